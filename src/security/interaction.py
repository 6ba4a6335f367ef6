"""Interaction safety helpers for Discord commands.
"""
from __future__ import annotations

from typing import Any
import logging

import discord

logger = logging.getLogger(__name__)


async def safe_send(interaction: discord.Interaction, content: str | None = None, *, ephemeral: bool = True, **kwargs: Any) -> None:
    """Send a response or follow-up safely based on interaction state.

    Tries interaction.response.send_message first if not done, otherwise followup.
    Extra keyword arguments (embeds, view, ...) are passed through. Secondary
    failures are logged rather than raised so error paths never raise again.
    """
    try:
        if not interaction.response.is_done():
            await interaction.response.send_message(content, ephemeral=ephemeral, **kwargs)
        else:
            await interaction.followup.send(content, ephemeral=ephemeral, **kwargs)
    except discord.HTTPException as e:
        logger.warning("Failed to send interaction reply: %s", e)


async def reply_or_edit(interaction: discord.Interaction, content: str, *, ephemeral: bool = True) -> None:
    """Reply to an interaction, or edit the original response if already acknowledged.

    Mirrors how command errors are surfaced: a deferred or answered
    interaction gets its original response replaced instead of a new reply.
    """
    try:
        if interaction.response.is_done():
            await interaction.edit_original_response(content=content, embeds=[], view=None)
        else:
            await interaction.response.send_message(content, ephemeral=ephemeral)
    except discord.HTTPException as e:
        logger.warning("Failed to deliver error reply: %s", e)
