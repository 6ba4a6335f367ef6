"""Registry for Discord bot event handlers.
"""
from __future__ import annotations

from typing import Any
import asyncio

import discord
from discord import app_commands

from ...commands.framework import GENERIC_ERROR_REPLY
from ...core.constants import LOG_COLORS
from ...core.log import Colorize, HandleError, Log
from ...security.interaction import reply_or_edit


def register_bot_events(client: Any) -> None:
    """Attach event handlers to the provided client instance.
    """

    @client.event
    async def on_ready() -> None:
        user = client.user
        Log(
            "client",
            f"Logged in as {Colorize(user.display_name, LOG_COLORS['highlight'])} ({Colorize(user.id, LOG_COLORS['highlight'])})",
        )

    Log("events", f"Imported & Loaded {Colorize('ready', LOG_COLORS['event_name'])}", 1)

    @client.tree.error
    async def on_app_command_error(interaction: discord.Interaction, error: app_commands.AppCommandError) -> None:
        # Errors inside command handlers are caught by the command itself;
        # this catches everything around them (transformers, checks, dispatch).
        original = getattr(error, "original", None)
        HandleError(original if isinstance(original, BaseException) else error)
        await reply_or_edit(interaction, GENERIC_ERROR_REPLY)

    Log("events", f"Imported & Loaded {Colorize('app_command_error', LOG_COLORS['event_name'])}", 1)


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    """Event loop exception handler: log uncaught task errors through the error tag."""
    exception = context.get("exception")
    if isinstance(exception, BaseException):
        HandleError(exception)
    else:
        Log("error", Colorize(context.get("message", "Unhandled event loop error"), LOG_COLORS["error"]))
