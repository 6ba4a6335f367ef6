"""Pushing the command registry to the Discord API.

Must run after login (the application id is known only then), e.g. from
`setup_hook` or a maintenance task that logs in without connecting.
"""
from __future__ import annotations

from typing import Any, Optional

import discord

from ..commands.framework import LoggedCommand
from ..core.constants import LOG_COLORS
from ..core.log import Colorize, Log, Warn
from .client import CustomClient


def _ApplicationId(client: CustomClient) -> int:
    application_id = client.application_id
    if application_id is None:
        raise RuntimeError("Application id unknown; log in before deploying commands.")
    return application_id


def _RequireGuild(dev_guild_id: Optional[int]) -> int:
    if dev_guild_id is None:
        raise RuntimeError("DEV_DISCORD_GUILD_ID is required to target the developer guild.")
    return dev_guild_id


async def DeployCommands(client: CustomClient, dev: bool, dev_guild_id: Optional[int], *, empty: bool = False) -> list[Any]:
    """Send the registry to the dev guild (dev mode) or globally and gather command ids.

    Args:
        client: Logged-in client whose registry is deployed.
        dev: Target the developer guild instead of global commands.
        dev_guild_id: Developer guild id (required when `dev`).
        empty: Push an empty command set instead, removing deployed commands.

    Returns:
        list: The API command objects returned by the sync (empty for `empty`).
    """
    target = "dev guild" if dev else "global"

    if empty:
        application_id = _ApplicationId(client)
        if dev:
            await client.http.bulk_upsert_guild_commands(application_id, _RequireGuild(dev_guild_id), [])
        else:
            await client.http.bulk_upsert_global_commands(application_id, [])
        Log("client", f"Removed all {target} commands.", 1)
        return []

    Log("client", f"Sending {Colorize(len(client.commands), LOG_COLORS['highlight'])} commands ({target})", 2)

    if dev:
        guild = discord.Object(id=_RequireGuild(dev_guild_id))
        client.tree.copy_global_to(guild=guild)
        synced = await client.tree.sync(guild=guild)
    else:
        synced = await client.tree.sync()

    Log("client", "Retrieving command ID's", 2)

    by_name = {api_command.name: api_command for api_command in synced}
    for command in client.commands.values():
        api_command = by_name.get(command.name)
        if api_command is None:
            Warn("client", f"No API command returned for {command.name}; its id stays {command.id}.", 3)
            continue
        command.id = str(api_command.id)
        Log("client", f"Gathered ID for {LoggedCommand(command)} ({Colorize(command.id, LOG_COLORS['highlight'])})", 3)

    Log("client", "Refreshed API commands.", 1)
    return list(synced)


async def ResetCommands(client: CustomClient, dev_guild_id: Optional[int]) -> None:
    """Remove every global command and every developer guild command."""
    application_id = _ApplicationId(client)
    await client.http.bulk_upsert_global_commands(application_id, [])
    await client.http.bulk_upsert_guild_commands(application_id, _RequireGuild(dev_guild_id), [])
