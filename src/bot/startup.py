"""Helpers to start and configure the Discord bot.

This module centralizes the wiring between configuration, the client, the
command registry and deployment so the entrypoint can remain small and focused.
"""

from __future__ import annotations

from typing import Awaitable, Callable
import asyncio

import discord

from ..commands.framework import DiscoverCommands, LoggedCommand
from ..core.config import AppConfig
from ..core.constants import LOG_COLORS
from ..core.log import Colorize, Log, Warn
from ..security import mask_token
from .client import ClientOptions, CustomClient
from .deploy import DeployCommands, ResetCommands
from .events import registry as bot_event_registry

COMMANDS_PACKAGE = "src.commands"


def BuildIntents() -> discord.Intents:
    intents = discord.Intents.default()
    intents.guilds = True
    intents.guild_messages = True
    intents.message_content = True
    intents.members = True
    return intents


def BuildClient(config: AppConfig) -> CustomClient:
    """Create the client from configuration (no commands loaded yet)."""
    Log("setup", "Setting up Discord client")
    options = ClientOptions(
        command_error_cooldown_seconds=config.command_error_cooldown_seconds,
        log_command_uses=config.log_command_uses,
        allow_guild_installed_commands=config.allow_guild_installed_commands,
        allow_user_installed_commands=config.allow_user_installed_commands,
    )
    client = CustomClient(
        intents=BuildIntents(),
        options=options,
        developer_ids=config.developer_ids,
        support_server_url=config.support_server_url,
        bot_invite_url=config.bot_invite_url,
        paste_service_url=config.paste_service_url,
    )
    client.startup_tasks.append(_InstallLoopExceptionHandler)
    return client


async def _InstallLoopExceptionHandler(client: CustomClient) -> None:
    asyncio.get_running_loop().set_exception_handler(bot_event_registry.handle_loop_exception)


def LoadCommands(client: CustomClient, package: str = COMMANDS_PACKAGE) -> int:
    """Discover command modules in `package` and register them on the client."""
    Log("client", "Setting up commands", 1)
    commands = DiscoverCommands(package)
    for command in commands:
        client.add_command(command)
        Log("client", f"Imported {LoggedCommand(command)}", 2)
    return len(commands)


def LogDeveloperMode(config: AppConfig) -> None:
    state = "ON" if config.dev_mode else "OFF"
    color = LOG_COLORS["dev_on"] if config.dev_mode else LOG_COLORS["dev_off"]
    Log("setup", f"Developer mode is {Colorize(state, color)}")


def RegisterRuntime(client: CustomClient, config: AppConfig, *, skip_deploy: bool = False) -> None:
    """Load commands, queue deployment (unless skipped) and register events."""
    LoadCommands(client)

    if skip_deploy:
        Log("client", "Skipped refreshing API commands, no command IDs will be gathered!", 1)
        Warn("client", "If the previous run did not deploy any commands, you could be running without commands now. Unknown things might happen!", 1)
        Warn("client", "If that's not the case, you can ignore this message.", 1)
    else:
        async def _deploy(c: CustomClient) -> None:
            Log("client", "Refreshing API commands", 1)
            await DeployCommands(c, config.dev_mode, config.dev_guild_id)

        client.startup_tasks.append(_deploy)

    Log("events", "Setting up Discord events")
    bot_event_registry.register_bot_events(client)


async def RunMaintenance(client: CustomClient, token: str, action: Callable[[CustomClient], Awaitable[None]]) -> None:
    """Log in without opening the gateway, run `action`, then close the client."""
    async with client:
        await client.login(token)
        await action(client)


def RunEmptyDeploy(config: AppConfig) -> None:
    """Remove all deployed commands for the configured target."""
    client = BuildClient(config)
    Log("client", "Removing all deployed commands...", 1)

    async def _empty(c: CustomClient) -> None:
        await DeployCommands(c, config.dev_mode, config.dev_guild_id, empty=True)

    asyncio.run(RunMaintenance(client, config.discord_token, _empty))
    Log("process", "Running without any commands is pointless, exiting...", 1)


def RunResetCommands(config: AppConfig) -> None:
    """Reset global and developer guild commands."""
    client = BuildClient(config)
    Log("process", "Resetting global and dev guild commands...")

    async def _reset(c: CustomClient) -> None:
        await ResetCommands(c, config.dev_guild_id)

    asyncio.run(RunMaintenance(client, config.discord_token, _reset))
    Log("process", "Commands reset successfully.")


def Run(config: AppConfig, *, skip_deploy: bool = False) -> None:
    """Build the client, register runtime integrations and connect to the gateway."""
    token = config.discord_token
    Log("setup", f"Using token (masked): {Colorize(mask_token(token), LOG_COLORS['highlight'])}")

    client = BuildClient(config)
    RegisterRuntime(client, config, skip_deploy=skip_deploy)

    Log("client", "Logging in...")
    # Logging is already configured; keep discord.py from installing its own handler.
    client.run(token, log_handler=None)
