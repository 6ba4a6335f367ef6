"""Discord client holding the command registry and cooldown maps."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

import discord
from discord import app_commands

from ..commands.framework import BaseCommand
from ..services.cooldowns import CooldownRegistry
from ..services.paste import DEFAULT_PASTE_URL


@dataclass(frozen=True)
class ClientOptions:
    """Behavioural options of `CustomClient`.

    The install flags should match the installation contexts configured in
    the developer dashboard.
    """
    command_error_cooldown_seconds: int = 60
    log_command_uses: bool = True
    allow_guild_installed_commands: bool = True
    allow_user_installed_commands: bool = True


class CustomClient(discord.Client):
    """`discord.Client` with a command tree, a name -> command registry and cooldowns."""

    def __init__(
        self,
        *,
        intents: discord.Intents,
        options: Optional[ClientOptions] = None,
        developer_ids: Iterable[int] = (),
        support_server_url: str = "",
        bot_invite_url: str = "",
        paste_service_url: str = DEFAULT_PASTE_URL,
        **kwargs: Any,
    ):
        super().__init__(intents=intents, **kwargs)
        self.options = options or ClientOptions()
        self.tree = app_commands.CommandTree(self)
        self.commands: dict[str, BaseCommand] = {}
        self.cooldowns = CooldownRegistry(self.options.command_error_cooldown_seconds)
        self.developer_ids: tuple[int, ...] = tuple(int(i) for i in developer_ids)
        self.support_server_url = support_server_url
        self.bot_invite_url = bot_invite_url
        self.paste_service_url = paste_service_url
        self.startup_tasks: list[Callable[["CustomClient"], Awaitable[None]]] = []

    def add_command(self, command: BaseCommand) -> None:
        """Register a command, give it an empty cooldown map and add it to the tree.

        Commands available in install types this client does not allow are
        registered as a narrowed copy.

        Raises:
            ValueError: If the name is already registered, or the command is only
                available in installation contexts this client does not allow.
        """
        if command.name in self.commands:
            raise ValueError(f"Command {command.name} is already registered.")

        guild_install = command.guild_installed and self.options.allow_guild_installed_commands
        user_install = command.user_installed and self.options.allow_user_installed_commands
        if not guild_install and not user_install:
            raise ValueError(f"{command.name} is not available in any installation context allowed by this client.")
        command = command.with_installs(guild_installed=guild_install, user_installed=user_install)

        self.commands[command.name] = command
        self.cooldowns.Ensure(command.name)
        self.tree.add_command(command.builder)

    async def setup_hook(self) -> None:
        """Run queued startup tasks (e.g. command deployment) after login."""
        for task in list(self.startup_tasks):
            await task(self)
