"""Command objects for Discord app commands.

Each command module in this package exposes a module-level `command` built
from one of the classes below:

    command = Command.ChatInput(
        metadata=CommandMetadata(name="ping", user_installed=True, guild_installed=True),
        execute=execute,
    )

`execute` is a coroutine taking the interaction (plus the slash options, or
the targeted message/user for context commands). Its return value controls
cooldowns: truthy applies the command cooldown, falsy skips it. Raising
applies the longer error cooldown and replies with a generic error.

Commands wrap `execute` into a discord.py `app_commands.Command` or
`app_commands.ContextMenu` (the `builder`), so the command tree handles option
parsing and dispatch while `BaseCommand.run` handles the developer gate,
cooldowns, error replies and usage logging.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Literal, Mapping, Optional, Sequence, Union
import copy
import importlib
import inspect
import logging
import pkgutil

import discord
from discord import app_commands

from ..core.constants import LOG_COLORS
from ..core.log import Colorize, HandleError, Log
from ..security.interaction import reply_or_edit, safe_send
from ..security.permissions import interaction_is_developer
from ..services.cooldowns import CooldownType
from .utils import Emb

# Public logger for discovery/registration diagnostics
logger = logging.getLogger(__name__)

GENERIC_ERROR_REPLY = "There was an error while executing this command!"
DEFAULT_COOLDOWN_SECONDS = 3
DEFAULT_DESCRIPTION = "No description."
ALLOWED_CONTEXTS = ("guild", "bot_dm", "private_channel")


class CommandGroup(Enum):
    general = 0


class CommandType(Enum):
    chat_input = 0
    message_context = 1
    user_context = 2


class CommandRunResult(Enum):
    normal = 0
    errored = 1
    on_cooldown = 2


Execute = Callable[..., Awaitable[Any]]
AutocompleteCallback = Callable[[discord.Interaction, str], Awaitable[list[app_commands.Choice[Any]]]]


@dataclass(frozen=True)
class CommandMetadata:
    """Static description of a command.

    Attributes:
        name: Command name as shown in Discord.
        user_installed: Available when the app is installed to a user.
        guild_installed: Available when the app is installed to a guild.
        contexts: True for every context, or a non-empty subset of
            "guild", "bot_dm", "private_channel".
        description: Short description; "No description." when omitted.
        help_text: Extra text shown by /help for this command.
        cooldown_seconds: Per-user cooldown; 3 seconds when omitted.
        group: Group the command is listed under in /help.
        developer: Restrict to configured developers (never cooled down).
    """
    name: str
    user_installed: bool
    guild_installed: bool
    contexts: Union[Literal[True], Sequence[str]] = True
    description: Optional[str] = None
    help_text: Optional[str] = None
    cooldown_seconds: Optional[float] = None
    group: CommandGroup = CommandGroup.general
    developer: bool = False


def _CallbackSignature(execute: Execute) -> inspect.Signature:
    # Resolve string annotations against the execute function's own module.
    return inspect.signature(execute, eval_str=True)


def _Adopt(callback: Callable[..., Any], execute: Execute) -> None:
    """Make `callback` look like `execute` to discord.py's introspection."""
    callback.__signature__ = _CallbackSignature(execute)  # type: ignore[attr-defined]
    callback.__doc__ = execute.__doc__
    # Carries decorator metadata such as app_commands.describe / rename / choices.
    callback.__dict__.update(getattr(execute, "__dict__", {}))


class BaseCommand(ABC):
    """Shared behaviour of chat input and context commands."""

    type: CommandType
    builder: Union[app_commands.Command[Any, Any, Any], app_commands.ContextMenu]

    def __init__(self, metadata: CommandMetadata, execute: Execute):
        self._patched = False

        self.user_installed = metadata.user_installed
        self.guild_installed = metadata.guild_installed
        self.name = metadata.name
        self.description = metadata.description or DEFAULT_DESCRIPTION
        self.help_text = metadata.help_text
        self.cooldown: float = DEFAULT_COOLDOWN_SECONDS if metadata.cooldown_seconds is None else metadata.cooldown_seconds
        self.group = metadata.group
        self.developer = metadata.developer
        self.contexts = metadata.contexts
        self.execute = execute

        self.id = "0"

    @abstractmethod
    def _BuildSdkCommand(self) -> Union[app_commands.Command[Any, Any, Any], app_commands.ContextMenu]:
        """Create the discord.py object that is synced and dispatched by the tree."""
        raise NotImplementedError

    def patch(self) -> "BaseCommand":
        """Apply installation types and contexts to the builder (once).

        Raises:
            ValueError: If the command is available in no installation context
                or lists an unknown context.
        """
        if self._patched:
            return self

        if not self.user_installed and not self.guild_installed:
            raise ValueError(f"{self.name} must be available in at least one installation context.")

        self.builder.allowed_installs = app_commands.AppInstallationType(
            guild=self.guild_installed,
            user=self.user_installed,
        )

        if self.contexts is True:
            self.builder.allowed_contexts = app_commands.AppCommandContext(guild=True, dm_channel=True, private_channel=True)
        else:
            contexts = list(self.contexts)
            unknown = [c for c in contexts if c not in ALLOWED_CONTEXTS]
            if not contexts or unknown:
                raise ValueError(f"{self.name} has invalid contexts {contexts!r}; expected a non-empty subset of {ALLOWED_CONTEXTS}.")
            self.builder.allowed_contexts = app_commands.AppCommandContext(
                guild="guild" in contexts,
                dm_channel="bot_dm" in contexts,
                private_channel="private_channel" in contexts,
            )

        self._patched = True
        return self

    @property
    def patched(self) -> bool:
        return self._patched

    def with_installs(self, *, guild_installed: bool, user_installed: bool) -> "BaseCommand":
        """Return this command limited to the given installation types.

        Commands are module-level objects shared by every client in the
        process, so a narrowed command is a copy with its own builder and the
        original is left untouched.
        """
        if guild_installed == self.guild_installed and user_installed == self.user_installed:
            return self
        narrowed = copy.copy(self)
        narrowed.guild_installed = guild_installed
        narrowed.user_installed = user_installed
        narrowed._patched = False
        narrowed.builder = narrowed._BuildSdkCommand()
        return narrowed.patch()

    async def handle_cooldown(self, interaction: discord.Interaction, execute: Execute, *args: Any, **kwargs: Any) -> CommandRunResult:
        """Run `execute` behind the invoking user's cooldown and record the outcome.

        Returns:
            CommandRunResult: on_cooldown if the user is still cooling down,
            errored if `execute` raised, normal otherwise.

        Raises:
            LookupError: If the client holds no cooldown map for this command.
        """
        client: Any = interaction.client
        cooldowns = client.cooldowns
        cooldowns.MapFor(self.name)

        user_id = interaction.user.id
        cooldown = cooldowns.Get(self.name, user_id, self.cooldown)

        if cooldown is not None:
            expires_at = datetime.fromtimestamp(cooldowns.ExpiresAt(cooldown, self.cooldown), tz=timezone.utc)
            time_left = discord.utils.format_dt(expires_at, style="R")
            if cooldown.type is CooldownType.errored:
                message = (
                    f"Sorry, the {self} command previously errored out. Please try again {time_left}.\n"
                    f"If this keeps happening, please contact support [here]({client.support_server_url})."
                )
            else:
                message = f"You will be able to use the {self} command {time_left}."

            await safe_send(interaction, embed=Emb("error", message), ephemeral=True)
            return CommandRunResult.on_cooldown

        result_type = CooldownType.errored
        errored = False

        try:
            output = await execute(interaction, *args, **kwargs)
            result_type = CooldownType.normal if output else CooldownType.skipped
        except Exception as err:
            errored = True
            HandleError(err)
            await reply_or_edit(interaction, GENERIC_ERROR_REPLY)

        # Developer commands and runs that returned a falsy value are not cooled down.
        if result_type is not CooldownType.skipped and not self.developer:
            if errored:
                cooldowns.Apply(self.name, user_id, CooldownType.errored, cooldowns.error_cooldown_seconds)
            else:
                cooldowns.Apply(self.name, user_id, CooldownType.normal, self.cooldown)

        return CommandRunResult.errored if errored else CommandRunResult.normal

    async def run(self, interaction: discord.Interaction, *args: Any, **kwargs: Any) -> Optional[CommandRunResult]:
        """Entry point called by the command tree for every invocation."""
        user = interaction.user
        who = f"{Colorize(user.name, LOG_COLORS['user_name'])} ({Colorize(user.id, LOG_COLORS['user_id'])})"

        if self.developer and not interaction_is_developer(interaction):
            Log("commands", f"{who} tried to use developer command {LoggedCommand(self)} but is not a developer.")
            await safe_send(
                interaction,
                embed=Emb("error", f"You are not allowed to use the {self} command. This incident was logged."),
                ephemeral=True,
            )
            return None

        result = await self.handle_cooldown(interaction, self.execute, *args, **kwargs)

        options = getattr(interaction.client, "options", None)
        if getattr(options, "log_command_uses", False):
            Log("commands", f"{who} used {LoggedCommand(self)} with result: {result.name}")

        return result

    def __str__(self) -> str:
        return self.name


class ChatInputCommand(BaseCommand):
    """Slash command. Options are the keyword parameters of `execute`.

    Args:
        metadata: Command metadata.
        execute: `async def execute(interaction, **options) -> bool`.
        autocomplete: Optional mapping of option name to autocomplete
            coroutine `(interaction, current) -> list[Choice]`.
    """

    type = CommandType.chat_input

    def __init__(
        self,
        *,
        metadata: CommandMetadata,
        execute: Execute,
        autocomplete: Optional[Mapping[str, AutocompleteCallback]] = None,
    ):
        super().__init__(metadata, execute)
        self.autocomplete: dict[str, AutocompleteCallback] = dict(autocomplete or {})
        self.builder = self._BuildSdkCommand()
        self.patch()

    def _BuildSdkCommand(self) -> app_commands.Command[Any, Any, Any]:
        command = self

        async def _callback(interaction: discord.Interaction, **options: Any) -> None:
            await command.run(interaction, **options)

        _Adopt(_callback, self.execute)
        builder = app_commands.Command(name=self.name, description=self.description, callback=_callback)
        for option, handler in self.autocomplete.items():
            builder.autocomplete(option)(handler)
        return builder

    def __str__(self) -> str:
        return f"</{self.name}:{self.id}>"


class _ContextCommand(BaseCommand):
    """Right-click command; `execute(interaction, target)`."""

    context_type: discord.AppCommandType

    def __init__(self, *, metadata: CommandMetadata, execute: Execute):
        super().__init__(metadata, execute)
        self.builder = self._BuildSdkCommand()
        self.patch()

    def _BuildSdkCommand(self) -> app_commands.ContextMenu:
        command = self

        async def _callback(interaction: discord.Interaction, target: Any) -> None:
            await command.run(interaction, target)

        _Adopt(_callback, self.execute)
        return app_commands.ContextMenu(name=self.name, callback=_callback, type=self.context_type)

    def __str__(self) -> str:
        return f"`* {self.name}`"


class MessageContextCommand(_ContextCommand):
    type = CommandType.message_context
    context_type = discord.AppCommandType.message


class UserContextCommand(_ContextCommand):
    type = CommandType.user_context
    context_type = discord.AppCommandType.user


class Command:
    """Namespace for the concrete command classes."""

    ChatInput = ChatInputCommand
    MessageContext = MessageContextCommand
    UserContext = UserContextCommand


AnyCommand = Union[ChatInputCommand, MessageContextCommand, UserContextCommand]


def LoggedCommand(command: BaseCommand) -> str:
    """Colored `/ name` (slash) or `* name` (context) for log lines."""
    if command.type is CommandType.chat_input:
        symbol = "/"
    elif command.type in (CommandType.message_context, CommandType.user_context):
        symbol = "*"
    else:
        symbol = "?"
    return f"{Colorize(symbol, LOG_COLORS['command_symbol'])} {Colorize(command.name, LOG_COLORS['command_name'])}"


def DiscoverCommands(package: str) -> list[BaseCommand]:
    """Import every module in `package` and collect their module-level `command` objects.

    Modules whose name starts with "_" and modules without a `command`
    attribute are skipped. Import failures are logged and skipped.
    """
    try:
        pkg = importlib.import_module(package)
    except Exception as e:  # pragma: no cover - import error path
        logger.error("Failed to import package '%s': %s", package, e)
        return []

    pkg_path_list = getattr(pkg, "__path__", None)
    if not pkg_path_list:
        logger.warning("Package '%s' has no __path__; nothing to discover.", package)
        return []

    found: list[BaseCommand] = []
    for mod_info in pkgutil.iter_modules(pkg_path_list):
        if mod_info.ispkg or mod_info.name.startswith("_"):
            continue
        full_name = f"{package}.{mod_info.name}"
        try:
            mod = importlib.import_module(full_name)
        except Exception as e:  # pragma: no cover - import error path
            logger.warning("Skipping module '%s' (import failed): %s", full_name, e)
            continue
        candidate = getattr(mod, "command", None)
        if isinstance(candidate, BaseCommand):
            found.append(candidate)
    found.sort(key=lambda c: c.name.lower())
    return found


__all__ = [
    "AnyCommand",
    "BaseCommand",
    "ChatInputCommand",
    "Command",
    "CommandGroup",
    "CommandMetadata",
    "CommandRunResult",
    "CommandType",
    "DiscoverCommands",
    "GENERIC_ERROR_REPLY",
    "LoggedCommand",
    "MessageContextCommand",
    "UserContextCommand",
]
