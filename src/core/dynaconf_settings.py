from dataclasses import dataclass
from typing import Optional, Tuple, Any
import os

from dynaconf import Dynaconf  # type: ignore

settings: Dynaconf = Dynaconf(  # type: ignore
    settings_files=["settings.toml", ".secrets.toml"],
    environments=True,           # allow [default], [development], [production], [testing]
    envvar_prefix="BOT",         # env vars like BOT_DEV_MODE etc.
    load_dotenv=True,            # read .env file if present
    env_switcher="DYNACONF_ENV", # switch env with DYNACONF_ENV=testing
)


@dataclass(frozen=True)
class AppConfig:
    """Configuration class holding all application settings.

    This dataclass contains the parsed and validated configuration values
    loaded from settings files, environment variables, and defaults.
    """
    discord_token: str  # The Discord bot authentication token
    dev_guild_id: Optional[int] = None  # Guild that receives commands in developer mode
    dev_mode: bool = False  # Deploy commands to the dev guild instead of globally
    developer_ids: Tuple[int, ...] = tuple()  # Users allowed to run developer-only commands
    command_error_cooldown_seconds: int = 60  # Cooldown applied after a command errors
    log_command_uses: bool = True  # Log every command use with its result
    allow_guild_installed_commands: bool = True  # Should match the developer dashboard
    allow_user_installed_commands: bool = True  # Should match the developer dashboard
    support_server_url: str = "https://google.com"  # Linked from help and error replies
    bot_invite_url: str = "https://google.com"  # Linked from help
    paste_service_url: str = "https://pastecord.com"  # Used to offload long command output
    log_level: str = "INFO"  # Root log level


def _ParseIds(value: Optional[Any]) -> Tuple[int, ...]:
    """Parse user/guild IDs from various input formats.

    Args:
        value: Input value that can be None, list, tuple, int or CSV string.

    Returns:
        Tuple[int, ...]: Parsed IDs as integers.

    Example:
        _ParseIds("123,456") -> (123, 456)
        _ParseIds([123, 456]) -> (123, 456)
    """
    if value is None:
        return tuple()
    if isinstance(value, (list, tuple)):
        return tuple(int(x) for x in value)  # type: ignore
    if isinstance(value, int) and not isinstance(value, bool):
        return (value,)
    # allow CSV
    return tuple(int(x.strip()) for x in str(value).split(",") if x.strip())  # type: ignore


def _ParseBool(value: Any, default: bool) -> bool:
    """Interpret dynaconf/env values as booleans ("true", "1", "on", ...)."""
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def _Lookup(key: str, default: Any = None) -> Any:
    """Read `key` from dynaconf, falling back to the unprefixed OS environment."""
    value: Any = settings.get(key, None)  # type: ignore[arg-type]
    if value in (None, ""):
        value = os.environ.get(key, None)
    if value in (None, ""):
        return default
    return value


def GetSettings(reload: bool = False) -> AppConfig:
    """
    Return AppConfig built from Dynaconf's settings.

    Args:
        reload: Whether to reload files and environment (useful in tests). Defaults to False.

    Returns:
        AppConfig: Configuration instance with loaded values.

    Example:
        config = GetSettings()
        config = GetSettings(reload=True)  # Reload settings
    """
    try:
        if reload:
            settings.reload()  # type: ignore

        token_raw = _Lookup("DISCORD_CLIENT_TOKEN", "")
        token = token_raw if isinstance(token_raw, str) else f"{token_raw}"

        guild_id_raw = _Lookup("DEV_DISCORD_GUILD_ID", None)
        dev_guild_id = int(guild_id_raw) if guild_id_raw not in (None, "", 0, "0") else None  # type: ignore

        return AppConfig(
            discord_token=token,
            dev_guild_id=dev_guild_id,
            dev_mode=_ParseBool(_Lookup("DEV_MODE", None), False),
            developer_ids=_ParseIds(_Lookup("DEVELOPER_IDS", None)),
            command_error_cooldown_seconds=int(_Lookup("COMMAND_ERROR_COOLDOWN_SECONDS", 60)),
            log_command_uses=_ParseBool(_Lookup("LOG_COMMAND_USES", None), True),
            allow_guild_installed_commands=_ParseBool(_Lookup("ALLOW_GUILD_INSTALLED_COMMANDS", None), True),
            allow_user_installed_commands=_ParseBool(_Lookup("ALLOW_USER_INSTALLED_COMMANDS", None), True),
            support_server_url=str(_Lookup("SUPPORT_SERVER_URL", "https://google.com")),
            bot_invite_url=str(_Lookup("BOT_INVITE_URL", "https://google.com")),
            paste_service_url=str(_Lookup("PASTE_SERVICE_URL", "https://pastecord.com")).rstrip("/"),
            log_level=str(_Lookup("LOG_LEVEL", "INFO")).upper(),
        )
    except Exception as e:
        raise RuntimeError(f"Failed to load settings: {e}") from e
