from .dynaconf_settings import AppConfig, GetSettings

__all__ = ["AppConfig", "LoadConfig", "CheckEnvironment"]


def LoadConfig() -> AppConfig:
    """Load configuration using dynaconf.

    Returns:
        AppConfig: Instance with loaded values from settings files and environment.

    Example:
        config = LoadConfig()
        print(config.dev_mode)
    """
    try:
        return GetSettings()
    except Exception as e:
        raise RuntimeError(f"Failed to load configuration: {e}") from e


def CheckEnvironment(config: AppConfig, *, need_dev_guild: bool) -> None:
    """Raise RuntimeError listing every required value that is missing.

    Args:
        config: Loaded configuration.
        need_dev_guild: Whether the run targets the developer guild (dev mode
            or a command reset), which makes DEV_DISCORD_GUILD_ID mandatory.
    """
    missing: list[str] = []
    if not config.discord_token:
        missing.append("DISCORD_CLIENT_TOKEN")
    if need_dev_guild and config.dev_guild_id is None:
        missing.append("DEV_DISCORD_GUILD_ID")
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")
