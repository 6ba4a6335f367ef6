"""Discord bot entrypoint: parses flags, loads configuration and starts the bot."""

from __future__ import annotations

from dataclasses import dataclass
import sys

import click

from .bot import startup
from .core.config import CheckEnvironment, LoadConfig
from .core.log import HandleError, HandleUncaught, Log, SetupLogging, Warn
from .security import validate_discord_token


@dataclass(frozen=True)
class RunFlags:
    skip_deploy: bool = False
    empty_deploy: bool = False
    reset_commands: bool = False


def ResolveFlags(skip_deploy: bool, empty_deploy: bool, reset_commands: bool) -> RunFlags:
    """Reconcile mutually exclusive flags.

    An empty deploy removes every command, so skipping the deploy at the same
    time makes no sense: `--empty-deploy` wins and `--skip-deploy` is cleared.
    A reset exits right after resetting, so it overrides both.
    """
    if reset_commands and (skip_deploy or empty_deploy):
        Warn("process", "--reset-commands exits after resetting; other deploy flags are ignored.")
        return RunFlags(reset_commands=True)
    if empty_deploy and skip_deploy:
        Warn("process", "--empty-deploy overrides --skip-deploy.")
        return RunFlags(empty_deploy=True)
    return RunFlags(skip_deploy=skip_deploy, empty_deploy=empty_deploy, reset_commands=reset_commands)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--skip-deploy", "-s", is_flag=True, help="Skip refreshing commands with the Discord API.")
@click.option("--empty-deploy", "-e", is_flag=True, help="Remove all deployed commands and exit.")
@click.option("--reset-commands", "-r", is_flag=True, help="Resets global and dev guild commands.")
def main(skip_deploy: bool, empty_deploy: bool, reset_commands: bool) -> None:
    """Start the bot."""
    SetupLogging()
    sys.excepthook = HandleUncaught
    Log("setup", "Logger loaded!")

    flags = ResolveFlags(skip_deploy, empty_deploy, reset_commands)

    Log("setup", "Loading environment variables...")
    try:
        config = LoadConfig()
        CheckEnvironment(config, need_dev_guild=config.dev_mode or flags.reset_commands)
    except RuntimeError as err:
        HandleError(err)
        sys.exit(1)
    validate_discord_token(config.discord_token)

    SetupLogging(config.log_level)
    startup.LogDeveloperMode(config)

    try:
        if flags.reset_commands:
            startup.RunResetCommands(config)
            return
        if flags.empty_deploy:
            startup.RunEmptyDeploy(config)
            return
        startup.Run(config, skip_deploy=flags.skip_deploy)
    except Exception as err:
        # Process-level failure: log it and exit non-zero.
        HandleError(err)
        sys.exit(1)


if __name__ == "__main__":
    main()
