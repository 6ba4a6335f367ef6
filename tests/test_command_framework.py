"""Tests for command dispatch: developer gate, cooldowns and error handling."""
from __future__ import annotations

from typing import Any
import discord
import pytest  # type: ignore

from src.commands.framework import (
    GENERIC_ERROR_REPLY,
    Command,
    CommandMetadata,
    CommandRunResult,
    CommandType,
    LoggedCommand,
)
from src.services.cooldowns import CooldownType


def _metadata(**overrides: Any) -> CommandMetadata:
    values: dict[str, Any] = {"name": "ping", "user_installed": True, "guild_installed": True}
    values.update(overrides)
    return CommandMetadata(**values)


def _chat(calls: list[str], result: Any = True, **overrides: Any):
    async def execute(interaction: discord.Interaction) -> Any:
        calls.append("run")
        return result

    return Command.ChatInput(metadata=_metadata(**overrides), execute=execute)


def _description(entry: dict[str, Any]) -> str:
    return entry["embed"].description


def test_metadata_defaults() -> None:
    cmd = _chat([])
    assert cmd.description == "No description."
    assert cmd.cooldown == 3
    assert cmd.developer is False
    assert cmd.id == "0"
    assert cmd.type is CommandType.chat_input
    assert cmd.patched is True


def test_patch_requires_an_installation_context() -> None:
    with pytest.raises(ValueError, match="at least one installation context"):
        _chat([], user_installed=False, guild_installed=False)


def test_patch_rejects_unknown_contexts() -> None:
    with pytest.raises(ValueError):
        _chat([], contexts=["guild", "somewhere"])


def test_patch_applies_installs_and_contexts() -> None:
    cmd = _chat([], user_installed=False, contexts=["guild", "private_channel"])
    assert cmd.builder.allowed_installs.guild is True
    assert cmd.builder.allowed_installs.user is False
    assert cmd.builder.allowed_contexts.guild is True
    assert cmd.builder.allowed_contexts.dm_channel is False
    assert cmd.builder.allowed_contexts.private_channel is True


def test_string_forms() -> None:
    slash = _chat([])
    assert str(slash) == "</ping:0>"
    slash.id = "1234"
    assert str(slash) == "</ping:1234>"

    async def on_message(interaction: discord.Interaction, message: discord.Message) -> bool:
        return True

    async def on_user(interaction: discord.Interaction, user: discord.User) -> bool:
        return True

    msg_cmd = Command.MessageContext(metadata=_metadata(name="Quote"), execute=on_message)
    user_cmd = Command.UserContext(metadata=_metadata(name="Profile"), execute=on_user)
    assert str(msg_cmd) == "`* Quote`"
    assert msg_cmd.builder.type is discord.AppCommandType.message
    assert user_cmd.type is CommandType.user_context
    assert user_cmd.builder.type is discord.AppCommandType.user
    assert "*" in LoggedCommand(msg_cmd) and "/" in LoggedCommand(slash)


def test_slash_options_come_from_execute_signature() -> None:
    async def execute(interaction: discord.Interaction, text: str, times: int = 1) -> bool:
        return True

    cmd = Command.ChatInput(metadata=_metadata(name="echo"), execute=execute)
    names = [p.name for p in cmd.builder.parameters]
    assert names == ["text", "times"]
    assert cmd.builder.get_parameter("text").required is True
    assert cmd.builder.get_parameter("times").required is False


@pytest.mark.asyncio  # type: ignore
async def test_normal_run_applies_cooldown(fake_client, make_interaction, clock) -> None:
    calls: list[str] = []
    cmd = _chat(calls)
    fake_client.add_command(cmd)

    first = make_interaction()
    assert await cmd.run(first) is CommandRunResult.normal
    entry = fake_client.cooldowns.MapFor("ping")[111]
    assert entry.type is CooldownType.normal

    second = make_interaction()
    assert await cmd.run(second) is CommandRunResult.on_cooldown
    assert calls == ["run"]
    assert second.response.sent[0]["ephemeral"] is True
    assert "You will be able to use the </ping:0> command" in _description(second.response.sent[0])

    clock.advance(3)
    assert await cmd.run(make_interaction()) is CommandRunResult.normal
    assert calls == ["run", "run"]


@pytest.mark.asyncio  # type: ignore
async def test_cooldowns_are_per_user(fake_client, make_interaction) -> None:
    calls: list[str] = []
    cmd = _chat(calls)
    fake_client.add_command(cmd)

    await cmd.run(make_interaction(user_id=1))
    assert await cmd.run(make_interaction(user_id=2)) is CommandRunResult.normal
    assert calls == ["run", "run"]


@pytest.mark.asyncio  # type: ignore
async def test_falsy_result_skips_cooldown(fake_client, make_interaction) -> None:
    calls: list[str] = []
    cmd = _chat(calls, result=False)
    fake_client.add_command(cmd)

    assert await cmd.run(make_interaction()) is CommandRunResult.normal
    assert await cmd.run(make_interaction()) is CommandRunResult.normal
    assert calls == ["run", "run"]
    assert fake_client.cooldowns.MapFor("ping") == {}


@pytest.mark.asyncio  # type: ignore
async def test_error_replies_and_applies_error_cooldown(fake_client, make_interaction, clock) -> None:
    async def execute(interaction: discord.Interaction) -> bool:
        raise RuntimeError("boom")

    cmd = Command.ChatInput(metadata=_metadata(), execute=execute)
    fake_client.add_command(cmd)

    interaction = make_interaction()
    assert await cmd.run(interaction) is CommandRunResult.errored
    assert interaction.response.sent[0]["content"] == GENERIC_ERROR_REPLY
    assert interaction.response.sent[0]["ephemeral"] is True
    assert fake_client.cooldowns.MapFor("ping")[111].type is CooldownType.errored

    # The command's own 3s window is not enough; the error window is 60s.
    clock.advance(10)
    blocked = make_interaction()
    assert await cmd.run(blocked) is CommandRunResult.on_cooldown
    message = _description(blocked.response.sent[0])
    assert "previously errored out" in message
    assert "https://support.example" in message

    clock.advance(50)
    assert await cmd.run(make_interaction()) is CommandRunResult.errored


@pytest.mark.asyncio  # type: ignore
async def test_error_after_defer_edits_original_response(fake_client, make_interaction) -> None:
    async def execute(interaction: Any) -> bool:
        await interaction.response.defer(ephemeral=True)
        raise ValueError("late failure")

    cmd = Command.ChatInput(metadata=_metadata(), execute=execute)
    fake_client.add_command(cmd)

    interaction = make_interaction()
    assert await cmd.run(interaction) is CommandRunResult.errored
    assert interaction.edits and interaction.edits[0]["content"] == GENERIC_ERROR_REPLY


@pytest.mark.asyncio  # type: ignore
async def test_developer_command_rejects_non_developers(fake_client, make_interaction) -> None:
    calls: list[str] = []
    cmd = _chat(calls, developer=True)
    fake_client.add_command(cmd)

    interaction = make_interaction(user_id=7)
    assert await cmd.run(interaction) is None
    assert calls == []
    assert "You are not allowed to use the </ping:0> command" in _description(interaction.response.sent[0])


@pytest.mark.asyncio  # type: ignore
async def test_developer_commands_are_never_cooled_down(fake_client, make_interaction) -> None:
    calls: list[str] = []
    cmd = _chat(calls, developer=True)
    fake_client.add_command(cmd)

    assert await cmd.run(make_interaction(user_id=42)) is CommandRunResult.normal
    assert await cmd.run(make_interaction(user_id=42)) is CommandRunResult.normal
    assert calls == ["run", "run"]
    assert fake_client.cooldowns.MapFor("ping") == {}


@pytest.mark.asyncio  # type: ignore
async def test_missing_cooldown_map_is_an_error(fake_client, make_interaction) -> None:
    cmd = _chat([])
    with pytest.raises(LookupError):
        await cmd.run(make_interaction())


@pytest.mark.asyncio  # type: ignore
async def test_sdk_callback_dispatches_through_run(fake_client, make_interaction) -> None:
    seen: list[tuple[str, int]] = []

    async def execute(interaction: discord.Interaction, text: str, times: int = 1) -> bool:
        seen.append((text, times))
        return True

    cmd = Command.ChatInput(metadata=_metadata(name="echo"), execute=execute)
    fake_client.add_command(cmd)

    await cmd.builder.callback(make_interaction(), text="hi", times=2)  # type: ignore[call-arg]
    assert seen == [("hi", 2)]
    assert 111 in fake_client.cooldowns.MapFor("echo")
