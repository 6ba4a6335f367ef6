from __future__ import annotations

import discord
import pytest  # type: ignore

from src.commands import help as help_module
from src.commands.framework import Command, CommandMetadata


async def _ok(interaction: discord.Interaction) -> bool:
    return True


async def _on_message(interaction: discord.Interaction, message: discord.Message) -> bool:
    return True


def _register_sample_commands(client) -> None:
    client.add_command(help_module.command)
    client.add_command(
        Command.ChatInput(
            metadata=CommandMetadata(name="ping", description="Pong!", help_text="Checks latency.", cooldown_seconds=90, user_installed=True, guild_installed=True),
            execute=_ok,
        )
    )
    client.add_command(
        Command.MessageContext(
            metadata=CommandMetadata(name="Secret", developer=True, user_installed=True, guild_installed=True),
            execute=_on_message,
        )
    )


def test_visible_commands_exclude_developer_commands(fake_client) -> None:
    _register_sample_commands(fake_client)
    assert sorted(help_module.VisibleCommands(fake_client)) == ["help", "ping"]


def test_command_help_embed(fake_client) -> None:
    _register_sample_commands(fake_client)
    embed = help_module.BuildCommandHelp(fake_client.commands["ping"], fake_client.user)

    assert embed.title == "</ping:0>"
    assert embed.description == "Pong!\n\nChecks latency."
    fields = {f.name: f.value for f in embed.fields}
    assert fields["**Group**"] == "`General`"
    assert fields["**Cooldown**"] == "`1m 30s`"
    assert embed.footer.text == fake_client.user.display_name


def test_overview_lists_groups_and_tip(fake_client) -> None:
    _register_sample_commands(fake_client)
    embed = help_module.BuildOverview(help_module.VisibleCommands(fake_client), fake_client.user)

    assert embed.title == "Templatebot - Help"
    assert embed.fields[0].name == "**General commands:**"
    lines = embed.fields[0].value.split("\n")
    assert lines[0].startswith("</help:0> - ")
    assert lines[1] == "</ping:0> - Pong!"
    assert "context commands" in embed.fields[-1].value


@pytest.mark.asyncio  # type: ignore
async def test_autocomplete_filters_visible_names(fake_client, make_interaction) -> None:
    _register_sample_commands(fake_client)
    choices = await help_module.AutocompleteCommandName(make_interaction(), "PI")
    assert [c.value for c in choices] == ["ping"]


@pytest.mark.asyncio  # type: ignore
async def test_execute_overview_sends_link_buttons(fake_client, make_interaction) -> None:
    _register_sample_commands(fake_client)
    interaction = make_interaction()

    assert await help_module.execute(interaction) is True
    sent = interaction.response.sent[0]
    urls = [item.url for item in sent["view"].children]
    assert urls == ["https://support.example", "https://invite.example"]


@pytest.mark.asyncio  # type: ignore
async def test_execute_unknown_or_hidden_command(fake_client, make_interaction) -> None:
    _register_sample_commands(fake_client)
    interaction = make_interaction()

    assert await help_module.execute(interaction, command="Secret") is False
    assert interaction.response.sent[0]["ephemeral"] is True
    assert "Unknown command" in interaction.response.sent[0]["embed"].description


@pytest.mark.asyncio  # type: ignore
async def test_execute_single_command(fake_client, make_interaction) -> None:
    _register_sample_commands(fake_client)
    interaction = make_interaction()

    assert await help_module.execute(interaction, command="ping") is True
    assert interaction.response.sent[0]["embed"].title == "</ping:0>"
