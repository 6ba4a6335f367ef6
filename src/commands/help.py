"""/help: list commands, or show details for one command."""

from typing import Any, Mapping, Optional

import discord
from discord import app_commands

from .framework import BaseCommand, Command, CommandGroup, CommandMetadata
from .utils import Capitalize, Emb, FormatTime

TEMPLATE_DESCRIPTION = "My awesome discord bot template."
CONTEXT_TIP = "_Tip: Commands marked with `*` are context commands._"


def VisibleCommands(client: Any) -> dict[str, BaseCommand]:
    """Commands shown by /help: everything except developer-only commands."""
    return {name: c for name, c in getattr(client, "commands", {}).items() if not c.developer}


async def AutocompleteCommandName(interaction: discord.Interaction, current: str) -> list[app_commands.Choice[str]]:
    needle = current.lower()
    names = sorted(VisibleCommands(interaction.client))
    return [app_commands.Choice(name=n, value=n) for n in names if needle in n.lower()][:25]


def _Decorate(embed: discord.Embed, bot_user: Any, *, footer: bool) -> discord.Embed:
    if bot_user is None:
        return embed
    avatar = bot_user.display_avatar.url
    embed.set_thumbnail(url=avatar)
    if footer:
        embed.set_footer(text=bot_user.display_name, icon_url=avatar)
    return embed


def BuildCommandHelp(command: BaseCommand, bot_user: Any = None) -> discord.Embed:
    description = command.description + (f"\n\n{command.help_text}" if command.help_text else "")
    embed = Emb("info", description)
    embed.title = f"{command}"
    embed.timestamp = discord.utils.utcnow()
    embed.add_field(name="**Group**", value=f"`{Capitalize(command.group.name)}`", inline=True)
    embed.add_field(name="**Cooldown**", value=f"`{FormatTime(command.cooldown)}`", inline=True)
    return _Decorate(embed, bot_user, footer=True)


def BuildOverview(commands: Mapping[str, BaseCommand], bot_user: Any = None) -> discord.Embed:
    """One field per non-empty group with `"{command} - {description}"` lines."""
    embed = Emb("info", TEMPLATE_DESCRIPTION)
    name = getattr(bot_user, "display_name", None) or "Bot"
    embed.title = f"{name} - Help"
    embed.timestamp = discord.utils.utcnow()

    for group in CommandGroup:
        members = sorted((c for c in commands.values() if c.group is group), key=lambda c: c.name.lower())
        if not members:
            continue
        embed.add_field(
            name=f"**{Capitalize(group.name.lower())} commands:**",
            value="\n".join(f"{c} - {c.description}" for c in members),
            inline=False,
        )

    embed.add_field(name="\u200b", value=CONTEXT_TIP, inline=False)
    return _Decorate(embed, bot_user, footer=False)


def BuildLinks(support_server_url: str, bot_invite_url: str) -> Optional[discord.ui.View]:
    view = discord.ui.View()
    if support_server_url:
        view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, url=support_server_url, label="Support Server", emoji="🔗"))
    if bot_invite_url:
        view.add_item(discord.ui.Button(style=discord.ButtonStyle.link, url=bot_invite_url, label="Bot Invite", emoji="🔗"))
    return view if view.children else None


@app_commands.describe(command="The command you need help with.")
async def execute(interaction: discord.Interaction, command: Optional[str] = None) -> bool:
    client: Any = interaction.client
    visible = VisibleCommands(client)

    if command:
        selected = visible.get(command)
        if selected is None:
            await interaction.response.send_message(embed=Emb("error", f"Unknown command `{command}`."), ephemeral=True)
            return False
        await interaction.response.send_message(embed=BuildCommandHelp(selected, client.user))
        return True

    overview = BuildOverview(visible, client.user)
    view = BuildLinks(client.support_server_url, client.bot_invite_url)
    if view is None:
        await interaction.response.send_message(embed=overview)
    else:
        await interaction.response.send_message(embed=overview, view=view)
    return True


command = Command.ChatInput(
    metadata=CommandMetadata(
        name="help",
        description="Get a list of commands or help with a specific command.",
        cooldown_seconds=5,
        group=CommandGroup.general,
        user_installed=True,
        guild_installed=True,
    ),
    execute=execute,
    autocomplete={"command": AutocompleteCommandName},
)
