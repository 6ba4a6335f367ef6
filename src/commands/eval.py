# Edit at your own risk: this runs arbitrary Python for configured developers.
"""`Eval` message context command: evaluates the targeted message as Python."""

from typing import Any, Mapping
import ast
import pprint
import textwrap
import traceback

import discord

from ..security.interaction import safe_send
from ..security.permissions import interaction_is_developer
from ..services.paste import Pastecord
from .framework import Command, CommandGroup, CommandMetadata
from .utils import CodeBlock, Emb

MAX_INLINE_OUTPUT = 4000
NO_CODE = "'No code was provided.'"


def StripCodeFence(content: str) -> str:
    """Return the code inside a ```py / ```python fence, or `content` unchanged."""
    text = content.strip()
    for fence in ("```python", "```py"):
        if text.startswith(fence) and text.endswith("```") and len(text) >= len(fence) + 3:
            return text[len(fence):-3].strip("\n")
    return content


async def Evaluate(code: str, env: Mapping[str, Any]) -> Any:
    """Run `code` inside an async function and return its result.

    A single expression evaluates to its value; statements need an explicit
    `return` (otherwise the result is None).
    """
    try:
        compile(code, "<eval>", "eval", flags=ast.PyCF_ALLOW_TOP_LEVEL_AWAIT)
    except SyntaxError:
        body = code
    else:
        body = f"return (\n{code}\n)"

    source = "async def __eval_fn():\n" + textwrap.indent(body, "    ")
    namespace: dict[str, Any] = dict(env)
    exec(compile(source, "<eval>", "exec"), namespace)
    return await namespace["__eval_fn"]()


def RenderOutput(output: Any) -> str:
    if isinstance(output, str):
        return output
    if isinstance(output, BaseException):
        return "".join(traceback.format_exception(type(output), output, output.__traceback__))
    return pprint.pformat(output)


async def execute(interaction: discord.Interaction, message: discord.Message) -> bool:
    if not interaction_is_developer(interaction):
        await safe_send(interaction, embed=Emb("error", "You're not allowed to use this command."), ephemeral=True)
        return True

    await interaction.response.defer(ephemeral=True, thinking=True)

    client: Any = interaction.client
    content = message.content if message.content else NO_CODE
    code = StripCodeFence(content)

    env = {"discord": discord, "client": client, "interaction": interaction, "message": message}
    try:
        output: Any = await Evaluate(code, env)
    except Exception as e:
        output = e

    out = RenderOutput(output)
    needs_paste = len(out) > MAX_INLINE_OUTPUT
    embed = Emb("info", CodeBlock("py", out[:MAX_INLINE_OUTPUT]))

    if needs_paste:
        paste = await Pastecord(out, client.paste_service_url)
        embed.add_field(name="\u200b", value=f"[Full Output]({paste})")

    await interaction.edit_original_response(embed=embed)
    return False


command = Command.MessageContext(
    metadata=CommandMetadata(
        name="Eval",
        description="Developer command. Evaluates Python code and outputs the result.",
        cooldown_seconds=24 * 60 * 60,
        group=CommandGroup.general,
        developer=True,
        user_installed=True,
        guild_installed=True,
    ),
    execute=execute,
)
