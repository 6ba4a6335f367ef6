"""Small utilities used by command modules.
"""

from datetime import datetime
from typing import Optional

import discord

from ..core.constants import EMBED_COLORS


def Emb(kind: str, description: str) -> discord.Embed:
    """Build a description-only embed colored by reply kind.

    Args:
        kind (str): One of "error", "ok", "info", "wait", or any color string
            accepted by `discord.Colour.from_str` (e.g. "#ff0000").
        description (str): Embed body.

    Returns:
        discord.Embed: The embed.
    """
    color = EMBED_COLORS.get(kind, kind)
    return discord.Embed(description=description, colour=discord.Colour.from_str(color))


def FormatTime(seconds: float) -> str:
    """Render a duration as compact units, largest first.

    Examples:
        >>> FormatTime(5)
        '5s'
        >>> FormatTime(3725)
        '1h 2m 5s'
        >>> FormatTime(86400)
        '1d'
    """
    remaining = max(int(seconds), 0)
    if remaining == 0:
        return "0s"
    parts: list[str] = []
    for suffix, size in (("d", 86400), ("h", 3600), ("m", 60), ("s", 1)):
        amount, remaining = divmod(remaining, size)
        if amount:
            parts.append(f"{amount}{suffix}")
    return " ".join(parts)


def Capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def CodeBlock(language: str, content: str) -> str:
    return f"```{language}\n{content}\n```"


def CurrentDateTime(now: Optional[datetime] = None) -> str:
    """Format a timestamp as `DD/MM/YY HH:MM:SS.d` (tenths of a second)."""
    now = now or datetime.now()
    return now.strftime("%d/%m/%y %H:%M:%S") + f".{now.microsecond // 100000}"
