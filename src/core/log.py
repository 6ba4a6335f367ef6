"""Tagged, colorized console logging on top of `logging` and rich.

Every message goes through a logger named `bot.<tag>`; the formatter renders
the tag as a centered, colored badge (e.g. `❮ Setup  ❯`) followed by an
optional layer indent, so nested startup steps read like a tree:

    ❮ Client ❯ Setting up commands
    ❮ Client ❯ ─── Imported / help

Messages logged through `Log` are rich markup; wrap dynamic values with
`Colorize` (or `Escape`) so user-supplied text is never parsed as markup.
"""
from __future__ import annotations

import logging
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .constants import LOG_COLORS, SPACER_CHAR, TAG_END_EDGE, TAG_START_EDGE

LOGGER_PREFIX = "bot."

TAG_NAMES: dict[str, str] = {
    "client": "Client",
    "events": "Events",
    "setup": "Setup",
    "error": "Error",
    "commands": "Commands",
    "process": "Process",
}

_TAG_WIDTH = max(len(name) for name in TAG_NAMES.values())
_LAYER_TAB_SIZE = 3

console = Console()


def Escape(text: object) -> str:
    """Escape arbitrary text so rich prints it literally."""
    return escape(str(text))


def Colorize(text: object, color: str) -> str:
    """Wrap `text` in rich markup for the given color (hex or style name)."""
    return f"[{color}]{escape(str(text))}[/]"


def RenderTag(tag: str) -> str:
    """Render a tag badge padded to the width of the longest known tag."""
    name = TAG_NAMES.get(tag, tag)
    padding = max(_TAG_WIDTH - len(name), 0)
    div = LOG_COLORS["div"]
    color = LOG_COLORS.get(tag, "white")

    pad_left_amount = padding // 2
    pad_right_amount = padding // 2 + padding % 2
    pad_left = "" if pad_left_amount == 0 else SPACER_CHAR * (pad_left_amount - 1) + " "
    pad_right = "" if pad_right_amount == 0 else " " + SPACER_CHAR * (pad_right_amount - 1)

    return (
        f"[{div}]{TAG_START_EDGE}[/]"
        f"[{div}]{pad_left}[/][{color}]{escape(name)}[/][{div}]{pad_right}[/]"
        f"[{div}]{TAG_END_EDGE}[/]"
    )


def RenderLayer(layer: int) -> str:
    if layer <= 0:
        return ""
    tab = f"[{LOG_COLORS['div']}]{SPACER_CHAR * _LAYER_TAB_SIZE}[/]"
    return " ".join([tab] * layer)


class TagFormatter(logging.Formatter):
    """Formatter producing `<tag> <layer indent> <message>` lines.

    Records from `bot.<tag>` loggers carry markup already; records from any
    other logger (discord.py, asyncio, ...) are escaped and tagged with their
    logger name.
    """

    def formatMessage(self, record: logging.LogRecord) -> str:
        message = getattr(record, "message", None)
        if message is None:
            message = record.getMessage()
        if record.name.startswith(LOGGER_PREFIX):
            tag = record.name[len(LOGGER_PREFIX):]
        else:
            tag = record.name
            message = escape(message)
        layer = RenderLayer(int(getattr(record, "layer", 0) or 0))
        if layer:
            return f"{RenderTag(tag)} {layer} {message}"
        return f"{RenderTag(tag)} {message}"


def SetupLogging(level: int | str = logging.INFO) -> None:
    """Route the root logger through a single rich console handler."""
    handler = RichHandler(
        console=console,
        show_time=True,
        show_level=False,
        show_path=False,
        markup=True,
        rich_tracebacks=True,
    )
    handler.setFormatter(TagFormatter())
    logging.basicConfig(level=level, handlers=[handler], force=True)


def GetLogger(tag: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_PREFIX}{tag}")


def Log(tag: str, message: str, layer: int = 0, *, level: int = logging.INFO) -> None:
    """Log a markup message under `tag`, indented by `layer` tabs."""
    GetLogger(tag).log(level, message, extra={"layer": layer})


def Warn(tag: str, message: str, layer: int = 0) -> None:
    Log(tag, Colorize(message, "yellow"), layer, level=logging.WARNING)


def HandleError(err: BaseException) -> None:
    """Log an exception with its traceback under the error tag."""
    GetLogger("error").error(
        f"{Escape(type(err).__name__)}: {Escape(err)}",
        exc_info=(type(err), err, err.__traceback__),
        extra={"layer": 0},
    )


def HandleUncaught(exc_type: type[BaseException], exc: BaseException, tb: Any) -> None:
    """`sys.excepthook` replacement routing uncaught errors through the error tag."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    HandleError(exc)
