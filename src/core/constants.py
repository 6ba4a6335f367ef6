"""Colors and glyphs shared by embeds and console logs."""

TAG_START_EDGE = "❮"
TAG_END_EDGE = "❯"
SPACER_CHAR = "─"

# Embed colors by reply kind
EMBED_COLORS: dict[str, str] = {
    "error": "#D9632D",
    "ok": "#6751B1",
    "info": "#2346FF",
    "wait": "#9E5B70",
}

# Console colors (rich accepts hex strings as styles)
LOG_COLORS: dict[str, str] = {
    "div": "#363636",
    "setup": "#3bd16f",
    "client": "#38c3f5",
    "events": "#f5a638",
    "commands": "#b638f5",
    "process": "#e0e0e0",
    "error": "#ff4d4d",
    "command_symbol": "#4538f5",
    "command_name": "#38c3f5",
    "user_name": "#f5cf38",
    "user_id": "#f5cf38",
    "event_name": "#f5a638",
    "highlight": "#f5cf38",
    "dev_on": "#3bd16f",
    "dev_off": "#ff4d4d",
    "string": "#a6e22e",
}
