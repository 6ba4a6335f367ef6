"""Security utilities: developer checks, interaction safety, and token validation.

Exports:
- is_developer, interaction_is_developer
- safe_send, reply_or_edit
- validate_discord_token, mask_token
"""

from .permissions import is_developer, interaction_is_developer
from .interaction import safe_send, reply_or_edit
from .token import validate_discord_token, mask_token

__all__ = [
    "is_developer",
    "interaction_is_developer",
    "safe_send",
    "reply_or_edit",
    "validate_discord_token",
    "mask_token",
]
