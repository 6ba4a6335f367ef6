"""Permission helpers for Discord interactions.
"""
from __future__ import annotations

from typing import Any, Iterable


def is_developer(user_id: Any, developer_ids: Iterable[int]) -> bool:
    """Return True if `user_id` belongs to a configured developer.

    Args:
        user_id: Discord user id (int or numeric string).
        developer_ids: Configured developer ids.

    Returns:
        bool: True when the id is listed, otherwise False.
    """
    try:
        uid = int(user_id)
    except (TypeError, ValueError):
        return False
    return uid in {int(d) for d in developer_ids}


def interaction_is_developer(interaction: Any) -> bool:
    """Return True if the invoking user of `interaction` is a developer of its client."""
    user_id = getattr(getattr(interaction, "user", None), "id", None)
    developer_ids = getattr(getattr(interaction, "client", None), "developer_ids", ())
    return is_developer(user_id, developer_ids)
