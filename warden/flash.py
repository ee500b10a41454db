"""
Warden - Flash messages.

One-time notifications stored in the host session and consumed on first
read. Messages are dicts with ``text`` and ``category`` keys.
"""

from __future__ import annotations

from typing import Any, Dict, List, MutableMapping


FLASH_KEY = "_flash_messages"


def flash(session: MutableMapping[str, Any], message: str, category: str = "message") -> None:
    """Append a flash message to the session."""
    messages = list(session.get(FLASH_KEY) or [])
    messages.append({"text": message, "category": category})
    session[FLASH_KEY] = messages


def get_flashed_messages(
    session: MutableMapping[str, Any],
    *,
    consume: bool = True,
) -> List[Dict[str, str]]:
    """
    Return flash messages, removing them from the session unless ``consume``
    is False.
    """
    if consume:
        return list(session.pop(FLASH_KEY, None) or [])
    return list(session.get(FLASH_KEY) or [])


__all__ = ["FLASH_KEY", "flash", "get_flashed_messages"]
