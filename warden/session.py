"""
Warden - Session adapter.

Thin typed view over the host's per-request session mapping. Only the keys
owned by the login manager are exposed:

- ``user_id``: identifier of the logged-in principal
- ``_fresh``: True when the identity came from an explicit login
- ``remember``: pending remember-cookie action, consumed at end of request
"""

from __future__ import annotations

from enum import Enum
from typing import Any, MutableMapping, Optional


USER_ID_KEY = "user_id"
FRESH_KEY = "_fresh"
REMEMBER_KEY = "remember"


class RememberIntent(str, Enum):
    """
    Pending remember-cookie action for the current request.

    NONE is never stored; SET and CLEAR are stored under ``remember``.
    """

    NONE = ""
    SET = "set"
    CLEAR = "clear"

    @classmethod
    def parse(cls, value: Any) -> "RememberIntent":
        if isinstance(value, RememberIntent):
            return value
        try:
            return cls(value)
        except ValueError:
            return cls.NONE


class LoginSession:
    """
    Typed access to the login keys of a host session.

    The adapter holds no state of its own; every read and write goes
    straight to the wrapped mapping.
    """

    __slots__ = ("data",)

    def __init__(self, data: MutableMapping[str, Any]):
        self.data = data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    # ------------------------------------------------------------------
    # user_id
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> Optional[str]:
        value = self.data.get(USER_ID_KEY)
        if value is None or value == "":
            return None
        return str(value)

    @user_id.setter
    def user_id(self, value: str) -> None:
        self.data[USER_ID_KEY] = value

    @user_id.deleter
    def user_id(self) -> None:
        self.data.pop(USER_ID_KEY, None)

    # ------------------------------------------------------------------
    # _fresh
    # ------------------------------------------------------------------

    @property
    def fresh(self) -> bool:
        return self.data.get(FRESH_KEY) is True

    @fresh.setter
    def fresh(self, value: bool) -> None:
        self.data[FRESH_KEY] = bool(value)

    @fresh.deleter
    def fresh(self) -> None:
        self.data.pop(FRESH_KEY, None)

    # ------------------------------------------------------------------
    # remember
    # ------------------------------------------------------------------

    @property
    def remember(self) -> RememberIntent:
        return RememberIntent.parse(self.data.get(REMEMBER_KEY))

    @remember.setter
    def remember(self, intent: RememberIntent) -> None:
        intent = RememberIntent.parse(intent)
        if intent is RememberIntent.NONE:
            self.data.pop(REMEMBER_KEY, None)
        else:
            self.data[REMEMBER_KEY] = intent.value

    def consume_remember(self) -> RememberIntent:
        """Read and delete the pending remember intent."""
        return RememberIntent.parse(self.data.pop(REMEMBER_KEY, None))

    def __repr__(self) -> str:
        return (
            f"LoginSession(user_id={self.user_id!r}, fresh={self.fresh}, "
            f"remember={self.remember.value!r})"
        )


__all__ = [
    "LoginSession",
    "RememberIntent",
    "USER_ID_KEY",
    "FRESH_KEY",
    "REMEMBER_KEY",
]
