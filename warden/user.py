"""
Warden - User model.

Any principal type the embedding application supplies satisfies the
``User`` protocol. ``UserMixin`` gives sensible defaults for real
principals; ``AnonymousUser`` stands in when nobody is logged in.

Example:
    >>> class Account(UserMixin):
    ...     def __init__(self, id, active=True):
    ...         self.id = id
    ...         self.active = active
    ...     def is_active(self):
    ...         return self.active
    >>> Account("alice").get_id()
    'alice'
    >>> ANONYMOUS.is_anonymous()
    True
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class User(Protocol):
    """Capability contract for principals handled by the login manager."""

    def is_authenticated(self) -> bool:
        """True only for real, logged-in principals."""
        ...

    def is_active(self) -> bool:
        """Application-defined activation flag; inactive users cannot log in."""
        ...

    def is_anonymous(self) -> bool:
        """True only for the anonymous principal."""
        ...

    def get_id(self) -> str:
        """Stable unique identifier stored in the session and remember cookie."""
        ...


class UserMixin:
    """
    Default implementation of the ``User`` protocol.

    Expects an ``id`` attribute; override ``get_id`` when the identifier
    lives elsewhere.
    """

    def is_authenticated(self) -> bool:
        return True

    def is_active(self) -> bool:
        return True

    def is_anonymous(self) -> bool:
        return False

    def get_id(self) -> str:
        try:
            return str(self.id)
        except AttributeError:
            raise NotImplementedError(
                f"{type(self).__name__} has no 'id' attribute; override get_id()"
            ) from None


class AnonymousUser:
    """The principal of a request nobody is logged in to."""

    __slots__ = ()

    def is_authenticated(self) -> bool:
        return False

    def is_active(self) -> bool:
        return False

    def is_anonymous(self) -> bool:
        return True

    def get_id(self) -> str:
        return ""

    def __eq__(self, other: object) -> bool:
        return isinstance(other, AnonymousUser)

    def __hash__(self) -> int:
        return hash(AnonymousUser)

    def __repr__(self) -> str:
        return "AnonymousUser()"


ANONYMOUS = AnonymousUser()


__all__ = ["User", "UserMixin", "AnonymousUser", "ANONYMOUS"]
