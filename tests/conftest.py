"""
Shared test fixtures and helpers for the Warden test suite.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from warden import (
    LoginManager,
    Request,
    UserMixin,
    secret_key,
    user_loader,
)
from warden.testing import make_test_scope


# ============================================================================
# Users
# ============================================================================


class TUser(UserMixin):
    """Test principal with a switchable activation flag."""

    def __init__(self, id: str, active: bool = True):
        self.id = id
        self.active = active

    def is_active(self) -> bool:
        return self.active

    def __repr__(self) -> str:
        return f"TUser({self.id!r}, active={self.active})"


TUSERS = {
    "one": TUser("one", active=True),
    "two": TUser("two", active=False),
}


def in_memory_user_loader(user_id: str) -> Optional[TUser]:
    return TUSERS.get(user_id)


class CountingLoader:
    """User loader that records every id it is asked for."""

    def __init__(self, users: Dict[str, TUser] = TUSERS):
        self.users = users
        self.calls: List[str] = []

    def __call__(self, user_id: str) -> Optional[TUser]:
        self.calls.append(user_id)
        return self.users.get(user_id)


# ============================================================================
# Request Helpers
# ============================================================================


def make_request(
    path: str = "/",
    cookies: Optional[Dict[str, str]] = None,
    headers: Optional[List[Tuple[str, str]]] = None,
) -> Request:
    """Build a Request carrying the given cookies."""
    headers = list(headers or [])
    if cookies:
        headers.append(("cookie", "; ".join(f"{k}={v}" for k, v in cookies.items())))
    return Request(make_test_scope("GET", path, headers))


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def one() -> TUser:
    return TUSERS["one"]


@pytest.fixture
def two() -> TUser:
    return TUSERS["two"]


@pytest.fixture
def manager() -> LoginManager:
    """Manager with the in-memory loader, isolated from the process env."""
    return LoginManager(
        user_loader(in_memory_user_loader),
        secret_key("test-secret-key"),
        environ={},
    )


@pytest.fixture
def session() -> Dict[str, Any]:
    return {}


@pytest.fixture
def login(manager, session):
    """LoginContext for a plain request with an empty session."""
    return manager.bind(make_request(), session)
