"""
Config system - Layered login settings.

Settings are uppercase string keys resolved with precedence:
application overrides > LOGIN_* environment variables > .env file > defaults

Lookup is case-insensitive and a missing key yields an empty string.
Typed accessors (``cookie_name``, ``cookie_max_age``, ...) sit on top of the
string layer so callers never parse values themselves.
"""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


ENV_PREFIX = "LOGIN_"

DEFAULT_COOKIE_DAYS = 31

DEFAULTS: Dict[str, str] = {
    "COOKIE_NAME": "remember_token",
    "COOKIE_DURATION": str(DEFAULT_COOKIE_DAYS),
    "COOKIE_PATH": "/",
    "COOKIE_DOMAIN": "",
    "COOKIE_SECURE": "false",
    "COOKIE_HTTPONLY": "true",
    "COOKIE_SAMESITE": "Lax",
    "MESSAGE_CATEGORY": "message",
    "REFRESH_MESSAGE": "Please reauthenticate to access this page.",
    "UNAUTHORIZED_MESSAGE": "Please log in to access this page",
}


def storekey(key: str) -> str:
    """Environment variable name for a setting key (``cookie_name`` -> ``LOGIN_COOKIE_NAME``)."""
    return f"{ENV_PREFIX}{key.upper()}"


def cookie_seconds(days: Any) -> int:
    """
    Convert a cookie duration in days to seconds.

    Only a plain run of ASCII digits is accepted; anything else, including
    signed or padded numbers, falls back to the default of 31 days.
    """
    text = str(days)
    if text.isascii() and text.isdigit():
        base = int(text)
    else:
        base = DEFAULT_COOKIE_DAYS
    return int(timedelta(days=base).total_seconds())


def _parse_bool(value: str, default: bool) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "1"):
        return True
    if lowered in ("false", "no", "0"):
        return False
    return default


class Settings:
    """
    Layered settings store for one LoginManager.

    Args:
        environ: Environment mapping to read LOGIN_* keys from
            (defaults to ``os.environ``, snapshotted at construction)
        env_file: Optional path to a .env file with LOGIN_* entries
    """

    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        env_file: Optional[str] = None,
    ):
        self.overrides: Dict[str, str] = {}
        self.environment: Dict[str, str] = {}

        if env_file:
            self._load_env_file(env_file)
        self._load_from_env(os.environ if environ is None else environ)

    def _load_env_file(self, path: str) -> None:
        """Load LOGIN_* entries from a .env file."""
        env_path = Path(path)
        if not env_path.exists():
            return

        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue

                if "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip().strip('"').strip("'")

                    if key.upper().startswith(ENV_PREFIX):
                        self.environment[key[len(ENV_PREFIX):].upper()] = value

    def _load_from_env(self, environ: Mapping[str, str]) -> None:
        """Load LOGIN_* entries from the process environment."""
        for key, value in environ.items():
            if key.upper().startswith(ENV_PREFIX):
                self.environment[key[len(ENV_PREFIX):].upper()] = value

    def set(self, key: str, value: Any) -> None:
        """Register an application-level override."""
        self.overrides[key.upper()] = str(value)

    def get(self, key: str) -> str:
        """Resolve a setting; unknown keys yield an empty string."""
        key = key.upper()
        for layer in (self.overrides, self.environment, DEFAULTS):
            if key in layer:
                return layer[key]
        return ""

    def __getitem__(self, key: str) -> str:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) != ""

    def to_dict(self) -> Dict[str, str]:
        """Export the effective settings."""
        merged = dict(DEFAULTS)
        merged.update(self.environment)
        merged.update(self.overrides)
        return merged

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------

    @property
    def cookie_name(self) -> str:
        return self.get("COOKIE_NAME")

    @property
    def cookie_path(self) -> str:
        return self.get("COOKIE_PATH") or "/"

    @property
    def cookie_domain(self) -> Optional[str]:
        return self.get("COOKIE_DOMAIN") or None

    @property
    def cookie_max_age(self) -> int:
        return cookie_seconds(self.get("COOKIE_DURATION"))

    @property
    def cookie_secure(self) -> bool:
        return _parse_bool(self.get("COOKIE_SECURE"), False)

    @property
    def cookie_httponly(self) -> bool:
        return _parse_bool(self.get("COOKIE_HTTPONLY"), True)

    @property
    def cookie_samesite(self) -> Optional[str]:
        return self.get("COOKIE_SAMESITE") or None

    @property
    def message_category(self) -> str:
        return self.get("MESSAGE_CATEGORY")

    @property
    def refresh_message(self) -> str:
        return self.get("REFRESH_MESSAGE")

    @property
    def unauthorized_message(self) -> str:
        return self.get("UNAUTHORIZED_MESSAGE")

    @property
    def login_url(self) -> str:
        return self.get("LOGIN_URL")

    @property
    def refresh_url(self) -> str:
        return self.get("REFRESH_URL")

    @property
    def secret_key(self) -> str:
        return self.get("SECRET_KEY")

    def __repr__(self) -> str:
        return f"Settings(overrides={sorted(self.overrides)}, environment={sorted(self.environment)})"


__all__ = ["Settings", "DEFAULTS", "ENV_PREFIX", "cookie_seconds", "storekey"]
