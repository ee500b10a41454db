"""
Request primitives - ASGI-scope backed request and per-request context.

Only the parts the login manager touches are modelled: method, path,
headers and cookies, plus a free-form ``state`` dict for middleware.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from http.cookies import CookieError, SimpleCookie
from typing import TYPE_CHECKING, Any, Dict, Mapping, MutableMapping, Optional

if TYPE_CHECKING:
    from .context import LoginContext


class Request:
    """
    HTTP request built from an ASGI scope.

    Headers and cookies are parsed lazily on first access.
    """

    __slots__ = ("scope", "state", "_headers", "_cookies")

    def __init__(self, scope: Mapping[str, Any]):
        self.scope = scope
        self.state: Dict[str, Any] = {}
        self._headers: Optional[Dict[str, str]] = None
        self._cookies: Optional[Dict[str, str]] = None

    @property
    def method(self) -> str:
        return self.scope.get("method", "GET")

    @property
    def path(self) -> str:
        return self.scope.get("path", "/")

    # ========================================================================
    # Headers
    # ========================================================================

    @property
    def headers(self) -> Mapping[str, str]:
        """Get parsed headers (lower-cased names, repeated headers joined)."""
        if self._headers is None:
            headers: Dict[str, str] = {}
            for raw_name, raw_value in self.scope.get("headers", ()):
                name = raw_name.decode("latin-1").lower()
                value = raw_value.decode("latin-1")
                if name in headers:
                    separator = "; " if name == "cookie" else ", "
                    headers[name] = f"{headers[name]}{separator}{value}"
                else:
                    headers[name] = value
            self._headers = headers
        return self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get single header (case-insensitive)."""
        return self.headers.get(name.lower(), default)

    # ========================================================================
    # Cookies
    # ========================================================================

    @property
    def cookies(self) -> Mapping[str, str]:
        """Get parsed cookies."""
        if self._cookies is None:
            cookie_header = self.header("cookie", "")
            self._cookies = {}
            if cookie_header:
                cookie = SimpleCookie()
                try:
                    cookie.load(cookie_header)
                except CookieError:
                    # Malformed header reads as no cookies
                    pass
                else:
                    self._cookies = {key: morsel.value for key, morsel in cookie.items()}
        return self._cookies

    def cookie(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get single cookie value."""
        return self.cookies.get(name, default)

    def __repr__(self) -> str:
        return f"<Request {self.method} {self.path}>"


@dataclass
class RequestCtx:
    """
    Request context handed through the middleware chain.

    Attributes:
        request: The HTTP request
        session: Host session mapping (provided by session middleware)
        login: Login state for this request (bound by LoginMiddleware)
        state: Additional state dictionary
    """

    request: Request
    session: Optional[MutableMapping[str, Any]] = None
    login: Optional["LoginContext"] = None
    state: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> str:
        return self.request.path

    @property
    def method(self) -> str:
        return self.request.method


__all__ = ["Request", "RequestCtx"]
