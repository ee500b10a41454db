"""
Warden - Login Manager

Process-wide coordinator: owns settings, the user loader, the handler
table and the remember-cookie codec. It carries no per-request state;
``bind`` hands out a fresh LoginContext for every request.

Example:
    >>> manager = LoginManager(
    ...     user_loader(lambda uid: USERS.get(uid)),
    ...     env("login_url:/login", "cookie_duration:14"),
    ...     secret_key("change-me"),
    ... )
    >>> stack = MiddlewareStack()
    >>> manager.init_app(stack)
"""

from __future__ import annotations

import logging
import secrets
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    MutableMapping,
    Optional,
    Tuple,
    Union,
)

from .config import Settings
from .context import LoginContext
from .cookies import CookieCodec, CookieSigner
from .faults import LoginConfigFault
from .remember import restore_from_cookie
from .response import Response
from .user import User

if TYPE_CHECKING:
    from .middleware import MiddlewareStack
    from .request import Request


logger = logging.getLogger("warden.manager")


UserLoader = Callable[[str], Optional[User]]
RestoreHandler = Callable[[LoginContext], None]
EscapeHandler = Callable[[LoginContext], Union[Optional[Response], Awaitable[Optional[Response]]]]


# ============================================================================
# Handler roles
# ============================================================================


class HandlerRole(str, Enum):
    """Named slots of the handler table."""

    COOKIE = "cookie"
    REQUEST = "request"
    TOKEN = "token"
    HEADER = "header"
    REFRESH = "refresh"
    UNAUTHORIZED = "unauthorized"

    @classmethod
    def parse(cls, value: Union[str, "HandlerRole"]) -> "HandlerRole":
        if isinstance(value, HandlerRole):
            return value
        name = str(value).strip().lower()
        if name == "unauthenticated":
            return cls.UNAUTHORIZED
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"unknown handler role {value!r}") from None


RESTORE_ORDER: Tuple[HandlerRole, ...] = (
    HandlerRole.COOKIE,
    HandlerRole.REQUEST,
    HandlerRole.TOKEN,
    HandlerRole.HEADER,
)


# ============================================================================
# Login Manager
# ============================================================================


class LoginManager:
    """
    Login manager for one application.

    Args:
        *configurations: Configuration functions applied in order
        environ: Environment mapping for LOGIN_* settings (default os.environ)
        env_file: Optional .env file with LOGIN_* settings

    Raises:
        LoginConfigFault: A configuration function failed
    """

    def __init__(
        self,
        *configurations: "Configuration",
        environ: Optional[MutableMapping[str, str]] = None,
        env_file: Optional[str] = None,
    ):
        self.settings = Settings(environ=environ, env_file=env_file)
        self.user_loader: Optional[UserLoader] = None
        self.handlers: Dict[HandlerRole, Callable[..., Any]] = {
            HandlerRole.COOKIE: restore_from_cookie,
        }
        self._cookie_codec: Optional[CookieCodec] = None
        self.configure(*configurations)

    def configure(self, *configurations: "Configuration") -> "LoginManager":
        """
        Apply configuration functions in order.

        Raises:
            LoginConfigFault: On the first configuration that fails
        """
        for conf in configurations:
            try:
                conf(self)
            except LoginConfigFault:
                raise
            except Exception as exc:
                raise LoginConfigFault(reason=str(exc)) from exc
        return self

    def init_app(self, stack: "MiddlewareStack", priority: int = 10) -> None:
        """Install LoginMiddleware into the application's middleware stack."""
        from .middleware import LoginMiddleware

        stack.add(LoginMiddleware(self), priority=priority, name="login")

    def bind(self, request: "Request", session: MutableMapping[str, Any]) -> LoginContext:
        """Create the login state for one request and reload its identity."""
        login = LoginContext(self, request, session)
        login.reload()
        return login

    # ------------------------------------------------------------------
    # Handler table
    # ------------------------------------------------------------------

    def register(self, role: Union[str, HandlerRole], handler: Callable[..., Any]) -> None:
        if not callable(handler):
            raise TypeError(f"handler for {role!r} must be callable")
        self.handlers[HandlerRole.parse(role)] = handler

    def restoration_handlers(self) -> Iterator[Tuple[HandlerRole, RestoreHandler]]:
        """Registered restoration handlers in their fixed order."""
        for role in RESTORE_ORDER:
            handler = self.handlers.get(role)
            if handler is not None:
                yield role, handler

    @property
    def unauthorized_handler(self) -> Optional[EscapeHandler]:
        return self.handlers.get(HandlerRole.UNAUTHORIZED)

    @property
    def refresh_handler(self) -> Optional[EscapeHandler]:
        return self.handlers.get(HandlerRole.REFRESH)

    # ------------------------------------------------------------------
    # Cookie codec
    # ------------------------------------------------------------------

    @property
    def cookie_codec(self) -> CookieCodec:
        """
        Codec for the remember cookie.

        Falls back to an HMAC signer keyed by the SECRET_KEY setting, or by a
        random per-process key when none is configured.
        """
        if self._cookie_codec is None:
            key = self.settings.secret_key
            if not key:
                logger.warning(
                    "No SECRET_KEY configured; remember cookies are signed with a "
                    "per-process key and will not survive a restart"
                )
                key = secrets.token_urlsafe(32)
            self._cookie_codec = CookieSigner(key)
        return self._cookie_codec

    @cookie_codec.setter
    def cookie_codec(self, codec: CookieCodec) -> None:
        self._cookie_codec = codec

    def __repr__(self) -> str:
        roles = ", ".join(role.value for role in self.handlers)
        return f"<LoginManager handlers=[{roles}]>"


# ============================================================================
# Configuration functions
# ============================================================================

Configuration = Callable[[LoginManager], None]


def user_loader(func: UserLoader) -> Configuration:
    """Set the function that maps a user id to a principal (or None)."""
    def apply(manager: LoginManager) -> None:
        if not callable(func):
            raise TypeError("user loader must be callable")
        manager.user_loader = func
    return apply


def handler(role: Union[str, HandlerRole], func: Callable[..., Any]) -> Configuration:
    """Register a handler for a named role."""
    def apply(manager: LoginManager) -> None:
        manager.register(role, func)
    return apply


def unauthorized(func: EscapeHandler) -> Configuration:
    """Register the unauthorized escape handler."""
    return handler(HandlerRole.UNAUTHORIZED, func)


def refresh(func: EscapeHandler) -> Configuration:
    """Register the refresh escape handler."""
    return handler(HandlerRole.REFRESH, func)


def env(*items: str) -> Configuration:
    """
    Register setting overrides as ``KEY:VALUE`` strings.

    Keys are case-insensitive; values may themselves contain ``:``.
    """
    def apply(manager: LoginManager) -> None:
        for item in items:
            key, sep, value = item.partition(":")
            if not sep or not key.strip():
                raise ValueError(f"setting {item!r} is not in KEY:VALUE form")
            manager.settings.set(key.strip(), value)
    return apply


def secret_key(key: Union[str, bytes]) -> Configuration:
    """Sign remember cookies with an HMAC signer keyed by ``key``."""
    def apply(manager: LoginManager) -> None:
        manager.cookie_codec = CookieSigner(key)
    return apply


def cookie_codec(codec: CookieCodec) -> Configuration:
    """Use a custom codec (e.g. CookieEncryptor) for remember cookies."""
    def apply(manager: LoginManager) -> None:
        if not (callable(getattr(codec, "encode", None)) and callable(getattr(codec, "decode", None))):
            raise TypeError("cookie codec must provide encode() and decode()")
        manager.cookie_codec = codec
    return apply


__all__ = [
    "LoginManager",
    "HandlerRole",
    "RESTORE_ORDER",
    "Configuration",
    "user_loader",
    "handler",
    "unauthorized",
    "refresh",
    "env",
    "secret_key",
    "cookie_codec",
]
