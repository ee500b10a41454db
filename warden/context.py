"""
Warden - Request-scoped login state.

A ``LoginContext`` is built fresh for every request by
``LoginManager.bind``. It resolves and memoizes the current principal and
implements the state transitions between the three session states:

    Anonymous   no user_id
    Fresh       user_id set, _fresh=True  (explicit login this session)
    Remembered  user_id set, _fresh=False (restored from remember cookie)

The shared manager never stores any of this; the active context is
reachable through ``ctx.login`` or, for templates and helpers, through
``current_login()``.
"""

from __future__ import annotations

import inspect
import logging
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, MutableMapping, Optional

from .faults import LoginContextMissingFault
from .flash import flash
from .response import Response
from .session import LoginSession, RememberIntent
from .user import ANONYMOUS, User

if TYPE_CHECKING:
    from .config import Settings
    from .manager import LoginManager
    from .request import Request, RequestCtx


logger = logging.getLogger("warden.login")


_current_login: ContextVar[Optional["LoginContext"]] = ContextVar(
    "current_login",
    default=None,
)


class LoginContext:
    """
    Login state of a single request.

    Args:
        manager: Process-wide LoginManager (read-only here)
        request: Incoming request
        session: Host session mapping for this request
    """

    def __init__(
        self,
        manager: "LoginManager",
        request: "Request",
        session: MutableMapping[str, Any],
    ):
        self.manager = manager
        self.request = request
        self.session = LoginSession(session)
        self._user: Optional[User] = None

    @property
    def settings(self) -> "Settings":
        return self.manager.settings

    # ========================================================================
    # Identity resolution
    # ========================================================================

    def reload(self) -> None:
        """
        Re-evaluate the identity for this request.

        Drops the cached principal and, when the session carries no
        ``user_id``, lets the registered restoration handlers try to
        establish one. The first handler that leaves a ``user_id`` wins.
        Restoration is skipped while a remember-cookie removal is pending.
        """
        self._user = None
        if self.session.user_id is not None:
            return
        if self.session.remember is RememberIntent.CLEAR:
            return

        for role, handler in self.manager.restoration_handlers():
            handler(self)
            if self.session.user_id is not None:
                logger.debug("Identity restored by %s handler", role.value)
                break

    def current_user_id(self) -> str:
        """The session's user id, or an empty string for anonymous."""
        return self.session.user_id or ""

    def current_user(self) -> User:
        """Resolve the current principal, loading it at most once per request."""
        if self._user is None:
            self._user = self._load_user(self.current_user_id())
        return self._user

    def forget_user(self) -> None:
        """Drop the cached principal so the next lookup hits the loader again."""
        self._user = None

    def _load_user(self, user_id: str) -> User:
        loader = self.manager.user_loader
        if not user_id or loader is None:
            return ANONYMOUS

        user = loader(user_id)
        if user is None:
            logger.debug("User loader returned nothing for id %r", user_id)
            return ANONYMOUS
        return user

    # ========================================================================
    # State transitions
    # ========================================================================

    def login_user(self, user: User, remember: bool = False, fresh: bool = True) -> bool:
        """
        Record ``user`` as the authenticated principal of this session.

        Args:
            user: Principal to log in
            remember: Issue a remember cookie at the end of the request
            fresh: Whether the login came from an actual credential check

        Returns:
            False (with no state change) if the user is inactive, else True
        """
        if not user.is_active():
            logger.warning("Rejected login for inactive user %r", user.get_id())
            return False

        self.session.user_id = user.get_id()
        self.session.fresh = fresh
        self._user = user
        if remember:
            self.session.remember = RememberIntent.SET

        logger.info("User %r logged in (fresh=%s, remember=%s)", user.get_id(), fresh, remember)
        return True

    def logout_user(self) -> bool:
        """
        Revoke the session's identity and schedule the remember cookie for
        deletion. The identity is re-resolved immediately, so
        ``current_user()`` is anonymous for the rest of the request.
        """
        user_id = self.session.user_id
        self._user = None
        del self.session.user_id
        del self.session.fresh
        self.session.remember = RememberIntent.CLEAR

        self._user = self._load_user(self.current_user_id())
        logger.info("User %r logged out", user_id)
        return True

    def confirm_login(self) -> None:
        """Mark a remembered session fresh again after re-authentication."""
        if self.session.user_id is None:
            return
        self.session.fresh = True

    def needs_refresh(self) -> bool:
        """True unless the identity was established by an explicit login."""
        return not self.session.fresh

    # ========================================================================
    # Escape paths
    # ========================================================================

    async def unauthorized(self) -> Response:
        """
        Build the response for a request that needs an authenticated user.

        Flashes the unauthorized message, gives a registered unauthorized
        handler the chance to answer, then redirects to LOGIN_URL (303) or
        answers 401.
        """
        settings = self.settings
        self.flash(settings.unauthorized_message, settings.message_category)

        response = await self._call_escape_handler(self.manager.unauthorized_handler)
        if response is not None:
            return response

        if settings.login_url:
            return Response.redirect(settings.login_url, status=303)
        return Response(status=401)

    async def refresh(self) -> Response:
        """
        Build the response for a request that needs a fresh login.

        A registered refresh handler takes over entirely; otherwise flashes
        the refresh message and redirects to REFRESH_URL (303) or answers 403.
        """
        response = await self._call_escape_handler(self.manager.refresh_handler)
        if response is not None:
            return response

        settings = self.settings
        self.flash(settings.refresh_message, settings.message_category)
        if settings.refresh_url:
            return Response.redirect(settings.refresh_url, status=303)
        return Response(status=403)

    async def _call_escape_handler(self, handler) -> Optional[Response]:
        if handler is None:
            return None
        result = handler(self)
        if inspect.isawaitable(result):
            result = await result
        return result if isinstance(result, Response) else None

    def flash(self, message: str, category: str) -> None:
        if message:
            flash(self.session.data, message, category)

    def __repr__(self) -> str:
        return f"<LoginContext {self.request!r} {self.session!r}>"


# ============================================================================
# Context access
# ============================================================================


def get_login(ctx: "RequestCtx") -> LoginContext:
    """
    Login context bound to a request context.

    Raises:
        LoginContextMissingFault: LoginMiddleware did not run for this request
    """
    if ctx.login is None:
        raise LoginContextMissingFault()
    return ctx.login


def current_login() -> LoginContext:
    """
    Login context of the request being handled by the current task.

    Raises:
        LoginContextMissingFault: called outside a request
    """
    login = _current_login.get()
    if login is None:
        raise LoginContextMissingFault()
    return login


def current_user() -> User:
    """Current principal, or ``ANONYMOUS`` outside a request."""
    login = _current_login.get()
    if login is None:
        return ANONYMOUS
    return login.current_user()


__all__ = [
    "LoginContext",
    "get_login",
    "current_login",
    "current_user",
]
