"""
Warden - Request-scoped login manager for async Python web stacks

Tracks which user a request belongs to across login, logout, remember-me
restoration and re-authentication:

- LoginManager: process-wide configuration, user loader, handler table
- LoginContext: per-request identity resolution and state transitions
- Remember-me cookies: signed (or encrypted) long-lived identity cookies
- Guards: require_login, login_required, refresh_required
"""

__version__ = "0.3.0"

from .config import DEFAULTS, Settings, cookie_seconds, storekey
from .context import LoginContext, current_login, current_user, get_login
from .cookies import CookieCodec, CookieEncryptor, CookieSigner
from .faults import (
    Fault,
    FaultDomain,
    LoginConfigFault,
    LoginContextMissingFault,
    LoginSessionMissingFault,
    Severity,
)
from .flash import flash, get_flashed_messages
from .guards import login_required, refresh_required, require_login
from .manager import (
    RESTORE_ORDER,
    Configuration,
    HandlerRole,
    LoginManager,
    cookie_codec,
    env,
    handler,
    refresh,
    secret_key,
    unauthorized,
    user_loader,
)
from .middleware import LoginMiddleware, MiddlewareStack
from .remember import persist_remember, restore_from_cookie
from .request import Request, RequestCtx
from .response import Response
from .session import LoginSession, RememberIntent
from .user import ANONYMOUS, AnonymousUser, User, UserMixin


__all__ = [
    "__version__",
    # Manager & configuration
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
    "Settings",
    "DEFAULTS",
    "cookie_seconds",
    "storekey",
    # Request state
    "LoginContext",
    "LoginSession",
    "RememberIntent",
    "get_login",
    "current_login",
    "current_user",
    # Users
    "User",
    "UserMixin",
    "AnonymousUser",
    "ANONYMOUS",
    # Remember-me
    "restore_from_cookie",
    "persist_remember",
    "CookieCodec",
    "CookieSigner",
    "CookieEncryptor",
    # Guards & pipeline
    "require_login",
    "login_required",
    "refresh_required",
    "LoginMiddleware",
    "MiddlewareStack",
    "Request",
    "RequestCtx",
    "Response",
    "flash",
    "get_flashed_messages",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "LoginConfigFault",
    "LoginContextMissingFault",
    "LoginSessionMissingFault",
]
