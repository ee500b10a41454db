"""
Middleware system - Composable async middleware and the login middleware.

Middleware signature: ``async (request, ctx, next) -> Response``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional

from .context import _current_login
from .faults import LoginSessionMissingFault
from .remember import persist_remember
from .request import Request, RequestCtx
from .response import Response
from .session import RememberIntent

if TYPE_CHECKING:
    from .manager import LoginManager


Handler = Callable[[Request, RequestCtx], Awaitable[Response]]
Middleware = Callable[[Request, RequestCtx, Handler], Awaitable[Response]]


@dataclass
class MiddlewareDescriptor:
    """Descriptor for middleware registration."""
    middleware: Middleware
    priority: int
    name: str


class MiddlewareStack:
    """
    Ordered middleware stack.

    Lower priority runs first (outermost); equal priorities keep
    registration order.
    """

    def __init__(self):
        self.middlewares: List[MiddlewareDescriptor] = []

    def add(
        self,
        middleware: Middleware,
        priority: int = 50,
        name: Optional[str] = None,
    ) -> None:
        """Add middleware to stack."""
        if name is None:
            name = getattr(middleware, "__name__", type(middleware).__name__)

        self.middlewares.append(
            MiddlewareDescriptor(middleware=middleware, priority=priority, name=name)
        )

    def build_handler(self, final_handler: Handler) -> Handler:
        """Build middleware chain wrapping the final handler."""
        ordered = sorted(self.middlewares, key=lambda desc: desc.priority)

        handler = final_handler
        for desc in reversed(ordered):
            handler = self._wrap_middleware(desc.middleware, handler)
        return handler

    def _wrap_middleware(self, middleware: Middleware, next_handler: Handler) -> Handler:
        async def wrapped(request: Request, ctx: RequestCtx) -> Response:
            return await middleware(request, ctx, next_handler)

        return wrapped


class LoginMiddleware:
    """
    Binds login state to each request and persists the remember cookie.

    1. Builds a fresh LoginContext (restoring from the remember cookie when
       the session has no identity) and exposes it on ``ctx.login``
    2. Runs the rest of the chain
    3. Issues or clears the remember cookie on the response

    When the chain raises, a pending cookie issue is discarded but a pending
    cookie removal stays in the session for the next response.
    """

    def __init__(self, manager: "LoginManager"):
        self.manager = manager
        self.logger = logging.getLogger("warden.middleware")

    async def __call__(self, request: Request, ctx: RequestCtx, next: Handler) -> Response:
        if ctx.session is None:
            raise LoginSessionMissingFault()

        login = self.manager.bind(request, ctx.session)
        ctx.login = login
        token = _current_login.set(login)
        try:
            response = await next(request, ctx)
            persist_remember(login, response)
            return response
        finally:
            if login.session.remember is RememberIntent.SET:
                login.session.remember = RememberIntent.NONE
                self.logger.warning(
                    "Discarded pending remember cookie for %s %s after a failed request",
                    request.method, request.path,
                )
            _current_login.reset(token)


__all__ = [
    "Handler",
    "Middleware",
    "MiddlewareDescriptor",
    "MiddlewareStack",
    "LoginMiddleware",
]
