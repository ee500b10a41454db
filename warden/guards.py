"""
Warden - Guards

Route protection for handlers and middleware stacks:

- require_login: middleware stage, short-circuits the chain for anonymous users
- login_required: handler decorator, calls the handler only when authenticated
- refresh_required: handler decorator, calls the handler only for fresh logins

Example:
    >>> @login_required
    ... async def profile(request, ctx):
    ...     return Response.json({"id": ctx.login.current_user().get_id()})
"""

from __future__ import annotations

import functools
from typing import Any, Awaitable, Callable, TypeVar

from .context import get_login
from .middleware import Handler
from .request import Request, RequestCtx
from .response import Response


F = TypeVar("F", bound=Callable[..., Awaitable[Response]])


async def require_login(request: Request, ctx: RequestCtx, next: Handler) -> Response:
    """Middleware stage answering unauthenticated requests with the unauthorized path."""
    login = get_login(ctx)
    if not login.current_user().is_authenticated():
        return await login.unauthorized()
    return await next(request, ctx)


def login_required(func: F) -> F:
    """Call ``func`` only if the current user is authenticated."""
    @functools.wraps(func)
    async def wrapper(request: Request, ctx: RequestCtx, *args: Any, **kwargs: Any) -> Response:
        login = get_login(ctx)
        if login.current_user().is_authenticated():
            return await func(request, ctx, *args, **kwargs)
        return await login.unauthorized()

    wrapper.__login_required__ = True
    return wrapper  # type: ignore[return-value]


def refresh_required(func: F) -> F:
    """Call ``func`` only if the session was established by an explicit login."""
    @functools.wraps(func)
    async def wrapper(request: Request, ctx: RequestCtx, *args: Any, **kwargs: Any) -> Response:
        login = get_login(ctx)
        if login.needs_refresh():
            return await login.refresh()
        return await func(request, ctx, *args, **kwargs)

    wrapper.__refresh_required__ = True
    return wrapper  # type: ignore[return-value]


__all__ = ["require_login", "login_required", "refresh_required"]
