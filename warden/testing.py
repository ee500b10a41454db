"""
Warden Testing - In-process test client.

Drives handlers through a MiddlewareStack with the login middleware
installed, keeping a cookie jar and a session mapping across requests the
way a browser and a cookie-backed session store would.

Usage::

    client = TestClient(manager, routes={"/profile": profile})
    resp = await client.get("/profile")
    assert resp.status_code == 401
"""

from __future__ import annotations

from http.cookies import SimpleCookie
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .manager import LoginManager
from .middleware import Handler, Middleware, MiddlewareStack
from .request import Request, RequestCtx
from .response import Response


def make_test_scope(
    method: str = "GET",
    path: str = "/",
    headers: Optional[List[Tuple[str, str]]] = None,
) -> dict:
    """Build a minimal ASGI HTTP scope for testing."""
    raw_headers = [
        (name.encode("latin-1"), value.encode("latin-1"))
        for name, value in (headers or [])
    ]
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": b"",
        "headers": raw_headers,
        "scheme": "http",
        "server": ("127.0.0.1", 8000),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
    }


class TestResponse:
    """Wrapper around a handler's Response with assertion-friendly accessors."""

    __test__ = False

    def __init__(self, response: Response):
        self.response = response
        self.status_code = response.status
        self.headers = response.headers
        self.body = response.body

    @property
    def text(self) -> str:
        return self.body.decode("utf-8")

    @property
    def location(self) -> Optional[str]:
        """Return Location header (useful for redirects)."""
        value = self.headers.get("location")
        return value if isinstance(value, str) or value is None else value[0]

    @property
    def set_cookies(self) -> Dict[str, Any]:
        """Cookies set by this response, as ``{name: Morsel}``."""
        morsels: Dict[str, Any] = {}
        for header in self.response.header_values("set-cookie"):
            cookie = SimpleCookie()
            cookie.load(header)
            morsels.update(cookie)
        return morsels

    @property
    def cookies(self) -> Dict[str, str]:
        """Cookie values set by this response."""
        return {name: morsel.value for name, morsel in self.set_cookies.items()}

    def __repr__(self) -> str:
        return f"<TestResponse [{self.status_code}]>"


class TestClient:
    """
    In-process client for testing login flows.

    Args:
        manager: LoginManager to install in front of the routes
        routes: Mapping of path to final handler
        middlewares: Extra middleware added after the login middleware
        session: Initial session contents
    """

    __test__ = False

    def __init__(
        self,
        manager: LoginManager,
        routes: Mapping[str, Handler],
        *,
        middlewares: Iterable[Middleware] = (),
        session: Optional[Dict[str, Any]] = None,
    ):
        self.manager = manager
        self.routes = dict(routes)
        self.session: Dict[str, Any] = dict(session or {})
        self.cookies: Dict[str, str] = {}
        self.last_ctx: Optional[RequestCtx] = None

        self.stack = MiddlewareStack()
        manager.init_app(self.stack)
        for middleware in middlewares:
            self.stack.add(middleware)
        self._app = self.stack.build_handler(self._dispatch)

    async def _dispatch(self, request: Request, ctx: RequestCtx) -> Response:
        route = self.routes.get(request.path)
        if route is None:
            return Response("Not Found", status=404)
        return await route(request, ctx)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[List[Tuple[str, str]]] = None,
    ) -> TestResponse:
        headers = list(headers or [])
        if self.cookies:
            headers.append(
                ("cookie", "; ".join(f"{name}={value}" for name, value in self.cookies.items()))
            )

        request = Request(make_test_scope(method, path, headers))
        ctx = RequestCtx(request=request, session=self.session)
        self.last_ctx = ctx

        result = TestResponse(await self._app(request, ctx))
        self._store_cookies(result)
        return result

    async def get(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> TestResponse:
        return await self.request("POST", path, **kwargs)

    def _store_cookies(self, response: TestResponse) -> None:
        for name, morsel in response.set_cookies.items():
            if morsel["max-age"] == "0" or not morsel.value:
                self.cookies.pop(name, None)
            else:
                self.cookies[name] = morsel.value

    def new_session(self) -> None:
        """Forget the session but keep cookies, like a browser restart."""
        self.session = {}


__all__ = ["TestClient", "TestResponse", "make_test_scope"]
