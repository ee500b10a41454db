"""
Test 12: Request primitives (request.py)

Tests header and cookie parsing from an ASGI scope.
"""

from warden.request import Request, RequestCtx
from warden.testing import make_test_scope


def build(headers):
    return Request(make_test_scope("POST", "/login", headers))


class TestRequest:

    def test_method_and_path(self):
        request = build([])
        assert request.method == "POST"
        assert request.path == "/login"

    def test_headers_case_insensitive(self):
        request = build([("X-API-Key", "abc")])
        assert request.header("x-api-key") == "abc"
        assert request.header("X-Api-Key") == "abc"
        assert request.header("missing", "fallback") == "fallback"

    def test_repeated_headers_joined(self):
        request = build([("accept", "text/html"), ("accept", "application/json")])
        assert request.headers["accept"] == "text/html, application/json"

    def test_cookies(self):
        request = build([("cookie", "remember_token=abc.def; theme=dark")])
        assert request.cookies == {"remember_token": "abc.def", "theme": "dark"}
        assert request.cookie("theme") == "dark"
        assert request.cookie("missing") is None

    def test_repeated_cookie_headers(self):
        request = build([("cookie", "a=1"), ("cookie", "b=2")])
        assert request.cookies == {"a": "1", "b": "2"}

    def test_no_cookie_header(self):
        assert build([]).cookies == {}

    def test_malformed_cookie_header(self):
        request = build([("cookie", 'a="unterminated\\')])
        assert isinstance(request.cookies, dict)


class TestRequestCtx:

    def test_defaults(self):
        request = build([])
        ctx = RequestCtx(request=request)
        assert ctx.session is None
        assert ctx.login is None
        assert ctx.state == {}
        assert ctx.path == "/login"
        assert ctx.method == "POST"
