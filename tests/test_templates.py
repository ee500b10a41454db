"""
Test 10: Template integration (templates.py)

Tests login globals and explicit context injection with jinja2.
"""

import pytest
from jinja2 import DictLoader, Environment

from warden import LoginContextMissingFault, Response, flash, get_flashed_messages
from warden.templates import inject_login_context, install_login_globals
from warden.testing import TestClient

from tests.conftest import make_request


TEMPLATES = {
    "nav.html": (
        "{% if current_user().is_authenticated() %}"
        "Signed in as {{ current_user().get_id() }}"
        "{% else %}"
        "Guest"
        "{% endif %}"
    ),
    "account.html": (
        "{{ current_user.get_id() or 'guest' }}"
        "{% if needs_refresh %} (confirm password){% endif %}"
    ),
    "login_state.html": "{{ current_login().needs_refresh() }}",
}


@pytest.fixture
def jinja_env():
    return install_login_globals(Environment(loader=DictLoader(TEMPLATES), autoescape=True))


class TestLoginGlobals:

    def test_globals_installed(self, jinja_env):
        assert "current_user" in jinja_env.globals
        assert "current_login" in jinja_env.globals

    def test_guest_outside_request(self, jinja_env):
        assert jinja_env.get_template("nav.html").render() == "Guest"

    def test_current_login_outside_request_faults(self, jinja_env):
        with pytest.raises(LoginContextMissingFault):
            jinja_env.get_template("login_state.html").render()

    @pytest.mark.asyncio
    async def test_rendered_during_request(self, manager, jinja_env):
        async def page(request, ctx):
            return Response(jinja_env.get_template("nav.html").render(), media_type="text/html")

        client = TestClient(manager, {"/": page}, session={"user_id": "one", "_fresh": True})
        resp = await client.get("/")

        assert resp.text == "Signed in as one"

    @pytest.mark.asyncio
    async def test_guest_during_anonymous_request(self, manager, jinja_env):
        async def page(request, ctx):
            return Response(jinja_env.get_template("nav.html").render())

        client = TestClient(manager, {"/": page})
        resp = await client.get("/")

        assert resp.text == "Guest"


class TestInjectLoginContext:

    def test_explicit_login(self, manager, jinja_env):
        login = manager.bind(make_request(), {"user_id": "one", "_fresh": False})
        context = inject_login_context({}, login)

        assert context["current_user"].get_id() == "one"
        assert context["needs_refresh"] is True
        assert jinja_env.get_template("account.html").render(**context) == "one (confirm password)"

    def test_without_login(self, jinja_env):
        context = inject_login_context({"title": "Home"})

        assert context["title"] == "Home"
        assert context["current_user"].is_anonymous() is True
        assert jinja_env.get_template("account.html").render(**context) == "guest (confirm password)"

    @pytest.mark.asyncio
    async def test_uses_bound_login(self, manager):
        captured = {}

        async def page(request, ctx):
            captured.update(inject_login_context({}))
            return Response("ok")

        client = TestClient(manager, {"/": page}, session={"user_id": "one", "_fresh": True})
        await client.get("/")

        assert captured["current_user"].get_id() == "one"
        assert captured["needs_refresh"] is False


class TestFlashInTemplates:

    def test_flashed_messages_render(self):
        env = Environment(autoescape=True)
        env.globals["get_flashed_messages"] = get_flashed_messages
        session = {}
        flash(session, "Please log in to access this page", "warning")

        template = env.from_string(
            "{% for m in get_flashed_messages(session) %}[{{ m.category }}] {{ m.text }}{% endfor %}"
        )

        assert template.render(session=session) == "[warning] Please log in to access this page"
        assert get_flashed_messages(session) == []
