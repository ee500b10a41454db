"""
Test 6: Remember-me cookie protocol (remember.py)

Tests cookie restoration during reload and cookie issue/removal at the end
of a request.
"""

from http.cookies import SimpleCookie

import pytest

from warden import (
    CookieEncryptor,
    CookieSigner,
    LoginManager,
    Response,
    cookie_codec,
    env,
    secret_key,
    user_loader,
)
from warden.remember import persist_remember
from warden.session import RememberIntent

from tests.conftest import in_memory_user_loader, make_request


DAY = 24 * 60 * 60


def parse_set_cookie(response: Response):
    """Return the single Set-Cookie header of ``response`` as a Morsel."""
    values = response.header_values("set-cookie")
    assert len(values) == 1
    cookie = SimpleCookie()
    cookie.load(values[0])
    (morsel,) = cookie.values()
    return morsel


# ============================================================================
# Restoration
# ============================================================================

class TestRestoreFromCookie:

    def test_valid_cookie_restores_non_fresh_identity(self, manager, session, one):
        token = manager.cookie_codec.encode("one")
        login = manager.bind(make_request(cookies={"remember_token": token}), session)

        assert login.current_user() is one
        assert session["user_id"] == "one"
        assert session["_fresh"] is False
        assert login.needs_refresh() is True

    def test_no_cookie_stays_anonymous(self, login, session):
        assert login.current_user().is_anonymous() is True
        assert session == {}

    def test_empty_cookie_is_ignored(self, manager, session):
        login = manager.bind(make_request(cookies={"remember_token": ""}), session)
        assert login.current_user().is_anonymous() is True
        assert session == {}

    def test_tampered_cookie_is_cleared(self, manager, session, caplog):
        forged = CookieSigner("attacker").encode("one")
        with caplog.at_level("WARNING", logger="warden.remember"):
            login = manager.bind(make_request(cookies={"remember_token": forged}), session)

        assert login.current_user().is_anonymous() is True
        assert "user_id" not in session
        assert session["remember"] == "clear"
        assert "undecodable remember cookie" in caplog.text

    def test_session_identity_beats_cookie(self, manager, session, one):
        session.update({"user_id": "one", "_fresh": True})
        token = manager.cookie_codec.encode("two")
        login = manager.bind(make_request(cookies={"remember_token": token}), session)

        assert login.current_user() is one
        assert login.needs_refresh() is False

    def test_pending_removal_blocks_restoration(self, manager, session):
        session["remember"] = "clear"
        token = manager.cookie_codec.encode("one")
        login = manager.bind(make_request(cookies={"remember_token": token}), session)

        assert login.current_user().is_anonymous() is True
        assert "user_id" not in session
        assert session["remember"] == "clear"

    def test_custom_cookie_name(self, session, one):
        manager = LoginManager(
            user_loader(in_memory_user_loader),
            secret_key("k"),
            env("cookie_name:stay"),
            environ={},
        )
        token = manager.cookie_codec.encode("one")

        ignored = manager.bind(make_request(cookies={"remember_token": token}), {})
        restored = manager.bind(make_request(cookies={"stay": token}), session)

        assert ignored.current_user().is_anonymous() is True
        assert restored.current_user() is one

    def test_encrypted_cookie(self, session, one):
        codec = CookieEncryptor(CookieEncryptor.generate_key())
        manager = LoginManager(
            user_loader(in_memory_user_loader),
            cookie_codec(codec),
            environ={},
        )
        login = manager.bind(make_request(cookies={"remember_token": codec.encode("one")}), session)
        assert login.current_user() is one


# ============================================================================
# Persistence
# ============================================================================

class TestPersistRemember:

    def test_set_issues_signed_cookie(self, login, one):
        login.login_user(one, remember=True)
        response = Response()

        assert persist_remember(login, response) is RememberIntent.SET

        morsel = parse_set_cookie(response)
        assert morsel.key == "remember_token"
        assert login.manager.cookie_codec.decode(morsel.value) == "one"
        assert morsel["max-age"] == str(31 * DAY)
        assert morsel["path"] == "/"
        assert morsel["httponly"] is True
        assert morsel["samesite"] == "Lax"
        assert not morsel["secure"]
        assert not morsel["domain"]

    def test_intent_consumed(self, login, session, one):
        login.login_user(one, remember=True)
        persist_remember(login, Response())

        assert "remember" not in session
        second = Response()
        assert persist_remember(login, second) is RememberIntent.NONE
        assert second.header_values("set-cookie") == []

    def test_clear_expires_cookie(self, login, one):
        login.login_user(one, remember=True)
        login.logout_user()
        response = Response()

        assert persist_remember(login, response) is RememberIntent.CLEAR

        morsel = parse_set_cookie(response)
        assert morsel.key == "remember_token"
        assert morsel.value == ""
        assert morsel["max-age"] == "0"

    def test_none_leaves_response_alone(self, login, one):
        login.login_user(one)
        response = Response()
        assert persist_remember(login, response) is RememberIntent.NONE
        assert response.header_values("set-cookie") == []

    def test_set_without_identity_is_skipped(self, login, session):
        session["remember"] = "set"
        response = Response()

        assert persist_remember(login, response) is RememberIntent.SET
        assert response.header_values("set-cookie") == []
        assert "remember" not in session

    def test_cookie_attributes_from_settings(self, session, one):
        manager = LoginManager(
            user_loader(in_memory_user_loader),
            secret_key("k"),
            env(
                "cookie_name:stay",
                "cookie_duration:7",
                "cookie_path:/app",
                "cookie_domain:example.com",
                "cookie_secure:true",
                "cookie_samesite:Strict",
            ),
            environ={},
        )
        login = manager.bind(make_request(), session)
        login.login_user(one, remember=True)
        response = Response()
        persist_remember(login, response)

        morsel = parse_set_cookie(response)
        assert morsel.key == "stay"
        assert morsel["max-age"] == str(7 * DAY)
        assert morsel["path"] == "/app"
        assert morsel["domain"] == "example.com"
        assert morsel["secure"] is True
        assert morsel["samesite"] == "Strict"

    @pytest.mark.parametrize("duration", ["", "abc", "-", "-5", " 7"])
    def test_malformed_duration_uses_31_days(self, session, one, duration):
        manager = LoginManager(
            user_loader(in_memory_user_loader),
            secret_key("k"),
            env(f"cookie_duration:{duration}"),
            environ={},
        )
        login = manager.bind(make_request(), session)
        login.login_user(one, remember=True)
        response = Response()
        persist_remember(login, response)

        assert parse_set_cookie(response)["max-age"] == str(31 * DAY)
