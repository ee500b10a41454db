"""
Warden - Remember-me cookie protocol.

Two halves running at opposite ends of a request:

- restore_from_cookie: during ``LoginContext.reload`` promotes a valid
  remember cookie into a non-fresh session identity
- persist_remember: after the handler chain consumes the pending
  RememberIntent and issues or clears the cookie on the response
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .response import Response
from .session import RememberIntent

if TYPE_CHECKING:
    from .context import LoginContext


logger = logging.getLogger("warden.remember")


def restore_from_cookie(login: "LoginContext") -> None:
    """Restore the session identity from the remember cookie, if present."""
    raw = login.request.cookies.get(login.settings.cookie_name)
    if not raw:
        return

    user_id = login.manager.cookie_codec.decode(raw)
    if not user_id:
        logger.warning("Ignoring undecodable remember cookie %r", login.settings.cookie_name)
        login.session.remember = RememberIntent.CLEAR
        return

    login.session.user_id = user_id
    login.session.fresh = False
    login.forget_user()
    logger.debug("Restored user %r from remember cookie", user_id)


def persist_remember(login: "LoginContext", response: Response) -> RememberIntent:
    """
    Execute the pending remember intent against ``response``.

    The intent is removed from the session whatever it was.

    Returns:
        The intent that was consumed
    """
    intent = login.session.consume_remember()
    settings = login.settings

    if intent is RememberIntent.SET:
        user_id = login.session.user_id
        if user_id is None:
            logger.warning("Remember cookie requested without a logged-in user; skipped")
            return intent
        response.set_cookie(
            settings.cookie_name,
            login.manager.cookie_codec.encode(user_id),
            max_age=settings.cookie_max_age,
            path=settings.cookie_path,
            domain=settings.cookie_domain,
            secure=settings.cookie_secure,
            httponly=settings.cookie_httponly,
            samesite=settings.cookie_samesite,
        )
        logger.debug("Issued remember cookie for user %r", user_id)

    elif intent is RememberIntent.CLEAR:
        response.set_cookie(
            settings.cookie_name,
            "",
            max_age=0,
            path=settings.cookie_path,
            domain=settings.cookie_domain,
            secure=settings.cookie_secure,
            httponly=settings.cookie_httponly,
            samesite=settings.cookie_samesite,
        )
        logger.debug("Cleared remember cookie")

    return intent


__all__ = ["restore_from_cookie", "persist_remember"]
