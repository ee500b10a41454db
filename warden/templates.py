"""
Warden - Template integration

Exposes login state to jinja2 templates.

Usage in templates:
    {% if current_user().is_authenticated() %}
        Signed in as {{ current_user().get_id() }}
    {% endif %}
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from jinja2 import Environment

from .context import LoginContext, _current_login, current_login, current_user
from .user import ANONYMOUS


logger = logging.getLogger("warden.templates")


def install_login_globals(env: Environment) -> Environment:
    """
    Register ``current_user`` and ``current_login`` as template globals.

    Both are callables resolved at render time against the request being
    handled by the rendering task.
    """
    env.globals["current_user"] = current_user
    env.globals["current_login"] = current_login
    logger.debug("Login globals installed on template environment")
    return env


def inject_login_context(
    context: Dict[str, Any],
    login: Optional[LoginContext] = None,
) -> Dict[str, Any]:
    """
    Add login values to an explicit render context.

    Adds ``current_user`` (the resolved principal) and ``needs_refresh``.
    Falls back to the context bound to the current task; with neither the
    user is anonymous.
    """
    if login is None:
        login = _current_login.get()

    if login is None:
        context["current_user"] = ANONYMOUS
        context["needs_refresh"] = True
    else:
        context["current_user"] = login.current_user()
        context["needs_refresh"] = login.needs_refresh()
    return context


__all__ = ["install_login_globals", "inject_login_context"]
