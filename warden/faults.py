"""
Warden - Fault taxonomy.

Structured error types for the login manager. Faults are typed values with
a stable code, a domain and a severity, never bare exceptions:

- LoginConfigFault: manager configuration failed (fatal at startup)
- LoginContextMissingFault: login state used outside a bound request
- LoginSessionMissingFault: host pipeline did not provide a session
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


# ============================================================================
# Severity & Domain
# ============================================================================

class Severity(str, Enum):
    """
    Fault severity levels.

    Determines logging level and whether the process should keep running.
    """
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    FATAL = "fatal"


class FaultDomain:
    """
    Fault domains (taxonomy).

    Identifies the functional area where a fault occurred.
    """

    def __init__(self, name: str, description: str = ""):
        self.name = name
        self.value = name
        self.description = description

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"FaultDomain(name='{self.name}')"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FaultDomain):
            return self.name == other.name
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(self.name)


FaultDomain.CONFIG = FaultDomain("config", "Configuration errors")
FaultDomain.FLOW = FaultDomain("flow", "Handler execution errors")


DOMAIN_DEFAULTS = {
    FaultDomain.CONFIG: {"severity": Severity.FATAL, "retryable": False},
    FaultDomain.FLOW: {"severity": Severity.ERROR, "retryable": False},
}


# ============================================================================
# Fault - Base Class
# ============================================================================

class Fault(Exception):
    """
    Base fault class.

    Subclasses declare ``code``, ``message`` and ``domain`` as class
    attributes; instances may override any of them.

    Example:
        ```python
        raise Fault(
            code="LOGIN_STATE_BROKEN",
            message="Session carries a non-string user id",
            domain=FaultDomain.FLOW,
        )
        ```
    """

    def __init__(
        self,
        code: str | None = None,
        message: str | None = None,
        *,
        domain: FaultDomain | None = None,
        severity: Optional[Severity] = None,
        retryable: Optional[bool] = None,
        public: Optional[bool] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        self.code = code if code is not None else getattr(self, "code", None)
        self.message = message if message is not None else getattr(self, "message", None)
        self.domain = domain if domain is not None else getattr(self, "domain", None)

        if self.code is None or self.message is None or self.domain is None:
            raise TypeError(f"{self.__class__.__name__} missing required code, message, or domain")

        super().__init__(self.message)

        defaults = DOMAIN_DEFAULTS.get(self.domain, {"severity": Severity.ERROR, "retryable": False})
        self.severity = severity or getattr(type(self), "severity", None) or defaults["severity"]
        if retryable is None:
            retryable = getattr(type(self), "retryable", defaults["retryable"])
        self.retryable = retryable
        if public is None:
            public = getattr(type(self), "public", False)
        self.public = public
        self.metadata = metadata or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"Fault(code={self.code!r}, domain={self.domain.value}, "
            f"severity={self.severity.value}, public={self.public})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize fault to a dictionary suitable for logging."""
        return {
            "code": self.code,
            "message": self.message,
            "domain": self.domain.value,
            "severity": self.severity.value,
            "retryable": self.retryable,
            "public": self.public,
            "metadata": self.metadata,
        }


# ============================================================================
# Login Faults
# ============================================================================

class LoginConfigFault(Fault):
    """
    A configuration function could not be applied.

    Raised while constructing or configuring a LoginManager; the embedding
    process should fail fast instead of serving half-configured.
    """

    domain = FaultDomain.CONFIG
    code = "LOGIN_CONFIG_INVALID"
    message = "Invalid login manager configuration"
    severity = Severity.FATAL
    public = False
    retryable = False

    def __init__(self, reason: str | None = None, **kwargs):
        super().__init__(**kwargs)
        if reason:
            self.message = f"Invalid login manager configuration: {reason}"
            self.metadata["reason"] = reason
            self.args = (self.message,)


class LoginContextMissingFault(Fault):
    """
    No login context is bound to the current request.

    Usually means LoginMiddleware was not installed in front of a guard.
    """

    domain = FaultDomain.FLOW
    code = "LOGIN_CONTEXT_MISSING"
    message = "No login context bound to this request; is LoginMiddleware installed?"
    severity = Severity.ERROR
    public = False
    retryable = False


class LoginSessionMissingFault(Fault):
    """The host pipeline handed LoginMiddleware a context without a session."""

    domain = FaultDomain.FLOW
    code = "LOGIN_SESSION_MISSING"
    message = "Request context carries no session; install session middleware first"
    severity = Severity.ERROR
    public = False
    retryable = False


__all__ = [
    "Severity",
    "FaultDomain",
    "DOMAIN_DEFAULTS",
    "Fault",
    "LoginConfigFault",
    "LoginContextMissingFault",
    "LoginSessionMissingFault",
]
