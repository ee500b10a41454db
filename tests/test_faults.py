"""
Test 11: Faults (faults.py)

Tests the structured fault base class and the login faults.
"""

import pytest

from warden.faults import (
    DOMAIN_DEFAULTS,
    Fault,
    FaultDomain,
    LoginConfigFault,
    LoginContextMissingFault,
    LoginSessionMissingFault,
    Severity,
)


# ============================================================================
# Fault base
# ============================================================================

class TestFault:

    def test_explicit_fields(self):
        fault = Fault(code="X_BROKEN", message="Broken", domain=FaultDomain.FLOW)
        assert fault.code == "X_BROKEN"
        assert fault.severity is Severity.ERROR
        assert fault.retryable is False
        assert fault.public is False
        assert str(fault) == "[X_BROKEN] Broken"

    def test_missing_fields(self):
        with pytest.raises(TypeError):
            Fault(code="X")

    def test_domain_defaults(self):
        fault = Fault(code="C", message="m", domain=FaultDomain.CONFIG)
        assert fault.severity is DOMAIN_DEFAULTS[FaultDomain.CONFIG]["severity"]

    def test_to_dict(self):
        fault = Fault(
            code="C",
            message="m",
            domain=FaultDomain.FLOW,
            severity=Severity.WARN,
            metadata={"k": "v"},
        )
        assert fault.to_dict() == {
            "code": "C",
            "message": "m",
            "domain": "flow",
            "severity": "warn",
            "retryable": False,
            "public": False,
            "metadata": {"k": "v"},
        }

    def test_domain_equality(self):
        assert FaultDomain("config") == FaultDomain.CONFIG
        assert FaultDomain.CONFIG != FaultDomain.FLOW


# ============================================================================
# Login faults
# ============================================================================

class TestLoginFaults:

    def test_config_fault_reason(self):
        fault = LoginConfigFault(reason="user loader must be callable")
        assert fault.code == "LOGIN_CONFIG_INVALID"
        assert fault.severity is Severity.FATAL
        assert fault.metadata == {"reason": "user loader must be callable"}
        assert "user loader must be callable" in str(fault)

    def test_config_fault_without_reason(self):
        fault = LoginConfigFault()
        assert fault.message == "Invalid login manager configuration"
        assert fault.metadata == {}

    @pytest.mark.parametrize("fault_cls,code", [
        (LoginContextMissingFault, "LOGIN_CONTEXT_MISSING"),
        (LoginSessionMissingFault, "LOGIN_SESSION_MISSING"),
    ])
    def test_flow_faults(self, fault_cls, code):
        fault = fault_cls()
        assert isinstance(fault, Fault)
        assert fault.code == code
        assert fault.domain is FaultDomain.FLOW
        assert fault.severity is Severity.ERROR
