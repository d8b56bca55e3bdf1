"""
Unit tests for role policies and PolicyEvaluator.
"""

import pytest
from datetime import datetime, timedelta, timezone

from service_customers.app.auth.claims import Claims
from service_customers.app.auth.policy import (
    ADMIN_ROLE, AUTHENTICATED, PUBLIC, USER_ROLE, OPERATION_POLICIES,
    AuthorizationPolicy, DenyReason, Operation, PolicyDecision, PolicyEvaluator, authorize,
)
from shared.errors import ForbiddenError, UnauthenticatedError


def make_claims(role: str, subject: str = "someone") -> Claims:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Claims(subject=subject, role=role, issued_at=now, expires_at=now + timedelta(hours=1))


class TestAuthorize:
    """Test cases for the generic policy check."""

    def test_public_policy_allows_anonymous(self):
        """Test public operations need no claims."""
        assert authorize(None, PUBLIC).allowed is True
        assert authorize(None, None).allowed is True

    def test_missing_claims_unauthenticated(self):
        """Test protected operation without claims."""
        decision = authorize(None, USER_ROLE)

        assert decision.allowed is False
        assert decision.reason == DenyReason.UNAUTHENTICATED

    def test_authenticated_policy_allows_any_role(self):
        """Test any validated role passes an authenticated-only policy."""
        for role in ("User", "Admin", "Auditor"):
            assert authorize(make_claims(role), AUTHENTICATED).allowed is True

    def test_authenticated_policy_denies_anonymous(self):
        """Test authenticated-only policy without claims."""
        assert authorize(None, AUTHENTICATED).reason == DenyReason.UNAUTHENTICATED

    def test_user_role_allows_user(self):
        """Test exact match."""
        assert authorize(make_claims("User"), USER_ROLE).allowed is True

    def test_user_denied_on_admin_policy(self):
        """Test User cannot satisfy Admin."""
        decision = authorize(make_claims("User"), ADMIN_ROLE)

        assert decision.allowed is False
        assert decision.reason == DenyReason.FORBIDDEN

    def test_admin_denied_on_user_policy(self):
        """Test there is no role hierarchy."""
        decision = authorize(make_claims("Admin"), USER_ROLE)

        assert decision.allowed is False
        assert decision.reason == DenyReason.FORBIDDEN

    def test_role_match_is_case_sensitive(self):
        """Test exact-string comparison."""
        assert authorize(make_claims("user"), USER_ROLE).allowed is False

    def test_bare_role_string(self):
        """Test a role string is treated as a single-role policy."""
        assert authorize(make_claims("Admin"), "Admin").allowed is True
        assert authorize(make_claims("User"), "Admin").reason == DenyReason.FORBIDDEN

    def test_explicit_multi_role_policy(self):
        """Test a policy may list several roles."""
        either = AuthorizationPolicy.require_role("User", "Admin")

        assert authorize(make_claims("User"), either).allowed is True
        assert authorize(make_claims("Admin"), either).allowed is True
        assert authorize(make_claims("Guest"), either).allowed is False


class TestPolicyDecision:
    """Test cases for PolicyDecision."""

    def test_allow_does_not_raise(self):
        """Test allow decision."""
        PolicyDecision.allow().raise_for_denial()

    def test_unauthenticated_raises_401_error(self):
        """Test unauthenticated denial."""
        with pytest.raises(UnauthenticatedError) as exc_info:
            PolicyDecision.deny(DenyReason.UNAUTHENTICATED, "nope").raise_for_denial()
        assert exc_info.value.status_code == 401

    def test_forbidden_raises_403_error(self):
        """Test forbidden denial."""
        with pytest.raises(ForbiddenError) as exc_info:
            PolicyDecision.deny(DenyReason.FORBIDDEN, "nope").raise_for_denial()
        assert exc_info.value.status_code == 403


class TestPolicyEvaluator:
    """Test cases for PolicyEvaluator."""

    @pytest.fixture
    def evaluator(self):
        """Create PolicyEvaluator instance."""
        return PolicyEvaluator()

    def test_operation_table(self, evaluator):
        """Test the static operation policy table."""
        assert evaluator.policy_for(Operation.LOGIN) is PUBLIC
        assert evaluator.policy_for(Operation.LIST_CUSTOMERS) is AUTHENTICATED
        assert evaluator.policy_for(Operation.CREATE_CUSTOMER) == USER_ROLE
        assert evaluator.policy_for(Operation.UPDATE_CUSTOMER) == USER_ROLE
        assert evaluator.policy_for(Operation.DELETE_CUSTOMER) == ADMIN_ROLE
        assert set(OPERATION_POLICIES) == set(Operation)

    @pytest.mark.parametrize("operation,role,allowed", [
        (Operation.LIST_CUSTOMERS, "User", True),
        (Operation.LIST_CUSTOMERS, "Admin", True),
        (Operation.CREATE_CUSTOMER, "User", True),
        (Operation.CREATE_CUSTOMER, "Admin", False),
        (Operation.UPDATE_CUSTOMER, "User", True),
        (Operation.UPDATE_CUSTOMER, "Admin", False),
        (Operation.DELETE_CUSTOMER, "Admin", True),
        (Operation.DELETE_CUSTOMER, "User", False),
    ])
    def test_check(self, evaluator, operation, role, allowed):
        """Test role requirements per operation."""
        assert evaluator.check(operation, make_claims(role)).allowed is allowed

    def test_custom_policy_table(self):
        """Test an evaluator built from a substitute table."""
        evaluator = PolicyEvaluator({Operation.DELETE_CUSTOMER: AuthorizationPolicy.require_role("User", "Admin")})

        assert evaluator.check(Operation.DELETE_CUSTOMER, make_claims("User")).allowed is True
        # Operations missing from the table still require authentication.
        assert evaluator.check(Operation.CREATE_CUSTOMER, None).reason == DenyReason.UNAUTHENTICATED
