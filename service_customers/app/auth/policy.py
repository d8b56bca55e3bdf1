"""
Role-based authorization policies for Customer service operations.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Mapping, Optional, Union

from shared.errors import ForbiddenError, UnauthenticatedError
from .claims import Claims


class DenyReason(str, Enum):
    """Why a request was denied."""
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class AuthorizationPolicy:
    """Static requirement attached to one operation.

    ``roles`` of ``None`` accepts any authenticated caller; otherwise the
    caller's role must equal one of the listed roles exactly.
    """
    name: str
    roles: Optional[FrozenSet[str]] = None
    requires_authentication: bool = True

    @classmethod
    def require_role(cls, *roles: str) -> "AuthorizationPolicy":
        return cls(name="|".join(roles), roles=frozenset(roles))


PUBLIC = AuthorizationPolicy(name="Public", requires_authentication=False)
AUTHENTICATED = AuthorizationPolicy(name="Authenticated")
USER_ROLE = AuthorizationPolicy.require_role("User")
ADMIN_ROLE = AuthorizationPolicy.require_role("Admin")


class Operation(str, Enum):
    """Operations exposed by the Customer service."""
    LOGIN = "auth:login"
    LIST_CUSTOMERS = "customers:list"
    CREATE_CUSTOMER = "customers:create"
    UPDATE_CUSTOMER = "customers:update"
    DELETE_CUSTOMER = "customers:delete"


OPERATION_POLICIES: Dict[Operation, AuthorizationPolicy] = {
    Operation.LOGIN: PUBLIC,
    Operation.LIST_CUSTOMERS: AUTHENTICATED,
    Operation.CREATE_CUSTOMER: USER_ROLE,
    Operation.UPDATE_CUSTOMER: USER_ROLE,
    Operation.DELETE_CUSTOMER: ADMIN_ROLE,
}


@dataclass(frozen=True)
class PolicyDecision:
    """Outcome of a policy check."""
    allowed: bool
    reason: Optional[DenyReason] = None
    message: Optional[str] = None

    @classmethod
    def allow(cls) -> "PolicyDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenyReason, message: str) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, message=message)

    def raise_for_denial(self) -> None:
        """Raise the service error matching a deny decision."""
        if self.allowed:
            return
        if self.reason == DenyReason.UNAUTHENTICATED:
            raise UnauthenticatedError(self.message or "Authentication required")
        raise ForbiddenError(self.message or "Forbidden")


PolicyLike = Union[AuthorizationPolicy, str, None]


def authorize(claims: Optional[Claims], policy: PolicyLike) -> PolicyDecision:
    """Decide whether ``claims`` satisfy ``policy``.

    A bare role string is treated as a single-role policy and ``None`` as a
    public operation. Role matching is exact: there is no role hierarchy.
    """
    if isinstance(policy, str):
        policy = AuthorizationPolicy.require_role(policy)

    if policy is None or not policy.requires_authentication:
        return PolicyDecision.allow()

    if claims is None:
        return PolicyDecision.deny(DenyReason.UNAUTHENTICATED, "Authentication required")

    if policy.roles is not None and claims.role not in policy.roles:
        return PolicyDecision.deny(
            DenyReason.FORBIDDEN,
            f"Role '{claims.role}' does not satisfy policy '{policy.name}'",
        )

    return PolicyDecision.allow()


class PolicyEvaluator:
    """Looks up the static policy for an operation and evaluates it."""

    def __init__(self, policies: Optional[Mapping[Operation, AuthorizationPolicy]] = None):
        self.policies: Dict[Operation, AuthorizationPolicy] = dict(
            OPERATION_POLICIES if policies is None else policies
        )

    def policy_for(self, operation: Operation) -> AuthorizationPolicy:
        """Return the policy for an operation; unknown operations are treated as authenticated-only."""
        return self.policies.get(operation, AUTHENTICATED)

    def authorize(self, claims: Optional[Claims], policy: PolicyLike) -> PolicyDecision:
        return authorize(claims, policy)

    def check(self, operation: Operation, claims: Optional[Claims]) -> PolicyDecision:
        return authorize(claims, self.policy_for(operation))
