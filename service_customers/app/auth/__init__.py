"""
Authentication and authorization package.

- token_service: checks fixed credentials and signs HS256 access tokens.
- token_validator: verifies signature first, then expiry, then extracts claims.
- policy: static operation -> role policy table and the generic evaluator.
"""

from .claims import Claims
from .policy import AuthorizationPolicy, Operation, PolicyDecision, PolicyEvaluator, authorize
from .token_service import IssuedToken, TokenService
from .token_validator import TokenValidator

__all__ = [
    "Claims",
    "AuthorizationPolicy",
    "Operation",
    "PolicyDecision",
    "PolicyEvaluator",
    "authorize",
    "IssuedToken",
    "TokenService",
    "TokenValidator",
]
