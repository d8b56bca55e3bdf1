"""
Token validation for protected Customer service routes.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt
from jwt.utils import base64url_decode

from shared.errors import (
    MissingTokenError, MalformedTokenError, InvalidSignatureError, TokenExpiredError,
)
from shared.logging import get_logger
from .claims import (
    Claims, Clock, utc_now, REQUIRED_CLAIMS,
    SUBJECT_CLAIM, ROLE_CLAIM, ISSUED_AT_CLAIM, EXPIRES_AT_CLAIM,
)


BEARER_PREFIX = "bearer "


class TokenValidator:
    """Verifies HMAC-signed tokens and extracts their claims.

    The signature is verified before any claim is trusted; expiry is checked
    against the injected clock only once the signature holds.
    """

    def __init__(self, secret: str, algorithm: str = "HS256", clock: Optional[Clock] = None):
        self._secret = secret
        self.algorithm = algorithm
        self._clock = clock or utc_now
        self.logger = get_logger("customers.token_validator")

    def extract_bearer_token(self, authorization: Optional[str]) -> str:
        """Pull the raw token out of an ``Authorization`` header value."""
        if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
            raise MissingTokenError()

        token = authorization[len(BEARER_PREFIX):].strip()
        if not token:
            raise MissingTokenError("Authorization header contained empty bearer token")
        return token

    def validate_header(self, authorization: Optional[str]) -> Claims:
        """Validate the bearer token found in an ``Authorization`` header."""
        return self.validate(self.extract_bearer_token(authorization))

    def validate(self, raw_token: Optional[str]) -> Claims:
        """
        Validate a raw token and return its claims.

        Raises:
            MissingTokenError: no token given
            MalformedTokenError: token cannot be decoded or lacks required claims
            InvalidSignatureError: signature does not verify
            TokenExpiredError: current time is at or past ``exp``
        """
        if raw_token is None or not raw_token.strip():
            raise MissingTokenError()
        token = raw_token.strip()

        payload = self._verify_signature(token)
        claims = self._build_claims(payload)

        if self._clock() >= claims.expires_at:
            self.logger.info("Expired token presented", subject=claims.subject)
            raise TokenExpiredError(details={"expired_at": claims.expires_at.isoformat()})

        return claims

    def _verify_signature(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_signature": True,
                    "verify_exp": False,
                    "verify_iat": False,
                    "verify_nbf": False,
                    "verify_aud": False,
                    "verify_iss": False,
                },
            )
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as exc:
            self.logger.warning("Token signature rejected", error=str(exc))
            raise InvalidSignatureError() from exc
        except jwt.MissingRequiredClaimError as exc:
            raise MalformedTokenError(f"Token missing required claim '{exc.claim}'") from exc
        except jwt.DecodeError as exc:
            # Readable header and payload with an undecodable signature segment
            # means the signature was altered, not that the token is garbage.
            if self._has_readable_segments(token):
                self.logger.warning("Token signature undecodable", error=str(exc))
                raise InvalidSignatureError() from exc
            raise MalformedTokenError(details={"error": str(exc)}) from exc
        except jwt.InvalidTokenError as exc:
            raise MalformedTokenError(details={"error": str(exc)}) from exc

    @staticmethod
    def _has_readable_segments(token: str) -> bool:
        parts = token.split(".")
        if len(parts) != 3:
            return False
        try:
            for segment in parts[:2]:
                if not isinstance(json.loads(base64url_decode(segment)), dict):
                    return False
        except (ValueError, TypeError):
            return False
        return True

    @staticmethod
    def _build_claims(payload: Dict[str, Any]) -> Claims:
        subject = payload.get(SUBJECT_CLAIM)
        role = payload.get(ROLE_CLAIM)
        if not isinstance(subject, str) or not subject:
            raise MalformedTokenError("Token subject claim must be a non-empty string")
        if not isinstance(role, str) or not role:
            raise MalformedTokenError("Token role claim must be a non-empty string")

        try:
            issued_at = datetime.fromtimestamp(float(payload[ISSUED_AT_CLAIM]), tz=timezone.utc)
            expires_at = datetime.fromtimestamp(float(payload[EXPIRES_AT_CLAIM]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError, OSError) as exc:
            raise MalformedTokenError("Token timestamps must be numeric") from exc

        return Claims(subject=subject, role=role, issued_at=issued_at, expires_at=expires_at)
