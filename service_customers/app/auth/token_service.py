"""
Token issuing for the Customer service login endpoint.
"""

import hmac
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Mapping, Optional

import jwt

from shared.config import Credential
from shared.errors import InvalidCredentialsError
from shared.logging import get_logger
from .claims import (
    Clock, utc_now,
    SUBJECT_CLAIM, ROLE_CLAIM, ISSUED_AT_CLAIM, EXPIRES_AT_CLAIM,
)


# Compared against when the username is unknown.
_UNKNOWN_USER_PASSWORD = secrets.token_bytes(32)


@dataclass(frozen=True)
class IssuedToken:
    """Signed access token handed back to the client."""
    access_token: str
    expires_in: int
    token_type: str = "Bearer"


class TokenService:
    """Checks fixed credentials and signs access tokens.

    Stateless: nothing about an issued token is recorded server-side. The
    credential mapping stands in for an identity provider; anything that can
    answer "which role does this username/password pair have" can replace it.
    """

    def __init__(
        self,
        secret: str,
        credentials: Mapping[str, Credential],
        ttl_seconds: int = 3600,
        algorithm: str = "HS256",
        clock: Optional[Clock] = None,
    ):
        self._secret = secret
        self._credentials = dict(credentials)
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm
        self._clock = clock or utc_now
        self.logger = get_logger("customers.token_service")

    def issue_token(self, username: str, password: str) -> IssuedToken:
        """Issue a token for a known username/password pair.

        Raises:
            InvalidCredentialsError: unknown user or wrong password (same error for both)
        """
        credential = self._credentials.get(username or "")

        # Compare against something even for unknown users so both paths cost the same.
        expected = credential.password.encode("utf-8") if credential else _UNKNOWN_USER_PASSWORD
        password_ok = hmac.compare_digest(expected, (password or "").encode("utf-8"))

        if credential is None or not password or not password_ok:
            self.logger.warning("Login rejected", username=username)
            raise InvalidCredentialsError()

        issued_at = self._clock().replace(microsecond=0)
        expires_at = issued_at + timedelta(seconds=self.ttl_seconds)
        payload = {
            SUBJECT_CLAIM: username,
            ROLE_CLAIM: credential.role,
            ISSUED_AT_CLAIM: int(issued_at.timestamp()),
            EXPIRES_AT_CLAIM: int(expires_at.timestamp()),
        }

        token = jwt.encode(payload, self._secret, algorithm=self.algorithm)
        self.logger.info("Token issued", username=username, role=credential.role)

        return IssuedToken(access_token=token, expires_in=self.ttl_seconds)
