"""
Identity claims carried by customer-service tokens.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]

SUBJECT_CLAIM = "sub"
ROLE_CLAIM = "role"
ISSUED_AT_CLAIM = "iat"
EXPIRES_AT_CLAIM = "exp"

REQUIRED_CLAIMS = [SUBJECT_CLAIM, ROLE_CLAIM, ISSUED_AT_CLAIM, EXPIRES_AT_CLAIM]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Claims:
    """Authenticated identity derived from a verified token."""

    subject: str
    role: str
    issued_at: datetime
    expires_at: datetime
