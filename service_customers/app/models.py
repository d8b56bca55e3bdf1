"""
Request/response models for the Customer service.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Customer(BaseModel):
    """Stored customer record."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Caller-supplied unique id")
    name: str = Field(..., description="Customer name")
    address: str = Field(..., description="Postal address")
    phone: str = Field(..., description="Phone number")
    birthday: date = Field(..., description="Date of birth (ISO-8601 calendar date)")


class CustomerUpdate(BaseModel):
    """PUT body. The path id is authoritative; a body id, if sent, must match it."""
    id: Optional[int] = Field(None, description="Must equal the path id when present")
    name: str
    address: str
    phone: str
    birthday: date

    def to_customer(self, customer_id: int) -> Customer:
        return Customer(id=customer_id, **self.model_dump(exclude={"id"}))


class LoginRequest(BaseModel):
    """Request model for login."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(BaseModel):
    """Response model for login."""
    token: str
    token_type: str = "Bearer"
    expires_in: int
