"""
Shared configuration management for the Customer Access service.
"""

import secrets
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# 256-bit minimum for the HMAC signing key.
MIN_SECRET_BYTES = 32

# Generated once per process; only used when env is "local" and no secret is set.
LOCAL_SECRET = secrets.token_urlsafe(MIN_SECRET_BYTES)


class Credential(BaseModel):
    """Fixed password/role pair for one username."""

    model_config = {"frozen": True}

    password: str
    role: str


def default_credentials() -> Dict[str, Credential]:
    return {
        "user": Credential(password="password", role="User"),
        "admin": Credential(password="password", role="Admin"),
    }


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CUSTOMERS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # Security
    jwt_secret: str = Field(default="", repr=False)
    jwt_algorithm: str = "HS256"
    token_ttl_seconds: int = 3600
    credentials: Dict[str, Credential] = Field(default_factory=default_credentials, repr=False)

    # Data
    seed_file: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_local_secret(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("jwt_secret"):
            if data.get("env", "local") != "local":
                raise ValueError("jwt_secret is required outside the local environment")
            data = {**data, "jwt_secret": LOCAL_SECRET}
        return data

    @field_validator("jwt_secret")
    @classmethod
    def _check_secret_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) < MIN_SECRET_BYTES:
            raise ValueError(f"jwt_secret must be at least {MIN_SECRET_BYTES} bytes")
        return value

    @field_validator("jwt_algorithm")
    @classmethod
    def _check_algorithm(cls, value: str) -> str:
        if value not in ("HS256", "HS384", "HS512"):
            raise ValueError("jwt_algorithm must be a symmetric HMAC algorithm")
        return value

    @field_validator("token_ttl_seconds")
    @classmethod
    def _check_ttl(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("token_ttl_seconds must be positive")
        return value


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port, **overrides)
