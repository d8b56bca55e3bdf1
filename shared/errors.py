"""
Shared error handling for the Customer Access service.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class CustomerApiException(Exception):
    """Base exception for Customer Access services."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            message=self.message,
            details=self.details
        )


class AuthenticationError(CustomerApiException):
    """Authentication-related errors."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHENTICATION_ERROR"):
        super().__init__(code, message, details)


class InvalidCredentialsError(AuthenticationError):
    """Username/password pair not accepted. Never says which half was wrong."""

    def __init__(self, message: str = "Invalid username or password", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="INVALID_CREDENTIALS")


class MissingTokenError(AuthenticationError):
    """No bearer token on a protected request."""

    def __init__(self, message: str = "Bearer token required", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="MISSING_TOKEN")


class MalformedTokenError(AuthenticationError):
    """Token could not be decoded or lacks required claims."""

    def __init__(self, message: str = "Malformed token", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="MALFORMED_TOKEN")


class InvalidSignatureError(AuthenticationError):
    """Token signature does not verify against the signing secret."""

    def __init__(self, message: str = "Invalid token signature", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="INVALID_SIGNATURE")


class TokenExpiredError(AuthenticationError):
    """Token expiry has passed."""

    def __init__(self, message: str = "Token expired", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="TOKEN_EXPIRED")


class UnauthenticatedError(AuthenticationError):
    """Operation requires an authenticated caller."""

    def __init__(self, message: str = "Authentication required", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="UNAUTHENTICATED")


class AuthorizationError(CustomerApiException):
    """Authorization-related errors."""

    status_code = 403

    def __init__(self, message: str = "Authorization failed", details: Optional[Dict[str, Any]] = None,
                 code: str = "AUTHORIZATION_ERROR"):
        super().__init__(code, message, details)


class ForbiddenError(AuthorizationError):
    """Authenticated caller lacks the role the operation requires."""

    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details, code="FORBIDDEN")


class ValidationError(CustomerApiException):
    """Validation-related errors."""

    status_code = 400

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ConflictError(CustomerApiException):
    """Resource already exists."""

    status_code = 409

    def __init__(self, message: str = "Resource already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFLICT", message, details)


class NotFoundError(CustomerApiException):
    """Resource does not exist."""

    status_code = 404

    def __init__(self, message: str = "Resource not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)
