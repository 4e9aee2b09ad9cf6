# accounts/core/errors.py
"""
Error taxonomy for the identity core.
Every error carries an HTTP status code and a stable machine-readable code;
the handler registered in main.py turns them into
{"detail": {"code": ..., "message": ...}} responses.
"""
from fastapi import status


class IdentityError(Exception):
    """Base class for all failures raised by the identity core."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"
    message: str = "Internal server error"

    def __init__(self, message: str | None = None, code: str | None = None):
        if message is not None:
            self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


class ValidationError(IdentityError):
    """Malformed input caught before reaching persistence."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "VALIDATION_ERROR"
    message = "Invalid input"


class AuthenticationFailure(IdentityError):
    """Missing/invalid/expired token, or bad credentials."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_INVALID_CREDENTIALS"
    message = "Invalid email or password"


class AuthorizationFailure(IdentityError):
    """Valid identity lacking the administrator role."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "AUTH_ADMIN_REQUIRED"
    message = "Administrator token required"


class ConflictError(IdentityError):
    """Uniqueness violation (email or national id already registered)."""

    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Record already exists"


class NotFoundError(IdentityError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"
    message = "User not found"


class ProtectedRecordError(IdentityError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "USER_PROTECTED"
    message = "Protected users cannot be deactivated"


class SelfActionError(IdentityError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "CANNOT_DEACTIVATE_SELF"
    message = "You cannot deactivate your own administrator account"


class InternalError(IdentityError):
    """Unexpected store or signing failure."""
