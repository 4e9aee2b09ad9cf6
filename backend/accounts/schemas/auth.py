# accounts/schemas/auth.py
"""
Pydantic schemas for authentication endpoints.
Defines request/response models for sign-in, registration and self-service profile updates.
"""
from pydantic import BaseModel, EmailStr, field_validator
from typing import Optional

from accounts.schemas.user import UserOut


class SigninRequest(BaseModel):
    """
    Request model for user sign-in endpoint.
    Contains credentials for authentication.
    """
    email: EmailStr  # Account email (normalized server-side)
    password: str  # User password (plain text, verified against the stored hash)

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Password must not be empty.")
        return v


class RegisterIn(BaseModel):
    """
    Request model for self-registration.
    National ID and phone are optional but must satisfy their format rules when given.
    """
    firstName: str
    lastName: str
    nationalId: Optional[str] = None  # Cédula / RIF, formatted before validation
    email: EmailStr
    password: str
    phone: Optional[str] = None  # 0XXX-XXXXXXX

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("Password must not be empty.")
        return v


class ProfileUpdateIn(BaseModel):
    """
    Request model for updating the authenticated user's own profile.
    Omitted (or null) fields are left unchanged; an empty string is a real value.
    """
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    nationalId: Optional[str] = None  # "" clears the stored value
    email: Optional[EmailStr] = None
    phone: Optional[str] = None  # "" clears the stored value
    password: Optional[str] = None  # Rehashed only when non-empty


class AuthUserOut(UserOut):
    """
    Sanitized user projection plus a freshly issued bearer token.
    Returned by sign-in, registration and profile update.
    """
    token: str  # JWT for the Authorization: Bearer header
