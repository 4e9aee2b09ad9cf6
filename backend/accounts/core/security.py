# accounts/core/security.py
"""
Security module for authentication and authorization.
Handles password hashing, JWT token creation/validation, and cryptographic operations.
"""
import datetime as dt
import uuid
from typing import Any

import jwt  # PyJWT
from passlib.context import CryptContext
from passlib.exc import UnknownHashError
from pydantic import BaseModel, ValidationError as PydanticValidationError

from accounts.core.errors import InternalError

# Password hashing context
# Argon2 is a modern, salted and cost-parameterized password hashing algorithm
pwd_context = CryptContext(
    schemes=["argon2"],  # Use Argon2 for password hashing
    deprecated="auto",   # Automatically handle deprecated schemes
)

# JWT configuration
JWT_ALG = "HS256"  # JWT signing algorithm (HMAC SHA-256)
TOKEN_EXPIRE_DAYS = 365  # Default token lifetime

# Verified when no account matches, so a failed sign-in costs the same either way
DUMMY_PASSWORD_HASH = pwd_context.hash(uuid.uuid4().hex)


def hash_password(plain: str) -> str:
    """
    Hash a plain text password using Argon2.

    Args:
        plain: Plain text password to hash

    Returns:
        Hashed password string (safe to store in database). A new random salt
        is generated on every call.
    """
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str | None) -> bool:
    """
    Verify a plain text password against a hashed password.

    Args:
        plain: Plain text password to verify
        hashed: Hashed password from database

    Returns:
        True if password matches, False otherwise. An empty, unknown or
        malformed hash is treated as a mismatch instead of raising.
    """
    if not hashed:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except (UnknownHashError, ValueError, TypeError):
        return False


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpired(TokenError):
    """Signature is valid but the expiry has elapsed."""


class TokenInvalid(TokenError):
    """Bad signature, malformed structure, missing claims or wrong algorithm."""


class TokenClaims(BaseModel):
    """Identity claims embedded in an access token."""

    sub: str  # User ID
    firstName: str
    email: str
    isAdmin: bool = False

    @property
    def user_id(self) -> str:
        return self.sub

    @property
    def is_admin(self) -> bool:
        return self.isAdmin


class TokenService:
    """
    Issues and verifies signed, time-limited bearer tokens.

    The signing secret is passed in explicitly; nothing in this class reads
    process-wide configuration.
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = JWT_ALG,
        expires_delta: dt.timedelta | None = None,
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_delta = expires_delta if expires_delta is not None else dt.timedelta(days=TOKEN_EXPIRE_DAYS)

    def issue(self, claims: TokenClaims) -> str:
        """
        Create a signed token for the given claims.

        Token payload includes:
            - sub: Subject (user ID)
            - firstName, email, isAdmin: identity claims
            - iat: Issued at timestamp
            - exp: Expiration timestamp
        """
        if not self.secret:
            raise InternalError("Token signing secret is not configured", code="TOKEN_SECRET_MISSING")
        now = dt.datetime.now(dt.timezone.utc)
        payload: dict[str, Any] = claims.model_dump()
        payload["iat"] = now
        payload["exp"] = now + self.expires_delta
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_for(self, user) -> str:
        """Create a token from a User record."""
        return self.issue(
            TokenClaims(
                sub=str(user.id),
                firstName=user.first_name,
                email=user.email,
                isAdmin=bool(user.is_admin),
            )
        )

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate a token.

        Only the issuer's algorithm is accepted, so tokens signed with another
        algorithm (or "none") are rejected as invalid.

        Raises:
            TokenExpired: If the token has expired
            TokenInvalid: If the token is invalid, malformed or lacks claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat", "sub"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired(str(exc)) from exc
        except jwt.PyJWTError as exc:
            raise TokenInvalid(str(exc)) from exc

        try:
            return TokenClaims.model_validate(payload)
        except PydanticValidationError as exc:
            raise TokenInvalid("Token is missing identity claims") from exc
