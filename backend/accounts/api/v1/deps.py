# accounts/api/v1/deps.py
import datetime as dt
from functools import lru_cache

from fastapi import Depends, Header, Request

from accounts.config import settings
from accounts.core.errors import AuthenticationFailure, AuthorizationFailure
from accounts.core.security import TokenClaims, TokenExpired, TokenInvalid, TokenService


@lru_cache
def get_token_service() -> TokenService:
    """
    Token issuer/verifier built once from the process configuration.

    Tests override this dependency (app.dependency_overrides) to inject
    their own secret or lifetime.
    """
    return TokenService(
        secret=settings.jwt_secret,
        expires_delta=dt.timedelta(days=settings.token_expire_days),
    )


async def get_current_claims(
    request: Request,
    authorization: str | None = Header(default=None),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """
    FastAPI dependency that authenticates the request.

    Requires an `Authorization: Bearer <token>` header. Verification is
    stateless: the decoded claims are trusted until the token expires and
    no database lookup is made.

    Returns:
        TokenClaims: Decoded claims, also stored on request.state.claims

    Raises:
        AuthenticationFailure (401): AUTH_REQUIRED when the header is missing,
            AUTH_TOKEN_EXPIRED when the token has expired,
            AUTH_INVALID_TOKEN for any other verification failure

    Usage:
        @router.put("/profile")
        async def update_profile(claims: TokenClaims = Depends(get_current_claims)):
            ...
    """
    if not authorization:
        raise AuthenticationFailure("Access denied. Authorization token is missing.", code="AUTH_REQUIRED")

    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        raise AuthenticationFailure("Invalid token", code="AUTH_INVALID_TOKEN")

    try:
        claims = tokens.verify(token)
    except TokenExpired:
        raise AuthenticationFailure("The token has expired. Please sign in again.", code="AUTH_TOKEN_EXPIRED")
    except TokenInvalid:
        raise AuthenticationFailure("Invalid token", code="AUTH_INVALID_TOKEN")

    request.state.claims = claims
    return claims


async def require_admin(claims: TokenClaims = Depends(get_current_claims)) -> TokenClaims:
    """
    FastAPI dependency to ensure the caller is an administrator.

    Builds on top of `get_current_claims`, so the token is always verified
    first; this check only inspects the isAdmin claim.

    Raises:
        AuthorizationFailure (401): AUTH_ADMIN_REQUIRED if the claims are not admin
    """
    if not claims.is_admin:
        raise AuthorizationFailure()
    return claims
