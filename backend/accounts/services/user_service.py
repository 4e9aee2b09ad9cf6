# accounts/services/user_service.py
"""
Identity lifecycle operations: registration, sign-in, profile updates,
administrative updates, soft-delete and listings.

Routers stay thin and call into this module; every failure is raised as an
accounts.core.errors.IdentityError subclass.
"""
from __future__ import annotations

import logging
import math
import uuid
from typing import Any, Optional

from tortoise.exceptions import IntegrityError
from tortoise.expressions import Q

from accounts.core.errors import (
    AuthenticationFailure,
    ConflictError,
    NotFoundError,
    ProtectedRecordError,
    SelfActionError,
    ValidationError,
)
from accounts.core.security import (
    DUMMY_PASSWORD_HASH,
    TokenService,
    hash_password,
    verify_password,
)
from accounts.core.validators import (
    format_national_id,
    normalize_email,
    validate_national_id,
    validate_phone,
)
from accounts.models.user import User

logger = logging.getLogger("uvicorn.error")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def _parse_id(user_id: Any) -> uuid.UUID:
    try:
        return user_id if isinstance(user_id, uuid.UUID) else uuid.UUID(str(user_id))
    except (ValueError, TypeError):
        raise NotFoundError() from None


def _clean_national_id(value: Optional[str]) -> Optional[str]:
    """Format and validate a national ID; raises ValidationError on bad input."""
    formatted = format_national_id(value)
    reason = validate_national_id(formatted)
    if reason:
        raise ValidationError(reason, code="INVALID_NATIONAL_ID")
    return formatted


def _clean_phone(value: Optional[str]) -> Optional[str]:
    phone = (value or "").strip()
    reason = validate_phone(phone)
    if reason:
        raise ValidationError(reason, code="INVALID_PHONE")
    return phone


async def _ensure_email_free(email: str, exclude_id: Optional[uuid.UUID] = None) -> None:
    qs = User.filter(email=email)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise ConflictError("Email already registered", code="EMAIL_EXISTS")


async def _ensure_national_id_free(national_id: str, exclude_id: Optional[uuid.UUID] = None) -> None:
    qs = User.filter(national_id=national_id)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    if await qs.exists():
        raise ConflictError("National ID already registered", code="NATIONAL_ID_EXISTS")


async def _save(user: User) -> User:
    """Persist the record, turning unique-index violations into ConflictError."""
    try:
        await user.save()
    except IntegrityError as exc:
        logger.warning("[users] unique constraint rejected save for %s: %s", user.id, exc)
        raise ConflictError("Email or national ID already registered", code="DUPLICATE_KEY") from exc
    return user


# ------------------------------------------------------------------------------
# Queries
# ------------------------------------------------------------------------------
async def get_user(user_id: Any) -> User:
    u = await User.get_or_none(id=_parse_id(user_id))
    if not u:
        raise NotFoundError()
    return u


async def list_users(
    page: int = DEFAULT_PAGE,
    limit: int = DEFAULT_LIMIT,
    search: str = "",
) -> tuple[list[User], int, int]:
    """
    Paginated listing with optional case-insensitive search.

    Matches the search text against first name, last name, email and
    national ID. Active and inactive users are both returned.

    Returns:
        (users on the page, page, total pages)
    """
    page = page if page and page > 0 else DEFAULT_PAGE
    limit = limit if limit and limit > 0 else DEFAULT_LIMIT

    qs = User.all()
    if search:
        qs = qs.filter(
            Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(email__icontains=search)
            | Q(national_id__icontains=search)
        )

    count = await qs.count()
    users = await qs.order_by("created_at", "id").offset(limit * (page - 1)).limit(limit)
    return users, page, math.ceil(count / limit)


async def list_sellers() -> list[User]:
    return await User.filter(is_seller=True).order_by("first_name")


# ------------------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------------------
async def register_user(
    tokens: TokenService,
    *,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
    national_id: Optional[str] = None,
    phone: Optional[str] = None,
) -> tuple[User, str]:
    """
    Create a self-registered account (seller, not admin, active).

    Raises:
        ValidationError: If national ID or phone are malformed
        ConflictError: If email or national ID is already registered
    """
    email = normalize_email(email)
    national_id = _clean_national_id(national_id) if national_id else None
    phone = _clean_phone(phone) if phone else None

    await _ensure_email_free(email)
    if national_id:
        await _ensure_national_id_free(national_id)

    user = User(
        first_name=first_name,
        last_name=last_name,
        national_id=national_id,
        email=email,
        password_hash=hash_password(password),
        phone=phone,
        is_seller=True,
        is_admin=False,
        is_active=True,
    )
    # A concurrent registration may still win the race; the unique index decides
    await _save(user)
    logger.info("[users] registered id=%s email=%s", user.id, user.email)
    return user, tokens.issue_for(user)


async def authenticate_user(tokens: TokenService, email: str, password: str) -> tuple[User, str]:
    """
    Sign in an active user by email and password.

    Unknown email, inactive account and wrong password all raise the same
    AuthenticationFailure.
    """
    user = await User.get_or_none(email=normalize_email(email), is_active=True)
    if user is None:
        verify_password(password, DUMMY_PASSWORD_HASH)
        ok = False
    else:
        ok = verify_password(password, user.password_hash)

    if not ok:
        logger.info("[users] failed sign-in attempt")
        raise AuthenticationFailure()
    return user, tokens.issue_for(user)


async def update_own_profile(
    tokens: TokenService,
    actor_id: Any,
    changes: dict[str, Any],
) -> tuple[User, str]:
    """
    Update the authenticated user's own record.

    Args:
        actor_id: Identifier from the verified token claims
        changes: snake_case field -> value; missing or None means "no change".
            Empty strings are applied as-is for names; for national_id and
            phone they clear the stored value.

    Returns:
        (updated user, new token reflecting the current claims)
    """
    user = await get_user(actor_id)
    changes = {k: v for k, v in changes.items() if v is not None}

    if "first_name" in changes:
        user.first_name = changes["first_name"]
    if "last_name" in changes:
        user.last_name = changes["last_name"]

    if "national_id" in changes:
        if changes["national_id"] == "":
            user.national_id = None
        else:
            national_id = _clean_national_id(changes["national_id"])
            if national_id != user.national_id:
                await _ensure_national_id_free(national_id, exclude_id=user.id)
            user.national_id = national_id

    if "phone" in changes:
        user.phone = _clean_phone(changes["phone"]) if changes["phone"] != "" else None

    if changes.get("email"):
        email = normalize_email(changes["email"])
        if email != user.email:
            await _ensure_email_free(email, exclude_id=user.id)
            user.email = email

    if changes.get("password"):
        user.password_hash = hash_password(changes["password"])

    await _save(user)
    return user, tokens.issue_for(user)


async def admin_update_user(target_id: Any, changes: dict[str, Any]) -> User:
    """
    Administrative update of any user.

    Names and email are applied when given; is_admin / is_seller are always
    coerced to bool (missing -> False); password is rehashed only when it
    is non-blank.
    """
    user = await get_user(target_id)

    if changes.get("first_name") is not None:
        user.first_name = changes["first_name"]
    if changes.get("last_name") is not None:
        user.last_name = changes["last_name"]
    if changes.get("email") is not None:
        email = normalize_email(changes["email"])
        if email != user.email:
            await _ensure_email_free(email, exclude_id=user.id)
            user.email = email

    user.is_admin = bool(changes.get("is_admin"))
    user.is_seller = bool(changes.get("is_seller"))

    password = changes.get("password")
    if password and password.strip():
        user.password_hash = hash_password(password)

    await _save(user)
    logger.info("[users] admin updated id=%s is_admin=%s is_seller=%s", user.id, user.is_admin, user.is_seller)
    return user


async def deactivate_user(actor_id: Any, target_id: Any) -> User:
    """
    Soft-delete a user (is_active=False).

    Raises:
        NotFoundError: Unknown target
        ProtectedRecordError: Target is protected
        SelfActionError: Administrator targeting their own account
    """
    user = await get_user(target_id)

    if user.is_protected:
        raise ProtectedRecordError()
    if str(user.id) == str(actor_id):
        raise SelfActionError()

    user.is_active = False
    await _save(user)
    logger.info("[users] deactivated id=%s by=%s", user.id, actor_id)
    return user
