# accounts/api/v1/routers/users.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from accounts.api.v1.deps import get_current_claims, get_token_service, require_admin
from accounts.core.security import TokenClaims, TokenService
from accounts.schemas.admin import (
    AdminUserActionOut,
    AdminUserUpdateIn,
    SellerOut,
    UserListOut,
)
from accounts.schemas.auth import AuthUserOut, ProfileUpdateIn, RegisterIn, SigninRequest
from accounts.schemas.user import UserOut, user_to_dict
from accounts.services import user_service

router = APIRouter(prefix="/users", tags=["users"])

# Request body (camelCase) -> model field (snake_case)
_FIELD_MAP = {
    "firstName": "first_name",
    "lastName": "last_name",
    "nationalId": "national_id",
    "email": "email",
    "phone": "phone",
    "password": "password",
    "isAdmin": "is_admin",
    "isSeller": "is_seller",
}


def _to_changes(data: dict) -> dict:
    return {_FIELD_MAP[k]: v for k, v in data.items() if k in _FIELD_MAP}


# ==============================================================================
# I. Administration
# ==============================================================================
@router.get(
    "",
    response_model=UserListOut,
    dependencies=[Depends(require_admin)],
)
async def list_users(
    page: int = Query(1),
    limit: int = Query(10),
    search: str = Query("", description="Case-insensitive search by name/email/national ID"),
):
    """
    Get paginated list of users (admin only).

    Inactive users are included; each item carries isActive. A page or
    limit below 1 falls back to the defaults (1 and 10).

    Returns:
        UserListOut: users on the page, current page and total pages
    """
    users, page, pages = await user_service.list_users(page=page, limit=limit, search=search)
    return {"users": [user_to_dict(u) for u in users], "page": page, "pages": pages}


@router.get(
    "/sellers",
    response_model=List[SellerOut],
    dependencies=[Depends(require_admin)],
)
async def list_sellers():
    """Sellers ordered by first name (admin only)."""
    sellers = await user_service.list_sellers()
    return [
        {"id": str(u.id), "firstName": u.first_name, "lastName": u.last_name, "nationalId": u.national_id}
        for u in sellers
    ]


# ==============================================================================
# II. Public authentication
# ==============================================================================
@router.post("/signin", response_model=AuthUserOut)
async def signin(body: SigninRequest, tokens: TokenService = Depends(get_token_service)):
    """
    Authenticate an active user and return a fresh token.

    Raises:
        AuthenticationFailure (401): AUTH_INVALID_CREDENTIALS, same response
            for unknown email, inactive account or wrong password
    """
    user, token = await user_service.authenticate_user(tokens, body.email, body.password)
    return {**user_to_dict(user), "token": token}


@router.post("/register", response_model=AuthUserOut)
async def register(body: RegisterIn, tokens: TokenService = Depends(get_token_service)):
    """
    Register a new seller account.

    Raises:
        ValidationError (400): Malformed national ID or phone
        ConflictError (409): Email or national ID already registered
    """
    user, token = await user_service.register_user(
        tokens,
        first_name=body.firstName,
        last_name=body.lastName,
        email=body.email,
        password=body.password,
        national_id=body.nationalId,
        phone=body.phone,
    )
    return {**user_to_dict(user), "token": token}


@router.put("/profile", response_model=AuthUserOut)
async def update_profile(
    body: ProfileUpdateIn,
    claims: TokenClaims = Depends(get_current_claims),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Update the caller's own profile and return a token with the new claims.
    Only fields present in the body are changed.
    """
    changes = _to_changes(body.model_dump(exclude_unset=True))
    user, token = await user_service.update_own_profile(tokens, claims.user_id, changes)
    return {**user_to_dict(user), "token": token}


# ==============================================================================
# III. Single user
# ==============================================================================
@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: str):
    """
    Get a single user (sanitized projection).

    Raises:
        NotFoundError (404): Unknown user
    """
    return user_to_dict(await user_service.get_user(user_id))


@router.put(
    "/{user_id}",
    response_model=AdminUserActionOut,
    dependencies=[Depends(require_admin)],
)
async def admin_update_user(user_id: str, body: AdminUserUpdateIn):
    """
    Update any user's names, email, role flags and password (admin only).
    isAdmin / isSeller default to false when omitted.
    """
    user = await user_service.admin_update_user(user_id, _to_changes(body.model_dump()))
    return {"message": "User updated", "user": user_to_dict(user)}


@router.delete("/{user_id}", response_model=AdminUserActionOut)
async def deactivate_user(user_id: str, claims: TokenClaims = Depends(require_admin)):
    """
    Deactivate (soft-delete) a user (admin only).

    Raises:
        NotFoundError (404): Unknown user
        ProtectedRecordError (400): Target is protected
        SelfActionError (400): Admin targeting their own account
    """
    user = await user_service.deactivate_user(claims.user_id, user_id)
    return {"message": "User deactivated", "user": user_to_dict(user)}
