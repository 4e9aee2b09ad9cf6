# accounts/schemas/admin.py
"""
Pydantic schemas for admin user management endpoints.
Defines request/response models for listing, updating and deactivating users.
"""
from pydantic import BaseModel, EmailStr
from typing import Optional, List

from accounts.schemas.user import UserOut


class UserListOut(BaseModel):
    """
    Response model for paginated user list endpoint.
    """
    users: List[UserOut]  # Users on the requested page
    page: int  # Current page (1-based)
    pages: int  # Total number of pages, ceil(matching / limit)


class SellerOut(BaseModel):
    """
    Minimal projection used to pick a seller.
    """
    id: str
    firstName: str
    lastName: str
    nationalId: Optional[str] = None


class AdminUserUpdateIn(BaseModel):
    """
    Request model for admin updates of any user.
    Names and email are optional; the role flags are always applied and
    are coerced to bool, so omitted or null means False.
    """
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[EmailStr] = None
    isAdmin: Optional[bool] = None  # null or omitted -> False
    isSeller: Optional[bool] = None
    password: Optional[str] = None  # Rehashed only when non-blank


class AdminUserActionOut(BaseModel):
    """
    Response model for admin update / deactivation.
    """
    message: str
    user: UserOut
