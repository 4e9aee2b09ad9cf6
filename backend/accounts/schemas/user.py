# accounts/schemas/user.py
"""
Outward-facing user projections.
The password hash has no field here, so it can never be serialized.
"""
from pydantic import BaseModel
from typing import Optional


class UserOut(BaseModel):
    """
    Sanitized user projection shared by every endpoint that returns a user.
    """
    id: str  # User unique identifier
    firstName: str
    lastName: str
    nationalId: Optional[str] = None
    email: str
    phone: Optional[str] = None
    isAdmin: bool
    isSeller: bool
    isActive: bool
    isProtected: bool
    createdAt: Optional[str] = None  # ISO format
    updatedAt: Optional[str] = None  # ISO format


def user_to_dict(u) -> dict:
    """
    Convert User model instance to dictionary format for API responses.

    Args:
        u: User model instance

    Returns:
        dict: Sanitized user fields (no password hash)
    """
    return {
        "id": str(u.id),
        "firstName": u.first_name,
        "lastName": u.last_name,
        "nationalId": u.national_id,
        "email": u.email,
        "phone": u.phone,
        "isAdmin": u.is_admin,
        "isSeller": u.is_seller,
        "isActive": u.is_active,
        "isProtected": u.is_protected,
        "createdAt": u.created_at.isoformat() if u.created_at else None,
        "updatedAt": u.updated_at.isoformat() if u.updated_at else None,
    }
