# accounts/models/user.py
"""
Database model for users.
Represents an account in the administrative system: profile data, credentials,
role flags and the soft-delete / protection markers.
"""
import uuid
from tortoise import fields, models


class User(models.Model):
    """
    User database model.

    Security:
    - Password is stored as a hash (never store plain text passwords)
    - Email must be unique across all users, active or not
    - National ID must be unique when present (NULLs do not collide)

    Lifecycle:
    - Records are never physically deleted; deactivation sets is_active=False
    - Records with is_protected=True can never be deactivated
    """
    id = fields.UUIDField(pk=True, default=uuid.uuid4)  # Primary key: unique user identifier
    first_name = fields.CharField(max_length=128)  # Given name
    last_name = fields.CharField(max_length=128)  # Family name
    national_id = fields.CharField(max_length=32, null=True, unique=True)  # Cédula / RIF, e.g. V12345678
    email = fields.CharField(max_length=256, unique=True, index=True)  # Stored lower-cased
    password_hash = fields.CharField(max_length=255)  # Argon2 hash, never serialized outward
    phone = fields.CharField(max_length=16, null=True)  # e.g. 0412-1234567
    is_admin = fields.BooleanField(default=False)
    is_seller = fields.BooleanField(default=False)
    is_active = fields.BooleanField(default=True, index=True)  # Soft-delete marker
    is_protected = fields.BooleanField(default=False)  # Deletion immunity for critical accounts
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        """Tortoise ORM metadata configuration."""
        table = "users"  # Database table name

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} <{self.email}>"
