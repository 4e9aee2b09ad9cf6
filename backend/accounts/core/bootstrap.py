# accounts/core/bootstrap.py
"""
Bootstrap module for application initialization.
Handles initial setup tasks such as creating the default admin user on first startup.
"""
import logging

from accounts.config import Settings, settings as default_settings
from accounts.core.security import hash_password
from accounts.core.validators import normalize_email
from accounts.models.user import User

logger = logging.getLogger("uvicorn.error")


async def ensure_default_admin(cfg: Settings | None = None) -> User | None:
    """
    If no admin exists in the database, create a default admin based on settings.
    Only takes effect under the following conditions:
      - Currently no user with is_admin=True
      - And ADMIN_PASSWORD is set (to avoid using a default weak password)
    The created admin is protected, so it can never be deactivated.
    Environment variables:
      ADMIN_EMAIL      (default: "admin@example.com")
      ADMIN_PASSWORD   (required, otherwise won't create)
      ADMIN_FIRST_NAME / ADMIN_LAST_NAME
    """
    cfg = cfg or default_settings

    if await User.filter(is_admin=True).exists():
        return None  # Skip creation if admin already exists

    if not cfg.admin_password:
        logger.warning("[bootstrap] No admin present, but ADMIN_PASSWORD not set -> skip creating default admin.")
        return None

    email = normalize_email(cfg.admin_email)
    if await User.filter(email=email).exists():
        # Email belongs to a regular account; never hijack it
        logger.warning("[bootstrap] No admin present, but %s is already registered -> skip.", email)
        return None

    u = await User.create(
        first_name=cfg.admin_first_name,
        last_name=cfg.admin_last_name,
        email=email,
        password_hash=hash_password(cfg.admin_password),  # Hash password before storing
        is_admin=True,
        is_seller=False,
        is_active=True,
        is_protected=True,
    )
    logger.warning("[bootstrap] Created default admin -> email=%s id=%s", u.email, u.id)
    return u
