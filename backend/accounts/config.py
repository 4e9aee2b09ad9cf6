# accounts/config.py
import os
import logging
from pydantic import BaseModel
from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

logger = logging.getLogger("uvicorn.error")


def _split_origins(raw: str | None) -> list[str]:
    if not raw:
        return [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    return [o.strip() for o in raw.split(",") if o.strip()]


class Settings(BaseModel):
    # General app settings
    APP_NAME: str = os.getenv("APP_NAME", "Accounts Admin API")
    env: str = os.getenv("ENV", "dev")

    # Host & Port settings
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "5000"))

    # CORS origins for frontend (comma separated in CORS_ORIGINS)
    CORS_ORIGINS: list[str] = _split_origins(os.getenv("CORS_ORIGINS"))

    # Mandatory: token signing secret and database connection string
    jwt_secret: str | None = os.getenv("JWT_SECRET")
    database_url: str | None = os.getenv("DATABASE_URL")
    # Create missing tables and unique indexes on startup (no migration tool is used)
    db_generate_schemas: bool = os.getenv("DB_GENERATE_SCHEMAS", "true").lower() in ("true", "1", "yes")

    # Token lifetime in days
    token_expire_days: int = int(os.getenv("TOKEN_EXPIRE_DAYS", "365"))

    # Default administrator created on first startup (see core/bootstrap.py)
    admin_email: str = os.getenv("ADMIN_EMAIL", "admin@example.com")
    admin_password: str | None = os.getenv("ADMIN_PASSWORD")
    admin_first_name: str = os.getenv("ADMIN_FIRST_NAME", "Admin")
    admin_last_name: str = os.getenv("ADMIN_LAST_NAME", "Principal")

    def missing_required(self) -> list[str]:
        """Names of the mandatory environment variables that are not set."""
        missing = []
        if not self.jwt_secret:
            missing.append("JWT_SECRET")
        if not self.database_url:
            missing.append("DATABASE_URL")
        return missing


def ensure_required_settings(cfg: "Settings | None" = None) -> None:
    """
    Abort the process when a critical environment variable is missing.

    The server cannot sign tokens without JWT_SECRET nor reach the store
    without DATABASE_URL, so startup stops with exit status 1.
    """
    cfg = cfg or settings
    missing = cfg.missing_required()
    if missing:
        logger.critical("[config] Missing critical environment variables: %s", ", ".join(missing))
        raise SystemExit(1)


settings = Settings()  # Instantiate configuration
