"""
Application configuration.

``Settings`` is a dataclass whose defaults are read from environment
variables.  The application factory receives a ``Settings`` instance
explicitly, so tests and scripts can build their own without touching
the environment; the module-level ``settings`` object only serves the
default ASGI entry point.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Skill Swap API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}

    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file in addition to the console handler.
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Token signing.  Tokens are short lived: the web client asks the
    # user to log in again once the token expires.
    secret_key: str = os.getenv("JWT_SECRET", "change_me_in_production_please_32b")
    algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # Cost factor for bcrypt password hashes.
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Path of the SQLite database file.  Relative paths are resolved
    # against the package root by ``Database.from_settings``.
    database_url: str = os.getenv("DATABASE_URL", "skill_swap.db")

    cors_origins: List[str] = field(
        default_factory=lambda: _split_csv(
            os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:3000")
        )
    )

    default_profile_photo: str = os.getenv(
        "DEFAULT_PROFILE_PHOTO",
        "https://res.cloudinary.com/demo/image/upload/v1/default_avatar.png",
    )


# Default settings for ``uvicorn skill_swap_api.app.main:app``.
# Environment variables must be set before this module is imported.
settings = Settings()
