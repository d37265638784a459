"""Dashboard configuration.

Environment variables override all defaults. A `.env` file next to the
backend directory is loaded for local development.
"""

import os
import warnings
from pathlib import Path
from typing import List


# Load .env for local development (safe no-op if not installed)
try:
    from dotenv import load_dotenv  # type: ignore

    _BACKEND_DIR = Path(__file__).resolve().parents[2]
    load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)
except ImportError:
    pass


class Settings:
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./pharmacy.db")

    # Session tokens for HTTP clients (signed JWT in a cookie or Bearer header)
    SECRET_KEY: str = os.getenv("SECRET_KEY", "")
    if not SECRET_KEY:
        if ENVIRONMENT == "production":
            raise ValueError("SECRET_KEY must be set in production environment")
        warnings.warn(
            "SECRET_KEY not set in environment. Using development default. "
            "Set SECRET_KEY in .env to a strong random value.",
            RuntimeWarning,
        )
        SECRET_KEY = "development-only-weak-default-change-in-production"

    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    SESSION_COOKIE_NAME: str = "pharmacy_session"
    SECURE_COOKIES: bool = ENVIRONMENT == "production"
    SAME_SITE_COOKIE: str = "strict"

    # Client-local identity cache (survives restarts until logout)
    IDENTITY_CACHE_PATH: str = os.getenv("IDENTITY_CACHE_PATH", "./.pharmacy_session.json")
    IDENTITY_CACHE_KEY: str = "pharmacy_user"

    # Password hashing cost factor
    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # CORS (specific origins only, no wildcards)
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Rate limiting on /auth endpoints
    RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", "20"))
    RATE_LIMIT_WINDOW_SECONDS: int = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Create an admin account with a random password when the users table is empty
    SEED_DEFAULT_ADMIN: bool = os.getenv("SEED_DEFAULT_ADMIN", "true").lower() == "true"


settings = Settings()
