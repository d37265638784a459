"""Password hashing with bcrypt, and signed session tokens for HTTP clients."""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
import jwt

from pharmadash.core.config import settings

logger = logging.getLogger(__name__)


def get_password_hash(password: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time comparison against the stored hash. False on malformed hashes."""
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "iat": now, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> Optional[str]:
    """Subject of a valid, unexpired token; None for anything else."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired session token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid session token: {e}")
        return None
    return payload.get("sub")
