"""
Password hashing and JWT helpers
"""
from datetime import datetime, timedelta, timezone
from passlib.context import CryptContext
from typing import Any, Dict, Optional
import jwt
import logging

from quizgen.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Issue a signed token for a user id

    Args:
        subject: User id stored in the ``sub`` claim
        expires_delta: Lifetime override (default from settings)

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    expires_at = now + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    payload = {"sub": str(subject), "iat": now, "exp": expires_at}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry

    Raises:
        jwt.PyJWTError: token is malformed, tampered with or expired
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["sub", "exp"]},
    )


def token_subject(token: str) -> Optional[str]:
    """Return the ``sub`` claim of a valid token, or None"""
    try:
        return decode_access_token(token).get("sub")
    except jwt.PyJWTError:
        return None
