"""
Client-side session context and token persistence
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import jwt
import logging
import os
import time

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_PATH = Path(os.environ.get("QUIZGEN_TOKEN_FILE", Path.home() / ".quizgen" / "token"))


class TokenStore:
    """File-backed storage for one bearer token"""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_TOKEN_PATH

    def load(self) -> Optional[str]:
        try:
            token = self.path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return None
        return token or None

    def save(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass


def token_expiry(token: str) -> Optional[float]:
    """
    Read the ``exp`` claim without verifying the signature

    The client cannot verify the signature; the server does that on every
    request. This only avoids sending a token that has already expired.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return None
    exp = claims.get("exp")
    return float(exp) if isinstance(exp, (int, float)) else None


def is_token_expired(token: str, now: Optional[float] = None) -> bool:
    expiry = token_expiry(token)
    if expiry is None:
        return True
    return expiry < (time.time() if now is None else now)


@dataclass
class Session:
    """Explicit auth context handed to every API call"""
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    store: Optional[TokenStore] = field(default=None, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @classmethod
    def from_store(cls, store: TokenStore) -> "Session":
        """Load the persisted token; expired or unreadable tokens are cleared"""
        token = store.load()
        if token and is_token_expired(token):
            logger.info("Stored token expired; clearing it")
            store.clear()
            token = None
        return cls(token=token, store=store)

    def login(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.user = user
        if self.store:
            self.store.save(token)

    def logout(self) -> None:
        """Local discard only; the server keeps no revocation list"""
        self.token = None
        self.user = None
        if self.store:
            self.store.clear()

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}
