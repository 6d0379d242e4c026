"""
Shared route dependencies
"""
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
from typing import Optional

from quizgen.database import get_db
from quizgen.errors import unauthorized
from quizgen.models import User
from quizgen.services.auth_service import auth_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the bearer token on protected routes"""
    if credentials is None or not credentials.credentials:
        raise unauthorized("Not authorized to access this route")

    return auth_service.user_from_token(db, credentials.credentials)
