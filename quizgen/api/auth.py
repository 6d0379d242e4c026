"""
Authentication API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from quizgen.api.deps import get_current_user
from quizgen.database import get_db
from quizgen.models import User
from quizgen.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    AuthResponse,
    UserOut,
    UserResponse,
)
from quizgen.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Create an account

    Returns a bearer token and the public user record
    """
    token, user = auth_service.register(db, request.email, request.password)
    return AuthResponse(token=token, user=UserOut.model_validate(user))


@router.post("/login", response_model=AuthResponse)
def login(request: LoginRequest, db: Session = Depends(get_db)):
    """
    Log in with email and password

    Failure codes distinguish an unknown email from a wrong password
    """
    token, user = auth_service.login(db, request.email, request.password)
    logger.info(f"User logged in: {user.id}")
    return AuthResponse(token=token, user=UserOut.model_validate(user))


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    """Return the user the bearer token belongs to"""
    return UserResponse(data=UserOut.model_validate(current_user))
