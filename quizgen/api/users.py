"""
User profile API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from quizgen.api.deps import get_current_user
from quizgen.database import get_db
from quizgen.models import User
from quizgen.schemas.auth import (
    ProfileUpdate,
    PasswordUpdate,
    UserOut,
    UserResponse,
    EmptyResponse,
)
from quizgen.services.auth_service import auth_service

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/profile", response_model=UserResponse)
def get_profile(current_user: User = Depends(get_current_user)):
    return UserResponse(data=UserOut.model_validate(current_user))


@router.put("/profile", response_model=UserResponse)
def update_profile(
    update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update the profile (currently only the email)"""
    user = auth_service.update_email(db, current_user, update.email)
    return UserResponse(data=UserOut.model_validate(user))


@router.put("/password", response_model=EmptyResponse)
def update_password(
    update: PasswordUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Change the password

    - 400 when either password is missing or the new one is too short
    - 401 when the current password does not match
    """
    auth_service.update_password(db, current_user, update.current_password, update.new_password)
    return EmptyResponse()
