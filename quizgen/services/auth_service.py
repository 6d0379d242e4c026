"""
Authentication and account service
"""
import logging
from typing import Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from uuid import UUID

from quizgen.config import settings
from quizgen.errors import (
    bad_request,
    unauthorized,
    EMAIL_IN_USE,
    EMAIL_NOT_FOUND,
    INCORRECT_PASSWORD,
    TOKEN_INVALID,
)
from quizgen.models import User
from quizgen.utils.security import (
    hash_password,
    verify_password,
    create_access_token,
    token_subject,
)

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthService:
    """Registration, login, token verification and credential updates"""

    def _check_password_length(self, password: str) -> None:
        if len(password) < settings.MIN_PASSWORD_LENGTH:
            raise bad_request(
                f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters"
            )

    def find_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == _normalize_email(email)).first()

    def register(self, db: Session, email: str, password: str) -> Tuple[str, User]:
        """
        Create an account and issue a token

        Returns:
            Tuple of (token, user)
        """
        self._check_password_length(password)

        if self.find_by_email(db, email):
            raise bad_request("User already exists with this email", EMAIL_IN_USE)

        user = User(email=_normalize_email(email), password_hash=hash_password(password))
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration
            db.rollback()
            raise bad_request("User already exists with this email", EMAIL_IN_USE)
        db.refresh(user)

        logger.info(f"User registered: {user.id}")
        return create_access_token(str(user.id)), user

    def login(self, db: Session, email: str, password: str) -> Tuple[str, User]:
        """
        Verify credentials and issue a token

        Raises:
            APIError: 401 with EMAIL_NOT_FOUND or INCORRECT_PASSWORD
        """
        if not email or not password:
            raise bad_request("Please provide an email and password")

        user = self.find_by_email(db, email)
        if not user:
            raise unauthorized("No account found with this email", EMAIL_NOT_FOUND)

        if not verify_password(password, user.password_hash):
            logger.info(f"Failed login for user {user.id}")
            raise unauthorized("Incorrect password", INCORRECT_PASSWORD)

        return create_access_token(str(user.id)), user

    def user_from_token(self, db: Session, token: str) -> User:
        """Resolve a bearer token to its user"""
        subject = token_subject(token)
        if subject is None:
            raise unauthorized("Not authorized to access this route", TOKEN_INVALID)

        try:
            user_id = UUID(subject)
        except ValueError:
            raise unauthorized("Not authorized to access this route", TOKEN_INVALID)

        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise unauthorized("Not authorized to access this route", TOKEN_INVALID)
        return user

    def update_email(self, db: Session, user: User, email: Optional[str]) -> User:
        """Change the login email; a missing email leaves the user unchanged"""
        if email:
            normalized = _normalize_email(email)
            existing = self.find_by_email(db, normalized)
            if existing and existing.id != user.id:
                raise bad_request("Email already in use", EMAIL_IN_USE)

            user.email = normalized
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise bad_request("Email already in use", EMAIL_IN_USE)
            db.refresh(user)
            logger.info(f"User {user.id} updated email")

        return user

    def update_password(
        self,
        db: Session,
        user: User,
        current_password: Optional[str],
        new_password: Optional[str]
    ) -> None:
        """Replace the password after checking the current one"""
        if not current_password or not new_password:
            raise bad_request("Please provide current password and new password")

        if not verify_password(current_password, user.password_hash):
            raise unauthorized("Current password is incorrect", INCORRECT_PASSWORD)

        self._check_password_length(new_password)

        user.password_hash = hash_password(new_password)
        db.commit()
        logger.info(f"User {user.id} changed password")


# Global instance
auth_service = AuthService()
