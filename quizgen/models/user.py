"""
User model - credential store
"""
from sqlalchemy import Column, String, DateTime, Uuid
from datetime import datetime, timezone
from quizgen.database import Base
import uuid


def _utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    """
    Users table - email login and password hash
    """
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
