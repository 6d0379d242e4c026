"""
Quiz model - stores generated quizzes
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Uuid
from quizgen.database import Base
from quizgen.models.user import _utcnow
import uuid


class Quiz(Base):
    """
    Quizzes table - generated questions owned by the requesting user
    """
    __tablename__ = "quizzes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    topic = Column(String(255), nullable=False)
    difficulty = Column(String(20), nullable=False)
    questions = Column(JSON, nullable=False)  # [{question, options, correctAnswer, explanation}]
    created_by = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<Quiz(id={self.id}, topic={self.topic}, difficulty={self.difficulty})>"
