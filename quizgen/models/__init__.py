"""
Database models package
"""
from quizgen.models.user import User
from quizgen.models.quiz import Quiz

__all__ = ["User", "Quiz"]
