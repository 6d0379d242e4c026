"""
Quiz generation and management API endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import Tuple
from uuid import UUID
import logging

from quizgen.api.deps import get_current_user
from quizgen.config import settings
from quizgen.database import get_db
from quizgen.errors import (
    APIError,
    bad_request,
    not_found,
    unauthorized,
    GENERATION_FAILED,
    PROVIDER_NOT_CONFIGURED,
)
from quizgen.models import Quiz, User
from quizgen.schemas.auth import EmptyResponse
from quizgen.schemas.quiz import (
    QuizGenerateRequest,
    QuizGenerateResponse,
    QuizListResponse,
    QuizDetailResponse,
    QuizOut,
)
from quizgen.services.gemini_service import gemini_service, MalformedQuizError, QuizGenerationError


router = APIRouter(prefix="/api/quiz", tags=["quiz"])
logger = logging.getLogger(__name__)

DIFFICULTIES = ("easy", "medium", "hard")


def validate_generation_request(request: QuizGenerateRequest) -> Tuple[str, str, int]:
    """
    Check generation input before any provider call

    Returns:
        Tuple of (trimmed topic, lower-cased difficulty, question count)
    """
    topic = (request.topic or "").strip()
    difficulty = (request.difficulty or "").strip().lower()
    count = request.question_count

    if not topic or not difficulty or not count:
        raise bad_request("Please provide topic, difficulty, and number of questions")

    if difficulty not in DIFFICULTIES:
        raise bad_request("Invalid difficulty level. Must be easy, medium, or hard")

    if not settings.MIN_QUIZ_QUESTIONS <= count <= settings.MAX_QUIZ_QUESTIONS:
        raise bad_request(
            f"Question count must be between {settings.MIN_QUIZ_QUESTIONS} "
            f"and {settings.MAX_QUIZ_QUESTIONS}"
        )

    return topic, difficulty, count


def get_owned_quiz(db: Session, quiz_id: str, user: User, action: str) -> Quiz:
    """Load a quiz and make sure the user owns it"""
    try:
        quiz_uuid = UUID(quiz_id)
    except ValueError:
        raise not_found("Quiz not found")

    quiz = db.query(Quiz).filter(Quiz.id == quiz_uuid).first()
    if not quiz:
        raise not_found("Quiz not found")

    if quiz.created_by != user.id:
        logger.warning(f"User {user.id} tried to {action} quiz {quiz.id} owned by {quiz.created_by}")
        raise unauthorized(f"Not authorized to {action} this quiz")

    return quiz


@router.post("/generate", response_model=QuizGenerateResponse)
def generate_quiz(
    request: QuizGenerateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Generate a quiz with Gemini and store it

    - Validates topic, difficulty and question count (1-20)
    - Calls the provider once, no retry
    - Stores the quiz owned by the current user
    """
    topic, difficulty, count = validate_generation_request(request)

    if not gemini_service.is_configured:
        logger.error("GEMINI_API_KEY is not configured")
        raise APIError(
            500,
            "API configuration error. Please contact support.",
            PROVIDER_NOT_CONFIGURED,
        )

    logger.info(f"Generating {difficulty} quiz on '{topic}' ({count} questions) for user {current_user.id}")

    try:
        questions = gemini_service.generate_quiz(topic, difficulty, count)
    except QuizGenerationError as e:
        logger.error(f"Quiz generation failed: {str(e)}")
        if isinstance(e, MalformedQuizError):
            message = "Failed to generate a valid quiz. Please try again."
        else:
            message = "Failed to generate quiz. Please try again later."
        raise APIError(500, message, GENERATION_FAILED)

    try:
        quiz = Quiz(
            title=topic,
            topic=topic,
            difficulty=difficulty,
            questions=questions,
            created_by=current_user.id,
        )

        db.add(quiz)
        db.commit()
        db.refresh(quiz)
    except Exception:
        db.rollback()
        raise

    logger.info(f"Quiz created: {quiz.id}")

    return QuizGenerateResponse(quiz=QuizOut.model_validate(quiz))


@router.get("", response_model=QuizListResponse)
def list_quizzes(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All quizzes of the current user, newest first"""
    quizzes = (
        db.query(Quiz)
        .filter(Quiz.created_by == current_user.id)
        .order_by(Quiz.created_at.desc())
        .all()
    )

    return QuizListResponse(
        count=len(quizzes),
        data=[QuizOut.model_validate(q) for q in quizzes],
    )


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
def get_quiz(
    quiz_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    quiz = get_owned_quiz(db, quiz_id, current_user, "access")
    return QuizDetailResponse(data=QuizOut.model_validate(quiz))


@router.delete("/{quiz_id}", response_model=EmptyResponse)
def delete_quiz(
    quiz_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete a quiz owned by the current user"""
    quiz = get_owned_quiz(db, quiz_id, current_user, "delete")

    db.delete(quiz)
    db.commit()

    logger.info(f"Quiz deleted: {quiz_id}")
    return EmptyResponse()
