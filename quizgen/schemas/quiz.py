"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime


class QuizGenerateRequest(BaseModel):
    """
    Request schema for quiz generation

    Fields are optional here so that missing or out-of-range values are
    reported with the route's own messages instead of schema errors.
    """
    topic: Optional[str] = None
    difficulty: Optional[str] = None
    question_count: Optional[int] = Field(None, alias="questionCount")

    class Config:
        populate_by_name = True


class Question(BaseModel):
    """Individual multiple-choice question"""
    question: str
    options: List[str]
    correct_answer: str = Field(..., alias="correctAnswer")
    explanation: str = ""

    class Config:
        populate_by_name = True


class QuizOut(BaseModel):
    """Stored quiz"""
    id: UUID
    title: str
    topic: str
    difficulty: str
    questions: List[Question]
    created_by: UUID = Field(..., alias="createdBy")
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class QuizGenerateResponse(BaseModel):
    """Response containing the generated quiz"""
    success: bool = True
    quiz: QuizOut


class QuizListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[QuizOut]


class QuizDetailResponse(BaseModel):
    success: bool = True
    data: QuizOut
