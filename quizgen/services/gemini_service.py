"""
Gemini AI service for quiz generation
"""
import google.generativeai as genai
from quizgen.config import settings
import json
import logging
from typing import List, Dict, Any

logger = logging.getLogger(__name__)

# Configure Gemini API
genai.configure(api_key=settings.GEMINI_API_KEY)

REQUIRED_FIELDS = ("question", "options", "correctAnswer")


class QuizGenerationError(Exception):
    """Provider call failed or returned an unusable payload"""


class MalformedQuizError(QuizGenerationError):
    """Provider answered, but not with a usable quiz"""


class GeminiService:
    """Service for all Gemini AI operations"""

    def __init__(self, model_name: str = None):
        self.model_name = model_name or settings.GEMINI_MODEL
        self._model = None

    @property
    def is_configured(self) -> bool:
        return bool(settings.GEMINI_API_KEY)

    @property
    def model(self):
        if self._model is None:
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def generate_quiz(self, topic: str, difficulty: str, question_count: int) -> List[Dict[str, Any]]:
        """
        Generate quiz questions with a single Gemini call

        Args:
            topic: Quiz topic
            difficulty: easy/medium/hard
            question_count: Number of questions to request

        Returns:
            List of question dictionaries (question, options, correctAnswer, explanation)

        Raises:
            QuizGenerationError: provider error or malformed response
        """
        prompt = self._create_quiz_prompt(topic, difficulty, question_count)

        try:
            response = self.model.generate_content(prompt)
            text = response.text
        except Exception as e:
            logger.error(f"Gemini request failed: {str(e)}")
            raise QuizGenerationError("Quiz generation failed") from e

        return self._parse_quiz_response(text, question_count)

    def _create_quiz_prompt(self, topic: str, difficulty: str, question_count: int) -> str:
        """Create structured prompt for quiz generation"""

        return f"""
Create a {difficulty} difficulty quiz about {topic} with {question_count} questions.

Return ONLY valid JSON in this exact format (no markdown, no preamble):

{{
  "questions": [
    {{
      "question": "question text",
      "options": ["option1", "option2", "option3", "option4"],
      "correctAnswer": "correct option",
      "explanation": "explanation of answer"
    }}
  ]
}}

Each question has exactly 4 options. All options must be distinct.
"correctAnswer" must be copied verbatim from "options".
"""

    def _parse_quiz_response(self, response_text: str, question_count: int) -> List[Dict[str, Any]]:
        """Parse Gemini's quiz response into structured format"""
        cleaned = (response_text or "").strip()

        # Remove markdown code blocks
        if cleaned.startswith("```json"):
            cleaned = cleaned[7:]
        elif cleaned.startswith("```"):
            cleaned = cleaned[3:]
        if cleaned.endswith("```"):
            cleaned = cleaned[:-3]
        cleaned = cleaned.strip()

        try:
            data = json.loads(cleaned)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse quiz JSON: {str(e)}")
            logger.error(f"Response text: {cleaned[:500]}")
            raise MalformedQuizError("Invalid quiz format received from provider") from e

        questions = data.get("questions") if isinstance(data, dict) else None
        if not isinstance(questions, list) or not questions:
            raise MalformedQuizError("Invalid quiz format received from provider")

        parsed = [self._validate_question(i, q) for i, q in enumerate(questions)]

        if len(parsed) != question_count:
            logger.warning(f"Expected {question_count} questions, got {len(parsed)}")

        return parsed

    def _validate_question(self, index: int, raw: Any) -> Dict[str, Any]:
        """Check one question object and normalize it to the stored shape"""
        if not isinstance(raw, dict) or any(field not in raw for field in REQUIRED_FIELDS):
            raise MalformedQuizError(f"Invalid quiz format: question {index + 1} is missing fields")

        options = raw["options"]
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise MalformedQuizError(f"Invalid quiz format: question {index + 1} has bad options")

        correct = raw["correctAnswer"]
        if not isinstance(correct, str) or correct not in options:
            raise MalformedQuizError(
                f"Invalid quiz format: question {index + 1} answer is not one of its options"
            )

        if len(set(options)) != len(options):
            logger.warning(f"Question {index + 1} has duplicate options")

        return {
            "question": str(raw["question"]),
            "options": options,
            "correctAnswer": correct,
            "explanation": str(raw.get("explanation") or ""),
        }


# Global instance
gemini_service = GeminiService()
