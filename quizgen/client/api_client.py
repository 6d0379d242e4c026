"""
HTTP client for the QuizGen API
"""
from typing import Any, Dict, List, Optional
import httpx
import logging

from quizgen import errors
from quizgen.client.session import Session
from quizgen.schemas.quiz import QuizOut

logger = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"
DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_TIMEOUT = 10.0


class ApiError(Exception):
    """Failed API call: HTTP status (None for network errors), error code and server message"""

    def __init__(self, message: Optional[str], code: Optional[str], status: Optional[int] = None):
        super().__init__(message or code or f"HTTP {status}")
        self.message = message
        self.code = code
        self.status = status


class FormValidationError(ApiError):
    """Input rejected before any request was sent"""

    def __init__(self, message: str):
        super().__init__(message, errors.VALIDATION_ERROR)


def validate_quiz_form(topic: Any, difficulty: Any, question_count: Any) -> Dict[str, Any]:
    """
    Check the generation form and build the request body

    Raises:
        FormValidationError: with the message to show next to the form
    """
    topic = str(topic or "").strip()
    if not topic:
        raise FormValidationError("Please enter a topic")

    difficulty = str(difficulty or "").strip().lower()
    if difficulty not in DIFFICULTIES:
        raise FormValidationError("Please select a difficulty level")

    try:
        count = int(question_count)
    except (TypeError, ValueError):
        count = 0
    if not 1 <= count <= 20:
        raise FormValidationError("Please enter a valid number of questions (1-20)")

    return {"topic": topic, "difficulty": difficulty, "questionCount": count}


class QuizApiClient:
    """
    Thin wrapper over the HTTP surface

    Auth state lives in the Session passed in, never in client-wide headers.
    Any ``httpx.Client`` works as transport, including FastAPI's TestClient.
    """

    def __init__(self, http: httpx.Client, session: Optional[Session] = None):
        self.http = http
        self.session = session or Session()

    @classmethod
    def connect(cls, base_url: str, session: Optional[Session] = None) -> "QuizApiClient":
        return cls(httpx.Client(base_url=base_url, timeout=DEFAULT_TIMEOUT), session)

    def _request(self, method: str, path: str, json: Any = None, wait: bool = False) -> Dict[str, Any]:
        """Send one request; ``wait`` disables the timeout"""
        options = {"timeout": None} if wait else {}
        try:
            response = self.http.request(
                method, path, json=json, headers=self.session.auth_headers(), **options
            )
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {str(e)}")
            raise ApiError(None, NETWORK_ERROR) from e

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        if response.is_error or body.get("success") is False:
            # None when the server sends no code
            code = body.get("code")
            logger.debug(f"{method} {path} -> {response.status_code} {code}")
            raise ApiError(body.get("error"), code, response.status_code)

        return body

    # Auth

    def register(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/register", {"email": email, "password": password})
        self.session.login(body["token"], body["user"])
        return body["user"]

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/login", {"email": email, "password": password})
        self.session.login(body["token"], body["user"])
        return body["user"]

    def logout(self) -> None:
        self.session.logout()

    def me(self) -> Dict[str, Any]:
        """
        Confirm the session with the server

        A rejected token is discarded so the session becomes unauthenticated.
        """
        try:
            body = self._request("GET", "/api/auth/me")
        except ApiError as e:
            if e.status == 401:
                self.session.logout()
            raise
        self.session.user = body["data"]
        return body["data"]

    # Quizzes

    def generate_quiz(self, topic: Any, difficulty: Any, question_count: Any) -> QuizOut:
        payload = validate_quiz_form(topic, difficulty, question_count)
        # The provider call can take a long time; wait for it
        body = self._request("POST", "/api/quiz/generate", payload, wait=True)
        return QuizOut.model_validate(body["quiz"])

    def list_quizzes(self) -> List[QuizOut]:
        body = self._request("GET", "/api/quiz")
        return [QuizOut.model_validate(item) for item in body["data"]]

    def get_quiz(self, quiz_id: str) -> QuizOut:
        body = self._request("GET", f"/api/quiz/{quiz_id}")
        return QuizOut.model_validate(body["data"])

    def delete_quiz(self, quiz_id: str) -> None:
        self._request("DELETE", f"/api/quiz/{quiz_id}")

    # Profile

    def update_email(self, email: str) -> Dict[str, Any]:
        body = self._request("PUT", "/api/user/profile", {"email": email})
        self.session.user = body["data"]
        return body["data"]

    def update_password(self, current_password: str, new_password: str) -> None:
        self._request(
            "PUT",
            "/api/user/password",
            {"currentPassword": current_password, "newPassword": new_password},
        )
