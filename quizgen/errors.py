"""
Structured API errors

Every failure response carries a machine-readable ``code`` next to the
human-readable ``error`` message so clients can pick their own wording.
"""
from fastapi import HTTPException
from typing import Optional


# Validation (400)
VALIDATION_ERROR = "VALIDATION_ERROR"
EMAIL_IN_USE = "EMAIL_IN_USE"

# Authorization (401)
NOT_AUTHORIZED = "NOT_AUTHORIZED"
TOKEN_INVALID = "TOKEN_INVALID"
EMAIL_NOT_FOUND = "EMAIL_NOT_FOUND"
INCORRECT_PASSWORD = "INCORRECT_PASSWORD"

# Not found (404)
NOT_FOUND = "NOT_FOUND"

# Rate limiting (429)
RATE_LIMITED = "RATE_LIMITED"

# Upstream / server faults (500)
GENERATION_FAILED = "GENERATION_FAILED"
PROVIDER_NOT_CONFIGURED = "PROVIDER_NOT_CONFIGURED"
INTERNAL_ERROR = "INTERNAL_ERROR"

DEFAULT_CODES = {
    400: VALIDATION_ERROR,
    401: NOT_AUTHORIZED,
    404: NOT_FOUND,
    429: RATE_LIMITED,
    500: INTERNAL_ERROR,
}


class APIError(HTTPException):
    """HTTPException carrying a structured error code"""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        super().__init__(status_code=status_code, detail=message)
        self.code = code or code_for_status(status_code)


def code_for_status(status_code: int) -> str:
    return DEFAULT_CODES.get(status_code, "HTTP_ERROR")


def bad_request(message: str, code: str = VALIDATION_ERROR) -> APIError:
    return APIError(400, message, code)


def unauthorized(message: str, code: str = NOT_AUTHORIZED) -> APIError:
    return APIError(401, message, code)


def not_found(message: str) -> APIError:
    return APIError(404, message, NOT_FOUND)
