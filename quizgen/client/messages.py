"""
User-facing wording for API failures
"""
from typing import Optional

from quizgen import errors

GENERIC_MESSAGE = "An unexpected error occurred. Please try again later."

CODE_MESSAGES = {
    errors.EMAIL_NOT_FOUND: "Email not found. Please check your email or sign up.",
    errors.INCORRECT_PASSWORD: "Incorrect password. Please try again.",
    errors.EMAIL_IN_USE: "That email is already registered.",
    errors.TOKEN_INVALID: "Authentication failed. Please log in again.",
    errors.NOT_AUTHORIZED: "You are not authorized to do that. Please log in again.",
    errors.NOT_FOUND: "That quiz could not be found.",
    errors.RATE_LIMITED: "Too many requests. Please wait a minute and try again.",
    errors.PROVIDER_NOT_CONFIGURED: "Quiz generation is not configured. Please contact support.",
    errors.GENERATION_FAILED: "Failed to generate quiz. Please try again.",
    errors.INTERNAL_ERROR: GENERIC_MESSAGE,
}


def login_hint(server_message: Optional[str]) -> Optional[str]:
    """Substring match on server text, for servers that send no code"""
    text = (server_message or "").lower()
    if "password" in text:
        return CODE_MESSAGES[errors.INCORRECT_PASSWORD]
    if "email" in text:
        return CODE_MESSAGES[errors.EMAIL_NOT_FOUND]
    return None


def friendly_message(error: Exception, login: bool = False) -> str:
    """
    Map a client error to the text shown to the user

    Validation failures keep the server's field message; everything else
    is looked up by code. Login failures without a code fall back to
    substring matching on the server message.
    """
    code = getattr(error, "code", None)
    message = getattr(error, "message", None)

    if code == errors.VALIDATION_ERROR and message:
        return message
    if code in CODE_MESSAGES:
        return CODE_MESSAGES[code]
    if login:
        hint = login_hint(message)
        if hint:
            return hint
    return message or GENERIC_MESSAGE
