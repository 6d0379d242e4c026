"""
Rate limiting middleware for API endpoints
"""
import time
from collections import defaultdict
from fastapi import Request
from typing import Dict, List
import logging

from quizgen.config import settings
from quizgen.errors import APIError, RATE_LIMITED
from quizgen.utils.security import token_subject

logger = logging.getLogger(__name__)

GENERATION_PATH = "/api/quiz/generate"


class RateLimiter:
    """
    In-memory sliding-window rate limiter

    Clients are identified by the user id in their bearer token, falling
    back to the remote address. Generation requests also count against a
    separate, smaller per-minute budget.
    """

    def __init__(
        self,
        requests_per_minute: int = 60,
        requests_per_hour: int = 1000,
        generations_per_minute: int = 5
    ):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour
        self.generations_per_minute = generations_per_minute

        # Storage: {client_id: [timestamps]}
        self.minute_tracker: Dict[str, List[float]] = defaultdict(list)
        self.hour_tracker: Dict[str, List[float]] = defaultdict(list)
        self.generation_tracker: Dict[str, List[float]] = defaultdict(list)

    def reset(self) -> None:
        self.minute_tracker.clear()
        self.hour_tracker.clear()
        self.generation_tracker.clear()

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        auth_header = request.headers.get("authorization", "")
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() == "bearer" and token:
            subject = token_subject(token.strip())
            if subject:
                return f"user:{subject}"

        client_ip = request.client.host if request.client else "unknown"
        return f"ip:{client_ip}"

    def _cleanup_old_entries(self, tracker: Dict[str, List[float]], window_seconds: int, now: float):
        """Remove entries older than window"""
        cutoff_time = now - window_seconds

        for client_id in list(tracker.keys()):
            tracker[client_id] = [ts for ts in tracker[client_id] if ts > cutoff_time]

            # Remove empty entries
            if not tracker[client_id]:
                del tracker[client_id]

    def _reject(self, client_id: str, limit: int, window: str):
        logger.warning(f"Rate limit exceeded ({window}): {client_id}")
        raise APIError(
            429,
            f"Too many requests. Limit: {limit} requests per {window}",
            RATE_LIMITED,
        )

    async def check_rate_limit(self, request: Request) -> None:
        """
        Check if request exceeds rate limits

        Raises:
            APIError: 429 if rate limit exceeded
        """
        client_id = self._get_client_id(request)
        now = time.time()
        is_generation = request.method == "POST" and request.url.path == GENERATION_PATH

        # Cleanup old entries
        self._cleanup_old_entries(self.minute_tracker, 60, now)
        self._cleanup_old_entries(self.hour_tracker, 3600, now)
        self._cleanup_old_entries(self.generation_tracker, 60, now)

        if len(self.minute_tracker[client_id]) >= self.requests_per_minute:
            self._reject(client_id, self.requests_per_minute, "minute")

        if len(self.hour_tracker[client_id]) >= self.requests_per_hour:
            self._reject(client_id, self.requests_per_hour, "hour")

        if is_generation and len(self.generation_tracker[client_id]) >= self.generations_per_minute:
            self._reject(client_id, self.generations_per_minute, "minute")

        # Record this request
        self.minute_tracker[client_id].append(now)
        self.hour_tracker[client_id].append(now)
        if is_generation:
            self.generation_tracker[client_id].append(now)

        logger.debug(f"Rate limit check passed: {client_id}")


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR,
    generations_per_minute=settings.GENERATION_LIMIT_PER_MINUTE,
)
