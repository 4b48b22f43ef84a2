"""Shared slowapi rate limiter."""
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from cad_api.config import settings


def get_rate_limit_key(request: Request) -> str:
    """
    Get rate limit key from request.
    Only the unauthenticated auth routes are limited, so clients are keyed by IP.
    """
    return get_remote_address(request)


limiter = Limiter(
    key_func=get_rate_limit_key,
    enabled=settings.RATE_LIMIT_ENABLED,
)

auth_limit = limiter.limit(settings.AUTH_RATE_LIMIT)  # Login/Register
