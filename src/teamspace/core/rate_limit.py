"""Rate limiting for unauthenticated credential endpoints.

Limits are in-memory and per process.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from src.teamspace.core.config import get_settings
from src.teamspace.core.logging import get_logger

logger = get_logger(__name__)


def get_rate_limit_key(request: Request) -> str:
    """Rate limit key from client IP only.

    Never include user-controlled headers here; rotating them would create
    unlimited new buckets.
    """
    return get_remote_address(request) or "unknown"


def create_limiter() -> Limiter:
    """Create the rate limiter. Disabled in the testing environment."""
    settings = get_settings()

    if settings.is_testing:
        logger.info("Rate limiter disabled (testing environment)")
        return Limiter(key_func=get_rate_limit_key, enabled=False)

    return Limiter(key_func=get_rate_limit_key)


limiter = create_limiter()


def signup_limit() -> str:
    return get_settings().signup_rate_limit


def login_limit() -> str:
    return get_settings().login_rate_limit
