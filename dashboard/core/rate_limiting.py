"""
Rate limiting for authentication endpoints using slowapi.
"""
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address

from dashboard.core.config import settings

# Per-endpoint limits for unauthenticated routes (brute-force protection)
AUTH_RATE_LIMITS = {
    "login": "5/minute",
    "register": "3/minute",
    "refresh": "10/minute",
}

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.rate_limit_storage_uri,
    enabled=settings.rate_limiting_enabled,
)

rate_limit_exceeded_handler = _rate_limit_exceeded_handler


def auth_rate_limit(endpoint: str):
    """
    Decorator applying the configured limit for an auth endpoint.

    The decorated route must accept a ``request: Request`` parameter.
    """
    if endpoint not in AUTH_RATE_LIMITS:
        raise ValueError(f"No rate limit configured for auth endpoint '{endpoint}'")
    return limiter.limit(AUTH_RATE_LIMITS[endpoint])
