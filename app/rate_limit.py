"""
OrganiJob - Centralized rate limiting configuration.

All rate limit decorators should import `limiter` from this module.
The limiter keys on client IP address (via X-Forwarded-For when behind a proxy).
"""
from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from .config import settings


def get_client_ip(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop set by the hosting proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=get_client_ip, enabled=settings.rate_limit_enabled)

# --- Rate limit constants ---

# Auth endpoints (login, register): strict to prevent brute force
RATE_LIMIT_AUTH = "5/minute"

# Sync writes (full replace of the contact set): moderate
RATE_LIMIT_GENERAL = "30/minute"

# Read-heavy endpoints (sync pull, export, tools): generous (1/sec sustained)
RATE_LIMIT_READ = "60/minute"
