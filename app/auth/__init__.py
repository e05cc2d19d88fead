"""
OrganiJob - Authentication Module

Email/password authentication with opaque server-side session tokens.

Usage:
    from app.auth import get_current_user, auth_service

    @router.get("/protected")
    def protected_route(current_user: UserRecord = Depends(get_current_user)):
        return {"user_id": current_user.id}
"""

# Models
from .models import User, UserSession

# Service
from .service import auth_service, AuthServiceError

# Dependencies (for use in routers)
from .dependencies import (
    get_bearer_token,
    get_current_user,
    get_current_user_optional,
)

# Router (for mounting in main.py)
from .router import router

__all__ = [
    # Models
    "User",
    "UserSession",
    # Service
    "auth_service",
    "AuthServiceError",
    # Dependencies
    "get_bearer_token",
    "get_current_user",
    "get_current_user_optional",
    # Router
    "router",
]
