"""
OrganiJob - Authentication Dependencies

FastAPI dependencies for route protection and user injection.

Usage in routers:
    from ..auth.dependencies import get_current_user

    @router.get("/protected")
    def protected_route(current_user: UserRecord = Depends(get_current_user)):
        return {"user_id": current_user.id}

Dependency hierarchy:
    get_bearer_token          - Raw token from the Authorization header (or None)
    get_current_user_optional - User for the token, None if unauthenticated
    get_current_user          - Same, but raises 401 if unauthenticated
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import logging

from ..storage import Storage, UserRecord, get_storage
from .service import auth_service

logger = logging.getLogger("organijob.auth")

MSG_UNAUTHORIZED = "Non autorise."

# auto_error=False allows us to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


# -----------------------------------------------------------------------------
# Core Authentication Dependencies
# -----------------------------------------------------------------------------

async def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> Optional[str]:
    """
    Extract the session token from an `Authorization: Bearer <token>` header.

    Returns None when the header is missing or uses another scheme.
    """
    if not credentials or not credentials.credentials:
        return None
    return credentials.credentials


def get_current_user_optional(
    token: Optional[str] = Depends(get_bearer_token),
    storage: Storage = Depends(get_storage)
) -> Optional[UserRecord]:
    """
    Optionally get the current user, returning None if not authenticated.

    An unknown token is not an error; it simply means "nobody".
    """
    return auth_service.authenticate_token(token, storage)


def get_current_user(
    current_user: Optional[UserRecord] = Depends(get_current_user_optional)
) -> UserRecord:
    """
    Get the current authenticated user.

    Use this dependency for every protected route.

    Raises:
        HTTPException: 401 if the token is missing or unknown
    """
    if current_user is None:
        logger.debug("Rejected request without a valid session")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=MSG_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return current_user

