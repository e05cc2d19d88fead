"""
OrganiJob - Authentication Router

API endpoints for user authentication.

Endpoints:
    POST /api/auth/register  - Email/password registration -> session token
    POST /api/auth/login     - Email/password login -> session token
    POST /api/auth/logout    - Delete the current session (always succeeds)
    GET  /api/auth/me        - Get current user
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from typing import Optional
import logging

from ..rate_limit import limiter, RATE_LIMIT_AUTH, RATE_LIMIT_READ
from ..storage import Storage, UserRecord, get_storage
from .schemas import Credentials, AuthResponse, MeResponse, OkResponse, UserResponse
from .service import auth_service, AuthServiceError
from .dependencies import get_bearer_token, get_current_user

logger = logging.getLogger("organijob.auth")
router = APIRouter()


def _raise_http(error: AuthServiceError):
    headers = {"WWW-Authenticate": "Bearer"} if error.status_code == 401 else None
    raise HTTPException(status_code=error.status_code, detail=error.message, headers=headers)


# -----------------------------------------------------------------------------
# Registration & Login
# -----------------------------------------------------------------------------

@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMIT_AUTH)
def register(
    request: Request,
    credentials: Optional[Credentials] = None,
    storage: Storage = Depends(get_storage)
):
    """
    Register a new user with email and password.

    Requires:
    - An email containing "@" and "."
    - A password of at least 8 characters

    Returns a session token; any previous session of the user is invalidated.
    """
    credentials = credentials or Credentials()
    try:
        user, token = auth_service.register(credentials.email, credentials.password, storage)
    except AuthServiceError as e:
        _raise_http(e)

    return AuthResponse(token=token, user=UserResponse.from_record(user))


@router.post("/login", response_model=AuthResponse)
@limiter.limit(RATE_LIMIT_AUTH)
def login(
    request: Request,
    credentials: Optional[Credentials] = None,
    storage: Storage = Depends(get_storage)
):
    """
    Login with email and password to get a session token.

    Logging in again from another device invalidates the previous token.
    """
    credentials = credentials or Credentials()
    try:
        user, token = auth_service.login(credentials.email, credentials.password, storage)
    except AuthServiceError as e:
        _raise_http(e)

    return AuthResponse(token=token, user=UserResponse.from_record(user))


@router.post("/logout", response_model=OkResponse)
def logout(
    token: Optional[str] = Depends(get_bearer_token),
    storage: Storage = Depends(get_storage)
):
    """
    Logout by deleting the session behind the bearer token.

    Idempotent: succeeds without a token or with an unknown one.
    """
    auth_service.logout(token, storage)
    return OkResponse()


# -----------------------------------------------------------------------------
# Current User
# -----------------------------------------------------------------------------

@router.get("/me", response_model=MeResponse)
@limiter.limit(RATE_LIMIT_READ)
def get_me(
    request: Request,
    current_user: UserRecord = Depends(get_current_user)
):
    """Get the current authenticated user."""
    return MeResponse(user=UserResponse.from_record(current_user))
