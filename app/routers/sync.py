"""
OrganiJob - Contact synchronization API.

Endpoints for pulling and pushing the authenticated user's whole contact set.
A push is a full replace: whichever device pushes last wins.
"""
import json

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from typing import Any

from ..auth.dependencies import get_current_user
from ..storage import Storage, UserRecord, get_storage
from ..auth.schemas import UserResponse
from ..schemas import ContactResponse, SyncPullResponse, SyncPushResponse
from ..services.sync_service import (
    MSG_BAD_REQUEST, SyncError, pull_contacts, push_contacts, synced_at,
)
from ..rate_limit import limiter, RATE_LIMIT_GENERAL, RATE_LIMIT_READ

router = APIRouter()

EXPORT_FILENAME = "contacts-organijob.json"


async def get_sync_payload(
    request: Request,
    current_user: UserRecord = Depends(get_current_user)
) -> Any:
    """
    Decode the push body once the caller is authenticated.

    An empty body decodes to None and is rejected later as a format error.
    """
    body = await request.body()
    if not body:
        return None
    try:
        return json.loads(body)
    except ValueError:
        raise HTTPException(status_code=400, detail=MSG_BAD_REQUEST)


@router.get("", response_model=SyncPullResponse)
@limiter.limit(RATE_LIMIT_READ)
def pull(
    request: Request,
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user)
):
    """Return every contact of the current user, most recent call first."""
    contacts = pull_contacts(current_user, storage)
    return SyncPullResponse(
        user=UserResponse.from_record(current_user),
        contacts=[ContactResponse.from_record(c) for c in contacts],
        synced_at=synced_at(),
    )


@router.put("", response_model=SyncPushResponse)
@limiter.limit(RATE_LIMIT_GENERAL)
def push(
    request: Request,
    payload: Any = Depends(get_sync_payload),
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user)
):
    """
    Replace the current user's contacts with the submitted list.

    Send {"contacts": [...]}. Entries without `nom`, `organisation` or a
    valid `dateAppel` are dropped; `count` tells how many were stored.
    """
    try:
        count = push_contacts(current_user, payload, storage)
    except SyncError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)

    return SyncPushResponse(count=count, synced_at=synced_at())


@router.get("/export")
@limiter.limit(RATE_LIMIT_READ)
def export_contacts(
    request: Request,
    storage: Storage = Depends(get_storage),
    current_user: UserRecord = Depends(get_current_user)
):
    """Download the current user's contacts as a JSON file."""
    contacts = pull_contacts(current_user, storage)
    return JSONResponse(
        content=[ContactResponse.from_record(c).model_dump(mode="json", by_alias=True) for c in contacts],
        headers={
            "Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"
        }
    )
