"""
OrganiJob - Job-search tools API.

Message template generator and canned directories of trainings and
support services. No authentication required.
"""
from fastapi import APIRouter, Query, Request
from typing import List, Optional

from ..schemas import MessageRequest, MessageResponse, Formation, SupportService
from ..services.message_generator import generate_message, get_objectives
from ..services.resources import search_formations, search_services
from ..rate_limit import limiter, RATE_LIMIT_READ

router = APIRouter()


@router.get("/objectives", response_model=List[str])
def list_objectives():
    """Goals accepted by the message generator."""
    return get_objectives()


@router.post("/message", response_model=MessageResponse)
@limiter.limit(RATE_LIMIT_READ)
def create_message(request: Request, data: MessageRequest):
    """Generate a message or action plan for the chosen goal."""
    return MessageResponse(
        objectif=data.objectif,
        message=generate_message(data.objectif, data.domaine, data.contexte),
    )


@router.get("/formations", response_model=List[Formation])
def list_formations(
    mot_cle: Optional[str] = Query(None, alias="motCle", max_length=200),
    ville: Optional[str] = Query(None, max_length=200),
):
    """Trainings filtered by title keyword and city."""
    return search_formations(mot_cle, ville)


@router.get("/services", response_model=List[SupportService])
def list_services(ville: Optional[str] = Query(None, max_length=200)):
    """Support services filtered by city."""
    return search_services(ville)
