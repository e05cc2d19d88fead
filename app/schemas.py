"""
OrganiJob - Pydantic schemas for request/response validation.

Contact fields keep the front-end's JSON keys (`nom`, `dateAppel`, ...)
as aliases of English attribute names.
"""
from pydantic import BaseModel, Field, field_serializer
from datetime import datetime
from typing import List, Optional

from .auth.schemas import UserResponse
from .storage import ContactRecord, to_iso


# --- Contact Schemas ---

class ContactResponse(BaseModel):
    id: str
    user_id: str = Field(..., alias="userId")
    name: str = Field(..., alias="nom")
    organisation: str
    call_date: datetime = Field(..., alias="dateAppel")
    expertise: str = ""
    inclusivity: str = Field("", alias="inclusivite")
    notes: str = ""
    updated_at: Optional[datetime] = Field(None, alias="updatedAt")

    class Config:
        populate_by_name = True

    @field_serializer("call_date", "updated_at")
    def serialize_timestamp(self, value: Optional[datetime]) -> Optional[str]:
        return to_iso(value)

    @classmethod
    def from_record(cls, record: ContactRecord) -> "ContactResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            name=record.name,
            organisation=record.organisation,
            call_date=record.call_date,
            expertise=record.expertise,
            inclusivity=record.inclusivity,
            notes=record.notes,
            updated_at=record.updated_at,
        )


# --- Sync Schemas ---

class SyncPullResponse(BaseModel):
    user: UserResponse
    contacts: List[ContactResponse]
    synced_at: str = Field(..., alias="syncedAt")

    class Config:
        populate_by_name = True


class SyncPushResponse(BaseModel):
    ok: bool = True
    count: int
    synced_at: str = Field(..., alias="syncedAt")

    class Config:
        populate_by_name = True


# --- Tools Schemas ---

class MessageRequest(BaseModel):
    objectif: Optional[str] = None
    domaine: Optional[str] = ""
    contexte: Optional[str] = ""


class MessageResponse(BaseModel):
    objectif: Optional[str] = None
    message: str


class Formation(BaseModel):
    titre: str
    ville: str
    duree: str
    niveau: str


class SupportService(BaseModel):
    nom: str
    ville: str
    type: str
    contact: str
