"""
OrganiJob - Contact synchronization service.

Pull returns every contact of a user; push replaces the whole set with the
submitted list (last write wins, no per-record merge).
"""
import logging
import uuid
from typing import Any, List, Optional

from ..database import utcnow
from ..storage import Storage, StorageConflictError, UserRecord, ContactRecord, from_iso, to_iso

logger = logging.getLogger("organijob.sync")

MSG_BAD_FORMAT = "Format invalide: contacts attendus."
MSG_BAD_REQUEST = "Requete invalide."


class SyncError(Exception):
    """Sync failure carrying the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _text(value: Any) -> str:
    """Coerce a loosely typed JSON value to a trimmed string ("" for null/empty)."""
    return str(value or "").strip()


def sanitize_contact(raw: Any, user_id: str) -> Optional[ContactRecord]:
    """
    Turn one incoming JSON contact into a record, or None if it must be dropped.

    `nom`, `organisation` and a parseable `dateAppel` are mandatory; the
    other text fields default to "". A missing id gets a fresh UUID.
    """
    if not isinstance(raw, dict):
        return None

    name = _text(raw.get("nom"))
    organisation = _text(raw.get("organisation"))
    call_date = from_iso(_text(raw.get("dateAppel")))
    if not name or not organisation or call_date is None:
        return None

    return ContactRecord(
        id=_text(raw.get("id")) or str(uuid.uuid4()),
        user_id=user_id,
        name=name,
        organisation=organisation,
        call_date=call_date,
        expertise=_text(raw.get("expertise")),
        inclusivity=_text(raw.get("inclusivite")),
        notes=_text(raw.get("notes")),
    )


def sanitize_contacts(incoming: List[Any], user_id: str) -> List[ContactRecord]:
    contacts = []
    for raw in incoming:
        contact = sanitize_contact(raw, user_id)
        if contact is not None:
            contacts.append(contact)
    return contacts


def pull_contacts(user: UserRecord, storage: Storage) -> List[ContactRecord]:
    """All contacts owned by the user, most recent call first."""
    return storage.list_contacts(user.id)


def push_contacts(user: UserRecord, payload: Any, storage: Storage) -> int:
    """
    Replace the user's contact set with the sanitized contents of `payload`.

    Args:
        user: Authenticated owner
        payload: Decoded JSON body, expected to be {"contacts": [...]}
        storage: Storage backend

    Returns:
        Number of contacts stored

    Raises:
        SyncError: 400 if `contacts` is not a list or ids collide
    """
    incoming = payload.get("contacts") if isinstance(payload, dict) else None
    if not isinstance(incoming, list):
        raise SyncError(MSG_BAD_FORMAT, 400)

    contacts = sanitize_contacts(incoming, user.id)
    dropped = len(incoming) - len(contacts)

    ids = [c.id for c in contacts]
    if len(ids) != len(set(ids)):
        logger.info(f"Rejected push from user {user.id}: duplicate contact ids")
        raise SyncError(MSG_BAD_REQUEST, 400)

    try:
        count = storage.replace_contacts(user.id, contacts)
    except StorageConflictError:
        logger.warning(f"Storage rejected push from user {user.id}")
        raise SyncError(MSG_BAD_REQUEST, 400)

    logger.info(f"Replaced contacts of user {user.id}: {count} stored, {dropped} dropped")
    return count


def synced_at() -> str:
    return to_iso(utcnow())
