"""
OrganiJob - Flat-file storage backend

Keeps users, sessions and contacts in a single JSON document:

    {"users": [...], "sessions": [...], "contacts": [...]}

Writes are serialized by a lock and land through a temp file that is
atomically renamed over the document, so a failed write leaves the previous
state intact.
"""
import json
import logging
import os
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, List, Optional

from ..database import utcnow
from .base import (
    Storage, StorageConflictError, UserRecord, ContactRecord, to_iso, from_iso,
)

logger = logging.getLogger("organijob.storage")


def _empty_document() -> Dict[str, list]:
    return {"users": [], "sessions": [], "contacts": []}


def _user_record(row: dict) -> UserRecord:
    return UserRecord(
        id=row["id"],
        email=row["email"],
        password_hash=row.get("passwordHash"),
        password_salt=row.get("passwordSalt"),
        created_at=from_iso(row.get("createdAt")),
        updated_at=from_iso(row.get("updatedAt")),
    )


def _contact_record(row: dict) -> ContactRecord:
    return ContactRecord(
        id=row["id"],
        user_id=row["userId"],
        name=row["nom"],
        organisation=row["organisation"],
        call_date=from_iso(row["dateAppel"]),
        expertise=row.get("expertise", ""),
        inclusivity=row.get("inclusivite", ""),
        notes=row.get("notes", ""),
        updated_at=from_iso(row.get("updatedAt")),
    )


class JsonFileStorage(Storage):
    """Storage backed by one JSON file on local disk."""

    name = "file"

    def __init__(self, path: str):
        self.path = Path(path)
        self._lock = threading.Lock()

    def init(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if not self.path.exists():
                self._write(_empty_document())
                logger.info(f"Created data file {self.path}")

    # -------------------------------------------------------------------------
    # Document I/O
    # -------------------------------------------------------------------------

    def _read(self) -> Dict[str, list]:
        if not self.path.exists():
            return _empty_document()
        with self.path.open("r", encoding="utf-8") as f:
            document = json.load(f)
        for key, value in _empty_document().items():
            document.setdefault(key, value)
        return document

    def _write(self, document: Dict[str, list]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(document, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, self.path)

    @contextmanager
    def _transaction(self):
        """Yield the document for mutation and persist it if no error was raised."""
        with self._lock:
            document = self._read()
            yield document
            self._write(document)

    def _snapshot(self) -> Dict[str, list]:
        with self._lock:
            return self._read()

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        for row in self._snapshot()["users"]:
            if row["email"] == email:
                return _user_record(row)
        return None

    def create_user(self, email: str, password_hash: str, password_salt: str) -> UserRecord:
        with self._transaction() as document:
            if any(row["email"] == email for row in document["users"]):
                raise StorageConflictError(f"Email already registered: {email}")
            row = {
                "id": str(uuid.uuid4()),
                "email": email,
                "passwordHash": password_hash,
                "passwordSalt": password_salt,
                "createdAt": to_iso(utcnow()),
                "updatedAt": None,
            }
            document["users"].append(row)

        logger.info(f"Created user {row['id']}")
        return _user_record(row)

    def set_password(self, user_id: str, password_hash: str, password_salt: str) -> None:
        with self._transaction() as document:
            for row in document["users"]:
                if row["id"] == user_id:
                    row["passwordHash"] = password_hash
                    row["passwordSalt"] = password_salt
                    row["updatedAt"] = to_iso(utcnow())

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def issue_session(self, user_id: str, token: str) -> None:
        with self._transaction() as document:
            sessions = [s for s in document["sessions"] if s["userId"] != user_id]
            sessions.append({"token": token, "userId": user_id, "createdAt": to_iso(utcnow())})
            document["sessions"] = sessions

    def delete_session(self, token: str) -> bool:
        with self._transaction() as document:
            before = len(document["sessions"])
            document["sessions"] = [s for s in document["sessions"] if s["token"] != token]
            return len(document["sessions"]) < before

    def delete_user_sessions(self, user_id: str) -> int:
        with self._transaction() as document:
            before = len(document["sessions"])
            document["sessions"] = [s for s in document["sessions"] if s["userId"] != user_id]
            return before - len(document["sessions"])

    def get_user_by_token(self, token: str) -> Optional[UserRecord]:
        document = self._snapshot()
        user_id = next((s["userId"] for s in document["sessions"] if s["token"] == token), None)
        if user_id is None:
            return None
        for row in document["users"]:
            if row["id"] == user_id:
                return _user_record(row)
        # Session left behind by a removed user
        return None

    # -------------------------------------------------------------------------
    # Contacts
    # -------------------------------------------------------------------------

    def list_contacts(self, user_id: str) -> List[ContactRecord]:
        contacts = [
            _contact_record(row)
            for row in self._snapshot()["contacts"]
            if row["userId"] == user_id
        ]
        contacts.sort(key=lambda c: c.call_date, reverse=True)
        return contacts

    def replace_contacts(self, user_id: str, contacts: List[ContactRecord]) -> int:
        ids = [c.id for c in contacts]
        if len(ids) != len(set(ids)):
            raise StorageConflictError("Duplicate contact id in sync payload")

        now = to_iso(utcnow())
        with self._transaction() as document:
            kept = [row for row in document["contacts"] if row["userId"] != user_id]
            kept.extend(
                {
                    "id": c.id,
                    "userId": user_id,
                    "nom": c.name,
                    "organisation": c.organisation,
                    "dateAppel": to_iso(c.call_date),
                    "expertise": c.expertise,
                    "inclusivite": c.inclusivity,
                    "notes": c.notes,
                    "updatedAt": now,
                }
                for c in contacts
            )
            document["contacts"] = kept

        return len(contacts)
