"""
OrganiJob - Storage interface

Both persistence backends (relational database and flat JSON file) implement
`Storage`, so the auth and sync services never know which one is configured.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional
import re


class StorageError(Exception):
    """Base error raised by storage backends."""
    pass


class StorageConflictError(StorageError):
    """A write would violate a uniqueness constraint (email, contact id)."""
    pass


@dataclass
class UserRecord:
    id: str
    email: str
    password_hash: Optional[str] = None
    password_salt: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash and self.password_salt)


@dataclass
class ContactRecord:
    id: str
    user_id: str
    name: str
    organisation: str
    call_date: datetime
    expertise: str = ""
    inclusivity: str = ""
    notes: str = ""
    updated_at: Optional[datetime] = None


# -----------------------------------------------------------------------------
# Timestamp helpers
# -----------------------------------------------------------------------------

_EXTENDED_DATE = re.compile(r"\d{4}-\d{2}-\d{2}($|[T ])")


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo) and convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    """Format as `2024-03-05T10:00:00.000Z`, the format the front-end sends and expects."""
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_iso(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp, returning None when it cannot be parsed.

    Accepts a trailing `Z`, date-only values and the `datetime-local`
    format of HTML inputs. Naive values are read as UTC. Compact forms
    such as `20240305` and dates that fall outside the representable
    range once converted to UTC are rejected.
    """
    raw = (value or "").strip()
    if not _EXTENDED_DATE.match(raw):
        return None
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        return as_utc(datetime.fromisoformat(raw))
    except (ValueError, OverflowError):
        return None


# -----------------------------------------------------------------------------
# Storage interface
# -----------------------------------------------------------------------------

class Storage(ABC):
    """Persistence operations needed by authentication and sync."""

    name = "abstract"

    @abstractmethod
    def init(self) -> None:
        """Create the schema (tables or empty document) if missing."""

    # Users

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    def create_user(self, email: str, password_hash: str, password_salt: str) -> UserRecord:
        """Insert a user. Raises StorageConflictError if the email is taken."""

    @abstractmethod
    def set_password(self, user_id: str, password_hash: str, password_salt: str) -> None:
        ...

    # Sessions

    @abstractmethod
    def issue_session(self, user_id: str, token: str) -> None:
        """Delete every session of the user and store `token`, in one write."""

    @abstractmethod
    def delete_session(self, token: str) -> bool:
        ...

    @abstractmethod
    def delete_user_sessions(self, user_id: str) -> int:
        ...

    @abstractmethod
    def get_user_by_token(self, token: str) -> Optional[UserRecord]:
        ...

    # Contacts

    @abstractmethod
    def list_contacts(self, user_id: str) -> List[ContactRecord]:
        """All contacts of the user, most recent call first."""

    @abstractmethod
    def replace_contacts(self, user_id: str, contacts: List[ContactRecord]) -> int:
        """
        Atomically replace the user's whole contact set.

        Either every contact is stored or the previous set is left intact.
        Returns the number of stored contacts.
        """
