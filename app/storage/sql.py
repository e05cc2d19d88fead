"""
OrganiJob - Relational storage backend

SQLAlchemy implementation of `Storage` for SQLite and PostgreSQL.
Every write runs in a single transaction; transient errors are retried.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from ..database import (
    create_app_engine, create_session_factory, init_db,
    resilient_session, with_retry, utcnow,
)
from ..models import Contact
from ..auth.models import User, UserSession
from .base import Storage, StorageConflictError, UserRecord, ContactRecord, as_utc

logger = logging.getLogger("organijob.storage")


def _user_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        password_salt=user.password_salt,
        created_at=user.created_at,
        updated_at=user.updated_at,
    )


def _contact_record(contact: Contact) -> ContactRecord:
    return ContactRecord(
        id=contact.id,
        user_id=contact.user_id,
        name=contact.name,
        organisation=contact.organisation,
        call_date=as_utc(contact.call_date),
        expertise=contact.expertise or "",
        inclusivity=contact.inclusivity or "",
        notes=contact.notes or "",
        updated_at=as_utc(contact.updated_at) if contact.updated_at else None,
    )


class SqlStorage(Storage):
    """Storage backed by a SQLAlchemy engine."""

    name = "database"

    def __init__(self, database_url: str = None):
        self.engine = create_app_engine(database_url)
        self.SessionLocal = create_session_factory(self.engine)

    def init(self) -> None:
        init_db(self.engine)

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @with_retry
    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with resilient_session(self.SessionLocal) as db:
            user = db.query(User).filter(User.email == email).first()
            return _user_record(user) if user else None

    def create_user(self, email: str, password_hash: str, password_salt: str) -> UserRecord:
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=password_hash,
            password_salt=password_salt,
        )
        try:
            with resilient_session(self.SessionLocal) as db:
                db.add(user)
                db.flush()
                record = _user_record(user)
        except IntegrityError as exc:
            raise StorageConflictError(f"Email already registered: {email}") from exc

        logger.info(f"Created user {record.id}")
        return record

    @with_retry
    def set_password(self, user_id: str, password_hash: str, password_salt: str) -> None:
        with resilient_session(self.SessionLocal) as db:
            db.query(User).filter(User.id == user_id).update({
                "password_hash": password_hash,
                "password_salt": password_salt,
                "updated_at": utcnow(),
            })

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    @with_retry
    def issue_session(self, user_id: str, token: str) -> None:
        with resilient_session(self.SessionLocal) as db:
            db.query(UserSession).filter(UserSession.user_id == user_id).delete()
            db.add(UserSession(token=token, user_id=user_id))

    @with_retry
    def delete_session(self, token: str) -> bool:
        with resilient_session(self.SessionLocal) as db:
            deleted = db.query(UserSession).filter(UserSession.token == token).delete()
        return deleted > 0

    @with_retry
    def delete_user_sessions(self, user_id: str) -> int:
        with resilient_session(self.SessionLocal) as db:
            return db.query(UserSession).filter(UserSession.user_id == user_id).delete()

    @with_retry
    def get_user_by_token(self, token: str) -> Optional[UserRecord]:
        with resilient_session(self.SessionLocal) as db:
            user = (
                db.query(User)
                .join(UserSession, UserSession.user_id == User.id)
                .filter(UserSession.token == token)
                .first()
            )
            return _user_record(user) if user else None

    # -------------------------------------------------------------------------
    # Contacts
    # -------------------------------------------------------------------------

    @with_retry
    def list_contacts(self, user_id: str) -> List[ContactRecord]:
        with resilient_session(self.SessionLocal) as db:
            contacts = (
                db.query(Contact)
                .filter(Contact.user_id == user_id)
                .order_by(Contact.call_date.desc())
                .all()
            )
            return [_contact_record(c) for c in contacts]

    @with_retry
    def replace_contacts(self, user_id: str, contacts: List[ContactRecord]) -> int:
        now = utcnow()
        try:
            with resilient_session(self.SessionLocal) as db:
                db.query(Contact).filter(Contact.user_id == user_id).delete()
                db.add_all([
                    Contact(
                        id=c.id,
                        user_id=user_id,
                        name=c.name,
                        organisation=c.organisation,
                        call_date=as_utc(c.call_date),
                        expertise=c.expertise,
                        inclusivity=c.inclusivity,
                        notes=c.notes,
                        updated_at=now,
                    )
                    for c in contacts
                ])
        except IntegrityError as exc:
            raise StorageConflictError("Duplicate contact id in sync payload") from exc

        return len(contacts)
