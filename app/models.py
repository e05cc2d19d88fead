"""
OrganiJob - SQLAlchemy ORM models

Networking contacts synchronized between a user's devices.
"""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Index
from sqlalchemy.orm import relationship

from .database import Base, utcnow


class Contact(Base):
    __tablename__ = "contacts"

    # Ids are generated on the client, so they are only unique per user
    id = Column(String, primary_key=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column("nom", String, nullable=False)
    organisation = Column(String, nullable=False)
    call_date = Column("date_appel", DateTime(timezone=True), nullable=False)
    expertise = Column(Text)
    inclusivity = Column("inclusivite", Text)
    notes = Column(Text)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="contacts")

    __table_args__ = (
        Index("idx_contacts_user_id", "user_id"),
    )
