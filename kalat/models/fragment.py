"""ORM model for archive fragments (voice, photo, quote, fact)."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, Text, Uuid

from kalat.models.base import Base


class Fragment(Base):
    """
    One archived fragment. Immutable once stored.

    row_id is the insertion sequence and breaks created_at ties in listings;
    id is the public identifier.
    """

    __tablename__ = "fragments"
    __table_args__ = (
        CheckConstraint("type in ('voice', 'photo', 'quote', 'fact')", name="type"),
    )

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid, nullable=False, unique=True, default=uuid.uuid4)
    type = Column(String(16), nullable=False)
    label = Column(Text, nullable=False)
    source = Column(Text, nullable=False)
    detail = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
