"""ORM model for reported client locations."""

import uuid

from sqlalchemy import Column, DateTime, Float, Integer, String, Uuid

from kalat.models.base import Base


class Location(Base):
    """A single location report. Append-only; readable by admins only."""

    __tablename__ = "locations"

    row_id = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(Uuid, nullable=False, unique=True, default=uuid.uuid4)
    username = Column(String(255), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
