"""Request/response schemas for location reports."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LocationCreate(BaseModel):
    """Coordinates captured by a client after the user granted permission."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class LocationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    latitude: float
    longitude: float
    created_at: datetime
