"""Request/response schemas for archive fragments."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

FragmentType = Literal["voice", "photo", "quote", "fact"]
FRAGMENT_TYPES: tuple[str, ...] = ("voice", "photo", "quote", "fact")


class FragmentCreate(BaseModel):
    """
    Body of POST /fragments. Fields are loosely typed here so the repository
    reports missing fields and unsupported types with its own messages.
    """

    type: str | None = None
    label: str | None = None
    source: str | None = None
    detail: str | None = None


class FragmentOut(BaseModel):
    """A stored fragment as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    type: FragmentType
    label: str
    source: str = Field(..., description="URI or inline data: payload")
    detail: str | None = None
    created_at: datetime
