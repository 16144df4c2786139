"""Client-side data shapes returned by the archive API."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from kalat.seeds import SEED_FRAGMENTS


class SessionState(BaseModel):
    """What the client persists after login: the token plus who it belongs to."""

    token: str
    role: Literal["admin", "user"]
    username: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class FragmentItem(BaseModel):
    id: str
    type: Literal["voice", "photo", "quote", "fact"]
    label: str
    source: str
    detail: str | None = None
    created_at: datetime | None = None
    # Set on items this client uploaded during the current session
    uploaded: bool = Field(default=False, exclude=True)


class LocationEntry(BaseModel):
    id: str
    username: str
    latitude: float
    longitude: float
    created_at: datetime

    @property
    def map_url(self) -> str:
        return f"https://www.google.com/maps?q={self.latitude},{self.longitude}"


class Coordinates(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


FALLBACK_FRAGMENTS: tuple[FragmentItem, ...] = tuple(
    FragmentItem(
        id=seed.fallback_id,
        type=seed.type,
        label=seed.label,
        source=seed.source,
        detail=seed.detail,
    )
    for seed in SEED_FRAGMENTS
)
