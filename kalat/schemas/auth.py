"""Request/response schemas for login and session claims."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["admin", "user"]


class LoginRequest(BaseModel):
    """Credentials for login. Presence is checked by the route (400, not 422)."""

    username: str | None = Field(default=None, max_length=255, description="Username")
    password: str | None = Field(default=None, max_length=128, description="Password")


class LoginResponse(BaseModel):
    """Session token returned after successful login, plus who it belongs to."""

    token: str = Field(..., description="Signed session token; send as 'Bearer <token>'")
    role: Role
    username: str


class Claims(BaseModel):
    """Verified contents of a session token."""

    subject_id: str
    username: str
    role: Role
    issued_at: datetime
    expires_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
