"""Pydantic schema for the health check response."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok", "degraded"] = Field(
        default="ok", description="'degraded' when the database is unreachable"
    )
    environment: str = Field(description="Current app environment (dev or prod)")
    database: Literal["connected", "disconnected"]
    version: str
