"""Pydantic request/response schemas."""

from kalat.schemas.auth import Claims, LoginRequest, LoginResponse, Role
from kalat.schemas.fragment import (
    FRAGMENT_TYPES,
    FragmentCreate,
    FragmentOut,
    FragmentType,
)
from kalat.schemas.health import HealthResponse
from kalat.schemas.location import LocationCreate, LocationOut

__all__ = [
    "Claims",
    "FRAGMENT_TYPES",
    "FragmentCreate",
    "FragmentOut",
    "FragmentType",
    "HealthResponse",
    "LocationCreate",
    "LocationOut",
    "LoginRequest",
    "LoginResponse",
    "Role",
]
