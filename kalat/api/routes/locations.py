"""Location routes: report (any session) and log listing (admin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kalat.api.routes.auth import get_current_claims, require_admin
from kalat.core.database import get_db
from kalat.core.errors import TransientError
from kalat.schemas.auth import Claims
from kalat.schemas.location import LocationCreate, LocationOut
from kalat.services.locations import LocationLog

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=LocationOut, status_code=status.HTTP_201_CREATED)
def report_location(
    body: LocationCreate,
    claims: Annotated[Claims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> LocationOut:
    """Record the caller's coordinates under their username."""
    try:
        entry = LocationLog(db).record(claims.username, body.latitude, body.longitude)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to save location for %r", claims.username)
        raise TransientError("Failed to save location") from e
    return LocationOut.model_validate(entry)


@router.get("", response_model=list[LocationOut])
def list_locations(
    _admin: Annotated[Claims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[LocationOut]:
    """Return the location log, newest first (admin only)."""
    try:
        rows = LocationLog(db).list()
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch locations")
        raise TransientError("Failed to fetch locations") from e
    return [LocationOut.model_validate(row) for row in rows]
