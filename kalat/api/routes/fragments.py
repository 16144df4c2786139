"""Fragment routes: list (any session) and create (admin only)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kalat.api.routes.auth import get_current_claims, require_admin
from kalat.core.database import get_db
from kalat.core.errors import TransientError
from kalat.schemas.auth import Claims
from kalat.schemas.fragment import FragmentCreate, FragmentOut
from kalat.services.fragments import FragmentRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[FragmentOut])
def list_fragments(
    _claims: Annotated[Claims, Depends(get_current_claims)],
    db: Annotated[Session, Depends(get_db)],
) -> list[FragmentOut]:
    """Return every fragment, newest first."""
    try:
        rows = FragmentRepository(db).list()
    except SQLAlchemyError as e:
        logger.exception("Failed to fetch fragments")
        raise TransientError("Failed to fetch fragments") from e
    return [FragmentOut.model_validate(row) for row in rows]


@router.post("", response_model=FragmentOut, status_code=status.HTTP_201_CREATED)
def create_fragment(
    body: FragmentCreate,
    admin: Annotated[Claims, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> FragmentOut:
    """
    Store a new fragment (admin only).

    - **type**: one of voice, photo, quote, fact
    - **label**, **source**: required, non-empty. source is a URL or a data: URL
    - **detail**: optional note
    """
    repo = FragmentRepository(db)
    try:
        row = repo.append(body.type, body.label, body.source, body.detail)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Failed to create fragment for %r", admin.username)
        raise TransientError("Failed to create fragment") from e
    return FragmentOut.model_validate(row)
