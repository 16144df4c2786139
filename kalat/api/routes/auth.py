"""Login route and auth dependencies (get_current_claims, require_admin)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from kalat.core.access import authenticate_token, authorize_admin
from kalat.core.database import get_db
from kalat.core.errors import MissingField, TransientError
from kalat.core.security import issue_token
from kalat.schemas.auth import Claims, LoginRequest, LoginResponse
from kalat.services.credentials import CredentialStore

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("", response_model=LoginResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a session token valid for 12 hours.
    Include the token in the Authorization header as: Bearer <token>
    """
    if not body.username or not body.password:
        raise MissingField("username", "password")

    try:
        account = CredentialStore(db).verify(body.username, body.password)
    except SQLAlchemyError as e:
        logger.exception("Login failed for %r", body.username)
        raise TransientError("Login failed") from e

    token = issue_token(account)
    logger.info("Issued session for %r (role=%s)", account.username, account.role)
    return LoginResponse(token=token, role=account.role, username=account.username)


def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Claims:
    """Dependency: require a valid Bearer token. Raises 401 if missing, invalid or expired."""
    token = credentials.credentials if credentials is not None else None
    return authenticate_token(token)


def require_admin(
    claims: Annotated[Claims, Depends(get_current_claims)],
) -> Claims:
    """Dependency: require an authenticated admin session. Raises 403 for role 'user'."""
    authorize_admin(claims)
    return claims
