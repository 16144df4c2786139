"""Access gate: bearer-token authentication and admin authorization.

Framework-free so it can be tested directly. The FastAPI dependencies in
kalat.api.routes.auth run authenticate before authorize_admin, so an
unauthenticated write always gets 401 and never 403.
"""

from kalat.core.errors import Forbidden, InvalidToken, Unauthorized
from kalat.core.security import verify_token
from kalat.schemas.auth import Claims

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an 'Authorization: Bearer <token>' header value."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME:
        return None
    return token.strip() or None


def authenticate_token(token: str | None, *, secret: str | None = None) -> Claims:
    """Verify a raw session token. Raises Unauthorized (401) if absent or rejected."""
    if not token:
        raise Unauthorized()
    try:
        return verify_token(token, secret=secret)
    except InvalidToken as e:
        raise Unauthorized(e.message) from e


def authenticate(authorization: str | None, *, secret: str | None = None) -> Claims:
    """Verify the bearer token in an Authorization header value."""
    return authenticate_token(extract_bearer_token(authorization), secret=secret)


def authorize_admin(claims: Claims) -> None:
    """Raises Forbidden (403) unless the session belongs to an admin."""
    if claims.role != "admin":
        raise Forbidden()
