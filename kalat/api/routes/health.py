"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from kalat import __version__
from kalat.core.config import settings
from kalat.core.database import check_db_connected, get_db
from kalat.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: Session = Depends(get_db)) -> HealthResponse:
    """Service health for load balancers; no authentication required."""
    connected = check_db_connected(db)
    return HealthResponse(
        status="ok" if connected else "degraded",
        environment=settings.APP_ENV,
        database="connected" if connected else "disconnected",
        version=__version__,
    )
