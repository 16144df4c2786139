"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kalat import __version__
from kalat.api.errors import register_exception_handlers
from kalat.api.routes import router as api_router
from kalat.core.config import settings
from kalat.services.bootstrap import prepare_database

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    try:
        prepare_database(settings)
    except Exception:
        logger.exception("Failed to start API")
        raise
    yield


app = FastAPI(
    title="Kalat API",
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    """Reject oversized bodies before they are read (uploads inline media as data: URLs)."""
    length = request.headers.get("content-length", "")
    if length.isdigit() and int(length) > settings.MAX_BODY_MB * 1024 * 1024:
        return JSONResponse(
            status_code=413,
            content={"message": f"Request body must not exceed {settings.MAX_BODY_MB} MB."},
        )
    return await call_next(request)


register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Kalat API", "version": __version__}
