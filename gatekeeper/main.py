"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from gatekeeper.api import router as api_router
from gatekeeper.api.errors import register_exception_handlers
from gatekeeper.core.config import settings
from gatekeeper.core.logging import setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger("gatekeeper.access")

app = FastAPI(
    title="Gatekeeper API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """One access line per request: method, path, status, duration."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        # Rendered as 500 by the outermost error handler, which then re-raises.
        _log_access(request, 500, start)
        raise
    _log_access(request, response.status_code, start)
    return response


def _log_access(request: Request, status_code: int, start: float) -> None:
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %s %.1fms",
        request.method,
        request.url.path,
        status_code,
        duration_ms,
    )


register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Gatekeeper API"}
