"""
Health Check Routes - System health and monitoring endpoints.

/health only proves the process answers; /health/ready also checks the
database connection.
"""
from datetime import datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from symposium import __version__
from symposium.core.logging_config import get_logger
from symposium.database.connection import get_database
from symposium.models.chat import HealthResponse

logger = get_logger(__name__)

router = APIRouter(
    prefix="/health",
    tags=["Health"],
)


@router.get(
    "",
    response_model=HealthResponse,
    summary="Health check endpoint",
)
def health_check() -> HealthResponse:
    """Basic liveness check. Does not touch the database or the LLM gateway."""
    logger.debug("Health check requested")
    return HealthResponse(status="healthy", version=__version__, timestamp=datetime.utcnow())


@router.get(
    "/ready",
    response_model=HealthResponse,
    summary="Readiness check endpoint",
    responses={503: {"model": HealthResponse, "description": "Database unavailable"}},
)
def readiness_check():
    """Returns 503 while the database is unreachable."""
    logger.debug("Readiness check requested")

    if get_database().check_connection():
        return HealthResponse(status="ready", version=__version__, database="ok")

    response = HealthResponse(status="not_ready", version=__version__, database="unavailable")
    return JSONResponse(status_code=503, content=response.model_dump(mode="json"))
