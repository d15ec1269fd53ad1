"""Health check endpoint with database connectivity check."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from tracker.api.deps import DbSession
from tracker.core.config import settings
from tracker.core.database import check_db_connected
from tracker.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def get_health(db: DbSession):
    """
    Return service health status and database connectivity.
    Responds 500 when the database cannot be reached.
    """
    if check_db_connected(db):
        return HealthResponse(status="ok", environment=settings.APP_ENV, database="connected")
    body = HealthResponse(
        status="error",
        environment=settings.APP_ENV,
        database="disconnected",
        message="Database connection failed",
    )
    return JSONResponse(status_code=500, content=body.model_dump())
