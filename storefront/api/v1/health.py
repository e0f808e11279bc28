"""Health check endpoint with database connectivity and session count."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.config import settings
from storefront.core.database import check_db_connected, get_db
from storefront.schemas.health import HealthResponse
from storefront.services.sessions import SessionRegistry, get_session_registry

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    db: Annotated[Session, Depends(get_db)],
    registry: Annotated[SessionRegistry, Depends(get_session_registry)],
) -> HealthResponse:
    """
    Return service health status, database connectivity and live session count.
    Used by load balancers and monitoring; requires no authentication.
    """
    db_status = "connected" if check_db_connected(db) else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        database=db_status,
        active_sessions=len(registry),
    )
