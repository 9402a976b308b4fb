"""
VideoAPI - Health Check Router
"""
import logging

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import literal, select

from app.config import get_settings
from app.database import engine

logger = logging.getLogger(__name__)
router = APIRouter(tags=["Health"])
settings = get_settings()


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    database: str
    app_name: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint.
    Verifies the database answers a trivial query.
    """
    try:
        async with engine.connect() as conn:
            await conn.scalar(select(literal(1)))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        body = HealthResponse(status="unhealthy", database="unreachable", app_name=settings.app_name)
        return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content=body.model_dump())

    return HealthResponse(status="healthy", database="connected", app_name=settings.app_name)
