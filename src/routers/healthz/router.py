import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.config.database import async_session_manager

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthCheckResponse(BaseModel):
    status: str
    database: str
    version: str = "0.1.0"


async def check_database() -> bool:
    try:
        async with async_session_manager(auto_commit=False) as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        return False
    return True


def get_database_check():
    """Dependency returning the database probe. Override in tests."""
    return check_database


@router.get("/", response_model=HealthCheckResponse)
async def health_check(database_check=Depends(get_database_check)) -> HealthCheckResponse:
    """
    Health check endpoint to verify the API and its database are reachable.
    """
    if await database_check():
        return HealthCheckResponse(status="healthy", database="ok")
    return HealthCheckResponse(status="degraded", database="unreachable")
