"""Liveness and readiness probes."""

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

# NULL until the migrations have created the table
_TABLE_EXISTS_SQL = text("SELECT to_regclass('feira_livre') IS NOT NULL")


class HealthResponse(BaseModel):
    """Probe result; database fields are only filled by the readiness probe."""

    status: Literal["ok", "unhealthy"]
    database: Literal["connected", "disconnected"] | None = None
    schema_ready: bool | None = None


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check() -> HealthResponse:
    """Liveness probe; never touches the database."""
    return HealthResponse(status="ok")


@router.get("/health/ready", response_model=HealthResponse)
async def readiness_check(db: AsyncSession = Depends(get_db)) -> HealthResponse:
    """Ready once the database answers and the street market table exists."""
    try:
        table_exists = bool(await db.scalar(_TABLE_EXISTS_SQL))
    except Exception as e:
        logger.error(
            "health.database_disconnected",
            error=str(e),
            error_type=type(e).__name__,
        )
        return HealthResponse(status="unhealthy", database="disconnected", schema_ready=False)

    if not table_exists:
        logger.warning("health.schema_missing", table="feira_livre")

    return HealthResponse(
        status="ok" if table_exists else "unhealthy",
        database="connected",
        schema_ready=table_exists,
    )
