"""Liveness probe and the Prometheus scrape endpoint."""

import secrets
import time
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from src.teamspace.core.config import get_settings
from src.teamspace.core.db import get_engine
from src.teamspace.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])

_metrics_key_header = APIKeyHeader(name="X-Metrics-Key", auto_error=False)


@router.get("/health")
async def health() -> JSONResponse:
    """Report whether the database answers. 503 when it does not."""
    database = "healthy"
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Health check failed", error_type=type(e).__name__)
        database = "unhealthy"

    healthy = database == "healthy"
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "database": database,
            "timestamp": time.time(),
        },
    )


async def require_metrics_key(
    api_key: Annotated[str | None, Depends(_metrics_key_header)],
) -> None:
    expected = get_settings().metrics_api_key
    if expected is None:
        return
    if api_key is None or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing metrics API key",
        )


def expose_metrics(app: FastAPI) -> None:
    """Instrument every route and serve /metrics, key-protected when configured."""
    Instrumentator().instrument(app).expose(
        app,
        endpoint="/metrics",
        dependencies=[Depends(require_metrics_key)],
    )
