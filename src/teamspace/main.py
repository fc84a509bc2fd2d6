from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from asgi_correlation_id import CorrelationIdMiddleware, correlation_id
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import RequestResponseEndpoint

from src.teamspace.api import health
from src.teamspace.api.v1.router import api_router
from src.teamspace.core.config import Settings, get_settings
from src.teamspace.core.db import dispose_engine
from src.teamspace.core.exceptions import setup_exception_handlers
from src.teamspace.core.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from src.teamspace.core.rate_limit import limiter

logger = get_logger(__name__)

OPENAPI_TAGS = [
    {"name": "auth", "description": "Signup, login and logout"},
    {"name": "users", "description": "Current user, role changes and deactivation"},
    {"name": "businesses", "description": "Businesses, seat quotas and audit trail"},
    {"name": "invitations", "description": "Invitation lifecycle"},
    {"name": "admin-requests", "description": "Review of self-service admin requests"},
    {"name": "health", "description": "Liveness probe"},
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    settings = get_settings()
    setup_logging(settings.debug)
    logger.info("Starting up", app=settings.app_name, env=settings.app_env)

    yield

    await dispose_engine()
    logger.info("Shut down")


async def request_log_context(request: Request, call_next: RequestResponseEndpoint) -> Response:
    """Scope the structlog context of each request to its X-Request-ID."""
    clear_request_context()
    bind_request_context(correlation_id.get())
    try:
        return await call_next(request)
    finally:
        clear_request_context()


def install_middleware(app: FastAPI, settings: Settings) -> None:
    app.middleware("http")(request_log_context)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )
    # Outermost, so the log context and every error body already see the id
    app.add_middleware(CorrelationIdMiddleware)


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Multi-tenant access provisioning API",
        version="0.1.0",
        openapi_tags=OPENAPI_TAGS,
        openapi_url="/openapi.json" if settings.enable_openapi else None,
        lifespan=lifespan,
    )

    setup_exception_handlers(app)
    app.state.limiter = limiter
    app.add_exception_handler(
        RateLimitExceeded,
        _rate_limit_exceeded_handler,  # type: ignore[arg-type]
    )
    install_middleware(app, settings)

    app.include_router(health.router)
    app.include_router(api_router)
    health.expose_metrics(app)
    return app


app = create_app()
