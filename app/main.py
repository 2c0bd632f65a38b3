"""
Application entry point for the Quotebook API.
Builds the FastAPI app and runs the notification worker and overdue sweeper
for as long as the app is up.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from typing import Dict, Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from app.config import settings
from app.application.dto.base_dto import HealthCheckResponseDTO
from app.infrastructure.db.database import init_db
from app.infrastructure.events.notification_queue import get_notification_queue
from app.infrastructure.scheduling.overdue_sweeper import create_overdue_sweeper
from app.infrastructure.web.middleware.error_handler import ErrorHandlerMiddleware
from app.infrastructure.web.routers import clients, invoices

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def init_sentry() -> None:
    """Report errors to Sentry outside development when a DSN is configured."""
    if not settings.sentry_dsn or settings.is_development:
        return

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        traces_sample_rate=settings.sentry_traces_sample_rate,
        environment=settings.environment,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            SqlalchemyIntegration(),
        ],
    )
    logger.info(f"Sentry enabled for {settings.environment}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the background workers on startup and drain them on shutdown."""
    logger.info(f"Starting {settings.api_title} v{settings.api_version} ({settings.environment})")
    init_sentry()

    # SQLite deployments have no migration step
    if settings.is_sqlite:
        init_db()

    notifications = get_notification_queue()
    await notifications.start()

    sweeper = create_overdue_sweeper()
    if settings.overdue_sweep_enabled:
        await sweeper.start()

    yield

    logger.info("Stopping background workers")
    await sweeper.stop()
    await notifications.stop()


def create_application() -> FastAPI:
    """Assemble middleware, routers and error handlers."""
    docs_enabled = settings.debug
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if docs_enabled else None,
        redoc_url=None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if docs_enabled else None,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )
    # Last added runs first, so unexpected errors from every layer are caught
    app.add_middleware(ErrorHandlerMiddleware)

    for module, path, tag in (
        (clients, "clients", "Clients"),
        (invoices, "invoices", "Invoices"),
    ):
        app.include_router(module.router, prefix=f"{settings.api_prefix}/{path}", tags=[tag])

    @app.get("/")
    async def root() -> Dict[str, Any]:
        return {
            "service": settings.api_title,
            "version": settings.api_version,
            "api": settings.api_prefix,
        }

    @app.get(f"{settings.api_prefix}/health", response_model=HealthCheckResponseDTO)
    async def health_check():
        """Liveness probe."""
        return HealthCheckResponseDTO(
            status="healthy",
            version=settings.api_version,
            environment=settings.environment
        )

    # Malformed or missing request fields are client errors
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Unknown paths and missing resources share one body shape."""
        detail = getattr(exc, "detail", None)
        if not detail or detail == "Not Found":
            detail = f"No route for {request.method} {request.url.path}"
        return JSONResponse(
            status_code=404,
            content={"error": "Not Found", "message": detail, "path": request.url.path}
        )

    return app


app = create_application()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level="debug" if settings.debug else "info",
    )
