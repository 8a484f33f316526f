"""Payout Operations Console API.

This service lets operations staff review scheduled creator payouts, inspect
fraud signals and record approve/reject/hold decisions. Data is served from an
in-memory record store seeded when the application is created.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from starlette.exceptions import HTTPException as StarletteHTTPException

from payout_console.api.middleware import RequestLoggingMiddleware
from payout_console.api.routes import api_router
from payout_console.core.config import AppEnvironment, Settings, get_settings
from payout_console.core.errors import PayoutConsoleError, ValidationError, get_status_code
from payout_console.core.logging import setup_logging
from payout_console.persistence.base import RecordStore
from payout_console.persistence.memory_store import InMemoryRecordStore
from payout_console.persistence.seed import build_seed_store
from payout_console.schemas.envelope import error_response

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan context manager."""
    settings: Settings = app.state.settings

    setup_logging(settings)

    logger.info(
        "Starting Payout Operations Console",
        extra={
            "app": settings.app.name,
            "env": settings.app.env,
            "version": settings.app.version,
            "records": app.state.store.counts(),
        },
    )

    yield

    logger.info("Payout Operations Console stopped")


def build_store(settings: Settings) -> RecordStore:
    """Build the record store for a new application instance."""
    if settings.store.seed_on_startup:
        return build_seed_store()
    return InMemoryRecordStore()


def envelope(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, details).model_dump(mode="json", exclude_none=True),
    )


def create_app(store: RecordStore | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Payout Operations Console API",
        description=(
            "API for reviewing scheduled creator payouts, inspecting fraud signals "
            "and recording approve/reject/hold decisions."
        ),
        version=settings.app.version,
        lifespan=lifespan,
        docs_url="/docs" if settings.app.env != AppEnvironment.PROD else None,
        redoc_url="/redoc" if settings.app.env != AppEnvironment.PROD else None,
        openapi_url="/openapi.json" if settings.app.env != AppEnvironment.PROD else None,
    )

    app.state.settings = settings
    app.state.store = store if store is not None else build_store(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_allowed_origins,
        allow_credentials=settings.security.cors_allow_credentials,
        allow_methods=settings.security.cors_allow_methods,
        allow_headers=settings.security.cors_allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router, prefix=settings.app.api_prefix)

    setup_telemetry(app, settings)

    @app.exception_handler(PayoutConsoleError)
    async def domain_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: PayoutConsoleError
    ) -> JSONResponse:
        """Handle domain-specific errors and return the error envelope."""
        status_code = get_status_code(exc)
        if status_code >= 500:
            logger.error(
                "Domain error",
                extra={"path": request.url.path, "code": exc.code, "error": exc.message},
            )
            return envelope(status_code, "INTERNAL_ERROR", "Internal server error")
        return envelope(status_code, exc.code, exc.message, exc.details)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed bodies and parameters are client errors, reported as 400."""
        return envelope(
            400,
            ValidationError.code,
            "Request validation failed",
            {"errors": [{"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()]},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        """Wrap framework HTTP errors (unknown routes, bad methods) in the envelope."""
        code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        return envelope(exc.status_code, code, str(exc.detail))

    @app.exception_handler(Exception)
    async def global_exception_handler(  # type: ignore[reportUnusedFunction]
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions and return 500 error responses."""
        logger.exception(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
        )
        return envelope(500, "INTERNAL_ERROR", "Internal server error")

    return app


def setup_telemetry(app: FastAPI, settings: Settings) -> None:
    """Setup OpenTelemetry instrumentation."""
    if not settings.observability.otlp_endpoint:
        return

    resource = Resource(
        attributes={
            SERVICE_NAME: settings.observability.service_name,
        }
    )

    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(
        endpoint=settings.observability.otlp_endpoint,
        insecure=settings.observability.otlp_insecure,
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)


def run() -> None:
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    # The store lives in process memory, so every worker would hold its own copy
    uvicorn.run(
        "payout_console.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.app.env == AppEnvironment.LOCAL,
        workers=1,
        log_level=settings.app.log_level.lower(),
    )


if __name__ == "__main__":
    run()
