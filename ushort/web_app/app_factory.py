"""FastAPI application factory."""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import api_router
from .web import web_router
from .middleware.headers import ForwardedHeadersMiddleware
from .middleware.logging import LoggingMiddleware
from ..lib.common.logging_config import get_logger

logger = get_logger("web")


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as plain 400s."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning(f"Validation errors in request: {request.method} {request.url.path}: {message}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request", "detail": message},
    )


def create_app(
    store_instance,
    service_instance,
    config,
    sweeper_instance=None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        store_instance: Mapping store instance
        service_instance: MappingLifecycle instance
        config: Configuration instance
        sweeper_instance: Optional ExpirySweeper

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="ushort",
        description="URL shortening service with access tracking and expiry",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Store instances in app state for access in routes
    app.state.db = store_instance
    app.state.service = service_instance
    app.state.sweeper = sweeper_instance
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["Authorization", "Content-Type"],
    )

    # Last added runs first: forwarded headers are parsed before access logging
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ForwardedHeadersMiddleware)

    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
