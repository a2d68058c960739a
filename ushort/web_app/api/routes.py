"""API routes implementation."""

import logging

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse
from datetime import datetime, timezone

from .schemas import (
    ShortenRequest,
    ShortenResponse,
    URLInfoResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from ..middleware.headers import forwarded_for, client_ip_for
from ...lib.errors import GenerationExhausted, InvalidInput
from ...lib.database.models import ResolutionStatus
from ...lib.common.url_builder import build_short_url
from ...lib.common.logging_config import (
    get_logger,
    log_event,
    INVALID_URL,
    SHORTEN_FAILED,
    URL_SHORTENED,
    REDIRECTING,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
)

router = APIRouter()

logger = get_logger("web.api")


@router.post(
    "/shorten",
    response_model=ShortenResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid request"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
    summary="Create short URL",
    description="Create (or fetch the existing) shortened URL for a long URL.",
)
async def shorten_url(request: Request, body: ShortenRequest):
    """Create a shortened URL."""
    service = request.app.state.service
    config = request.app.state.config
    client_ip = client_ip_for(request)

    try:
        mapping = await service.create_or_get(body.url)
    except InvalidInput as e:
        log_event(logger, logging.WARNING, INVALID_URL, url=body.url, clientIp=client_ip)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except GenerationExhausted as e:
        log_event(logger, logging.ERROR, SHORTEN_FAILED, originalUrl=body.url, clientIp=client_ip, error=e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not allocate a short code for this URL",
        )
    except Exception as e:
        log_event(
            logger, logging.ERROR, SHORTEN_FAILED, exc_info=True,
            originalUrl=body.url, clientIp=client_ip, error=repr(e),
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        )

    base_url = forwarded_for(request).base_url(
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )

    short_url = build_short_url(
        short_code=mapping.short_code,
        base_url=base_url,
        path_prefix=config.path_prefix,
    )

    log_event(
        logger, logging.INFO, URL_SHORTENED,
        originalUrl=mapping.original_url, shortenedUrl=short_url, clientIp=client_ip,
    )

    return ShortenResponse(
        short_code=mapping.short_code,
        short_url=short_url,
        original_url=mapping.original_url,
        created_at=mapping.created_at,
    )


@router.get(
    "/urls/{short_code}",
    response_model=URLInfoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Short code not found"},
        410: {"model": ErrorResponse, "description": "Short code expired"},
    },
    summary="Get URL information",
    description="Get information about a shortened URL. Does not count as an access.",
)
async def get_url_info(request: Request, short_code: str):
    """Get information about a live shortened URL."""
    service = request.app.state.service

    mapping = await service.get_mapping(short_code)

    if not mapping:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    # Read-only: the row is left for resolve or the sweep to purge
    if service.is_expired(mapping):
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail=f"Short code '{short_code}' has expired",
        )

    return URLInfoResponse.from_mapping(mapping, service.ttl_days)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get service-wide statistics.",
)
async def get_statistics(request: Request):
    """Get service statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service is healthy.",
)
async def health_check(request: Request):
    """Health check endpoint for load balancers and monitoring."""
    service = request.app.state.service
    sweeper = getattr(request.app.state, "sweeper", None)

    health = await service.health_check()

    if sweeper is None or not sweeper.enabled:
        sweeper_status = "disabled"
    else:
        sweeper_status = "running" if sweeper.running else "stopped"

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        sweeper=sweeper_status,
        timestamp=datetime.now(timezone.utc),
    )


# Declared last so the fixed paths above win over the code placeholder
@router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    responses={
        302: {"description": "Redirect to the original URL"},
        404: {"model": ErrorResponse, "description": "Short code not found"},
        410: {"model": ErrorResponse, "description": "Short code expired"},
    },
    summary="Resolve short code",
    description="Redirect to the original URL. Counts an access and refreshes expiry.",
)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL with JSON errors instead of pages."""
    service = request.app.state.service
    client_ip = client_ip_for(request)

    try:
        outcome = await service.resolve(short_code, client_ip=client_ip)
    except InvalidInput:
        outcome = None

    if outcome is None or outcome.status is ResolutionStatus.NOT_FOUND:
        log_event(logger, logging.WARNING, SHORT_URL_NOT_FOUND, shortenedCode=short_code, clientIp=client_ip)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Short code '{short_code}' not found",
        )

    if outcome.status is ResolutionStatus.EXPIRED:
        log_event(logger, logging.WARNING, SHORT_URL_EXPIRED, shortenedCode=short_code, clientIp=client_ip)
        raise HTTPException(
            status_code=status.HTTP_410_GONE,
            detail=f"Short code '{short_code}' has expired",
        )

    log_event(
        logger, logging.INFO, REDIRECTING,
        shortenedCode=short_code, originalUrl=outcome.original_url, clientIp=client_ip,
    )
    return RedirectResponse(url=outcome.original_url, status_code=status.HTTP_302_FOUND)
