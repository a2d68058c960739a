"""Admin routes: read-only analytics behind HTTP Basic auth."""

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .schemas import AnalyticsResponse, ErrorResponse, SweepResponse, URLInfoResponse
from ..middleware.headers import client_ip_for
from ...lib.errors import InvalidInput
from ...lib.common.logging_config import get_logger, log_event, ADMIN_ACCESS, ADMIN_SWEEP, AUTH_FAILED

router = APIRouter()

logger = get_logger("web.admin")

security = HTTPBasic(realm="ushort admin")


def require_admin(
    request: Request,
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """Check Basic credentials against the configured admin account.

    Returns:
        The authenticated username
    """
    config = request.app.state.config

    if not config.admin_password:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin access is not configured",
        )

    username_ok = secrets.compare_digest(
        credentials.username.encode("utf-8"), config.admin_username.encode("utf-8")
    )
    password_ok = secrets.compare_digest(
        credentials.password.encode("utf-8"), config.admin_password.encode("utf-8")
    )
    if not (username_ok and password_ok):
        log_event(
            logger, logging.WARNING, AUTH_FAILED,
            username=credentials.username, ip=client_ip_for(request), reason="bad credentials",
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username


@router.get(
    "/analytics",
    response_model=AnalyticsResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
        503: {"model": ErrorResponse, "description": "Admin access not configured"},
    },
    summary="Admin analytics",
    description="All mappings ordered by access count, with totals.",
)
async def analytics(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, le=10000),
    username: str = Depends(require_admin),
):
    service = request.app.state.service

    log_event(logger, logging.INFO, ADMIN_ACCESS, user=username, clientIp=client_ip_for(request))

    mappings = await service.list_most_accessed(limit)
    stats = await service.get_statistics()

    return AnalyticsResponse(
        username=username,
        total_urls=stats["total_urls"],
        total_access_count=stats["total_accesses"],
        has_urls=bool(mappings),
        url_statistics=[URLInfoResponse.from_mapping(m, service.ttl_days) for m in mappings],
    )


@router.post(
    "/sweep",
    response_model=SweepResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid TTL"},
        401: {"model": ErrorResponse, "description": "Missing or invalid credentials"},
    },
    summary="Run expiry sweep",
    description="Delete every mapping not accessed within the TTL now.",
)
async def sweep(
    request: Request,
    ttl_days: Optional[int] = Query(None, ge=0),
    username: str = Depends(require_admin),
):
    service = request.app.state.service
    effective_ttl = service.ttl_days if ttl_days is None else ttl_days

    try:
        deleted = await service.sweep_expired(effective_ttl)
    except InvalidInput as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    log_event(logger, logging.INFO, ADMIN_SWEEP, user=username, deleted=deleted, ttlDays=effective_ttl)
    return SweepResponse(deleted=deleted, ttl_days=effective_ttl)
