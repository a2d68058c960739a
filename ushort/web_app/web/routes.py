"""Web interface routes implementation."""

import logging

from fastapi import APIRouter, Request, Form, HTTPException, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ...lib.errors import GenerationExhausted, InvalidInput
from ...lib.database.models import ResolutionStatus
from ...lib.common.url_builder import build_short_url, normalize_path_prefix
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
from ..middleware.headers import forwarded_for, client_ip_for
from ..html_prefix import inject_forwarded_prefix_into_html
from .pages import index_page, result_page, error_page

router = APIRouter()

logger = get_logger("web")


def _html(request: Request, content: str, status_code: int = 200) -> HTMLResponse:
    # Only a proxy-supplied prefix is injected; direct access keeps relative links
    content = inject_forwarded_prefix_into_html(content, forwarded_for(request).prefix)
    return HTMLResponse(content=content, status_code=status_code)


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def homepage(request: Request):
    """Serve the homepage form."""
    return _html(request, index_page())


@router.get("/health", include_in_schema=False)
async def health_check_web(request: Request):
    """Health check endpoint (simple version for load balancers)."""
    service = request.app.state.service

    health = await service.health_check()

    if health["overall"]:
        return {"status": "healthy"}
    raise HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Service unhealthy",
    )


@router.post("/create", response_class=HTMLResponse, include_in_schema=False)
async def create_short_url_web(
    request: Request,
    url: str = Form(""),
):
    """Handle form submission to create short URL."""
    service = request.app.state.service
    config = request.app.state.config
    client_ip = client_ip_for(request)

    try:
        mapping = await service.create_or_get(url)
    except InvalidInput:
        log_event(logger, logging.WARNING, INVALID_URL, url=url, clientIp=client_ip, source="web")
        return _html(
            request,
            index_page("Please enter a valid URL that starts with http:// or https://"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except GenerationExhausted as e:
        log_event(logger, logging.ERROR, SHORTEN_FAILED, originalUrl=url, clientIp=client_ip, error=e, source="web")
        return _html(
            request,
            error_page("An error occurred while shortening the URL. Please try again."),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    forwarded = forwarded_for(request)
    base_url = forwarded.base_url(
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    # Proxy prefix wins; otherwise the configured one
    path_prefix = forwarded.prefix or normalize_path_prefix(config.path_prefix)
    short_url = build_short_url(
        short_code=mapping.short_code,
        base_url=base_url,
        path_prefix=path_prefix,
    )

    log_event(
        logger, logging.INFO, URL_SHORTENED,
        originalUrl=mapping.original_url, shortenedUrl=short_url, clientIp=client_ip, source="web",
    )
    return _html(request, result_page(short_url, mapping.original_url))


@router.get("/{short_code}", include_in_schema=False)
async def redirect_to_url(request: Request, short_code: str):
    """Redirect to the original URL (counts an access)."""
    service = request.app.state.service
    client_ip = client_ip_for(request)

    try:
        outcome = await service.resolve(short_code, client_ip=client_ip)
    except InvalidInput:
        outcome = None

    if outcome is None or outcome.status is ResolutionStatus.NOT_FOUND:
        log_event(logger, logging.WARNING, SHORT_URL_NOT_FOUND, shortenedCode=short_code, clientIp=client_ip)
        return _html(
            request,
            error_page("The shortened URL you requested was not found."),
            status_code=status.HTTP_404_NOT_FOUND,
        )

    if outcome.status is ResolutionStatus.EXPIRED:
        log_event(logger, logging.WARNING, SHORT_URL_EXPIRED, shortenedCode=short_code, clientIp=client_ip)
        return _html(
            request,
            error_page("The shortened URL you requested has expired."),
            status_code=status.HTTP_410_GONE,
        )

    log_event(
        logger, logging.INFO, REDIRECTING,
        shortenedCode=short_code, originalUrl=outcome.original_url, clientIp=client_ip,
    )
    # Temporary redirect so every visit reaches us and is counted
    return RedirectResponse(url=outcome.original_url, status_code=status.HTTP_302_FOUND)
