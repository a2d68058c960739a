"""Forwarded headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from ...lib.common.headers import ForwardedHeaders


def forwarded_for(request: Request) -> ForwardedHeaders:
    """Parsed proxy headers of a request, cached in request state."""
    forwarded = getattr(request.state, "forwarded", None)
    if forwarded is None:
        forwarded = ForwardedHeaders.parse(request.headers)
        request.state.forwarded = forwarded
    return forwarded


def client_ip_for(request: Request) -> str:
    return forwarded_for(request).client_ip(request.client.host if request.client else None)


class ForwardedHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to parse X-Forwarded-* headers and the client address once per request."""

    async def dispatch(self, request: Request, call_next: Callable):
        request.state.client_ip = client_ip_for(request)
        return await call_next(request)
