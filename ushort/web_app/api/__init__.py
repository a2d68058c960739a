"""JSON API for URL shortener."""

from fastapi import APIRouter

from .routes import router as _routes
from .admin import router as _admin

api_router = APIRouter()
api_router.include_router(_routes)
api_router.include_router(_admin, prefix="/admin", tags=["Admin"])

__all__ = ["api_router"]
