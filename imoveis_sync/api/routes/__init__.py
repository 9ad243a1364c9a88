"""Rotas da API."""

from .health import router as health_router
from .listings import router as listings_router
from .listings import legacy_router as listings_legacy_router

__all__ = [
    "health_router",
    "listings_router",
    "listings_legacy_router",
]
