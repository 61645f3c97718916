"""API routes package."""

from .health_routes import router as health_router
from .logo_routes import router as logo_router, get_kv_store, get_blob_store, get_resolution_service

__all__ = ["health_router", "logo_router", "get_kv_store", "get_blob_store", "get_resolution_service"]
