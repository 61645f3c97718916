"""API 엔드포인트 패키지 - export only."""

from .routes import health_router, logo_router, get_kv_store, get_blob_store, get_resolution_service

__all__ = ["health_router", "logo_router", "get_kv_store", "get_blob_store", "get_resolution_service"]
