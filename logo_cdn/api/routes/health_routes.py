"""헬스 체크 엔드포인트"""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from logo_cdn.schemas.logo_schema import HealthResponse
from logo_cdn.storage import RedisKeyValueStore, S3BlobStore
from logo_cdn.api.routes.logo_routes import get_blob_store, get_kv_store
from logo_cdn.core.logging import logger
from logo_cdn import __version__

router = APIRouter(tags=["health"])


def _probe(tier: str, check) -> bool:
    try:
        return bool(check())
    except Exception as e:
        logger.error(f"Unexpected {tier} health error: {type(e).__name__}: {e}")
        return False


@router.get("/health", response_model=HealthResponse)
async def health_check(
    kv_store: RedisKeyValueStore = Depends(get_kv_store),
    blob_store: S3BlobStore = Depends(get_blob_store),
):
    """
    헬스 체크 엔드포인트

    - KV(Redis) / Blob(S3) 연결 상태
    - 저장소 장애여도 캐시 미스/fail-open으로 계속 응답하므로 error가 아니라 degraded
    """
    kv_ok = _probe("kv", kv_store.health_check)
    blob_ok = _probe("blob", blob_store.health_check)

    return HealthResponse(
        status="ok" if kv_ok and blob_ok else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        kv=kv_ok,
        blob=blob_ok,
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "Logo CDN",
        "version": __version__,
        "docs": "/docs"
    }
