"""Cache Manager - Two-Tier Logo Cache

Fast tier(KV)에는 메타데이터 JSON만, durable tier(Blob)에는 로고 바이너리와
sidecar 메타데이터 JSON을 저장합니다. 신선도 판단은 메타데이터만 기준으로 합니다.
"""

import time
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Callable, Optional

from pydantic import ValidationError

from logo_cdn.core.config import settings
from logo_cdn.core.exceptions import StorageSerializationException
from logo_cdn.core.logging import logger, log_provider_operation
from logo_cdn.schemas.logo_schema import LogoMetadata
from logo_cdn.storage.base import BlobStore, KeyValueStore

from .keys import CacheKey

_FORMAT_CONTENT_TYPES = {
    "svg": "image/svg+xml",
    "png": "image/png",
    "webp": "image/webp",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "gif": "image/gif",
    "avif": "image/avif",
    "ico": "image/x-icon",
}


def content_type_for_format(fmt: Optional[str]) -> str:
    return _FORMAT_CONTENT_TYPES.get((fmt or "").lower(), "application/octet-stream")


@dataclass
class CacheLookup:
    """캐시 조회 결과

    Attributes:
        hit: 신선한 메타데이터와 바이너리를 모두 찾았는지 여부
        reason: hit | miss | stale | blob_missing | error
        logo_bytes: 로고 바이너리 (hit인 경우)
        metadata: 읽은 메타데이터 (stale/blob_missing이어도 채워질 수 있음)
    """

    hit: bool
    reason: str
    logo_bytes: Optional[bytes] = None
    metadata: Optional[LogoMetadata] = None

    @classmethod
    def found(cls, logo_bytes: bytes, metadata: LogoMetadata) -> "CacheLookup":
        return cls(hit=True, reason="hit", logo_bytes=logo_bytes, metadata=metadata)

    @classmethod
    def miss(cls, reason: str = "miss", metadata: Optional[LogoMetadata] = None) -> "CacheLookup":
        return cls(hit=False, reason=reason, metadata=metadata)


class CacheManager:
    """2단 캐시 관리자

    스토리지 장애는 전부 캐시 미스로 취급하고, 예외를 밖으로 올리지 않습니다.
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        blob_store: BlobStore,
        max_age_s: Optional[int] = None,
        metadata_ttl_s: Optional[int] = None,
        cache_control: Optional[str] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            kv_store: KeyValueStore 구현체 (fast tier)
            blob_store: BlobStore 구현체 (durable tier)
            max_age_s: 이 시간이 지나면 stale (기본값: 30일)
            metadata_ttl_s: fast tier 메타데이터 TTL (기본값: 1년)
            cache_control: 저장/응답 시 Cache-Control 값
            clock: 현재 UTC 시각 함수 (테스트 주입용)
        """
        if kv_store is None:
            raise ValueError("kv_store must not be None")
        if blob_store is None:
            raise ValueError("blob_store must not be None")

        self.kv = kv_store
        self.blob = blob_store
        self.max_age_s = max_age_s or settings.cache_max_age_s
        self.metadata_ttl_s = metadata_ttl_s or settings.metadata_ttl_s
        self.cache_control = cache_control or settings.blob_cache_control
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        return self._clock()

    def is_stale(self, metadata: LogoMetadata) -> bool:
        """retrieved_at 기준 max_age 초과 여부"""
        return metadata.age_seconds(self.now()) > self.max_age_s

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    @staticmethod
    def _serialize(metadata: LogoMetadata) -> str:
        return metadata.model_dump_json()

    @staticmethod
    def _deserialize(raw) -> LogoMetadata:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8")
        try:
            return LogoMetadata.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            raise StorageSerializationException(operation="deserialize", reason=str(e))

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    async def lookup(self, key: CacheKey) -> CacheLookup:
        """
        캐시 조회

        1. fast tier 메타데이터 → 2. sidecar 메타데이터 → 3. 신선도 검사 → 4. 바이너리

        Args:
            key: 캐시 키

        Returns:
            CacheLookup (절대 예외를 던지지 않음)
        """
        metadata, had_error = self._read_metadata(key)

        if metadata is None:
            reason = "error" if had_error else "miss"
            logger.debug(f"[Cache] {reason}: key={key.kv_key}")
            return CacheLookup.miss(reason)

        if self.is_stale(metadata):
            logger.info(
                f"[Cache] stale: key={key.kv_key}, age={metadata.age_seconds(self.now()):.0f}s"
            )
            self._purge(key)
            return CacheLookup.miss("stale", metadata=metadata)

        try:
            logo_bytes = self.blob.get(key.blob_key)
        except Exception as e:
            logger.warning(f"[Cache] blob read failed: key={key.blob_key}, error={type(e).__name__}: {e}")
            return CacheLookup.miss("error", metadata=metadata)

        if not logo_bytes:
            # 메타데이터만 남은 상태는 오류가 아니라 미스
            logger.info(f"[Cache] blob missing: key={key.blob_key}")
            return CacheLookup.miss("blob_missing", metadata=metadata)

        logger.info(f"[Cache] hit: key={key.kv_key}, bytes={len(logo_bytes)}")
        return CacheLookup.found(logo_bytes, metadata)

    def follow_alias(self, key: CacheKey) -> CacheKey:
        """회사명 키 → 도메인 폴백으로 저장된 도메인 키 (별칭이 없으면 그대로)"""
        if not key.is_name:
            return key

        try:
            domain = self.kv.get(key.alias_key)
        except Exception as e:
            logger.warning(f"[Cache] alias read failed: key={key.alias_key}, error={type(e).__name__}: {e}")
            return key

        if isinstance(domain, (bytes, bytearray)):
            domain = domain.decode("utf-8")
        if not domain:
            return key

        logger.debug(f"[Cache] alias: {key.basis} -> {domain}")
        return replace(key, basis=domain)

    def remember_alias(self, key: CacheKey, domain: str) -> bool:
        """회사명 키에 폴백 도메인 별칭 기록 (메타데이터와 같은 TTL)"""
        if not key.is_name or not domain:
            return False

        try:
            self.kv.put(key.alias_key, domain, ttl_seconds=self.metadata_ttl_s)
            return True
        except Exception as e:
            logger.warning(f"[Cache] alias write failed: key={key.alias_key}, error={type(e).__name__}: {e}")
            return False

    def _read_metadata(self, key: CacheKey) -> tuple[Optional[LogoMetadata], bool]:
        """fast tier → sidecar 순으로 메타데이터 읽기 (메타데이터, 오류 발생 여부)"""
        had_error = False

        try:
            raw = self.kv.get(key.kv_key)
            if raw:
                return self._deserialize(raw), had_error
        except Exception as e:
            had_error = True
            logger.warning(f"[Cache] KV metadata read failed: key={key.kv_key}, error={type(e).__name__}: {e}")

        try:
            raw = self.blob.get(key.sidecar_key)
            if raw:
                return self._deserialize(raw), had_error
        except Exception as e:
            had_error = True
            logger.warning(
                f"[Cache] sidecar metadata read failed: key={key.sidecar_key}, error={type(e).__name__}: {e}"
            )

        return None, had_error

    def _purge(self, key: CacheKey) -> None:
        """stale 항목 best-effort 삭제"""
        for tier, store, object_key in (
            ("blob", self.blob, key.blob_key),
            ("blob", self.blob, key.sidecar_key),
            ("kv", self.kv, key.kv_key),
        ):
            try:
                store.delete(object_key)
            except Exception as e:
                logger.warning(f"[Cache] purge failed: tier={tier}, key={object_key}, error={type(e).__name__}: {e}")

    # ------------------------------------------------------------------
    # Store / Invalidate
    # ------------------------------------------------------------------

    async def store(self, key: CacheKey, logo_bytes: bytes, metadata: LogoMetadata) -> bool:
        """
        로고 저장 (같은 키는 덮어씀)

        바이너리를 먼저 쓰고, 실패하면 메타데이터는 쓰지 않습니다.

        Args:
            key: 캐시 키
            logo_bytes: 로고 바이너리
            metadata: 메타데이터

        Returns:
            바이너리 + 메타데이터 1곳 이상 저장 성공 여부
        """
        started = time.perf_counter()
        content_type = metadata.content_type or content_type_for_format(key.format)

        try:
            self.blob.put(
                key.blob_key,
                logo_bytes,
                content_type,
                cache_control=self.cache_control,
                metadata={
                    "provider": metadata.provider,
                    "retrieved-at": metadata.retrieved_at.isoformat(),
                },
            )
        except Exception as e:
            logger.error(f"[Cache] blob write failed: key={key.blob_key}, error={type(e).__name__}: {e}")
            log_provider_operation(
                metadata.provider,
                "store",
                False,
                domain=metadata.domain,
                company_name=metadata.company_name,
                duration_ms=(time.perf_counter() - started) * 1000,
                error=f"{type(e).__name__}: {e}",
            )
            return False

        payload = self._serialize(metadata)

        sidecar_ok = True
        try:
            self.blob.put(key.sidecar_key, payload.encode("utf-8"), "application/json")
        except Exception as e:
            sidecar_ok = False
            logger.warning(f"[Cache] sidecar write failed: key={key.sidecar_key}, error={type(e).__name__}: {e}")

        kv_ok = True
        try:
            self.kv.put(key.kv_key, payload, ttl_seconds=self.metadata_ttl_s)
        except Exception as e:
            kv_ok = False
            logger.warning(f"[Cache] KV write failed: key={key.kv_key}, error={type(e).__name__}: {e}")

        stored = sidecar_ok or kv_ok
        log_provider_operation(
            metadata.provider,
            "store",
            stored,
            domain=metadata.domain,
            company_name=metadata.company_name,
            duration_ms=(time.perf_counter() - started) * 1000,
            metadata={"format": key.format, "file_size": len(logo_bytes), "kv": kv_ok, "sidecar": sidecar_ok},
        )
        return stored

    async def invalidate(self, key: CacheKey) -> bool:
        """
        캐시 무효화

        Args:
            key: 캐시 키

        Returns:
            바이너리, sidecar, KV (회사명 키는 별칭까지) 모두 삭제 성공 여부
        """
        targets = [
            (self.blob, key.blob_key),
            (self.blob, key.sidecar_key),
            (self.kv, key.kv_key),
        ]
        if key.is_name:
            targets.append((self.kv, key.alias_key))

        all_deleted = True
        for store, object_key in targets:
            try:
                store.delete(object_key)
            except Exception as e:
                all_deleted = False
                logger.warning(f"[Cache] invalidate failed: key={object_key}, error={type(e).__name__}: {e}")

        logger.info(f"[Cache] invalidated: key={key.kv_key}, complete={all_deleted}")
        return all_deleted

    def cache_control_headers(self, metadata: Optional[LogoMetadata] = None) -> dict[str, str]:
        """로고 응답 헤더 (프로바이더 이름은 노출하지 않음)"""
        headers = {
            "Cache-Control": self.cache_control,
            "X-Content-Type-Options": "nosniff",
        }
        if metadata is not None:
            headers["X-Logo-Retrieved-At"] = metadata.retrieved_at.isoformat()
        return headers
