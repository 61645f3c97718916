"""Store Adapter Protocols

엔진(CacheManager, RateLimiter)이 기대하는 두 스토리지 계층의 인터페이스입니다.
두 계층은 서로 독립적이며 eventually-consistent로 가정합니다.
구현체는 장애 시 StorageException 계열을 던지고, 엔진이 경계에서 처리합니다.
"""

from typing import Optional, Protocol


class KeyValueStore(Protocol):
    """Fast tier: 저지연 key-value 저장소 (장기 보존 보장 없음)"""

    def get(self, key: str) -> Optional[str]:
        ...

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class BlobStore(Protocol):
    """Durable tier: 장기 보존용 오브젝트 저장소 (캐시의 기준 원본)"""

    def get(self, key: str) -> Optional[bytes]:
        ...

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        ...

    def head(self, key: str) -> bool:
        ...

    def delete(self, key: str) -> None:
        ...
