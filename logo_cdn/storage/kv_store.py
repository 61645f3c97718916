"""Redis 기반 fast tier - 키 단위 get/put(ttl)/delete만 담당"""
from typing import Optional
from redis import Redis

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger
from logo_cdn.core.exceptions import StorageConnectionException


class RedisKeyValueStore:
    """Redis key-value 저장소

    연결은 첫 명령 시점에 맺어집니다. 앱 시작 시 Redis가 내려가 있어도
    엔진은 캐시 미스/fail-open 경로로 계속 동작해야 하므로 생성자에서 ping하지 않습니다.
    """

    def __init__(self, redis_client: Optional[Redis] = None, redis_url: Optional[str] = None):
        """
        Args:
            redis_client: 이미 만들어진 Redis 클라이언트 (테스트 주입용)
            redis_url: 연결 URL (기본값: settings.redis_url)
        """
        if redis_client is not None:
            self.redis_client = redis_client
        else:
            self.redis_client = Redis.from_url(
                redis_url or settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5
            )

    def get(self, key: str) -> Optional[str]:
        """
        값 조회

        Args:
            key: 키

        Returns:
            저장된 문자열 또는 None
        """
        try:
            value = self.redis_client.get(key)
        except Exception as e:
            logger.error(f"KV read error: key={key}, error={e}")
            raise StorageConnectionException(tier="kv", reason=str(e), details={"key": key})

        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        """
        값 저장

        Args:
            key: 키
            value: 문자열 값
            ttl_seconds: 만료 시간 (None이면 만료 없음)
        """
        try:
            if ttl_seconds:
                self.redis_client.setex(key, ttl_seconds, value)
            else:
                self.redis_client.set(key, value)
        except Exception as e:
            logger.error(f"KV write error: key={key}, error={e}")
            raise StorageConnectionException(tier="kv", reason=str(e), details={"key": key})

        logger.debug(f"KV set: key={key}, TTL={ttl_seconds}")

    def delete(self, key: str) -> None:
        """키 삭제 (없는 키도 성공으로 취급)"""
        try:
            self.redis_client.delete(key)
        except Exception as e:
            logger.error(f"KV delete error: key={key}, error={e}")
            raise StorageConnectionException(tier="kv", reason=str(e), details={"key": key})

    def health_check(self) -> bool:
        """Redis 연결 상태 확인"""
        try:
            self.redis_client.ping()
            return True
        except Exception:
            return False
