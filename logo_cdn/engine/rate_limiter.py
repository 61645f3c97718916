"""Rate Limiter - Fixed Window Quota Gate

클라이언트 키별 고정 윈도우 카운터를 fast tier(KV)에 저장합니다.

NOTE: 읽기 → 증가가 원자적이지 않아 동시 요청에서 한도를 조금 넘길 수 있습니다.
보안 경계가 아니라 advisory limiter로 취급합니다.
"""

import math
import time
from dataclasses import dataclass
from typing import Callable, Optional

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger, sanitize_for_log
from logo_cdn.storage.base import KeyValueStore


@dataclass(frozen=True)
class RateLimitDecision:
    """요청 허용 여부

    Attributes:
        allowed: 허용 여부
        limit: 윈도우당 최대 요청 수
        remaining: 남은 요청 수 (스토리지 장애로 fail-open 된 경우 None)
        reset_at: 윈도우가 끝나는 시각 (epoch seconds)
    """

    allowed: bool
    limit: int
    remaining: Optional[int]
    reset_at: int

    def retry_after(self, now: Optional[float] = None) -> int:
        """윈도우 리셋까지 남은 초 (0 이상)"""
        current = time.time() if now is None else now
        return max(0, math.ceil(self.reset_at - current))

    def headers(self, now: Optional[float] = None) -> dict[str, str]:
        """응답에 붙일 X-RateLimit-* 헤더"""
        headers = {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Reset": str(self.reset_at),
        }
        if self.remaining is not None:
            headers["X-RateLimit-Remaining"] = str(self.remaining)
        if not self.allowed:
            headers["Retry-After"] = str(self.retry_after(now))
        return headers


class RateLimiter:
    """고정 윈도우 rate limiter (fail-open)

    Usage:
        limiter = RateLimiter(kv_store)
        decision = await limiter.check("ip:1.2.3.4")
        if not decision.allowed:
            ...  # 429
    """

    def __init__(
        self,
        kv_store: KeyValueStore,
        max_requests: Optional[int] = None,
        window_s: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """
        Args:
            kv_store: KeyValueStore 구현체
            max_requests: 윈도우당 최대 요청 수 (기본값: settings.rate_limit_max_requests)
            window_s: 윈도우 길이 초 (기본값: settings.rate_limit_window_s)
            clock: 현재 시각 함수 (테스트 주입용)
        """
        if kv_store is None:
            raise ValueError("kv_store must not be None")

        self.kv = kv_store
        self.max_requests = max_requests or settings.rate_limit_max_requests
        self.window_s = window_s or settings.rate_limit_window_s
        self._clock = clock or time.time

    def window_start(self, now: float) -> int:
        return int(math.floor(now / self.window_s) * self.window_s)

    @staticmethod
    def counter_key(client_key: str, window_start: int) -> str:
        return f"ratelimit:{client_key}:{window_start}"

    async def check(self, client_key: str) -> RateLimitDecision:
        """
        요청 1건을 카운트하고 허용 여부 반환

        Args:
            client_key: 클라이언트 식별자 (API 키 해시 또는 IP)

        Returns:
            RateLimitDecision (절대 예외를 던지지 않음)
        """
        now = self._clock()
        window_start = self.window_start(now)
        reset_at = window_start + self.window_s
        key = self.counter_key(client_key, window_start)

        try:
            raw = self.kv.get(key)
            count = int(raw) if raw else 0

            if count >= self.max_requests:
                logger.info(
                    f"[RateLimit] rejected: client={sanitize_for_log(client_key)}, "
                    f"count={count}, limit={self.max_requests}"
                )
                return RateLimitDecision(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    reset_at=reset_at,
                )

            new_count = count + 1
            self.kv.put(key, str(new_count), ttl_seconds=self.window_s)

            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - new_count,
                reset_at=reset_at,
            )

        except Exception as e:
            logger.warning(
                f"[RateLimit] storage error, allowing request: "
                f"client={sanitize_for_log(client_key)}, error={type(e).__name__}: {e}"
            )
            return RateLimitDecision(
                allowed=True,
                limit=self.max_requests,
                remaining=None,
                reset_at=reset_at,
            )
