"""Logo Resolution Service - Request State Machine

RateLimit → Validate → Cache → Providers (→ DomainFallback) → Rank → Store → Respond
"""

import time
from typing import Optional

from logo_cdn.core.logging import logger, sanitize_for_log
from logo_cdn.schemas.logo_schema import LogoMetadata

from .cache_manager import CacheManager
from .keys import CacheKey, derive_cache_key
from .orchestrator import ProviderOrchestrator
from .ranker import ResultRanker
from .rate_limiter import RateLimiter
from .result import CandidateResult, LogoRequest, ResolutionResult
from .strategy import ResolutionStrategy


class LogoResolutionService:
    """로고 조회 서비스

    resolve()는 어떤 경우에도 예외를 던지지 않습니다.
    """

    def __init__(
        self,
        orchestrator: ProviderOrchestrator,
        cache_manager: CacheManager,
        ranker: Optional[ResultRanker] = None,
        rate_limiter: Optional[RateLimiter] = None,
    ):
        """
        Args:
            orchestrator: 프로바이더 오케스트레이터
            cache_manager: 2단 캐시 관리자
            ranker: 후보 순위 결정기 (기본값: ResultRanker())
            rate_limiter: rate limiter (없으면 검사 생략)
        """
        if orchestrator is None:
            raise ValueError("orchestrator must not be None")
        if cache_manager is None:
            raise ValueError("cache_manager must not be None")

        self.orchestrator = orchestrator
        self.cache = cache_manager
        self.ranker = ranker or ResultRanker()
        self.rate_limiter = rate_limiter
        self.strategy = ResolutionStrategy()

    async def resolve(self, request: LogoRequest, client_key: Optional[str] = None) -> ResolutionResult:
        """
        로고 조회

        Args:
            request: 로고 요청
            client_key: rate limit 클라이언트 키 (None이면 검사 생략)

        Returns:
            ResolutionResult
        """
        started = time.perf_counter()
        try:
            return await self._resolve(request, client_key, started)
        except Exception as e:
            logger.error(
                f"Logo resolution failed: identifier='{sanitize_for_log(request.identifier)}', "
                f"error={type(e).__name__}",
                exc_info=True,
            )
            return ResolutionResult.not_found("Failed to fetch logo", self._elapsed_ms(started))

    async def _resolve(
        self, request: LogoRequest, client_key: Optional[str], started: float
    ) -> ResolutionResult:
        """잘못된 식별자도 rate limit 한도를 먼저 소모합니다."""
        # 1. Rate limit
        decision = None
        if client_key and self.rate_limiter is not None:
            decision = await self.rate_limiter.check(client_key)
            if not decision.allowed:
                return ResolutionResult.rate_limited(decision, self._elapsed_ms(started))

        if not request.domain and not request.company_name:
            return ResolutionResult.invalid_request(
                "Either domain or company_name must be provided", self._elapsed_ms(started)
            )

        try:
            key = derive_cache_key(request.domain, request.company_name, request.format, request.size)
        except ValueError as e:
            return ResolutionResult.invalid_request(str(e), self._elapsed_ms(started))

        # 2. Cache (회사명 키는 도메인 폴백 별칭을 따라감)
        if request.use_cache:
            lookup_key = self.cache.follow_alias(key)
            lookup = await self.cache.lookup(lookup_key)
            if lookup.hit:
                logger.info(f"Logo served from cache: key={lookup_key.kv_key}")
                return ResolutionResult.from_cache(
                    lookup.logo_bytes, lookup.metadata, self._elapsed_ms(started), rate_limit=decision
                )

        # 3. Providers (+ domain fallback)
        outcome = await self.orchestrator.fetch_candidates(request)
        winner = self.ranker.select(outcome.candidates)
        if winner is None:
            logger.warning(
                f"No logo found: identifier='{sanitize_for_log(request.identifier)}', "
                f"errors={len(outcome.errors)}"
            )
            return ResolutionResult.not_found(
                outcome.error_summary or "Failed to fetch logo from all providers",
                self._elapsed_ms(started),
                rate_limit=decision,
            )

        if not self.strategy.is_cacheable(winner):
            logger.info(f"Logo URL only (not cached): provider={winner.provider}")
            return ResolutionResult.url_only(winner.source_url, self._elapsed_ms(started), rate_limit=decision)

        # 4. Store
        metadata = self._build_metadata(request, key, winner, outcome.resolved_domain)
        store_key = derive_cache_key(metadata.domain, metadata.company_name, key.format, key.size)
        stored = await self.cache.store(store_key, winner.content, metadata)
        if not stored:
            logger.warning(f"Logo store failed, returning fetched bytes: key={store_key.kv_key}")
        elif key.is_name and not store_key.is_name:
            self.cache.remember_alias(key, store_key.basis)

        logger.info(
            f"Logo resolved: provider={winner.provider}, key={store_key.kv_key}, "
            f"bytes={winner.byte_length}, stored={stored}"
        )
        return ResolutionResult.from_provider(
            winner.content,
            winner.source_url,
            metadata,
            self._elapsed_ms(started),
            rate_limit=decision,
        )

    def _build_metadata(
        self,
        request: LogoRequest,
        key: CacheKey,
        winner: CandidateResult,
        resolved_domain: Optional[str],
    ) -> LogoMetadata:
        """메타데이터 식별자: 폴백 도메인 > 요청 도메인 > 회사명"""
        domain = None
        company_name = None
        if resolved_domain:
            domain = resolved_domain
        elif not key.basis.startswith("name:"):
            domain = key.basis
        else:
            company_name = (request.company_name or "").strip()

        return LogoMetadata(
            domain=domain,
            company_name=company_name,
            provider=winner.provider,
            format=key.format,
            size=key.size,
            original_url=winner.source_url,
            retrieved_at=self.cache.now(),
            response_time_ms=winner.elapsed_ms,
            file_size=winner.byte_length,
            content_type=winner.content_type,
        )

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000
