"""Provider Orchestrator - Sequential Failover Engine

Runs the declared provider list in order:
1. Attempt each provider with a bounded timeout
2. Fetch bytes for every verified candidate
3. Name-only requests with zero successes: resolve a domain once and rerun the list

Nothing raised inside a provider escapes; every failure becomes an error entry.
"""

import time
from asyncio import TimeoutError as AsyncTimeoutError, wait_for
from typing import Any, Optional, Sequence

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger, log_provider_operation, sanitize_for_log

from .result import CandidateResult, LogoRequest, ProviderOutcome
from .strategy import DomainLookup, LogoProvider, ResolutionStrategy


class ProviderOrchestrator:
    """프로바이더 페일오버 오케스트레이터

    프로바이더는 항상 순차 실행합니다. 성공한 후보도 모두 모아서 ResultRanker에 넘깁니다.
    """

    def __init__(
        self,
        providers: Sequence[LogoProvider],
        http_client: Any,
        domain_resolver: Optional[DomainLookup] = None,
        attempt_timeout_s: Optional[float] = None,
        byte_fetch_timeout_s: Optional[float] = None,
    ):
        """
        Args:
            providers: 우선순위 순서의 프로바이더 목록
            http_client: 바이트 fetch용 클라이언트 (get_bytes 구현)
            domain_resolver: 회사명 → 도메인 해석기 (없으면 폴백 생략)
            attempt_timeout_s: 프로바이더 1회 시도 타임아웃 (기본값: settings.provider_timeout_s)
            byte_fetch_timeout_s: 바이트 fetch 타임아웃 (기본값: settings.byte_fetch_timeout_s)
        """
        if not providers:
            raise ValueError("providers must not be empty")
        if http_client is None:
            raise ValueError("http_client must not be None")

        self.providers = tuple(providers)
        self.http = http_client
        self.domain_resolver = domain_resolver
        self.attempt_timeout_s = attempt_timeout_s or settings.provider_timeout_s
        self.byte_fetch_timeout_s = byte_fetch_timeout_s or settings.byte_fetch_timeout_s
        self.strategy = ResolutionStrategy()

    async def fetch_candidates(self, request: LogoRequest) -> ProviderOutcome:
        """프로바이더 체인 실행 (+ 회사명 전용 요청의 도메인 폴백 1회)

        Args:
            request: 로고 요청

        Returns:
            ProviderOutcome: 성공 후보, 실패 목록, 폴백으로 찾은 도메인
        """
        outcome = await self.run_providers(request)

        if not self.strategy.should_resolve_domain(request, outcome):
            return outcome

        if self.domain_resolver is None:
            return outcome

        logger.info(
            f"All providers failed, resolving domain: company='{sanitize_for_log(request.company_name or '')}'"
        )
        domain = await self._resolve_domain(request.company_name or "")
        if not domain:
            return outcome

        retry = await self.run_providers(request.with_domain(domain))
        retry.errors = outcome.errors + retry.errors
        retry.resolved_domain = domain
        logger.info(
            f"Retry with resolved domain {domain}: "
            f"{'success' if retry.has_success else 'failed'} ({len(retry.candidates)} candidates)"
        )
        return retry

    async def run_providers(self, request: LogoRequest) -> ProviderOutcome:
        """선언 순서대로 모든 프로바이더를 1회씩 시도"""
        outcome = ProviderOutcome()

        for provider in self.providers:
            candidate = await self._attempt(provider, request)

            if candidate.success and candidate.source_url:
                candidate = await self._fetch_bytes(candidate)
                outcome.candidates.append(candidate)
            else:
                outcome.errors.append(f"{provider.name}: {candidate.error or 'Unknown error'}")

        return outcome

    async def _attempt(self, provider: LogoProvider, request: LogoRequest) -> CandidateResult:
        started = time.perf_counter()
        try:
            candidate = await wait_for(provider.attempt(request), timeout=self.attempt_timeout_s)
            if not isinstance(candidate, CandidateResult):
                candidate = CandidateResult.failed(provider.name, "Invalid provider result")
        except AsyncTimeoutError:
            candidate = CandidateResult.failed(
                provider.name, f"TimeoutError: attempt exceeded {self.attempt_timeout_s:.1f}s"
            )
        except Exception as e:
            candidate = CandidateResult.failed(provider.name, f"{type(e).__name__}: {e}")

        if candidate.elapsed_ms is None:
            candidate.elapsed_ms = (time.perf_counter() - started) * 1000

        log_provider_operation(
            provider.name,
            "fetch",
            candidate.success,
            domain=request.domain,
            company_name=request.company_name,
            duration_ms=candidate.elapsed_ms,
            error=candidate.error,
            metadata=(
                {"logo_url": sanitize_for_log(candidate.source_url, max_length=300)}
                if candidate.source_url
                else None
            ),
        )
        return candidate

    async def _fetch_bytes(self, candidate: CandidateResult) -> CandidateResult:
        """검증된 후보의 실제 바이트 확보. 실패해도 URL만 가진 후보로 유지"""
        try:
            response = await self.http.get_bytes(
                candidate.source_url, timeout_s=self.byte_fetch_timeout_s
            )
        except Exception as e:
            logger.warning(f"Byte fetch failed: provider={candidate.provider}, error={type(e).__name__}: {e}")
            return candidate

        if response is None:
            logger.warning(f"Byte fetch failed: provider={candidate.provider}")
            return candidate

        status, content, content_type = response
        if not (200 <= status < 300) or not content:
            logger.warning(
                f"Byte fetch unusable: provider={candidate.provider}, status={status}, bytes={len(content or b'')}"
            )
            return candidate

        image_type = content_type if content_type and content_type.lower().startswith("image/") else None
        return candidate.with_content(content, image_type)

    async def _resolve_domain(self, company_name: str) -> Optional[str]:
        try:
            return await self.domain_resolver.resolve(company_name)
        except Exception as e:
            logger.warning(f"Domain resolution failed: {type(e).__name__}: {e}")
            return None
