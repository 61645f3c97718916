"""Resolution Strategy - Fallback Decision Logic

Determines which resolution path runs next and what may be cached.
"""

from typing import Optional, Protocol

from .result import CandidateResult, LogoRequest, ProviderOutcome


class LogoProvider(Protocol):
    """로고 프로바이더 인터페이스

    attempt()는 실패를 예외가 아니라 실패한 CandidateResult로 돌려줘야 합니다.
    """

    name: str

    async def attempt(self, request: LogoRequest) -> CandidateResult:
        ...


class DomainLookup(Protocol):
    """회사명 → 도메인 해석기 인터페이스"""

    async def resolve(self, company_name: str) -> Optional[str]:
        ...


class ResolutionStrategy:
    """경로 결정

    Usage:
        outcome = await orchestrator.run_providers(request)
        if ResolutionStrategy.should_resolve_domain(request, outcome):
            ...
    """

    @staticmethod
    def should_resolve_domain(request: LogoRequest, outcome: ProviderOutcome) -> bool:
        """도메인 폴백 여부

        성공 후보가 하나도 없고, 도메인 없이 회사명만 받은 경우에만 폴백합니다.

        Args:
            request: 원 요청
            outcome: 첫 번째 프로바이더 체인 결과

        Returns:
            bool: DomainResolver를 호출해야 하는지 여부
        """
        return not outcome.has_success and request.is_name_only

    @staticmethod
    def is_cacheable(candidate: Optional[CandidateResult]) -> bool:
        """바이트까지 확보한 후보만 캐시에 저장"""
        return candidate is not None and candidate.success and candidate.has_bytes
