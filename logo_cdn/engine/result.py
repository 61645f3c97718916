"""Resolution Result - Standardized Result Format

Request/candidate/result types shared by the providers, the orchestrator and
the resolution service.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from logo_cdn.schemas.logo_schema import LogoMetadata

from .rate_limiter import RateLimitDecision


@dataclass(frozen=True)
class LogoRequest:
    """로고 조회 요청

    Attributes:
        domain: 도메인 (있으면 우선)
        company_name: 회사명
        format: png | svg | webp
        size: 64 ~ 512 또는 None
        greyscale: 흑백 요청 (프로바이더에 그대로 전달)
        use_cache: False면 캐시 조회를 건너뜀 (저장은 수행)
    """

    domain: Optional[str] = None
    company_name: Optional[str] = None
    format: str = "png"
    size: Optional[int] = None
    greyscale: bool = False
    use_cache: bool = True

    @property
    def is_name_only(self) -> bool:
        """회사명만 있고 도메인이 없는 요청"""
        return not self.domain and bool(self.company_name)

    @property
    def identifier(self) -> str:
        """로깅용 식별자"""
        return self.domain or self.company_name or ""

    def with_domain(self, domain: str) -> "LogoRequest":
        """도메인을 채운 새 요청 (폴백 재시도용)"""
        return replace(self, domain=domain)


@dataclass
class CandidateResult:
    """프로바이더 1회 시도 결과

    한 요청 안에서만 사용합니다. content는 바이트 fetch에 성공한 경우에만 채워집니다.
    """

    success: bool
    provider: str
    source_url: Optional[str] = None
    error: Optional[str] = None
    content: Optional[bytes] = None
    byte_length: Optional[int] = None
    elapsed_ms: Optional[float] = None
    content_type: Optional[str] = None

    @property
    def has_bytes(self) -> bool:
        return bool(self.content)

    @classmethod
    def succeeded(
        cls,
        provider: str,
        source_url: str,
        elapsed_ms: Optional[float] = None,
        content_type: Optional[str] = None,
    ) -> "CandidateResult":
        """검증(verify) 성공 후보 생성 (바이트는 아직 없음)"""
        return cls(
            success=True,
            provider=provider,
            source_url=source_url,
            elapsed_ms=elapsed_ms,
            content_type=content_type,
        )

    @classmethod
    def failed(
        cls, provider: str, error: str, elapsed_ms: Optional[float] = None
    ) -> "CandidateResult":
        """실패 후보 생성"""
        return cls(
            success=False,
            provider=provider,
            error=error,
            elapsed_ms=elapsed_ms,
        )

    def with_content(
        self, content: bytes, content_type: Optional[str] = None
    ) -> "CandidateResult":
        """바이트 fetch 결과를 붙인 새 후보"""
        return replace(
            self,
            content=content,
            byte_length=len(content),
            content_type=content_type or self.content_type,
        )


@dataclass
class ProviderOutcome:
    """프로바이더 체인 1회(+폴백 재시도) 실행 결과

    Attributes:
        candidates: 성공한 후보 목록 (비어있을 수 있음)
        errors: "<provider>: <error>" 형식의 실패 목록
        resolved_domain: 도메인 폴백이 실행되어 찾은 도메인
    """

    candidates: list[CandidateResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    resolved_domain: Optional[str] = None

    @property
    def has_success(self) -> bool:
        return bool(self.candidates)

    @property
    def error_summary(self) -> Optional[str]:
        """모든 프로바이더 실패 시 요약 메시지"""
        if self.candidates:
            return None
        if not self.errors:
            return "All providers failed"
        return "All providers failed: " + "; ".join(self.errors)


class ResolutionStatus(str, Enum):
    """조회 상태"""

    CACHE_HIT = "cache_hit"  # 캐시 히트
    PROVIDER_SUCCESS = "provider_success"  # 프로바이더에서 바이트까지 확보
    URL_ONLY = "url_only"  # URL만 확보 (캐시 저장 안 함)
    NOT_FOUND = "not_found"  # 모든 경로 실패
    RATE_LIMITED = "rate_limited"  # 요청 한도 초과
    INVALID_REQUEST = "invalid_request"  # 도메인/회사명 누락 등


@dataclass
class ResolutionResult:
    """로고 조회 결과 표준 포맷

    Attributes:
        status: 조회 상태
        logo_bytes: 로고 바이너리
        logo_url: 프로바이더 원본 URL
        metadata: 저장(또는 캐시에서 읽은) 메타데이터
        from_cache: 캐시에서 반환했는지 여부
        error: 오류 메시지
        rate_limit: rate limit 판정 (검사한 경우)
        elapsed_ms: 소요 시간 (밀리초)
    """

    status: ResolutionStatus
    logo_bytes: Optional[bytes] = None
    logo_url: Optional[str] = None
    metadata: Optional[LogoMetadata] = None
    from_cache: bool = False
    error: Optional[str] = None
    rate_limit: Optional[RateLimitDecision] = None
    elapsed_ms: Optional[float] = None

    @property
    def success(self) -> bool:
        """성공 여부 반환"""
        return self.status in (
            ResolutionStatus.CACHE_HIT,
            ResolutionStatus.PROVIDER_SUCCESS,
            ResolutionStatus.URL_ONLY,
        )

    @classmethod
    def from_cache(
        cls,
        logo_bytes: bytes,
        metadata: LogoMetadata,
        elapsed_ms: float,
        rate_limit: Optional[RateLimitDecision] = None,
    ) -> "ResolutionResult":
        """캐시 히트 결과 생성"""
        return cls(
            status=ResolutionStatus.CACHE_HIT,
            logo_bytes=logo_bytes,
            logo_url=metadata.original_url,
            metadata=metadata,
            from_cache=True,
            rate_limit=rate_limit,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def from_provider(
        cls,
        logo_bytes: bytes,
        logo_url: Optional[str],
        metadata: LogoMetadata,
        elapsed_ms: float,
        rate_limit: Optional[RateLimitDecision] = None,
    ) -> "ResolutionResult":
        """프로바이더 성공 결과 생성 (저장 실패여도 바이트는 반환)"""
        return cls(
            status=ResolutionStatus.PROVIDER_SUCCESS,
            logo_bytes=logo_bytes,
            logo_url=logo_url,
            metadata=metadata,
            from_cache=False,
            rate_limit=rate_limit,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def url_only(
        cls,
        logo_url: str,
        elapsed_ms: float,
        rate_limit: Optional[RateLimitDecision] = None,
    ) -> "ResolutionResult":
        """URL만 확보한 결과 생성"""
        return cls(
            status=ResolutionStatus.URL_ONLY,
            logo_url=logo_url,
            rate_limit=rate_limit,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def not_found(
        cls,
        error: str,
        elapsed_ms: float,
        rate_limit: Optional[RateLimitDecision] = None,
    ) -> "ResolutionResult":
        """결과 없음 생성"""
        return cls(
            status=ResolutionStatus.NOT_FOUND,
            error=error,
            rate_limit=rate_limit,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def rate_limited(
        cls, rate_limit: RateLimitDecision, elapsed_ms: float
    ) -> "ResolutionResult":
        """요청 한도 초과 결과 생성"""
        return cls(
            status=ResolutionStatus.RATE_LIMITED,
            error="Rate limit exceeded",
            rate_limit=rate_limit,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def invalid_request(cls, error: str, elapsed_ms: float = 0.0) -> "ResolutionResult":
        """잘못된 요청 결과 생성"""
        return cls(
            status=ResolutionStatus.INVALID_REQUEST,
            error=error,
            elapsed_ms=elapsed_ms,
        )
