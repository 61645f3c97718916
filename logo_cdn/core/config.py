"""설정 관리 - 환경 변수 로드 및 검증"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # Fast tier (Redis: 메타데이터 + rate limit 카운터)
    redis_url: str = "redis://localhost:6379/0"

    # Durable tier (S3 호환 오브젝트 스토리지: R2, MinIO 등)
    blob_bucket: str = "logos"
    blob_endpoint_url: Optional[str] = None
    blob_region: Optional[str] = None
    blob_prefix: str = ""

    # 캐시 정책
    cache_max_age_s: int = 2592000  # 30일 지나면 stale
    metadata_ttl_s: int = 31536000  # fast tier 메타데이터 TTL (1년)
    blob_cache_control: str = "public, max-age=31536000, immutable"

    # Rate limit (고정 윈도우)
    rate_limit_max_requests: int = 1000
    rate_limit_window_s: int = 3600

    # 로고 프로바이더
    # NOTE: 순서가 곧 우선순위입니다. 앱 시작 시 한 번만 읽습니다.
    providers: list[str] = [
        "getlogo.dev",
        "logo.dev",
        "brandfetch",
        "wikipedia",
        "google-favicon",
    ]
    provider_timeout_s: float = 8.0
    byte_fetch_timeout_s: float = 8.0
    getlogo_token: str = ""
    logodev_key: str = ""
    brandfetch_key: str = ""

    # 도메인 검색 (회사명 → 도메인 폴백)
    search_timeout_s: float = 5.0

    # HTTP 클라이언트
    http_user_agent: str = "LogoCDN/1.0 (+https://logo-cdn.dev)"
    http_impersonate: str = "chrome110"
    http_max_clients: int = 20
    # 로고 1개 다운로드 상한 (초과 시 스트림 중단)
    max_logo_bytes: int = 5 * 1024 * 1024

    # API
    api_title: str = "Logo CDN"
    api_version: str = "1.0.0"
    api_description: str = "여러 로고 프로바이더를 순서대로 시도하고 결과를 2단 캐시에 저장합니다."

    # 프로바이더 체인 전체(+도메인 폴백 재시도)를 감싸는 서버 측 하드 캡
    api_resolve_timeout_s: float = 60.0

    # 로깅
    log_level: str = "INFO"

    @field_validator("cache_max_age_s", "metadata_ttl_s")
    @classmethod
    def validate_cache_ages(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("cache ages must be positive")
        return v

    @field_validator("rate_limit_max_requests", "rate_limit_window_s")
    @classmethod
    def validate_rate_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("rate limit quota and window must be positive")
        return v

    @field_validator(
        "provider_timeout_s",
        "byte_fetch_timeout_s",
        "search_timeout_s",
        "api_resolve_timeout_s",
    )
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("http_max_clients", "max_logo_bytes")
    @classmethod
    def validate_http_limits(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("HTTP limits must be positive")
        return v

    @field_validator("redis_url", "blob_bucket")
    @classmethod
    def validate_required(cls, v: str) -> str:
        if not v:
            raise ValueError("redis_url and blob_bucket must not be empty")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
