"""Logo Provider Base

모든 HTTP 기반 프로바이더가 공유하는 시도/검증/오류 변환 로직입니다.
"""

import re
import time
from enum import Enum
from typing import Dict, Optional

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger
from logo_cdn.engine.result import CandidateResult, LogoRequest

from .http_client import SharedHttpClient, get_shared_http_client


class ProviderName(str, Enum):
    """등록된 프로바이더 이름 (캐시 메타데이터/로그에 그대로 기록됨)"""

    GETLOGO = "getlogo.dev"
    LOGODEV = "logo.dev"
    BRANDFETCH = "brandfetch"
    WIKIPEDIA = "wikipedia"
    GOOGLE_FAVICON = "google-favicon"


DEFAULT_LOGO_SIZE = 256


def compact_company_name(company_name: str) -> str:
    """"Acme Corp" → "acmecorp" (프로바이더 URL 추정용)"""
    return re.sub(r"\s+", "", (company_name or "").strip().lower())


class HttpLogoProvider:
    """HTTP 프로바이더 공통 구현

    하위 클래스는 name과 _attempt()만 구현합니다.
    attempt()는 어떤 경우에도 예외를 던지지 않고 CandidateResult를 반환합니다.
    """

    name: str = ""

    def __init__(
        self,
        http_client: Optional[SharedHttpClient] = None,
        timeout_s: Optional[float] = None,
    ):
        """
        Args:
            http_client: 공유 HTTP 클라이언트 (기본값: 프로세스 싱글톤)
            timeout_s: 개별 HTTP 요청 타임아웃 (기본값: settings.provider_timeout_s)
        """
        self.http = http_client or get_shared_http_client()
        self.timeout_s = timeout_s or settings.provider_timeout_s

    async def attempt(self, request: LogoRequest) -> CandidateResult:
        """
        프로바이더 1회 시도

        Args:
            request: 로고 요청

        Returns:
            CandidateResult (성공 시 source_url, 실패 시 error)
        """
        started = time.perf_counter()
        try:
            return await self._attempt(request, started)
        except Exception as e:
            logger.debug(f"[{self.name}] attempt raised: {type(e).__name__}: {e}")
            return self.fail(f"{type(e).__name__}: {e}", started)

    async def _attempt(self, request: LogoRequest, started: float) -> CandidateResult:
        raise NotImplementedError

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def elapsed_ms(started: float) -> float:
        return (time.perf_counter() - started) * 1000

    def fail(self, error: str, started: float) -> CandidateResult:
        return CandidateResult.failed(self.name, error, self.elapsed_ms(started))

    @staticmethod
    def status_error(status: int) -> str:
        """HTTP 상태 → 짧은 실패 사유"""
        if status == 404:
            return "Logo not found"
        if status == 429:
            return "Rate limit exceeded"
        return f"HTTP {status}"

    async def verify(
        self,
        url: str,
        started: float,
        headers: Optional[Dict[str, str]] = None,
        min_bytes: int = 0,
    ) -> CandidateResult:
        """URL이 실제 이미지를 돌려주는지 확인

        Args:
            url: 후보 로고 URL
            started: 시도 시작 시각 (perf_counter)
            headers: 추가 요청 헤더
            min_bytes: 이보다 작은 본문은 유효한 이미지로 보지 않음

        Returns:
            CandidateResult
        """
        probe = await self.http.probe_image(url, timeout_s=self.timeout_s, headers=headers)

        if not probe.ok:
            return self.fail(self.status_error(probe.status), started)
        if not probe.is_image:
            return self.fail("Response is not an image", started)
        if probe.truncated:
            return self.fail("Image too large", started)
        if probe.byte_length < min_bytes:
            return self.fail("Image too small or invalid", started)

        return CandidateResult.succeeded(
            provider=self.name,
            source_url=url,
            elapsed_ms=self.elapsed_ms(started),
            content_type=probe.content_type,
        )
