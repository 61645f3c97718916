"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (메모리 KV/Blob 저장소, HTTP 클라이언트, 프로바이더)
- 전역 상태 초기화

금지:
- 실제 네트워크 호출
- 실제 Redis/S3 연결
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional, Union

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(Path(__file__).parent))

from logo_cdn.core.exceptions import StorageConnectionException  # noqa: E402
from logo_cdn.engine.result import CandidateResult, LogoRequest  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


# ============================================================================
# 저장소 Fake
# ============================================================================

@dataclass
class FakeKeyValueStore:
    """메모리 KV 저장소

    - fail_* 플래그로 장애 주입
    - TTL은 기록만 하고 만료시키지 않음
    """

    data: dict[str, str] = field(default_factory=dict)
    ttls: dict[str, Optional[int]] = field(default_factory=dict)
    fail_get: bool = False
    fail_put: bool = False
    fail_delete: bool = False
    get_calls: int = 0
    put_calls: int = 0

    def get(self, key: str) -> Optional[str]:
        self.get_calls += 1
        if self.fail_get:
            raise StorageConnectionException(tier="kv", reason="injected get failure")
        return self.data.get(key)

    def put(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        self.put_calls += 1
        if self.fail_put:
            raise StorageConnectionException(tier="kv", reason="injected put failure")
        self.data[key] = value
        self.ttls[key] = ttl_seconds

    def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageConnectionException(tier="kv", reason="injected delete failure")
        self.data.pop(key, None)
        self.ttls.pop(key, None)


@dataclass
class StoredBlob:
    data: bytes
    content_type: str
    cache_control: Optional[str] = None
    metadata: Optional[dict[str, str]] = None


@dataclass
class FakeBlobStore:
    """메모리 Blob 저장소

    - fail_* 플래그는 모든 키, fail_put_keys는 특정 키에만 장애 주입
    """

    objects: dict[str, StoredBlob] = field(default_factory=dict)
    fail_get: bool = False
    fail_put: bool = False
    fail_delete: bool = False
    fail_put_keys: set[str] = field(default_factory=set)

    def get(self, key: str) -> Optional[bytes]:
        if self.fail_get:
            raise StorageConnectionException(tier="blob", reason="injected get failure")
        stored = self.objects.get(key)
        return stored.data if stored else None

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        cache_control: Optional[str] = None,
        metadata: Optional[dict[str, str]] = None,
    ) -> None:
        if self.fail_put or key in self.fail_put_keys:
            raise StorageConnectionException(tier="blob", reason="injected put failure")
        self.objects[key] = StoredBlob(data, content_type, cache_control, metadata)

    def head(self, key: str) -> bool:
        return key in self.objects

    def delete(self, key: str) -> None:
        if self.fail_delete:
            raise StorageConnectionException(tier="blob", reason="injected delete failure")
        self.objects.pop(key, None)


@pytest.fixture
def kv_store() -> FakeKeyValueStore:
    return FakeKeyValueStore()


@pytest.fixture
def blob_store() -> FakeBlobStore:
    return FakeBlobStore()


# ============================================================================
# 시계
# ============================================================================

@dataclass
class FakeClock:
    """CacheManager(datetime)와 RateLimiter(epoch float) 양쪽에 쓰는 고정 시계"""

    epoch: float = 1_700_000_000.0

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.epoch, tz=timezone.utc)

    def time(self) -> float:
        return self.epoch

    def advance(self, seconds: float) -> None:
        self.epoch += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================================
# HTTP / 프로바이더 Fake
# ============================================================================

@dataclass
class FakeHttpClient:
    """오케스트레이터 바이트 fetch용 HTTP 클라이언트

    bytes_responses: url → (status, content, content_type) 또는 예외
    """

    bytes_responses: dict[str, Union[tuple[int, bytes, str], Exception, None]] = field(default_factory=dict)
    get_bytes_calls: list[str] = field(default_factory=list)

    async def get_bytes(self, url: str, *, timeout_s: float, headers: Any = None):
        _ = timeout_s
        self.get_bytes_calls.append(url)
        response = self.bytes_responses.get(url)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def http_client() -> FakeHttpClient:
    return FakeHttpClient()


@dataclass
class StubProvider:
    """고정 응답 프로바이더

    respond(request)가 CandidateResult를 돌려주거나 예외를 던집니다.
    """

    name: str
    respond: Callable[[LogoRequest], CandidateResult]
    calls: list[LogoRequest] = field(default_factory=list)

    async def attempt(self, request: LogoRequest) -> CandidateResult:
        self.calls.append(request)
        return self.respond(request)


def succeed_with(url: str, elapsed_ms: float = 50.0, content_type: str = "image/png"):
    def _respond(request: LogoRequest) -> CandidateResult:
        return CandidateResult.succeeded(
            provider="", source_url=url, elapsed_ms=elapsed_ms, content_type=content_type
        )
    return _respond


def fail_with(error: str, elapsed_ms: float = 20.0):
    def _respond(request: LogoRequest) -> CandidateResult:
        return CandidateResult.failed("", error, elapsed_ms)
    return _respond


def make_provider(name: str, respond: Callable[[LogoRequest], CandidateResult]) -> StubProvider:
    """응답의 provider 필드를 프로바이더 이름으로 채워주는 StubProvider"""

    def _named(request: LogoRequest) -> CandidateResult:
        result = respond(request)
        result.provider = name
        return result

    return StubProvider(name=name, respond=_named)


@dataclass
class StubDomainResolver:
    domain: Optional[str] = None
    calls: list[str] = field(default_factory=list)

    async def resolve(self, company_name: str) -> Optional[str]:
        self.calls.append(company_name)
        return self.domain
