"""Cache Key Derivation

도메인/회사명 + 포맷 + 크기로부터 두 스토리지 계층의 키를 만드는 유일한 경로입니다.
조회/저장/무효화 모두 이 모듈을 거쳐야 키가 어긋나지 않습니다.
"""

import re
from dataclasses import dataclass
from typing import Optional

_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*://")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_domain(value: str) -> str:
    """도메인 정규화

    "https://WWW.Example.com:443/path?q=1" → "example.com"

    Args:
        value: 사용자가 입력한 도메인 또는 URL

    Returns:
        소문자 호스트명 (프로토콜, www., 경로, 포트, 끝의 점 제거). 남는 게 없으면 ""
    """
    host = (value or "").strip().lower()
    host = _SCHEME_RE.sub("", host)

    for sep in ("/", "?", "#"):
        host = host.split(sep, 1)[0]

    # user:pass@host
    if "@" in host:
        host = host.rsplit("@", 1)[1]
    host = host.split(":", 1)[0]
    host = host.strip(".")

    if host.startswith("www."):
        host = host[4:]
    return host


def slugify_company_name(name: str) -> str:
    """회사명 → 캐시 키용 slug ("Acme  Corp" → "acme-corp")"""
    return _WHITESPACE_RE.sub("-", (name or "").strip().lower())


@dataclass(frozen=True)
class CacheKey:
    """캐시 식별 튜플 (basis, format, size)

    basis는 정규화된 도메인이거나, 도메인이 없을 때 "name:<slug>" 입니다.
    """

    basis: str
    format: str = "png"
    size: Optional[int] = None

    @property
    def _size_suffix(self) -> str:
        return f"_{self.size}" if self.size else ""

    @property
    def blob_key(self) -> str:
        """durable tier 로고 바이너리 키"""
        return f"logos/{self.basis}{self._size_suffix}.{self.format}"

    @property
    def sidecar_key(self) -> str:
        """durable tier 메타데이터 JSON 키"""
        return f"metadata/{self.basis}{self._size_suffix}.{self.format}.json"

    @property
    def kv_key(self) -> str:
        """fast tier 메타데이터 키"""
        return f"logo:{self.basis}:{self.format}{self._size_suffix}"

    @property
    def is_name(self) -> bool:
        return self.basis.startswith("name:")

    @property
    def alias_key(self) -> str:
        """fast tier 회사명 → 도메인 별칭 키 (포맷/크기와 무관)"""
        return f"alias:{self.basis}"

    def __str__(self) -> str:
        return self.kv_key


def derive_cache_key(
    domain: Optional[str] = None,
    company_name: Optional[str] = None,
    format: str = "png",
    size: Optional[int] = None,
) -> CacheKey:
    """요청 식별자로부터 CacheKey 생성

    도메인이 있으면 도메인이 우선입니다.

    Args:
        domain: 도메인 (URL 형태도 허용)
        company_name: 회사명
        format: 이미지 포맷
        size: 요청 크기

    Returns:
        CacheKey

    Raises:
        ValueError: 도메인과 회사명이 모두 비어있는 경우
    """
    fmt = (format or "png").strip().lower()

    if domain:
        basis = normalize_domain(domain)
        if basis:
            return CacheKey(basis=basis, format=fmt, size=size)

    if company_name:
        slug = slugify_company_name(company_name)
        if slug:
            return CacheKey(basis=f"name:{slug}", format=fmt, size=size)

    raise ValueError("Either domain or company_name must be provided")
