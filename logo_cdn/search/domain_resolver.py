"""Domain Resolver - Company Name → Domain Fallback

프로바이더가 회사명만으로 모두 실패했을 때 한 번 호출됩니다.
검색 전략을 순서대로 시도하고 첫 번째로 허용되는 도메인을 돌려줍니다.
"""

import time
from typing import Optional, Sequence
from urllib.parse import urlparse

from logo_cdn.core.logging import logger, sanitize_for_log

from .strategies import SearchStrategy, build_default_strategies

# 부분 문자열로 거르는 브랜드 (youtube-nocookie.com, googleusercontent.com 등 파생 도메인 포함)
_SEARCH_ENGINE_STEMS = frozenset({"google", "duckduckgo", "yahoo"})
_ENCYCLOPEDIA_STEMS = frozenset({"wiki", "britannica"})
# 짧아서 라벨 단위로만 비교 (plumbing.com, govee.com 허용)
_SHORT_LABELS = frozenset({"bing", "gov", "mil"})
_SOCIAL_STEMS = frozenset({
    "facebook",
    "twitter",
    "instagram",
    "linkedin",
    "youtube",
    "tiktok",
    "pinterest",
    "reddit",
})
_SOCIAL_EXACT = frozenset({"x.com", "youtu.be", "fb.com", "t.co"})


def extract_domain(url: str) -> Optional[str]:
    """URL → "example.com" (www. 제거, 점이 없으면 None)"""
    if not url:
        return None

    try:
        hostname = urlparse(url.strip()).hostname
    except ValueError:
        return None

    if not hostname:
        return None

    domain = hostname.lower().strip(".")
    if domain.startswith("www."):
        domain = domain[4:]

    if "." not in domain:
        return None
    return domain


def is_disallowed_domain(domain: str) -> bool:
    """회사 공식 도메인이 될 수 없는 도메인인지 확인

    검색엔진, 위키/백과사전, 정부/군 도메인, 주요 소셜/영상 네트워크를 거릅니다.
    """
    if not domain:
        return True

    domain = domain.lower()
    if set(domain.split(".")) & _SHORT_LABELS:
        return True
    for stems in (_SEARCH_ENGINE_STEMS, _ENCYCLOPEDIA_STEMS, _SOCIAL_STEMS):
        if any(stem in domain for stem in stems):
            return True
    if any(domain == d or domain.endswith("." + d) for d in _SOCIAL_EXACT):
        return True
    return False


class DomainResolver:
    """회사명 → 도메인 (절대 예외를 던지지 않음)

    Usage:
        resolver = DomainResolver()
        domain = await resolver.resolve("Acme Corporation")
    """

    def __init__(self, strategies: Optional[Sequence[SearchStrategy]] = None):
        """
        Args:
            strategies: 검색 전략 (기본값: Wikipedia → DuckDuckGo → Google)
        """
        self.strategies = tuple(strategies) if strategies is not None else build_default_strategies()

    async def resolve(self, company_name: str) -> Optional[str]:
        """
        회사명으로 공식 도메인 찾기

        Args:
            company_name: 회사명

        Returns:
            허용되는 첫 번째 도메인 또는 None
        """
        if not company_name or not company_name.strip():
            return None

        name = company_name.strip()
        for strategy in self.strategies:
            started = time.perf_counter()
            try:
                urls = await strategy.find_urls(name)
            except Exception as e:
                logger.warning(
                    f"[DomainSearch] {strategy.name} failed: company='{sanitize_for_log(name)}', "
                    f"error={type(e).__name__}: {e}"
                )
                continue

            domain = self._first_allowed(urls)
            elapsed_ms = (time.perf_counter() - started) * 1000
            if domain:
                logger.info(
                    f"[DomainSearch] resolved via {strategy.name}: "
                    f"company='{sanitize_for_log(name)}' -> {domain} ({elapsed_ms:.0f}ms)"
                )
                return domain

            logger.debug(
                f"[DomainSearch] {strategy.name} found no acceptable domain "
                f"(candidates={len(urls)}, {elapsed_ms:.0f}ms)"
            )

        logger.info(f"[DomainSearch] no domain found: company='{sanitize_for_log(name)}'")
        return None

    @staticmethod
    def _first_allowed(urls: Sequence[str]) -> Optional[str]:
        for url in urls or []:
            domain = extract_domain(url)
            if domain and not is_disallowed_domain(domain):
                return domain
        return None
