"""Domain search strategies

각 전략은 회사명으로 후보 URL 목록을 순서대로 돌려주기만 합니다.
도메인 추출과 차단 목록 필터링은 DomainResolver가 담당합니다.
"""

from typing import List, Optional

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger
from logo_cdn.providers.http_client import SharedHttpClient, get_shared_http_client

from .parsing import (
    extract_duckduckgo_result_urls,
    extract_google_result_urls,
    get_blocked_keyword,
)

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class SearchStrategy:
    """검색 전략 공통 구현"""

    name: str = ""

    def __init__(
        self,
        http_client: Optional[SharedHttpClient] = None,
        timeout_s: Optional[float] = None,
    ):
        self.http = http_client or get_shared_http_client()
        self.timeout_s = timeout_s or settings.search_timeout_s

    async def find_urls(self, company_name: str) -> List[str]:
        raise NotImplementedError


class WikipediaSearchStrategy(SearchStrategy):
    """OpenSearch로 문서를 찾고 문서의 외부 링크를 후보로 사용"""

    name = "wikipedia"
    API_URL = "https://en.wikipedia.org/w/api.php"

    async def find_urls(self, company_name: str) -> List[str]:
        response = await self.http.get_json(
            self.API_URL,
            timeout_s=self.timeout_s,
            params={"action": "opensearch", "search": company_name, "limit": 1, "format": "json"},
        )
        if response is None or response[0] != 200:
            return []

        # [query, [titles], [descriptions], [urls]]
        data = response[1]
        if not isinstance(data, list) or len(data) < 2 or not data[1]:
            return []
        title = data[1][0]

        response = await self.http.get_json(
            self.API_URL,
            timeout_s=self.timeout_s,
            params={"action": "query", "titles": title, "prop": "extlinks", "format": "json"},
        )
        if response is None or response[0] != 200 or not isinstance(response[1], dict):
            return []

        pages = (response[1].get("query") or {}).get("pages") or {}
        urls: List[str] = []
        for page in pages.values():
            for link in page.get("extlinks") or []:
                url = link.get("*") or link.get("url")
                if url and url.startswith(("http://", "https://")):
                    urls.append(url)
            break
        return urls


class DuckDuckGoSearchStrategy(SearchStrategy):
    name = "duckduckgo"
    SEARCH_URL = "https://html.duckduckgo.com/html/"

    async def find_urls(self, company_name: str) -> List[str]:
        response = await self.http.get_text(
            self.SEARCH_URL,
            timeout_s=self.timeout_s,
            params={"q": f"{company_name} official website"},
            headers={"User-Agent": BROWSER_USER_AGENT, "Accept": "text/html"},
        )
        if response is None:
            return []

        status, html = response
        if status != 200:
            logger.debug(f"[DomainSearch] duckduckgo returned {status}")
            return []

        blocked = get_blocked_keyword(html)
        if blocked:
            logger.info(f"[DomainSearch] duckduckgo blocked: keyword='{blocked}'")
            return []
        return extract_duckduckgo_result_urls(html)


class GoogleSearchStrategy(SearchStrategy):
    """최후 수단 (rate limit 가능성이 높음)"""

    name = "google"
    SEARCH_URL = "https://www.google.com/search"

    async def find_urls(self, company_name: str) -> List[str]:
        response = await self.http.get_text(
            self.SEARCH_URL,
            timeout_s=self.timeout_s,
            params={"q": f"{company_name} official website"},
            headers={"User-Agent": BROWSER_USER_AGENT, "Accept": "text/html"},
        )
        if response is None:
            return []

        status, html = response
        if status != 200:
            logger.debug(f"[DomainSearch] google returned {status}")
            return []

        blocked = get_blocked_keyword(html)
        if blocked:
            logger.info(f"[DomainSearch] google blocked: keyword='{blocked}'")
            return []
        return extract_google_result_urls(html)


def build_default_strategies(
    http_client: Optional[SharedHttpClient] = None,
) -> tuple[SearchStrategy, ...]:
    """Wikipedia → DuckDuckGo → Google"""
    return (
        WikipediaSearchStrategy(http_client=http_client),
        DuckDuckGoSearchStrategy(http_client=http_client),
        GoogleSearchStrategy(http_client=http_client),
    )
