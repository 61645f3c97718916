"""Brandfetch provider (https://docs.brandfetch.com/)

도메인이 있으면 바로 brand 조회, 회사명만 있으면 search API로 도메인을 먼저 찾습니다.
"""

from typing import Any, Dict, Optional
from urllib.parse import quote

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger
from logo_cdn.engine.keys import normalize_domain
from logo_cdn.engine.result import CandidateResult, LogoRequest

from .base import HttpLogoProvider, ProviderName

PREFERRED_FORMATS = ("svg", "png")


def pick_logo_url(brand_data: Any) -> Optional[str]:
    """brand 응답에서 로고 URL 선택 (SVG 우선, 없으면 PNG)"""
    if not isinstance(brand_data, dict):
        return None

    logos = brand_data.get("logos")
    if not isinstance(logos, list):
        return None

    for wanted in PREFERRED_FORMATS:
        for logo in logos:
            formats = logo.get("formats") if isinstance(logo, dict) else None
            if not isinstance(formats, list):
                continue
            for fmt in formats:
                if isinstance(fmt, dict) and fmt.get("format") == wanted and fmt.get("src"):
                    return fmt["src"]
    return None


class BrandfetchProvider(HttpLogoProvider):
    name = ProviderName.BRANDFETCH.value
    API_BASE = "https://api.brandfetch.io/v2"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = settings.brandfetch_key if api_key is None else api_key

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def search_brand(self, company_name: str) -> Optional[str]:
        """회사명 → 첫 번째 검색 결과의 도메인"""
        url = f"{self.API_BASE}/search/{quote(company_name)}"
        response = await self.http.get_json(url, timeout_s=self.timeout_s, headers=self._headers())
        if response is None:
            return None

        status, data = response
        if status != 200:
            logger.debug(f"[{self.name}] search returned {status}")
            return None

        if isinstance(data, list) and data and isinstance(data[0], dict) and data[0].get("domain"):
            return data[0]["domain"]
        return None

    async def _attempt(self, request: LogoRequest, started: float) -> CandidateResult:
        if request.domain:
            domain = normalize_domain(request.domain)
        elif request.company_name:
            domain = await self.search_brand(request.company_name)
            if not domain:
                return self.fail(f'Brand not found for "{request.company_name}"', started)
        else:
            return self.fail("Either domain or company_name must be provided", started)

        response = await self.http.get_json(
            f"{self.API_BASE}/brands/{quote(domain)}",
            timeout_s=self.timeout_s,
            headers=self._headers(),
        )
        if response is None:
            return self.fail("Brand lookup failed", started)

        status, brand_data = response
        if status != 200:
            return self.fail(self.status_error(status), started)

        logo_url = pick_logo_url(brand_data)
        if not logo_url:
            return self.fail("No logo found in brand data", started)

        return await self.verify(logo_url, started)
