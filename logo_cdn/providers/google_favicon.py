"""Google favicon service provider (최후 수단, 해상도가 낮음)"""

from urllib.parse import urlencode

from logo_cdn.engine.keys import normalize_domain
from logo_cdn.engine.result import CandidateResult, LogoRequest

from .base import DEFAULT_LOGO_SIZE, HttpLogoProvider, ProviderName

# 이보다 작은 응답은 빈 기본 아이콘으로 간주
MIN_FAVICON_BYTES = 100


class GoogleFaviconProvider(HttpLogoProvider):
    name = ProviderName.GOOGLE_FAVICON.value
    BASE_URL = "https://www.google.com/s2/favicons"

    def build_url(self, request: LogoRequest) -> str:
        params = {
            "domain": normalize_domain(request.domain or ""),
            "sz": str(request.size or DEFAULT_LOGO_SIZE),
        }
        return f"{self.BASE_URL}?{urlencode(params)}"

    async def _attempt(self, request: LogoRequest, started: float) -> CandidateResult:
        if not request.domain:
            return self.fail("Domain required for Google Favicon", started)

        return await self.verify(
            self.build_url(request),
            started,
            headers={"User-Agent": "Mozilla/5.0 (compatible; LogoCDN/1.0)"},
            min_bytes=MIN_FAVICON_BYTES,
        )
