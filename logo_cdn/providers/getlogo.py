"""getlogo.dev provider (https://getlogo.dev/)"""

from typing import Optional
from urllib.parse import quote, urlencode

from logo_cdn.core.config import settings
from logo_cdn.engine.keys import normalize_domain
from logo_cdn.engine.result import CandidateResult, LogoRequest

from .base import DEFAULT_LOGO_SIZE, HttpLogoProvider, ProviderName, compact_company_name


class GetLogoProvider(HttpLogoProvider):
    """도메인 기반 URL. 도메인이 없으면 "<회사명>.com"으로 추정합니다."""

    name = ProviderName.GETLOGO.value
    BASE_URL = "https://getlogo.dev/logos"

    def __init__(self, token: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.token = settings.getlogo_token if token is None else token

    def build_url(self, request: LogoRequest) -> Optional[str]:
        if request.domain:
            target = normalize_domain(request.domain)
        elif request.company_name:
            target = f"{compact_company_name(request.company_name)}.com"
        else:
            return None

        params = {}
        if self.token:
            params["token"] = self.token
        params["size"] = str(request.size or DEFAULT_LOGO_SIZE)
        params["format"] = request.format
        if request.greyscale:
            params["greyscale"] = "true"

        return f"{self.BASE_URL}/{quote(target)}?{urlencode(params)}"

    async def _attempt(self, request: LogoRequest, started: float) -> CandidateResult:
        url = self.build_url(request)
        if url is None:
            return self.fail("Either domain or company_name must be provided", started)
        return await self.verify(url, started)
