"""logo.dev provider"""

from typing import Optional
from urllib.parse import quote, urlencode

from logo_cdn.core.config import settings
from logo_cdn.engine.keys import normalize_domain
from logo_cdn.engine.result import CandidateResult, LogoRequest

from .base import DEFAULT_LOGO_SIZE, HttpLogoProvider, ProviderName, compact_company_name


class LogoDevProvider(HttpLogoProvider):
    name = ProviderName.LOGODEV.value
    BASE_URL = "https://logo.dev/api/v1/logo"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = settings.logodev_key if api_key is None else api_key

    def build_url(self, request: LogoRequest) -> Optional[str]:
        if request.domain:
            target = normalize_domain(request.domain)
        elif request.company_name:
            target = compact_company_name(request.company_name)
        else:
            return None

        params = {}
        if self.api_key:
            params["key"] = self.api_key
        params["size"] = str(request.size or DEFAULT_LOGO_SIZE)
        params["format"] = request.format
        if request.greyscale:
            params["greyscale"] = "true"

        return f"{self.BASE_URL}/{quote(target)}?{urlencode(params)}"

    async def _attempt(self, request: LogoRequest, started: float) -> CandidateResult:
        url = self.build_url(request)
        if url is None:
            return self.fail("Either domain or company_name must be provided", started)
        return await self.verify(url, started, headers={"Accept": "image/*"})
