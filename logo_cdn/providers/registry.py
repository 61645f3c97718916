"""Provider registry

설정에 선언된 순서대로 프로바이더를 한 번만 만들어 tuple로 고정합니다.
"""

from typing import Optional, Sequence

from logo_cdn.core.config import settings
from logo_cdn.core.logging import logger

from .base import HttpLogoProvider, ProviderName
from .brandfetch import BrandfetchProvider
from .getlogo import GetLogoProvider
from .google_favicon import GoogleFaviconProvider
from .http_client import SharedHttpClient
from .logodev import LogoDevProvider
from .wikipedia import WikipediaProvider

PROVIDER_CLASSES: dict[str, type[HttpLogoProvider]] = {
    ProviderName.GETLOGO.value: GetLogoProvider,
    ProviderName.LOGODEV.value: LogoDevProvider,
    ProviderName.BRANDFETCH.value: BrandfetchProvider,
    ProviderName.WIKIPEDIA.value: WikipediaProvider,
    ProviderName.GOOGLE_FAVICON.value: GoogleFaviconProvider,
}


def build_default_providers(
    names: Optional[Sequence[str]] = None,
    http_client: Optional[SharedHttpClient] = None,
) -> tuple[HttpLogoProvider, ...]:
    """
    프로바이더 목록 생성

    Args:
        names: 프로바이더 이름 순서 (기본값: settings.providers)
        http_client: 공유 HTTP 클라이언트

    Returns:
        선언 순서를 유지한 프로바이더 tuple (알 수 없는 이름과 중복은 건너뜀)
    """
    providers: list[HttpLogoProvider] = []
    seen: set[str] = set()

    for name in names if names is not None else settings.providers:
        cls = PROVIDER_CLASSES.get(name)
        if cls is None:
            logger.warning(f"Unknown logo provider in settings, skipped: {name}")
            continue
        if name in seen:
            continue
        seen.add(name)
        providers.append(cls(http_client=http_client))

    logger.info(f"Logo providers registered: {[p.name for p in providers]}")
    return tuple(providers)
