"""테스트 자산(데이터) 레이어

규칙:
- 로직 없음 (단순 dict/list/primitive)
- 엔진/네트워크 의존 없음
"""

from .provider_payloads import (
    BRANDFETCH_BRAND,
    BRANDFETCH_BRAND_PNG_ONLY,
    BRANDFETCH_SEARCH,
    PNG_12KB,
    SVG_LOGO,
    WIKITEXT_IMAGE_LOGO_ONLY,
    WIKITEXT_IMAGE_PHOTO_ONLY,
    WIKITEXT_WITH_LOGO,
    WIKITEXT_WITH_LOGOTYPE,
)
from .search_pages import DUCKDUCKGO_BLOCKED_HTML, DUCKDUCKGO_RESULTS_HTML, GOOGLE_RESULTS_HTML

__all__ = [
    "PNG_12KB",
    "SVG_LOGO",
    "BRANDFETCH_BRAND",
    "BRANDFETCH_BRAND_PNG_ONLY",
    "BRANDFETCH_SEARCH",
    "WIKITEXT_WITH_LOGO",
    "WIKITEXT_WITH_LOGOTYPE",
    "WIKITEXT_IMAGE_LOGO_ONLY",
    "WIKITEXT_IMAGE_PHOTO_ONLY",
    "DUCKDUCKGO_RESULTS_HTML",
    "DUCKDUCKGO_BLOCKED_HTML",
    "GOOGLE_RESULTS_HTML",
]
