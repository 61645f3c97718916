"""Wikipedia provider

회사명으로 문서를 찾고 infobox의 logo/logotype 파일을 Wikimedia Commons URL로 바꿉니다.
"""

import re
from typing import Any, Dict, Optional

from logo_cdn.core.logging import logger
from logo_cdn.engine.result import CandidateResult, LogoRequest

from .base import HttpLogoProvider, ProviderName

WIKIPEDIA_API = "https://en.wikipedia.org/w/api.php"
COMMONS_API = "https://commons.wikimedia.org/w/api.php"

_INFOBOX_FIELD = r"\|\s*{field}\s*=\s*\[\[(?:File|Image):([^|\]]+)"
_LOGO_FIELDS = ("logo", "logotype")

# 건물/사진으로 보이는 page image는 로고로 쓰지 않음
_NON_LOGO_WORDS = ("tower", "building", "headquarters", "office", "hq")


def extract_infobox_logo_file(wikitext: str) -> Optional[str]:
    """infobox에서 로고 파일명 추출

    logo → logotype 순서로 보고, 마지막으로 image 필드는 파일명에 logo가 있을 때만 사용합니다.
    """
    if not wikitext:
        return None

    for field in _LOGO_FIELDS:
        match = re.search(_INFOBOX_FIELD.format(field=field), wikitext, re.IGNORECASE)
        if match:
            return match.group(1).strip()

    match = re.search(_INFOBOX_FIELD.format(field="image"), wikitext, re.IGNORECASE)
    if match:
        file_name = match.group(1).strip()
        if "logo" in file_name.lower():
            return file_name

    return None


def looks_like_logo(image_url: str) -> bool:
    lowered = (image_url or "").lower()
    if any(word in lowered for word in _NON_LOGO_WORDS):
        return False
    return "logo" in lowered


def _first_page(data: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(data, dict):
        return None
    pages = (data.get("query") or {}).get("pages")
    if not isinstance(pages, dict):
        return None
    for page in pages.values():
        if isinstance(page, dict):
            return page
    return None


class WikipediaProvider(HttpLogoProvider):
    name = ProviderName.WIKIPEDIA.value

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    async def find_page_title(self, company_name: str) -> Optional[str]:
        response = await self.http.get_json(
            WIKIPEDIA_API,
            timeout_s=self.timeout_s,
            headers=self._headers(),
            params={
                "action": "query",
                "list": "search",
                "srsearch": company_name.strip(),
                "srlimit": 5,
                "format": "json",
            },
        )
        if response is None or response[0] != 200:
            return None

        results = (response[1] or {}).get("query", {}).get("search") or []
        if results and isinstance(results[0], dict):
            return results[0].get("title")
        return None

    async def commons_file_url(self, file_name: str) -> Optional[str]:
        """파일명 → Commons 원본 URL"""
        title = file_name if file_name.startswith("File:") else f"File:{file_name}"
        response = await self.http.get_json(
            COMMONS_API,
            timeout_s=self.timeout_s,
            headers=self._headers(),
            params={
                "action": "query",
                "titles": title,
                "prop": "imageinfo",
                "iiprop": "url",
                "format": "json",
            },
        )
        if response is None or response[0] != 200:
            return None

        page = _first_page(response[1])
        infos = (page or {}).get("imageinfo") or []
        if infos and isinstance(infos[0], dict):
            return infos[0].get("url")
        return None

    async def find_logo_url(self, page_title: str) -> Optional[str]:
        response = await self.http.get_json(
            WIKIPEDIA_API,
            timeout_s=self.timeout_s,
            headers=self._headers(),
            params={
                "action": "query",
                "titles": page_title,
                "prop": "pageimages|revisions",
                "piprop": "original",
                "rvprop": "content",
                "rvslots": "main",
                "format": "json",
            },
        )
        if response is None or response[0] != 200:
            return None

        page = _first_page(response[1])
        if page is None:
            return None

        revisions = page.get("revisions") or []
        if revisions:
            wikitext = revisions[0].get("slots", {}).get("main", {}).get("content", "")
            file_name = extract_infobox_logo_file(wikitext)
            if file_name:
                logger.debug(f"[{self.name}] infobox logo: {file_name}")
                url = await self.commons_file_url(file_name)
                if url:
                    return url

        page_image = (page.get("original") or {}).get("source")
        if page_image and looks_like_logo(page_image):
            return page_image
        return None

    async def _attempt(self, request: LogoRequest, started: float) -> CandidateResult:
        if not request.company_name:
            return self.fail("Company name required for Wikipedia", started)

        title = await self.find_page_title(request.company_name)
        if not title:
            return self.fail("Wikipedia page not found", started)

        logo_url = await self.find_logo_url(title)
        if not logo_url:
            return self.fail("No logo found on Wikipedia page", started)

        return await self.verify(logo_url, started)
