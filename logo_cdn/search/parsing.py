"""검색 결과 HTML 파싱 유틸.

네트워크(fetch)와 분리된 순수 파싱 로직만 담습니다.
"""

from __future__ import annotations

from typing import List, Optional
from urllib.parse import parse_qs, unquote, urlparse

from selectolax.parser import HTMLParser


_BLOCK_KEYWORDS = (
    "unusual traffic",
    "captcha",
    "are you a robot",
    "verify you are human",
)


def get_blocked_keyword(html: str) -> Optional[str]:
    if not html:
        return None
    lowered = html.lower()
    for k in _BLOCK_KEYWORDS:
        if k in lowered:
            return k
    return None


def unwrap_redirect(href: str) -> Optional[str]:
    """검색엔진 리다이렉트 링크에서 실제 목적지 URL 추출

    - "//duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.com" -> "https://example.com"
    - "/url?q=https://example.com&sa=U" -> "https://example.com"
    - "https://example.com" -> 그대로
    """
    if not href:
        return None

    h = href.strip()
    if h.startswith("//"):
        h = "https:" + h

    parsed = urlparse(h)
    params = parse_qs(parsed.query)

    for name in ("uddg", "q", "url"):
        values = params.get(name)
        if values and values[0].startswith(("http://", "https://")):
            return unquote(values[0])

    if parsed.scheme in ("http", "https") and parsed.netloc:
        return h
    return None


def extract_duckduckgo_result_urls(html: str) -> List[str]:
    """DuckDuckGo HTML 결과 페이지의 결과 링크 (순서 유지)"""
    if not html:
        return []

    tree = HTMLParser(html)
    urls: List[str] = []
    for node in tree.css("a.result__a"):
        target = unwrap_redirect(node.attributes.get("href") or "")
        if target:
            urls.append(target)
    return urls


def extract_google_result_urls(html: str) -> List[str]:
    """Google 결과 페이지의 /url?q= 리다이렉트 링크 (순서 유지)"""
    if not html:
        return []

    tree = HTMLParser(html)
    urls: List[str] = []
    for node in tree.css("a"):
        href = node.attributes.get("href") or ""
        if not href.startswith("/url?"):
            continue
        target = unwrap_redirect(href)
        if target:
            urls.append(target)
    return urls
