"""Result Ranker - Deterministic Winner Selection

성공한 후보 중 하나를 고릅니다. 정렬 키가 전순서(total order)이므로
입력 순서와 무관하게 항상 같은 후보가 선택됩니다.
"""

from typing import Iterable, Optional
from urllib.parse import urlparse

from logo_cdn.core.logging import logger

from .result import CandidateResult

# 프로바이더 신뢰도 (높을수록 우선)
PROVIDER_TIERS: dict[str, int] = {
    "brandfetch": 40,
    "logo.dev": 30,
    "getlogo.dev": 30,
    "wikipedia": 20,
    "google-favicon": 10,
}
DEFAULT_TIER = 20

RASTER_FORMATS = frozenset({"png", "webp", "jpeg", "jpg", "gif", "avif", "ico"})

_CONTENT_TYPE_FORMATS = {
    "image/svg+xml": "svg",
    "image/png": "png",
    "image/webp": "webp",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/avif": "avif",
    "image/x-icon": "ico",
    "image/vnd.microsoft.icon": "ico",
}


def infer_format(content_type: Optional[str], url: Optional[str]) -> Optional[str]:
    """Content-Type, 없으면 URL 확장자로 이미지 포맷 추정

    Args:
        content_type: 응답 Content-Type (파라미터 포함 가능)
        url: 후보 URL

    Returns:
        "svg" | "png" | ... 또는 None (알 수 없음)
    """
    if content_type:
        mime = content_type.split(";", 1)[0].strip().lower()
        if mime in _CONTENT_TYPE_FORMATS:
            return _CONTENT_TYPE_FORMATS[mime]

    if url:
        path = urlparse(url).path.lower()
        last_segment = path.rsplit("/", 1)[-1]
        if "." in last_segment:
            ext = last_segment.rsplit(".", 1)[-1]
            if ext == "svg" or ext in RASTER_FORMATS:
                return ext

    return None


def format_priority(fmt: Optional[str]) -> int:
    """svg(3) > raster(2) > unknown(1)"""
    if fmt == "svg":
        return 3
    if fmt in RASTER_FORMATS:
        return 2
    return 1


class ResultRanker:
    """후보 순위 결정

    우선순위:
    1. 프로바이더 tier
    2. 포맷 (svg > raster > 알 수 없음)
    3. 바이트 확보 여부, 확보했다면 더 큰 쪽
    4. 더 짧은 응답 시간
    5. 프로바이더 이름, URL (동점 처리)

    바이트가 있는 후보와 없는 후보가 만나면 응답 시간과 무관하게 바이트가 있는 쪽이 이깁니다.
    "둘 다 바이트가 있을 때만 크기 비교, 아니면 응답 시간" 규칙은 추이적이지 않아
    입력 순서에 따라 승자가 바뀌므로, 바이트 확보 여부를 별도 단계로 두어 전순서를 유지합니다.
    """

    def __init__(self, tiers: Optional[dict[str, int]] = None, default_tier: int = DEFAULT_TIER):
        self.tiers = dict(PROVIDER_TIERS if tiers is None else tiers)
        self.default_tier = default_tier

    def tier_of(self, provider: str) -> int:
        return self.tiers.get(provider, self.default_tier)

    def sort_key(self, candidate: CandidateResult) -> tuple:
        """오름차순 정렬 시 최선 후보가 맨 앞에 오는 키"""
        fmt = infer_format(candidate.content_type, candidate.source_url)
        size = len(candidate.content) if candidate.content else 0
        latency = candidate.elapsed_ms if candidate.elapsed_ms is not None else float("inf")
        return (
            -self.tier_of(candidate.provider),
            -format_priority(fmt),
            -int(candidate.has_bytes),
            -size,
            latency,
            candidate.provider,
            candidate.source_url or "",
        )

    def rank(self, candidates: Iterable[CandidateResult]) -> list[CandidateResult]:
        """성공 후보만 골라 최선 순으로 정렬"""
        successful = [c for c in candidates if c.success]
        return sorted(successful, key=self.sort_key)

    def select(self, candidates: Iterable[CandidateResult]) -> Optional[CandidateResult]:
        """
        최선 후보 1개 선택

        Args:
            candidates: 후보 목록 (실패 후보는 무시)

        Returns:
            선택된 후보 또는 None (성공 후보가 없을 때)
        """
        ranked = self.rank(candidates)
        if not ranked:
            return None

        winner = ranked[0]
        logger.debug(
            f"[Ranker] winner={winner.provider}, tier={self.tier_of(winner.provider)}, "
            f"bytes={winner.byte_length}, candidates={len(ranked)}"
        )
        return winner
