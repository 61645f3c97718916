"""ResultRanker 테스트"""

import itertools

import pytest

from logo_cdn.engine.ranker import PROVIDER_TIERS, ResultRanker, format_priority, infer_format
from logo_cdn.engine.result import CandidateResult


def candidate(provider, url, content=None, elapsed_ms=100.0, content_type=None, success=True):
    c = CandidateResult(
        success=success,
        provider=provider,
        source_url=url,
        elapsed_ms=elapsed_ms,
        content_type=content_type,
    )
    if content is not None:
        c = c.with_content(content, content_type)
    return c


class TestInferFormat:
    def test_content_type_wins_over_extension(self):
        assert infer_format("image/svg+xml; charset=utf-8", "https://x.com/logo.png") == "svg"

    def test_extension_fallback(self):
        assert infer_format(None, "https://x.com/a/logo.WEBP?size=64") == "webp"
        assert infer_format("", "https://x.com/favicon.ico") == "ico"

    def test_unknown(self):
        assert infer_format("application/octet-stream", "https://x.com/logo") is None

    def test_priority_order(self):
        assert format_priority("svg") > format_priority("png") > format_priority(None)
        assert format_priority("jpg") == format_priority("avif") == 2


class TestResultRanker:
    def test_default_tiers(self):
        assert PROVIDER_TIERS["brandfetch"] > PROVIDER_TIERS["logo.dev"]
        assert PROVIDER_TIERS["logo.dev"] == PROVIDER_TIERS["getlogo.dev"]
        assert PROVIDER_TIERS["google-favicon"] < PROVIDER_TIERS["wikipedia"]
        assert ResultRanker().tier_of("unknown-provider") == 20

    def test_higher_tier_beats_larger_bytes(self):
        """tier가 바이트 크기보다 우선"""
        small_trusted = candidate("brandfetch", "https://b.io/l.png", b"x" * 100, content_type="image/png")
        large_favicon = candidate("google-favicon", "https://g.com/f.png", b"x" * 50_000, content_type="image/png")

        assert ResultRanker().select([large_favicon, small_trusted]) is small_trusted

    def test_selection_independent_of_input_order(self):
        candidates = [
            candidate("brandfetch", "https://b.io/l.png", b"x" * 100, content_type="image/png"),
            candidate("google-favicon", "https://g.com/f.png", b"x" * 50_000, content_type="image/png"),
            candidate("logo.dev", "https://logo.dev/a.svg", b"<svg/>", content_type="image/svg+xml"),
            candidate("getlogo.dev", "https://getlogo.dev/a", None, elapsed_ms=10.0),
            candidate("wikipedia", "https://upload.wikimedia.org/a.svg", b"<svg/>" * 10),
        ]
        ranker = ResultRanker()

        winners = {
            ranker.select(list(order)).provider
            for order in itertools.permutations(candidates)
        }

        assert winners == {"brandfetch"}

    def test_svg_beats_raster_within_same_tier(self):
        png = candidate("logo.dev", "https://logo.dev/a.png", b"x" * 9000, content_type="image/png")
        svg = candidate("getlogo.dev", "https://getlogo.dev/a.svg", b"<svg/>", content_type="image/svg+xml")

        assert ResultRanker().select([png, svg]) is svg

    def test_bytes_then_size_then_latency(self):
        no_bytes = candidate("logo.dev", "https://logo.dev/a.png", None, elapsed_ms=1.0, content_type="image/png")
        small = candidate("getlogo.dev", "https://getlogo.dev/a.png", b"x" * 10, elapsed_ms=5.0, content_type="image/png")
        big = candidate("getlogo.dev", "https://getlogo.dev/b.png", b"x" * 20, elapsed_ms=500.0, content_type="image/png")

        ranked = ResultRanker().rank([no_bytes, small, big])
        assert [c.source_url for c in ranked] == [
            "https://getlogo.dev/b.png",
            "https://getlogo.dev/a.png",
            "https://logo.dev/a.png",
        ]

    def test_bytes_beat_faster_candidate_without_bytes(self):
        slow_with_bytes = candidate("logo.dev", "https://logo.dev/a.png", b"x" * 10, elapsed_ms=900.0, content_type="image/png")
        fast_url_only = candidate("logo.dev", "https://logo.dev/b.png", None, elapsed_ms=5.0, content_type="image/png")

        for order in ([slow_with_bytes, fast_url_only], [fast_url_only, slow_with_bytes]):
            assert ResultRanker().select(order) is slow_with_bytes

    def test_latency_breaks_tie_without_bytes(self):
        slow = candidate("logo.dev", "https://logo.dev/a.png", None, elapsed_ms=300.0)
        fast = candidate("getlogo.dev", "https://getlogo.dev/a.png", None, elapsed_ms=30.0)

        assert ResultRanker().select([slow, fast]) is fast

    def test_candidate_without_bytes_can_win_on_tier(self):
        url_only = candidate("brandfetch", "https://b.io/l.svg", None)
        with_bytes = candidate("google-favicon", "https://g.com/f.png", b"x" * 5000, content_type="image/png")

        winner = ResultRanker().select([with_bytes, url_only])
        assert winner is url_only
        assert not winner.has_bytes

    def test_failed_candidates_ignored(self):
        failed = candidate("brandfetch", None, success=False)
        ok = candidate("google-favicon", "https://g.com/f.png", b"x" * 500)

        assert ResultRanker().select([failed, ok]) is ok
        assert ResultRanker().select([failed]) is None
        assert ResultRanker().select([]) is None

    @pytest.mark.parametrize("tiers", [{"google-favicon": 100}])
    def test_custom_tiers(self, tiers):
        favicon = candidate("google-favicon", "https://g.com/f.png", b"x" * 500)
        brand = candidate("brandfetch", "https://b.io/l.png", b"x" * 500)

        assert ResultRanker(tiers=tiers).select([brand, favicon]) is favicon
