"""프로바이더 테스트 (HTTP는 AsyncMock)"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from fixtures import (
    BRANDFETCH_BRAND,
    BRANDFETCH_BRAND_PNG_ONLY,
    BRANDFETCH_SEARCH,
    WIKITEXT_IMAGE_LOGO_ONLY,
    WIKITEXT_IMAGE_PHOTO_ONLY,
    WIKITEXT_WITH_LOGO,
    WIKITEXT_WITH_LOGOTYPE,
)
from logo_cdn.engine.result import LogoRequest
from logo_cdn.providers.base import HttpLogoProvider, compact_company_name
from logo_cdn.providers.brandfetch import BrandfetchProvider, pick_logo_url
from logo_cdn.providers.getlogo import GetLogoProvider
from logo_cdn.providers.google_favicon import GoogleFaviconProvider
from logo_cdn.providers.http_client import ImageProbe
from logo_cdn.providers.logodev import LogoDevProvider
from logo_cdn.providers.registry import build_default_providers
from logo_cdn.providers.wikipedia import (
    WikipediaProvider,
    extract_infobox_logo_file,
    looks_like_logo,
)


def make_http(probe=None, json_responses=None):
    http = MagicMock()
    http.probe_image = AsyncMock(return_value=probe or ImageProbe(200, "image/png", 4096))
    if isinstance(json_responses, list):
        http.get_json = AsyncMock(side_effect=json_responses)
    else:
        http.get_json = AsyncMock(return_value=json_responses)
    return http


def test_compact_company_name():
    assert compact_company_name("  Acme   Corp ") == "acmecorp"


class TestGetLogo:
    def test_domain_url(self):
        provider = GetLogoProvider(token="tok", http_client=make_http())
        url = provider.build_url(LogoRequest(domain="www.Example.com", format="svg", size=128, greyscale=True))

        assert url == "https://getlogo.dev/logos/example.com?token=tok&size=128&format=svg&greyscale=true"

    def test_company_name_guesses_dot_com(self):
        provider = GetLogoProvider(token="", http_client=make_http())
        url = provider.build_url(LogoRequest(company_name="Acme Corp"))

        assert url == "https://getlogo.dev/logos/acmecorp.com?size=256&format=png"

    @pytest.mark.asyncio
    async def test_verified_image_succeeds(self):
        http = make_http(probe=ImageProbe(200, "image/png", 12288))
        provider = GetLogoProvider(token="", http_client=http)

        result = await provider.attempt(LogoRequest(domain="example.com"))

        assert result.success is True
        assert result.provider == "getlogo.dev"
        assert result.source_url.startswith("https://getlogo.dev/logos/example.com")
        assert result.content_type == "image/png"
        assert result.elapsed_ms is not None

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "probe, error",
        [
            (ImageProbe(404, "text/html", 0), "Logo not found"),
            (ImageProbe(429, "application/json", 10), "Rate limit exceeded"),
            (ImageProbe(503, "text/html", 0), "HTTP 503"),
            (ImageProbe(200, "text/html", 5000), "Response is not an image"),
            (ImageProbe(200, "image/png", 5242881, truncated=True), "Image too large"),
        ],
    )
    async def test_verification_failures(self, probe, error):
        provider = GetLogoProvider(token="", http_client=make_http(probe=probe))

        result = await provider.attempt(LogoRequest(domain="example.com"))

        assert result.success is False
        assert result.error == error

    @pytest.mark.asyncio
    async def test_transport_error_becomes_failed_result(self):
        http = make_http()
        http.probe_image = AsyncMock(side_effect=ConnectionError("connection refused"))
        provider = GetLogoProvider(token="", http_client=http)

        result = await provider.attempt(LogoRequest(domain="example.com"))

        assert result.success is False
        assert result.error == "ConnectionError: connection refused"


class TestLogoDev:
    def test_url_includes_key(self):
        provider = LogoDevProvider(api_key="pk_test", http_client=make_http())
        url = provider.build_url(LogoRequest(domain="example.com", format="webp", size=64))

        assert url == "https://logo.dev/api/v1/logo/example.com?key=pk_test&size=64&format=webp"

    @pytest.mark.asyncio
    async def test_sends_image_accept_header(self):
        http = make_http()
        provider = LogoDevProvider(api_key="", http_client=http)

        await provider.attempt(LogoRequest(domain="example.com"))

        assert http.probe_image.await_args.kwargs["headers"] == {"Accept": "image/*"}


class TestGoogleFavicon:
    def test_url(self):
        provider = GoogleFaviconProvider(http_client=make_http())
        assert provider.build_url(LogoRequest(domain="https://www.example.com/")) == (
            "https://www.google.com/s2/favicons?domain=example.com&sz=256"
        )

    @pytest.mark.asyncio
    async def test_requires_domain(self):
        http = make_http()
        provider = GoogleFaviconProvider(http_client=http)

        result = await provider.attempt(LogoRequest(company_name="Acme"))

        assert result.error == "Domain required for Google Favicon"
        http.probe_image.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_tiny_default_icon_rejected(self):
        provider = GoogleFaviconProvider(http_client=make_http(probe=ImageProbe(200, "image/png", 99)))

        result = await provider.attempt(LogoRequest(domain="example.com"))

        assert result.error == "Image too small or invalid"

    @pytest.mark.asyncio
    async def test_real_icon_accepted(self):
        provider = GoogleFaviconProvider(http_client=make_http(probe=ImageProbe(200, "image/png", 100)))

        result = await provider.attempt(LogoRequest(domain="example.com"))

        assert result.success is True


class TestBrandfetch:
    def test_pick_logo_prefers_svg(self):
        assert pick_logo_url(BRANDFETCH_BRAND) == "https://cdn.brandfetch.io/acme/logo.svg"
        assert pick_logo_url(BRANDFETCH_BRAND_PNG_ONLY) == "https://cdn.brandfetch.io/acme/logo.png"
        assert pick_logo_url({"logos": [{"formats": [{"format": "jpeg", "src": "x"}]}]}) is None
        assert pick_logo_url(None) is None

    @pytest.mark.asyncio
    async def test_domain_lookup(self):
        http = make_http(
            probe=ImageProbe(200, "image/svg+xml", 900),
            json_responses=(200, BRANDFETCH_BRAND),
        )
        provider = BrandfetchProvider(api_key="bf_key", http_client=http)

        result = await provider.attempt(LogoRequest(domain="acme.com"))

        assert result.success is True
        assert result.source_url == "https://cdn.brandfetch.io/acme/logo.svg"
        call = http.get_json.await_args
        assert call.args[0] == "https://api.brandfetch.io/v2/brands/acme.com"
        assert call.kwargs["headers"]["Authorization"] == "Bearer bf_key"

    @pytest.mark.asyncio
    async def test_company_name_searches_first(self):
        http = make_http(json_responses=[(200, BRANDFETCH_SEARCH), (200, BRANDFETCH_BRAND_PNG_ONLY)])
        provider = BrandfetchProvider(api_key="", http_client=http)

        result = await provider.attempt(LogoRequest(company_name="Acme"))

        assert result.success is True
        urls = [c.args[0] for c in http.get_json.await_args_list]
        assert urls == [
            "https://api.brandfetch.io/v2/search/Acme",
            "https://api.brandfetch.io/v2/brands/acme.com",
        ]

    @pytest.mark.asyncio
    async def test_brand_not_found_by_name(self):
        provider = BrandfetchProvider(api_key="", http_client=make_http(json_responses=(200, [])))

        result = await provider.attempt(LogoRequest(company_name="Nobody"))

        assert result.error == 'Brand not found for "Nobody"'

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response, error",
        [
            (None, "Brand lookup failed"),
            ((404, {"message": "not found"}), "Logo not found"),
            ((200, {"logos": []}), "No logo found in brand data"),
        ],
    )
    async def test_brand_lookup_failures(self, response, error):
        provider = BrandfetchProvider(api_key="", http_client=make_http(json_responses=response))

        result = await provider.attempt(LogoRequest(domain="acme.com"))

        assert result.error == error


class TestWikipedia:
    def test_infobox_logo_field(self):
        assert extract_infobox_logo_file(WIKITEXT_WITH_LOGO) == "Acme Corporation logo.svg"
        assert extract_infobox_logo_file(WIKITEXT_WITH_LOGOTYPE) == "Acme wordmark.png"

    def test_image_field_only_when_logo_named(self):
        assert extract_infobox_logo_file(WIKITEXT_IMAGE_LOGO_ONLY) == "Acme_logo_2020.png"
        assert extract_infobox_logo_file(WIKITEXT_IMAGE_PHOTO_ONLY) is None
        assert extract_infobox_logo_file("") is None

    def test_page_image_filter(self):
        assert looks_like_logo("https://upload.wikimedia.org/Acme_logo.svg") is True
        assert looks_like_logo("https://upload.wikimedia.org/Acme_logo_tower.jpg") is False
        assert looks_like_logo("https://upload.wikimedia.org/Acme_HQ.jpg") is False

    @pytest.mark.asyncio
    async def test_requires_company_name(self):
        provider = WikipediaProvider(http_client=make_http())

        result = await provider.attempt(LogoRequest(domain="acme.com"))

        assert result.error == "Company name required for Wikipedia"

    @pytest.mark.asyncio
    async def test_infobox_logo_resolved_through_commons(self):
        commons_url = "https://upload.wikimedia.org/wikipedia/commons/a/ab/Acme_Corporation_logo.svg"
        http = make_http(
            probe=ImageProbe(200, "image/svg+xml", 2048),
            json_responses=[
                (200, {"query": {"search": [{"title": "Acme Corporation"}]}}),
                (
                    200,
                    {
                        "query": {
                            "pages": {
                                "1": {
                                    "title": "Acme Corporation",
                                    "revisions": [{"slots": {"main": {"content": WIKITEXT_WITH_LOGO}}}],
                                }
                            }
                        }
                    },
                ),
                (200, {"query": {"pages": {"-1": {"imageinfo": [{"url": commons_url}]}}}}),
            ],
        )
        provider = WikipediaProvider(http_client=http)

        result = await provider.attempt(LogoRequest(company_name="Acme Corporation"))

        assert result.success is True
        assert result.source_url == commons_url
        commons_call = http.get_json.await_args_list[2]
        assert commons_call.kwargs["params"]["titles"] == "File:Acme Corporation logo.svg"

    @pytest.mark.asyncio
    async def test_page_not_found(self):
        provider = WikipediaProvider(http_client=make_http(json_responses=(200, {"query": {"search": []}})))

        result = await provider.attempt(LogoRequest(company_name="Nobody"))

        assert result.error == "Wikipedia page not found"

    @pytest.mark.asyncio
    async def test_photo_page_image_is_not_a_logo(self):
        http = make_http(
            json_responses=[
                (200, {"query": {"search": [{"title": "Acme"}]}}),
                (
                    200,
                    {
                        "query": {
                            "pages": {
                                "1": {
                                    "original": {"source": "https://upload.wikimedia.org/Acme_tower.jpg"},
                                    "revisions": [{"slots": {"main": {"content": WIKITEXT_IMAGE_PHOTO_ONLY}}}],
                                }
                            }
                        }
                    },
                ),
            ]
        )
        provider = WikipediaProvider(http_client=http)

        result = await provider.attempt(LogoRequest(company_name="Acme"))

        assert result.error == "No logo found on Wikipedia page"


class TestRegistry:
    def test_declared_order_kept(self):
        providers = build_default_providers(
            ["logo.dev", "getlogo.dev", "google-favicon"], http_client=make_http()
        )

        assert [p.name for p in providers] == ["logo.dev", "getlogo.dev", "google-favicon"]
        assert all(isinstance(p, HttpLogoProvider) for p in providers)

    def test_unknown_and_duplicate_names_skipped(self):
        providers = build_default_providers(
            ["brandfetch", "clearbit", "brandfetch", "wikipedia"], http_client=make_http()
        )

        assert [p.name for p in providers] == ["brandfetch", "wikipedia"]

    def test_default_order_from_settings(self):
        providers = build_default_providers(http_client=make_http())

        assert [p.name for p in providers] == [
            "getlogo.dev",
            "logo.dev",
            "brandfetch",
            "wikipedia",
            "google-favicon",
        ]
