"""Logo provider adapters - export only."""

from .base import HttpLogoProvider, ProviderName
from .brandfetch import BrandfetchProvider
from .getlogo import GetLogoProvider
from .google_favicon import GoogleFaviconProvider
from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .logodev import LogoDevProvider
from .registry import PROVIDER_CLASSES, build_default_providers
from .wikipedia import WikipediaProvider

__all__ = [
    "ProviderName",
    "HttpLogoProvider",
    "GetLogoProvider",
    "LogoDevProvider",
    "BrandfetchProvider",
    "WikipediaProvider",
    "GoogleFaviconProvider",
    "PROVIDER_CLASSES",
    "build_default_providers",
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
]
