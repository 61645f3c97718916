"""Company name → domain resolution - export only."""

from .domain_resolver import DomainResolver, extract_domain, is_disallowed_domain
from .strategies import (
    DuckDuckGoSearchStrategy,
    GoogleSearchStrategy,
    SearchStrategy,
    WikipediaSearchStrategy,
    build_default_strategies,
)

__all__ = [
    "DomainResolver",
    "extract_domain",
    "is_disallowed_domain",
    "SearchStrategy",
    "WikipediaSearchStrategy",
    "DuckDuckGoSearchStrategy",
    "GoogleSearchStrategy",
    "build_default_strategies",
]
