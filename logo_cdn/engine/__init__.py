"""Engine Layer - Logo Resolution Core

This module provides the core engine layer, implementing:
- LogoResolutionService: request state machine (rate limit, cache, providers, store)
- ProviderOrchestrator: sequential provider failover with domain fallback
- ResultRanker: deterministic winner selection
- CacheManager: two-tier cache (fast KV metadata + durable blob)
- RateLimiter: fixed-window, fail-open quota gate
- Cache key derivation shared by every tier
"""

from .cache_manager import CacheLookup, CacheManager
from .keys import CacheKey, derive_cache_key, normalize_domain, slugify_company_name
from .orchestrator import ProviderOrchestrator
from .ranker import PROVIDER_TIERS, ResultRanker, infer_format
from .rate_limiter import RateLimitDecision, RateLimiter
from .result import (
    CandidateResult,
    LogoRequest,
    ProviderOutcome,
    ResolutionResult,
    ResolutionStatus,
)
from .service import LogoResolutionService
from .strategy import LogoProvider, ResolutionStrategy

__all__ = [
    "LogoResolutionService",
    "ProviderOrchestrator",
    "ResultRanker",
    "PROVIDER_TIERS",
    "infer_format",
    "CacheManager",
    "CacheLookup",
    "RateLimiter",
    "RateLimitDecision",
    "CacheKey",
    "derive_cache_key",
    "normalize_domain",
    "slugify_company_name",
    "LogoRequest",
    "CandidateResult",
    "ProviderOutcome",
    "ResolutionResult",
    "ResolutionStatus",
    "LogoProvider",
    "ResolutionStrategy",
]
