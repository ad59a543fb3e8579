"""RDW open-data API configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int, optional_env_var
from .errors import InvalidSettingError
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
    ShouldCacheHook,
)

DEFAULT_RDW_BASE_URL = "https://opendata.rdw.nl/resource/"
RDW_VEHICLE_DATASET = "m9d7-ebf2.json"
RDW_TIMEOUT_SECONDS = 10.0
RDW_APP_TOKEN_HEADER = "X-App-Token"

_CACHE_BACKENDS = ("off", "memory", "sqlite")


@dataclass(frozen=True, slots=True)
class RdwConfig:
    """Holds RDW API configuration values."""

    resilience: ResilienceConfig
    dataset: str = RDW_VEHICLE_DATASET


def get_rdw_config(
    *,
    resilience: ResilienceConfig | None = None,
    cache_predicate: ShouldCacheHook | None = None,
) -> RdwConfig:
    """Build the RDW configuration from the environment.

    The API is public, so nothing is required. ``RDW_APP_TOKEN`` raises the
    upstream throttling threshold when set.
    """

    if resilience is not None:
        return RdwConfig(resilience=resilience)

    base_url = optional_env_var("RDW_BASE_URL") or DEFAULT_RDW_BASE_URL
    app_token = optional_env_var("RDW_APP_TOKEN")
    timeout = env_float("RDW_TIMEOUT_SECONDS", RDW_TIMEOUT_SECONDS) or RDW_TIMEOUT_SECONDS
    retries = env_int("RDW_MAX_RETRIES", 0) or 0
    rate = env_float("RDW_RATE_LIMIT", None)
    cache_backend = (optional_env_var("RDW_HTTP_CACHE") or "off").lower()
    cache_ttl = env_float("RDW_HTTP_CACHE_TTL", None)

    if retries < 0:
        raise InvalidSettingError("RDW_MAX_RETRIES", retries, "non-negative")
    if rate is not None and rate <= 0:
        raise InvalidSettingError("RDW_RATE_LIMIT", rate, "positive")
    if cache_backend not in _CACHE_BACKENDS:
        raise InvalidSettingError("RDW_HTTP_CACHE", cache_backend, " or ".join(_CACHE_BACKENDS))
    if cache_ttl is not None and cache_ttl <= 0:
        raise InvalidSettingError("RDW_HTTP_CACHE_TTL", cache_ttl, "positive")

    cache: CacheConfig | None = None
    if cache_backend != "off":
        cache = CacheConfig(
            backend="sqlite" if cache_backend == "sqlite" else "memory",
            ttl_seconds=cache_ttl,
            should_cache=cache_predicate,
        )

    return RdwConfig(
        resilience=ResilienceConfig(
            name="rdw",
            base_url=base_url,
            timeout_seconds=timeout,
            retry=RetryPolicy(total=retries),
            ratelimit=None if rate is None else RateLimit.per_second(rate),
            cache=cache,
            default_headers={RDW_APP_TOKEN_HEADER: app_token} if app_token else None,
        )
    )
