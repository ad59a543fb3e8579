"""Shared fixtures for RDW adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from kentekenpy.adapters.http_resilience import ResilienceConfig, ResilientClient, RetryPolicy
from kentekenpy.adapters.rdw import RdwLookupClient
from kentekenpy.config.rdw import RdwConfig

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://rdw.test/resource/"


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


@pytest.fixture
def rdw_config() -> RdwConfig:
    return RdwConfig(
        resilience=ResilienceConfig(
            name="rdw-test",
            base_url=BASE_URL,
            retry=RetryPolicy(total=0),
            cache=None,
        )
    )


@pytest.fixture
def make_rdw_client(
    rdw_config: RdwConfig,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], RdwLookupClient]:
    def build(handler: Callable[[httpx.Request], httpx.Response]) -> RdwLookupClient:
        return RdwLookupClient(config=rdw_config, client_factory=make_client_factory(handler))

    return build
