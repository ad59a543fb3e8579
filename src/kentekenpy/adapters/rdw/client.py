"""HTTP client for the RDW open-data vehicle registry."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from kentekenpy.adapters.http_resilience import ResilientClient
from kentekenpy.config.rdw import get_rdw_config
from kentekenpy.domain.identifiers import query_form
from kentekenpy.domain.model import ResolutionRecord

from .schema import RdwVehiclePayload, RdwVehicleResponse
from .translator import translate_vehicle

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from kentekenpy.config.http_resilience import ResilienceConfig
    from kentekenpy.config.rdw import RdwConfig
    from kentekenpy.domain.ports.lookup import LookupSessionFactory

log = getLogger(__name__)


class RdwAPIError(RuntimeError):
    """Raised when the RDW API returns an unexpected response."""


def has_matches(payload: object) -> bool:
    """Cache predicate: only answers that found a vehicle are worth keeping."""

    return isinstance(payload, list) and bool(payload)


class RdwLookupClient:
    """Resolve plates against the RDW dataset, one GET per plate.

    Use as an async context manager: entering opens the HTTP session shared by
    every lookup of a pipeline run, leaving closes it. :meth:`resolve` never
    raises for transport or payload problems; those become ``error`` records.
    """

    def __init__(
        self,
        *,
        config: RdwConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> RdwLookupClient:
        self._client = self._client_factory(self._config.resilience)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    async def resolve(self, identifier: str) -> ResolutionRecord:
        plate = query_form(identifier)
        if not plate:
            # an empty kenteken filter would match the whole dataset
            log.warning("Plate %r has no characters left to query", identifier)
            return ResolutionRecord.not_found(identifier)

        try:
            vehicles = await self._fetch_vehicles(plate)
        except (httpx.HTTPError, RdwAPIError, ValidationError, ValueError) as exc:
            log.warning("RDW lookup failed for %s: %s", identifier, exc)
            return ResolutionRecord.error(identifier)

        if not vehicles:
            log.debug("RDW has no vehicle for %s", identifier)
            return ResolutionRecord.not_found(identifier)
        return translate_vehicle(identifier, vehicles[0])

    async def _fetch_vehicles(self, plate: str) -> list[RdwVehiclePayload]:
        if self._client is None:
            raise RdwAPIError("RDW client session is not open")
        response = await self._client.get(self._config.dataset, params={"kenteken": plate})
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, list):
            raise RdwAPIError("Unexpected RDW response payload")

        return RdwVehicleResponse.model_validate(payload).root


def build_rdw_session_factory(config: RdwConfig | None = None) -> LookupSessionFactory:
    """Return a factory opening one :class:`RdwLookupClient` session per run."""

    active_config = config or get_rdw_config(cache_predicate=has_matches)

    def factory() -> RdwLookupClient:
        return RdwLookupClient(config=active_config)

    return factory
