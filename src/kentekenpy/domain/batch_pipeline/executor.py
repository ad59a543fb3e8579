"""Resolve one chunk of identifiers concurrently."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from kentekenpy.domain.model import ResolutionRecord

if TYPE_CHECKING:
    from kentekenpy.domain.ports.lookup import LookupClient

log = getLogger(__name__)

type ChunkExecutor = Callable[[Sequence[str], LookupClient], Awaitable[list[ResolutionRecord]]]


async def execute_chunk(chunk: Sequence[str], client: LookupClient) -> list[ResolutionRecord]:
    """Fan out one lookup per identifier and wait for every one to settle.

    Records are matched to identifiers by position, never by completion order. A
    lookup that raises becomes an ``error`` record and does not disturb its
    siblings.
    """

    outcomes = await asyncio.gather(
        *(client.resolve(identifier) for identifier in chunk),
        return_exceptions=True,
    )
    return [
        _settle(identifier, outcome)
        for identifier, outcome in zip(chunk, outcomes, strict=True)
    ]


def _settle(identifier: str, outcome: object) -> ResolutionRecord:
    if isinstance(outcome, ResolutionRecord):
        if outcome.identifier != identifier:
            return replace(outcome, identifier=identifier)
        return outcome
    if isinstance(outcome, Exception | asyncio.CancelledError):
        log.warning("Lookup for %s failed: %r", identifier, outcome)
        return ResolutionRecord.error(identifier)
    if isinstance(outcome, BaseException):
        raise outcome
    log.warning("Lookup for %s returned %s instead of a record", identifier, type(outcome).__name__)
    return ResolutionRecord.error(identifier)
