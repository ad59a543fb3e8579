"""Ports for resolving identifiers against an external record service."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from kentekenpy.domain.model import ResolutionRecord


@runtime_checkable
class LookupClient(Protocol):
    """Resolves one identifier per call and never raises for lookup failures."""

    async def resolve(self, identifier: str) -> ResolutionRecord: ...


# Opens the client session for one pipeline run; failing here is a setup error.
type LookupSessionFactory = Callable[[], AbstractAsyncContextManager[LookupClient]]


__all__ = ["LookupClient", "LookupSessionFactory"]
