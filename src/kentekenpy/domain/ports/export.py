"""Port for handing terminal result sets to a tabular exporter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from kentekenpy.domain.model import ResolutionRecord


@runtime_checkable
class ResultExporter(Protocol):
    """Turns a completed, ordered result set into a downloadable artifact."""

    def export(
        self,
        records: Sequence[ResolutionRecord],
        destination: Path,
        *,
        field_labels: Mapping[str, str],
    ) -> Path: ...
