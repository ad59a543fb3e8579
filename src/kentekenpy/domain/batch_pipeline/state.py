"""Lifecycle state, options and values emitted by a pipeline run."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum

from kentekenpy.domain.model import ResolutionRecord, ResultSummary, summarize


class PipelineState(StrEnum):
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in {PipelineState.COMPLETED, PipelineState.CANCELLED, PipelineState.FAILED}


class PipelineStateError(RuntimeError):
    """Raised when a controller operation is not valid in its current state."""


class SetupError(RuntimeError):
    """Raised when the execution context for a run cannot be created."""


def progress_percentage(processed: int, total: int) -> float:
    if total <= 0:
        return 100.0
    return min(100.0, 100.0 * processed / total)


@dataclass(frozen=True, slots=True)
class BatchProgress:
    """Snapshot emitted after each chunk completes."""

    processed_count: int
    total_count: int
    latest_chunk_results: tuple[ResolutionRecord, ...] = ()

    @property
    def percentage(self) -> float:
        return progress_percentage(self.processed_count, self.total_count)


type ProgressCallback = Callable[[BatchProgress], None]
type CompleteCallback = Callable[[Sequence[ResolutionRecord]], None]
type ErrorCallback = Callable[[str], None]
type CancelledCallback = Callable[[Sequence[ResolutionRecord]], None]


@dataclass(frozen=True, slots=True)
class PipelineOptions:
    batch_size: int
    on_progress: ProgressCallback | None = None
    on_complete: CompleteCallback | None = None
    on_error: ErrorCallback | None = None
    on_cancelled: CancelledCallback | None = None

    def __post_init__(self) -> None:
        if self.batch_size <= 0:
            raise ValueError(f"Batch size must be positive, got {self.batch_size}")


@dataclass(frozen=True, slots=True)
class PipelineOutcome:
    """Terminal result of one run.

    ``records`` is the full ordered result set only when ``state`` is
    ``COMPLETED``. For cancelled runs it holds the partial accumulator, which
    must not be exported as a complete result.
    """

    state: PipelineState
    records: tuple[ResolutionRecord, ...] = ()
    total_count: int = 0
    error: str | None = None
    summary: ResultSummary = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "summary", summarize(self.records))

    @property
    def is_complete(self) -> bool:
        return self.state is PipelineState.COMPLETED
