"""Batch plate resolution engine.

Identifiers are normalized, split into chunks, and each chunk is resolved with
one concurrent lookup per identifier. The controller drives chunks one at a
time, reports progress after each, and honours cancellation between chunks.
The worker runs the same controller on a background thread and talks back
through one-way events.
"""

from __future__ import annotations

from .controller import PipelineController
from .executor import ChunkExecutor, execute_chunk
from .partition import chunk_count, partition
from .state import (
    BatchProgress,
    PipelineOptions,
    PipelineOutcome,
    PipelineState,
    PipelineStateError,
    SetupError,
    progress_percentage,
)
from .worker import (
    CancelledEvent,
    CompletedEvent,
    FailedEvent,
    PipelineEvent,
    PipelineWorker,
    ProgressEvent,
)

__all__ = [
    "BatchProgress",
    "CancelledEvent",
    "ChunkExecutor",
    "CompletedEvent",
    "FailedEvent",
    "PipelineController",
    "PipelineEvent",
    "PipelineOptions",
    "PipelineOutcome",
    "PipelineState",
    "PipelineStateError",
    "PipelineWorker",
    "ProgressEvent",
    "SetupError",
    "chunk_count",
    "execute_chunk",
    "partition",
    "progress_percentage",
]
