"""Stateful driver for batch plate resolution."""

from __future__ import annotations

import asyncio
import contextlib
from logging import getLogger
from typing import TYPE_CHECKING

from kentekenpy.config.batch import DEFAULT_DISPATCH_DELAY_SECONDS
from kentekenpy.domain.identifiers import prepare_identifiers

from .executor import execute_chunk
from .partition import chunk_count, partition
from .state import (
    BatchProgress,
    PipelineOptions,
    PipelineOutcome,
    PipelineState,
    PipelineStateError,
    SetupError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from kentekenpy.domain.model import ResolutionRecord
    from kentekenpy.domain.ports.lookup import LookupClient, LookupSessionFactory

    from .executor import ChunkExecutor

log = getLogger(__name__)


class PipelineController:
    """Drive partitioning, chunk execution, progress and cancellation for one run at a time.

    The controller runs chunks strictly one after another on the event loop that
    called :meth:`start`; the chunk size is the only bound on in-flight lookups.
    Between chunks it waits ``dispatch_delay`` seconds to go easy on the shared
    upstream service. Cancellation is checked at chunk boundaries: the chunk in
    flight is awaited and dropped, and no further chunk is dispatched.

    State moves ``IDLE -> RUNNING -> COMPLETED | CANCELLED | FAILED``. Terminal
    states stick until :meth:`reset` is called.
    """

    def __init__(
        self,
        session_factory: LookupSessionFactory,
        *,
        dispatch_delay: float = DEFAULT_DISPATCH_DELAY_SECONDS,
        executor: ChunkExecutor = execute_chunk,
    ) -> None:
        if dispatch_delay < 0:
            raise ValueError("Dispatch delay must be non-negative")
        self._session_factory = session_factory
        self._dispatch_delay = dispatch_delay
        self._executor = executor
        self._state = PipelineState.IDLE
        self._accumulator: list[ResolutionRecord] = []
        self._total = 0
        self._cancel_requested: asyncio.Event | None = None
        self._task: asyncio.Task[PipelineOutcome] | None = None

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def records(self) -> tuple[ResolutionRecord, ...]:
        """Snapshot of the records accumulated so far."""
        return tuple(self._accumulator)

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested is not None and self._cancel_requested.is_set()

    def start(
        self,
        identifiers: Iterable[str],
        options: PipelineOptions,
    ) -> asyncio.Task[PipelineOutcome]:
        """Begin a run on the current event loop and return the task driving it."""

        if self._state is PipelineState.RUNNING:
            raise PipelineStateError("A pipeline is already running on this controller")
        if self._state is not PipelineState.IDLE:
            raise PipelineStateError(
                f"Pipeline is {self._state}; call reset() before starting another run"
            )

        loop = asyncio.get_running_loop()
        prepared = prepare_identifiers(identifiers)
        self._accumulator = []
        self._total = len(prepared)
        self._cancel_requested = asyncio.Event()
        self._state = PipelineState.RUNNING
        self._task = loop.create_task(self._drive(prepared, options), name="kentekenpy-pipeline")
        return self._task

    async def run(self, identifiers: Iterable[str], options: PipelineOptions) -> PipelineOutcome:
        """Start a run and wait for its terminal outcome."""

        return await self.start(identifiers, options)

    def cancel(self) -> bool:
        """Request cancellation; returns ``False`` when no run is in progress."""

        if self._state is not PipelineState.RUNNING or self._cancel_requested is None:
            return False
        if not self._cancel_requested.is_set():
            log.info(
                "Cancellation requested after %s of %s plates", len(self._accumulator), self._total
            )
            self._cancel_requested.set()
        return True

    def reset(self) -> None:
        """Return to ``IDLE`` and drop the accumulator of the previous run."""

        if self._state is PipelineState.RUNNING:
            raise PipelineStateError("Cannot reset a running pipeline; cancel it first")
        self._state = PipelineState.IDLE
        self._accumulator = []
        self._total = 0
        self._cancel_requested = None
        self._task = None

    async def _drive(self, identifiers: list[str], options: PipelineOptions) -> PipelineOutcome:
        log.info(
            "Starting batch lookup: plates=%s, batch_size=%s, chunks=%s",
            len(identifiers),
            options.batch_size,
            chunk_count(len(identifiers), options.batch_size),
        )
        try:
            async with contextlib.AsyncExitStack() as stack:
                try:
                    client = await stack.enter_async_context(self._session_factory())
                except Exception as exc:
                    raise SetupError(f"Could not open lookup session: {exc}") from exc
                stopped_early = await self._process(identifiers, client, options)
        except asyncio.CancelledError:
            # the task itself was cancelled: the run is abandoned mid-chunk
            self._finish_cancelled(options)
            raise
        except SetupError as exc:
            log.exception("Batch lookup setup failed")
            return self._finish_failed(str(exc), options)
        except Exception as exc:
            log.exception("Batch lookup failed")
            return self._finish_failed(f"Batch lookup failed: {exc}", options)

        if stopped_early:
            return self._finish_cancelled(options)
        return self._finish_completed(options)

    async def _process(
        self,
        identifiers: Sequence[str],
        client: LookupClient,
        options: PipelineOptions,
    ) -> bool:
        """Run every chunk; returns ``True`` when a cancel left chunks undispatched."""

        for index, chunk in enumerate(partition(identifiers, options.batch_size)):
            if index and self._dispatch_delay:
                await self._pause()
            if self.cancel_requested:
                return True

            records = await self._executor(chunk, client)
            if len(records) != len(chunk):
                raise RuntimeError(
                    f"Executor returned {len(records)} records for {len(chunk)} identifiers"
                )
            if self.cancel_requested:
                log.info("Discarding %s results from the chunk in flight", len(records))
                return True

            self._accumulator.extend(records)
            progress = BatchProgress(
                processed_count=len(self._accumulator),
                total_count=self._total,
                latest_chunk_results=tuple(records),
            )
            log.debug(
                "Processed %s/%s plates (%.1f%%)",
                progress.processed_count,
                progress.total_count,
                progress.percentage,
            )
            if options.on_progress is not None:
                options.on_progress(progress)
        return False

    async def _pause(self) -> None:
        if self._cancel_requested is None:
            await asyncio.sleep(self._dispatch_delay)
            return
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._cancel_requested.wait(), timeout=self._dispatch_delay)

    def _finish_completed(self, options: PipelineOptions) -> PipelineOutcome:
        self._state = PipelineState.COMPLETED
        outcome = PipelineOutcome(
            state=self._state,
            records=tuple(self._accumulator),
            total_count=self._total,
        )
        log.info(
            "Finished batch lookup: total=%s, found=%s, not_found=%s, errors=%s",
            outcome.summary.total,
            outcome.summary.found,
            outcome.summary.not_found,
            outcome.summary.errors,
        )
        if options.on_complete is not None:
            options.on_complete(outcome.records)
        return outcome

    def _finish_cancelled(self, options: PipelineOptions) -> PipelineOutcome:
        self._state = PipelineState.CANCELLED
        outcome = PipelineOutcome(
            state=self._state,
            records=tuple(self._accumulator),
            total_count=self._total,
        )
        log.info("Batch lookup cancelled after %s of %s plates", len(outcome.records), self._total)
        if options.on_cancelled is not None:
            options.on_cancelled(outcome.records)
        return outcome

    def _finish_failed(self, message: str, options: PipelineOptions) -> PipelineOutcome:
        self._state = PipelineState.FAILED
        if options.on_error is not None:
            options.on_error(message)
        return PipelineOutcome(state=self._state, total_count=self._total, error=message)
