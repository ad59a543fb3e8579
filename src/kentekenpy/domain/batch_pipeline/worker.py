"""Run a pipeline on a background thread and report back through messages."""

from __future__ import annotations

import asyncio
import queue
import threading
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from kentekenpy.config.batch import DEFAULT_DISPATCH_DELAY_SECONDS

from .controller import PipelineController
from .state import BatchProgress, PipelineOptions, PipelineState, PipelineStateError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from kentekenpy.domain.model import ResolutionRecord
    from kentekenpy.domain.ports.lookup import LookupSessionFactory

log = getLogger(__name__)

_POLL_SECONDS = 0.25


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    progress: BatchProgress


@dataclass(frozen=True, slots=True)
class CompletedEvent:
    records: tuple[ResolutionRecord, ...]


@dataclass(frozen=True, slots=True)
class CancelledEvent:
    records: tuple[ResolutionRecord, ...]


@dataclass(frozen=True, slots=True)
class FailedEvent:
    message: str


type PipelineEvent = ProgressEvent | CompletedEvent | CancelledEvent | FailedEvent

TERMINAL_EVENTS = (CompletedEvent, CancelledEvent, FailedEvent)


class PipelineWorker:
    """Own a :class:`PipelineController` running on a private event loop.

    The calling thread never touches controller state. It reads one-way events
    from :meth:`events` and may request cancellation; everything else happens on
    the worker thread. A worker runs a single pipeline and cannot be restarted.
    """

    def __init__(
        self,
        session_factory: LookupSessionFactory,
        *,
        dispatch_delay: float = DEFAULT_DISPATCH_DELAY_SECONDS,
        thread_factory: Callable[..., threading.Thread] = threading.Thread,
    ) -> None:
        self._session_factory = session_factory
        self._dispatch_delay = dispatch_delay
        self._thread_factory = thread_factory
        self._events: queue.Queue[PipelineEvent] = queue.Queue()
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._controller: PipelineController | None = None
        self._cancel_pending = False
        self._thread: threading.Thread | None = None
        self._started = False

    @property
    def state(self) -> PipelineState:
        controller = self._controller
        return PipelineState.IDLE if controller is None else controller.state

    def start(self, identifiers: Sequence[str], batch_size: int) -> None:
        """Spawn the worker thread; setup failures arrive as a :class:`FailedEvent`."""

        with self._lock:
            if self._started:
                raise PipelineStateError("This worker has already been started")
            self._started = True

        plates = list(identifiers)
        try:
            thread = self._thread_factory(
                target=self._run,
                args=(plates, batch_size),
                name="kentekenpy-pipeline",
                daemon=True,
            )
            thread.start()
        except (RuntimeError, OSError) as exc:
            log.exception("Could not start pipeline worker")
            self._events.put(FailedEvent(f"Could not start pipeline worker: {exc}"))
            return
        self._thread = thread

    def cancel(self) -> None:
        """Ask the running pipeline to stop at its next chunk boundary."""

        with self._lock:
            loop, controller = self._loop, self._controller
            if loop is None or controller is None:
                self._cancel_pending = True
                return
        try:
            loop.call_soon_threadsafe(controller.cancel)
        except RuntimeError:
            log.debug("Pipeline loop already closed; nothing to cancel")

    def events(self) -> Iterator[PipelineEvent]:
        """Yield events in emission order, ending with the terminal one."""

        while True:
            try:
                event = self._events.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                thread = self._thread
                if thread is not None and not thread.is_alive() and self._events.empty():
                    yield FailedEvent("Pipeline worker exited without a result")
                    return
                continue
            yield event
            if isinstance(event, TERMINAL_EVENTS):
                return

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self, identifiers: list[str], batch_size: int) -> None:
        try:
            asyncio.run(self._main(identifiers, batch_size))
        except Exception as exc:
            log.exception("Pipeline worker crashed")
            self._events.put(FailedEvent(f"Pipeline worker crashed: {exc}"))
        finally:
            with self._lock:
                self._loop = None

    async def _main(self, identifiers: list[str], batch_size: int) -> None:
        controller = PipelineController(
            self._session_factory,
            dispatch_delay=self._dispatch_delay,
        )
        options = PipelineOptions(
            batch_size=batch_size,
            on_progress=lambda progress: self._events.put(ProgressEvent(progress)),
            on_complete=lambda records: self._events.put(CompletedEvent(tuple(records))),
            on_cancelled=lambda records: self._events.put(CancelledEvent(tuple(records))),
            on_error=lambda message: self._events.put(FailedEvent(message)),
        )
        task = controller.start(identifiers, options)
        with self._lock:
            self._loop = asyncio.get_running_loop()
            self._controller = controller
            cancel_pending = self._cancel_pending
        if cancel_pending:
            controller.cancel()
        await task
