"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from kentekenpy.adapters.rdw import build_rdw_session_factory
from kentekenpy.adapters.spreadsheet import DEFAULT_FIELD_LABELS, ExcelResultExporter
from kentekenpy.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemySavedVehicleUnitOfWork,
    is_started,
    startup,
)
from kentekenpy.config import get_batch_config, get_current_owner
from kentekenpy.domain.batch_pipeline import (
    CancelledEvent,
    CompletedEvent,
    FailedEvent,
    PipelineState,
    PipelineWorker,
    ProgressEvent,
)
from kentekenpy.domain.identifiers import prepare_identifiers
from kentekenpy.domain.model import ResultSummary, summarize
from kentekenpy.domain.ports.unit_of_work import SavedVehicleUnitOfWork
from kentekenpy.domain.saved_vehicles import (
    SaveVehiclesResult,
    delete_vehicle,
    delete_vehicles,
    list_vehicles,
    save_records,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from uuid import UUID

    from kentekenpy.config.batch import BatchConfig
    from kentekenpy.domain.batch_pipeline import BatchProgress, PipelineEvent
    from kentekenpy.domain.model import ResolutionRecord, SavedVehicle
    from kentekenpy.domain.ports.export import ResultExporter
    from kentekenpy.domain.ports.lookup import LookupSessionFactory

UnitOfWorkFactory = Callable[[], SavedVehicleUnitOfWork]
WorkerFactory = Callable[..., PipelineWorker]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LookupResult:
    """Outcome of a plate lookup run as seen by the caller."""

    state: PipelineState
    records: tuple[ResolutionRecord, ...]
    total_count: int
    error: str | None = None
    export_path: Path | None = None

    @property
    def summary(self) -> ResultSummary:
        return summarize(self.records)


def lookup_plates(
    identifiers: Iterable[str],
    *,
    session_factory: LookupSessionFactory | None = None,
    batch_config: BatchConfig | None = None,
    batch_size: int | None = None,
    export_to: Path | None = None,
    exporter: ResultExporter | None = None,
    field_labels: Mapping[str, str] = DEFAULT_FIELD_LABELS,
    worker_factory: WorkerFactory = PipelineWorker,
    on_progress: Callable[[BatchProgress], None] | None = None,
) -> LookupResult:
    """Resolve plates on a background worker and optionally export the results.

    Ctrl+C while waiting cancels the run at the next chunk boundary; the
    partial results come back with state ``cancelled`` and are not exported.
    A completed run is exported to ``export_to`` when given, and large runs are
    always exported (to the working directory unless ``export_to`` is set).
    ``field_labels`` picks and orders the exported vehicle columns.
    """

    plates = prepare_identifiers(identifiers)
    if not plates:
        raise ValueError("No license plates to look up")

    config = batch_config or get_batch_config()
    effective_batch_size = batch_size or config.batch_size_for(len(plates))
    effective_sessions = session_factory or build_rdw_session_factory()

    log.info(
        "Starting plate lookup: plates=%s, batch_size=%s",
        len(plates),
        effective_batch_size,
    )
    worker = worker_factory(effective_sessions, dispatch_delay=config.dispatch_delay_seconds)
    worker.start(plates, effective_batch_size)
    terminal = _await_terminal_event(worker, on_progress)
    worker.join()

    match terminal:
        case CompletedEvent(records=records):
            result = LookupResult(
                state=PipelineState.COMPLETED, records=records, total_count=len(plates)
            )
        case CancelledEvent(records=records):
            log.warning("Lookup cancelled after %s of %s plates", len(records), len(plates))
            return LookupResult(
                state=PipelineState.CANCELLED, records=records, total_count=len(plates)
            )
        case FailedEvent(message=message):
            log.error("Lookup failed: %s", message)
            return LookupResult(
                state=PipelineState.FAILED, records=(), total_count=len(plates), error=message
            )

    if export_to is None and not config.is_large_request(len(plates)):
        return result

    destination = export_to or Path.cwd()
    if export_to is None:
        log.info("Large request (%s plates): exporting results directly", len(plates))
    path = (exporter or ExcelResultExporter()).export(
        result.records, destination, field_labels=field_labels
    )
    return LookupResult(
        state=result.state,
        records=result.records,
        total_count=result.total_count,
        export_path=path,
    )


def _await_terminal_event(
    worker: PipelineWorker,
    on_progress: Callable[[BatchProgress], None] | None,
) -> CompletedEvent | CancelledEvent | FailedEvent:
    while True:
        try:
            for event in worker.events():
                terminal = _handle_event(event, on_progress)
                if terminal is not None:
                    return terminal
        except KeyboardInterrupt:
            log.warning("Interrupted; stopping after the chunk in flight")
            worker.cancel()


def _handle_event(
    event: PipelineEvent,
    on_progress: Callable[[BatchProgress], None] | None,
) -> CompletedEvent | CancelledEvent | FailedEvent | None:
    if isinstance(event, ProgressEvent):
        progress = event.progress
        log.info(
            "Processed %s/%s plates (%.0f%%)",
            progress.processed_count,
            progress.total_count,
            progress.percentage,
        )
        if on_progress is not None:
            on_progress(progress)
        return None
    return event


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemySavedVehicleUnitOfWork


def save_vehicles(
    records: Iterable[ResolutionRecord],
    *,
    owner: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> SaveVehiclesResult:
    """Store the found records in the saved-vehicle list."""

    return save_records(
        records,
        owner=owner or get_current_owner(),
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
    )


def list_saved_vehicles(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Sequence[SavedVehicle]:
    return list_vehicles(unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory))


def delete_saved_vehicles(
    vehicle_ids: Sequence[UUID],
    *,
    owner: str | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Delete saved vehicles owned by ``owner``.

    A single id is deleted strictly and raises when it is missing or owned by
    someone else; several ids are deleted in bulk, skipping the ones that do
    not belong to ``owner``.
    """

    effective_owner = owner or get_current_owner()
    factory = _unit_of_work_factory(unit_of_work_factory)
    if len(vehicle_ids) == 1:
        delete_vehicle(vehicle_ids[0], owner=effective_owner, unit_of_work_factory=factory)
        return 1
    return delete_vehicles(vehicle_ids, owner=effective_owner, unit_of_work_factory=factory)
