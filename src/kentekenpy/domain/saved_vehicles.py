"""Application services for the saved-vehicle store."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from kentekenpy.domain.model import SavedVehicle
from kentekenpy.domain.ports.persistence import DuplicateKeyError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Sequence
    from uuid import UUID

    from kentekenpy.domain.model import ResolutionRecord
    from kentekenpy.domain.ports.unit_of_work import SavedVehicleUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class SaveVehiclesResult:
    """Outcome of saving a batch of resolved plates."""

    saved: list[SavedVehicle] = field(default_factory=list[SavedVehicle])
    already_saved: list[str] = field(default_factory=list[str])
    skipped: list[str] = field(default_factory=list[str])


def save_records(
    records: Iterable[ResolutionRecord],
    *,
    owner: str,
    unit_of_work_factory: Callable[[], SavedVehicleUnitOfWork],
) -> SaveVehiclesResult:
    """Store every found record for ``owner``; unresolved plates are skipped.

    A plate that is already stored is reported, not overwritten.
    """

    result = SaveVehiclesResult()
    with unit_of_work_factory() as uow:
        repository = uow.repositories.saved_vehicles
        for record in records:
            if not record.is_found:
                result.skipped.append(record.identifier)
                continue
            vehicle = SavedVehicle.from_record(record, owner=owner)
            try:
                repository.add(vehicle)
            except DuplicateKeyError:
                log.info("Vehicle %s is already saved", record.identifier)
                result.already_saved.append(record.identifier)
                continue
            result.saved.append(vehicle)
        uow.commit()
    log.info(
        "Saved %s vehicles for %s (%s already saved, %s skipped)",
        len(result.saved),
        owner,
        len(result.already_saved),
        len(result.skipped),
    )
    return result


def list_vehicles(
    *,
    unit_of_work_factory: Callable[[], SavedVehicleUnitOfWork],
) -> Sequence[SavedVehicle]:
    with unit_of_work_factory() as uow:
        return list(uow.repositories.saved_vehicles.list())


def delete_vehicle(
    vehicle_id: UUID,
    *,
    owner: str,
    unit_of_work_factory: Callable[[], SavedVehicleUnitOfWork],
) -> None:
    with unit_of_work_factory() as uow:
        uow.repositories.saved_vehicles.delete(vehicle_id, owner=owner)
        uow.commit()


def delete_vehicles(
    vehicle_ids: Iterable[UUID],
    *,
    owner: str,
    unit_of_work_factory: Callable[[], SavedVehicleUnitOfWork],
) -> int:
    """Delete the listed vehicles that ``owner`` added; returns how many went."""

    with unit_of_work_factory() as uow:
        deleted = uow.repositories.saved_vehicles.bulk_delete(vehicle_ids, owner=owner)
        uow.commit()
    log.info("Deleted %s saved vehicles for %s", deleted, owner)
    return deleted
