from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Literal

import pytest

from kentekenpy.domain.identifiers import query_form
from kentekenpy.domain.model import ResolutionRecord, SavedVehicle
from kentekenpy.domain.ports.persistence import DuplicateKeyError, NotFoundError, NotOwnerError
from kentekenpy.domain.ports.unit_of_work import SavedVehicleRepositories
from kentekenpy.domain.saved_vehicles import (
    delete_vehicle,
    delete_vehicles,
    list_vehicles,
    save_records,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from types import TracebackType


class FakeSavedVehicleRepository:
    def __init__(self) -> None:
        self.items: dict[uuid.UUID, SavedVehicle] = {}

    def add(self, vehicle: SavedVehicle) -> None:
        if self.is_saved(vehicle.identifier):
            raise DuplicateKeyError(vehicle.identifier)
        self.items[vehicle.id] = vehicle

    def delete(self, vehicle_id: uuid.UUID, *, owner: str) -> None:
        vehicle = self.items.get(vehicle_id)
        if vehicle is None:
            raise NotFoundError(vehicle_id)
        if vehicle.added_by != owner:
            raise NotOwnerError(vehicle_id, owner)
        del self.items[vehicle_id]

    def bulk_delete(self, vehicle_ids: Iterable[uuid.UUID], *, owner: str) -> int:
        deleted = 0
        for vehicle_id in vehicle_ids:
            vehicle = self.items.get(vehicle_id)
            if vehicle is not None and vehicle.added_by == owner:
                del self.items[vehicle_id]
                deleted += 1
        return deleted

    def list(self) -> Sequence[SavedVehicle]:
        return sorted(self.items.values(), key=lambda vehicle: vehicle.added_at, reverse=True)

    def is_saved(self, identifier: str) -> bool:
        return any(vehicle.identifier == query_form(identifier) for vehicle in self.items.values())


class FakeUnitOfWork:
    def __init__(self, repository: FakeSavedVehicleRepository) -> None:
        self._repositories = SavedVehicleRepositories(saved_vehicles=repository)
        self.commits = 0

    @property
    def repositories(self) -> SavedVehicleRepositories:
        return self._repositories

    def __enter__(self) -> FakeUnitOfWork:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        return False

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        return None


@pytest.fixture
def repository() -> FakeSavedVehicleRepository:
    return FakeSavedVehicleRepository()


@pytest.fixture
def uow(repository: FakeSavedVehicleRepository) -> FakeUnitOfWork:
    return FakeUnitOfWork(repository)


def test_save_records_stores_found_and_skips_the_rest(
    repository: FakeSavedVehicleRepository,
    uow: FakeUnitOfWork,
) -> None:
    records = [
        ResolutionRecord.found("1-ABC-23", {"merk": "SAAB"}),
        ResolutionRecord.not_found("XX-99-YY"),
        ResolutionRecord.error("ZZ-11-ZZ"),
    ]

    result = save_records(records, owner="anna", unit_of_work_factory=lambda: uow)

    assert [vehicle.identifier for vehicle in result.saved] == ["1ABC23"]
    assert result.skipped == ["XX-99-YY", "ZZ-11-ZZ"]
    assert result.already_saved == []
    assert repository.is_saved("1-ABC-23")
    assert uow.commits == 1


def test_save_records_reports_duplicates(uow: FakeUnitOfWork) -> None:
    record = ResolutionRecord.found("1-ABC-23", {})
    save_records([record], owner="anna", unit_of_work_factory=lambda: uow)

    result = save_records([record], owner="bram", unit_of_work_factory=lambda: uow)

    assert result.saved == []
    assert result.already_saved == ["1-ABC-23"]


def test_save_records_treats_plate_spellings_as_one_vehicle(uow: FakeUnitOfWork) -> None:
    save_records(
        [ResolutionRecord.found("1-ABC-23", {"kenteken": "1ABC23"})],
        owner="anna",
        unit_of_work_factory=lambda: uow,
    )

    result = save_records(
        [ResolutionRecord.found("1abc23", {"kenteken": "1ABC23"})],
        owner="anna",
        unit_of_work_factory=lambda: uow,
    )

    assert result.saved == []
    assert result.already_saved == ["1abc23"]


def test_list_and_delete_vehicles(
    repository: FakeSavedVehicleRepository,
    uow: FakeUnitOfWork,
) -> None:
    mine = SavedVehicle(identifier="1-ABC-23", added_by="anna")
    theirs = SavedVehicle(identifier="XX-99-YY", added_by="bram")
    repository.add(mine)
    repository.add(theirs)

    with pytest.raises(NotOwnerError):
        delete_vehicle(theirs.id, owner="anna", unit_of_work_factory=lambda: uow)
    with pytest.raises(NotFoundError):
        delete_vehicle(uuid.uuid4(), owner="anna", unit_of_work_factory=lambda: uow)

    deleted = delete_vehicles([mine.id, theirs.id], owner="anna", unit_of_work_factory=lambda: uow)

    assert deleted == 1
    assert list(list_vehicles(unit_of_work_factory=lambda: uow)) == [theirs]
