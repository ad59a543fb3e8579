from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from kentekenpy.domain.model import (
    ERROR_VALUE,
    NOT_FOUND_VALUE,
    UNKNOWN_VALUE,
    VEHICLE_FIELDS,
    ResolutionRecord,
    ResolutionStatus,
    SavedVehicle,
    summarize,
)

if TYPE_CHECKING:
    from collections.abc import Callable


def test_found_record_fills_missing_fields_with_unknown() -> None:
    record = ResolutionRecord.found("1-ABC-23", {"kenteken": "1ABC23", "merk": "TOYOTA"})

    assert record.status is ResolutionStatus.FOUND
    assert set(record.fields) == set(VEHICLE_FIELDS)
    assert record.fields["merk"] == "TOYOTA"
    assert record.fields["handelsbenaming"] == UNKNOWN_VALUE


def test_found_record_rejects_fields_outside_the_vehicle_set() -> None:
    with pytest.raises(ValueError, match="kleur"):
        ResolutionRecord.found("1-ABC-23", {"kleur": "ROOD"})


@pytest.mark.parametrize(
    ("factory", "sentinel", "status"),
    [
        (ResolutionRecord.not_found, NOT_FOUND_VALUE, ResolutionStatus.NOT_FOUND),
        (ResolutionRecord.error, ERROR_VALUE, ResolutionStatus.ERROR),
    ],
)
def test_unresolved_records_fill_every_field(
    factory: Callable[[str], ResolutionRecord],
    sentinel: str,
    status: ResolutionStatus,
) -> None:
    record = factory("XX-99-YY")

    assert record.status is status
    assert not record.is_found
    assert all(record.fields[name] == sentinel for name in VEHICLE_FIELDS)


def test_summarize_counts_each_status() -> None:
    records = [
        ResolutionRecord.found("A", {}),
        ResolutionRecord.found("B", {}),
        ResolutionRecord.not_found("C"),
        ResolutionRecord.error("D"),
    ]

    summary = summarize(records)

    assert (summary.total, summary.found, summary.not_found, summary.errors) == (4, 2, 1, 1)
    assert summary.unresolved == 2


def test_saved_vehicle_requires_a_found_record() -> None:
    with pytest.raises(ValueError, match="not_found"):
        SavedVehicle.from_record(ResolutionRecord.not_found("1-ABC-23"), owner="anna")


def test_saved_vehicle_copies_fields_from_record() -> None:
    record = ResolutionRecord.found("1-ABC-23", {"merk": "FIAT"})

    vehicle = SavedVehicle.from_record(record, owner="anna")

    assert vehicle.identifier == "1ABC23"
    assert vehicle.added_by == "anna"
    assert vehicle.fields == dict(record.fields)
    assert vehicle.added_at.tzinfo is not None


def test_saved_vehicle_is_keyed_on_the_registry_plate() -> None:
    record = ResolutionRecord.found("1-abc-23", {"kenteken": "1ABC23"})

    vehicle = SavedVehicle.from_record(record, owner="anna")

    assert record.registry_identifier == "1ABC23"
    assert vehicle.identifier == "1ABC23"
    assert ResolutionRecord.not_found("XX-99-YY").registry_identifier == "XX99YY"
