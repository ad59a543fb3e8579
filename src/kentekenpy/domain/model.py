"""Domain types for plate resolution and saved vehicles."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from kentekenpy.domain.identifiers import query_form

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

# Field names agreed with the RDW "gekentekende voertuigen" dataset. Bump the
# version whenever the set changes so stored snapshots can be told apart.
VEHICLE_FIELDS_VERSION: Final[int] = 1
VEHICLE_FIELDS: Final[tuple[str, ...]] = (
    "kenteken",
    "merk",
    "handelsbenaming",
    "vervaldatum_apk",
    "datum_eerste_toelating",
    "wam_verzekerd",
    "geschorst",
    "datum_tenaamstelling",
    "datum_eerste_tenaamstelling_in_nederland_dt",
    "export_indicator",
    "tenaamstellen_mogelijk",
)

UNKNOWN_VALUE: Final[str] = "Unknown"
NOT_FOUND_VALUE: Final[str] = "Not Found"
ERROR_VALUE: Final[str] = "Error"


class ResolutionStatus(StrEnum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


def _filled(value: str) -> dict[str, str]:
    return dict.fromkeys(VEHICLE_FIELDS, value)


@dataclass(frozen=True, slots=True)
class ResolutionRecord:
    """Outcome of resolving a single identifier."""

    identifier: str
    status: ResolutionStatus
    fields: Mapping[str, str]

    @classmethod
    def found(cls, identifier: str, fields: Mapping[str, str]) -> ResolutionRecord:
        unknown = set(fields).difference(VEHICLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown vehicle fields: {', '.join(sorted(unknown))}")
        values = _filled(UNKNOWN_VALUE)
        values.update(fields)
        return cls(identifier=identifier, status=ResolutionStatus.FOUND, fields=values)

    @classmethod
    def not_found(cls, identifier: str) -> ResolutionRecord:
        return cls(
            identifier=identifier,
            status=ResolutionStatus.NOT_FOUND,
            fields=_filled(NOT_FOUND_VALUE),
        )

    @classmethod
    def error(cls, identifier: str) -> ResolutionRecord:
        return cls(
            identifier=identifier,
            status=ResolutionStatus.ERROR,
            fields=_filled(ERROR_VALUE),
        )

    @property
    def is_found(self) -> bool:
        return self.status is ResolutionStatus.FOUND

    @property
    def registry_identifier(self) -> str:
        """The registry's own plate for found records, else the separator-free input."""
        kenteken = self.fields.get("kenteken", UNKNOWN_VALUE)
        if self.is_found and kenteken != UNKNOWN_VALUE:
            return query_form(kenteken)
        return query_form(self.identifier)


@dataclass(frozen=True, slots=True)
class ResultSummary:
    total: int
    found: int
    not_found: int
    errors: int

    @property
    def unresolved(self) -> int:
        return self.not_found + self.errors


def summarize(records: Iterable[ResolutionRecord]) -> ResultSummary:
    counts = dict.fromkeys(ResolutionStatus, 0)
    for record in records:
        counts[record.status] += 1
    return ResultSummary(
        total=sum(counts.values()),
        found=counts[ResolutionStatus.FOUND],
        not_found=counts[ResolutionStatus.NOT_FOUND],
        errors=counts[ResolutionStatus.ERROR],
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False)
class SavedVehicle:
    """A vehicle snapshot saved by a user.

    ``identifier`` is stored without separators so every spelling of a plate
    maps to the same saved vehicle.
    """

    identifier: str
    added_by: str
    fields: dict[str, str] = field(default_factory=dict[str, str])
    added_at: datetime = field(default_factory=_utcnow)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        self.identifier = query_form(self.identifier)

    @classmethod
    def from_record(cls, record: ResolutionRecord, *, owner: str) -> SavedVehicle:
        if not record.is_found:
            msg = f"Only found vehicles can be saved, {record.identifier} is {record.status}"
            raise ValueError(msg)
        return cls(
            identifier=record.registry_identifier,
            added_by=owner,
            fields=dict(record.fields),
        )
