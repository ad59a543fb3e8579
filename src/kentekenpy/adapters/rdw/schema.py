"""Pydantic models describing the RDW open-data vehicle payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, RootModel, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return value


class RdwBaseModel(BaseModel):
    # the dataset carries ~90 columns; only the agreed vehicle fields are modeled
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class RdwVehiclePayload(RdwBaseModel):
    """One row of the "gekentekende voertuigen" dataset (m9d7-ebf2)."""

    kenteken: str | None = None
    merk: str | None = None
    handelsbenaming: str | None = None
    vervaldatum_apk: str | None = None
    datum_eerste_toelating: str | None = None
    wam_verzekerd: str | None = None
    geschorst: str | None = None
    datum_tenaamstelling: str | None = None
    datum_eerste_tenaamstelling_in_nederland_dt: str | None = None
    export_indicator: str | None = None
    tenaamstellen_mogelijk: str | None = None

    _normalize_values = field_validator("*", mode="before")(_blank_to_none)


class RdwVehicleResponse(RootModel[list[RdwVehiclePayload]]):
    """The dataset answers every query with a JSON array, empty when nothing matched."""
