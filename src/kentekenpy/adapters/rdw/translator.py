"""Translate RDW payloads into resolution records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from kentekenpy.domain.identifiers import query_form
from kentekenpy.domain.model import UNKNOWN_VALUE, VEHICLE_FIELDS, ResolutionRecord

if TYPE_CHECKING:
    from .schema import RdwVehiclePayload

# Fields whose absence means something other than "Unknown".
FIELD_DEFAULTS: Final[dict[str, str]] = {"geschorst": "No"}


def translate_vehicle(identifier: str, payload: RdwVehiclePayload) -> ResolutionRecord:
    """Build a ``found`` record, echoing ``identifier`` as the record identity."""

    fields: dict[str, str] = {}
    for name in VEHICLE_FIELDS:
        value = getattr(payload, name)
        fields[name] = value if value is not None else FIELD_DEFAULTS.get(name, UNKNOWN_VALUE)
    if payload.kenteken is None:
        fields["kenteken"] = query_form(identifier)
    return ResolutionRecord.found(identifier, fields)
