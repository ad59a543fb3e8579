from __future__ import annotations

from kentekenpy.adapters.rdw import RdwVehiclePayload, translate_vehicle
from kentekenpy.domain.model import UNKNOWN_VALUE, VEHICLE_FIELDS, ResolutionStatus


def test_translate_fills_defaults() -> None:
    payload = RdwVehiclePayload(kenteken="1ABC23", merk="PEUGEOT")

    record = translate_vehicle("1-ABC-23", payload)

    assert record.status is ResolutionStatus.FOUND
    assert record.identifier == "1-ABC-23"
    assert set(record.fields) == set(VEHICLE_FIELDS)
    assert record.fields["merk"] == "PEUGEOT"
    assert record.fields["geschorst"] == "No"
    assert record.fields["vervaldatum_apk"] == UNKNOWN_VALUE


def test_translate_keeps_reported_suspension() -> None:
    record = translate_vehicle("1-ABC-23", RdwVehiclePayload(geschorst="Ja"))

    assert record.fields["geschorst"] == "Ja"


def test_translate_falls_back_to_queried_plate() -> None:
    record = translate_vehicle("1-abc-23", RdwVehiclePayload(merk="KIA"))

    assert record.fields["kenteken"] == "1ABC23"
