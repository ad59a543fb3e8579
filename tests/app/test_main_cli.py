from __future__ import annotations

import uuid
from pathlib import Path

import pytest

from kentekenpy import main as main_module
from kentekenpy.adapters.spreadsheet import DEFAULT_FIELD_LABELS
from kentekenpy.app import LookupResult
from kentekenpy.domain.batch_pipeline import PipelineState
from kentekenpy.domain.model import ResolutionRecord
from kentekenpy.domain.ports.persistence import NotOwnerError
from kentekenpy.domain.saved_vehicles import SaveVehiclesResult
from tests.helpers.lookups import make_found


def _completed(*records: ResolutionRecord) -> LookupResult:
    return LookupResult(state=PipelineState.COMPLETED, records=records, total_count=len(records))


def test_lookup_command_prints_records(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    captured: dict[str, object] = {}

    def fake_lookup(plates: list[str], **kwargs: object) -> LookupResult:
        captured["plates"] = plates
        captured.update(kwargs)
        return _completed(make_found("1-ABC-23"), ResolutionRecord.not_found("XX-99-YY"))

    monkeypatch.setattr(main_module, "lookup_plates", fake_lookup)

    main_module.main(["lookup", "1-abc-23", "xx-99-yy"])

    out = capsys.readouterr().out
    assert captured["plates"] == ["1-abc-23", "xx-99-yy"]
    assert captured["export_to"] is None
    assert captured["field_labels"] == DEFAULT_FIELD_LABELS
    assert "1-ABC-23" in out
    assert "VOLKSWAGEN" in out
    assert "2 processed: 1 found, 1 not found, 0 errors" in out


def test_bulk_command_reads_file_and_passes_options(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    source = tmp_path / "plates.txt"
    source.write_text("1-ABC-23\nXX-99-YY\n", encoding="utf-8")
    captured: dict[str, object] = {}

    def fake_lookup(plates: list[str], **kwargs: object) -> LookupResult:
        captured["plates"] = plates
        captured.update(kwargs)
        return _completed(make_found("1-ABC-23"))

    monkeypatch.setattr(main_module, "lookup_plates", fake_lookup)

    main_module.main(
        ["bulk", "--file", str(source), "--batch-size", "25", "--output", str(tmp_path)]
    )

    assert captured["plates"] == ["1-ABC-23", "XX-99-YY"]
    assert captured["batch_size"] == 25
    assert captured["export_to"] == tmp_path


def test_bulk_command_rejects_bad_batch_size(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["bulk", "--file", str(tmp_path / "x.csv"), "--batch-size", "0"])

    assert excinfo.value.code == 2


def test_missing_plate_file_is_a_usage_error(tmp_path: Path) -> None:
    source = tmp_path / "empty.txt"
    source.write_text("\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["bulk", "--file", str(source)])

    assert excinfo.value.code == 2


def test_failed_lookup_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_lookup(plates: list[str], **_: object) -> LookupResult:
        return LookupResult(
            state=PipelineState.FAILED, records=(), total_count=len(plates), error="offline"
        )

    monkeypatch.setattr(main_module, "lookup_plates", fake_lookup)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "1-ABC-23"])

    assert excinfo.value.code == 1


def test_cancelled_lookup_exits_130(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_lookup(plates: list[str], **_: object) -> LookupResult:
        return LookupResult(
            state=PipelineState.CANCELLED,
            records=(make_found("1-ABC-23"),),
            total_count=len(plates),
        )

    monkeypatch.setattr(main_module, "lookup_plates", fake_lookup)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "1-ABC-23", "XX-99-YY"])

    assert excinfo.value.code == 130


def test_unexpected_error_exits_1(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_lookup(*_: object, **__: object) -> LookupResult:
        raise RuntimeError("disk full")

    monkeypatch.setattr(main_module, "lookup_plates", fake_lookup)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "1-ABC-23"])

    assert excinfo.value.code == 1


def test_saved_add_saves_found_records(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    records = (make_found("1-ABC-23"), ResolutionRecord.not_found("XX-99-YY"))
    saved_with: list[tuple[ResolutionRecord, ...]] = []

    def fake_save(found: tuple[ResolutionRecord, ...]) -> SaveVehiclesResult:
        saved_with.append(found)
        return SaveVehiclesResult(skipped=["XX-99-YY"], already_saved=["1-ABC-23"])

    monkeypatch.setattr(main_module, "lookup_plates", lambda *_, **__: _completed(*records))
    monkeypatch.setattr(main_module, "save_vehicles", fake_save)

    main_module.main(["saved", "add", "1-ABC-23", "XX-99-YY"])

    out = capsys.readouterr().out
    assert saved_with == [records]
    assert "1-ABC-23 is already saved" in out
    assert "XX-99-YY was not found" in out


def test_saved_delete_parses_ids(monkeypatch: pytest.MonkeyPatch) -> None:
    vehicle_id = uuid.uuid4()
    captured: list[object] = []

    def fake_delete(ids: list[uuid.UUID]) -> int:
        captured.extend(ids)
        return len(ids)

    monkeypatch.setattr(main_module, "delete_saved_vehicles", fake_delete)

    main_module.main(["saved", "delete", str(vehicle_id)])

    assert captured == [vehicle_id]


def test_saved_delete_of_foreign_vehicle_is_a_usage_error(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    vehicle_id = uuid.uuid4()

    def fake_delete(ids: list[uuid.UUID]) -> int:
        raise NotOwnerError(ids[0], "anna")

    monkeypatch.setattr(main_module, "delete_saved_vehicles", fake_delete)

    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["saved", "delete", str(vehicle_id)])

    assert excinfo.value.code == 2


def test_saved_delete_rejects_malformed_id() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["saved", "delete", "not-a-uuid"])

    assert excinfo.value.code == 2


def test_fields_option_picks_export_columns(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_lookup(plates: list[str], **kwargs: object) -> LookupResult:
        captured.update(kwargs)
        return _completed(make_found(plates[0]))

    monkeypatch.setattr(main_module, "lookup_plates", fake_lookup)

    main_module.main(["lookup", "1-ABC-23", "--fields", "geschorst, merk"])

    assert captured["field_labels"] == {"geschorst": "Suspended", "merk": "Make"}
    assert list(captured["field_labels"]) == ["geschorst", "merk"]  # type: ignore[call-overload]


def test_fields_option_rejects_unknown_names() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main_module.main(["lookup", "1-ABC-23", "--fields", "kleur"])

    assert excinfo.value.code == 2
