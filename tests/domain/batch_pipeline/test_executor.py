from __future__ import annotations

import asyncio

from kentekenpy.domain.batch_pipeline import execute_chunk
from kentekenpy.domain.model import ResolutionRecord, ResolutionStatus
from tests.helpers.lookups import FakeLookupClient


def test_execute_chunk_returns_records_in_chunk_order() -> None:
    # the first plate answers last
    client = FakeLookupClient(delays={"A-1": 0.03, "B-2": 0.01})

    records = asyncio.run(execute_chunk(["A-1", "B-2", "C-3"], client))

    assert [record.identifier for record in records] == ["A-1", "B-2", "C-3"]
    assert all(record.is_found for record in records)


def test_execute_chunk_dispatches_every_lookup_concurrently() -> None:
    in_flight: list[int] = []
    active = 0

    class _CountingClient:
        async def resolve(self, identifier: str) -> ResolutionRecord:
            nonlocal active
            active += 1
            in_flight.append(active)
            await asyncio.sleep(0.01)
            active -= 1
            return ResolutionRecord.not_found(identifier)

    asyncio.run(execute_chunk(["A", "B", "C", "D"], _CountingClient()))

    assert max(in_flight) == 4


def test_raising_lookup_only_affects_its_own_record() -> None:
    client = FakeLookupClient(failing={"B-2"}, missing={"C-3"})

    records = asyncio.run(execute_chunk(["A-1", "B-2", "C-3"], client))

    assert [record.status for record in records] == [
        ResolutionStatus.FOUND,
        ResolutionStatus.ERROR,
        ResolutionStatus.NOT_FOUND,
    ]
    assert records[1].identifier == "B-2"
    assert records[1].fields["merk"] == "Error"


def test_records_are_associated_by_position() -> None:
    class _MislabellingClient:
        async def resolve(self, identifier: str) -> ResolutionRecord:
            return ResolutionRecord.found("SOMETHING-ELSE", {"kenteken": identifier})

    records = asyncio.run(execute_chunk(["A-1", "B-2"], _MislabellingClient()))

    assert [record.identifier for record in records] == ["A-1", "B-2"]
    assert [record.fields["kenteken"] for record in records] == ["A-1", "B-2"]
