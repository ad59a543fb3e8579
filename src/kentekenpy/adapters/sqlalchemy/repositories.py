"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from sqlalchemy import delete, select

from kentekenpy.adapters.sqlalchemy.mappings import saved_vehicle_table
from kentekenpy.domain.identifiers import query_form
from kentekenpy.domain.model import SavedVehicle
from kentekenpy.domain.ports.persistence import DuplicateKeyError, NotFoundError, NotOwnerError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from sqlalchemy.orm import Session


class SqlAlchemySavedVehicleRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, vehicle: SavedVehicle) -> None:
        if self.is_saved(vehicle.identifier):
            raise DuplicateKeyError(vehicle.identifier)
        self.session.add(vehicle)

    def get(self, vehicle_id: UUID) -> SavedVehicle | None:
        return self.session.get(SavedVehicle, vehicle_id)

    def delete(self, vehicle_id: UUID, *, owner: str) -> None:
        vehicle = self.get(vehicle_id)
        if vehicle is None:
            raise NotFoundError(vehicle_id)
        if vehicle.added_by != owner:
            raise NotOwnerError(vehicle_id, owner)
        self.session.delete(vehicle)

    def bulk_delete(self, vehicle_ids: Iterable[UUID], *, owner: str) -> int:
        ids = list(vehicle_ids)
        if not ids:
            return 0
        stmt = (
            delete(saved_vehicle_table)
            .where(saved_vehicle_table.c.id.in_(ids))
            .where(saved_vehicle_table.c.added_by == owner)
        )
        result = self.session.execute(stmt)
        self.session.expire_all()
        return cast(int, getattr(result, "rowcount", 0) or 0)

    def list(self) -> Sequence[SavedVehicle]:
        stmt = select(SavedVehicle).order_by(saved_vehicle_table.c.added_at.desc())
        return self.session.execute(stmt).scalars().all()

    def is_saved(self, identifier: str) -> bool:
        stmt = (
            select(saved_vehicle_table.c.id)
            .where(saved_vehicle_table.c.identifier == query_form(identifier))
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none() is not None

