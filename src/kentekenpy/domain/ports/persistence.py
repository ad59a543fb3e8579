"""Ports for persisting saved vehicles."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from uuid import UUID

    from kentekenpy.domain.model import SavedVehicle


class SavedVehicleError(RuntimeError):
    """Base class for saved-vehicle store failures."""


class DuplicateKeyError(SavedVehicleError):
    """Raised when a vehicle with the same identifier is already stored."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Vehicle {identifier} is already saved")
        self.identifier = identifier


class NotFoundError(SavedVehicleError):
    """Raised when no saved vehicle has the requested id."""

    def __init__(self, vehicle_id: UUID) -> None:
        super().__init__(f"Saved vehicle {vehicle_id} does not exist")
        self.vehicle_id = vehicle_id


class NotOwnerError(SavedVehicleError):
    """Raised when a user deletes a saved vehicle they did not add."""

    def __init__(self, vehicle_id: UUID, owner: str) -> None:
        super().__init__(f"Saved vehicle {vehicle_id} is not owned by {owner}")
        self.vehicle_id = vehicle_id
        self.owner = owner


@runtime_checkable
class SavedVehicleRepository(Protocol):
    """Keyed store of saved vehicles with owner-scoped deletes."""

    def add(self, vehicle: SavedVehicle) -> None: ...

    def delete(self, vehicle_id: UUID, *, owner: str) -> None: ...

    def bulk_delete(self, vehicle_ids: Iterable[UUID], *, owner: str) -> int: ...

    def list(self) -> Sequence[SavedVehicle]: ...

    def is_saved(self, identifier: str) -> bool: ...
