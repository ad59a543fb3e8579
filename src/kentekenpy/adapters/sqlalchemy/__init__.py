"""SQLAlchemy adapter package for kentekenpy."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, saved_vehicle_table, start_mappers
from .repositories import SqlAlchemySavedVehicleRepository
from .unit_of_work import (
    SqlAlchemySavedVehicleUnitOfWork,
    StartupError,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemySavedVehicleRepository",
    "SqlAlchemySavedVehicleUnitOfWork",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "saved_vehicle_table",
    "shutdown",
    "start_mappers",
    "startup",
]
