"""Domain port definitions for adapters."""

from __future__ import annotations

from .export import ResultExporter
from .lookup import LookupClient, LookupSessionFactory
from .persistence import (
    DuplicateKeyError,
    NotFoundError,
    NotOwnerError,
    SavedVehicleError,
    SavedVehicleRepository,
)
from .unit_of_work import (
    RepositoryCollection,
    SavedVehicleRepositories,
    SavedVehicleUnitOfWork,
    UnitOfWork,
)

__all__ = [
    "DuplicateKeyError",
    "LookupClient",
    "LookupSessionFactory",
    "NotFoundError",
    "NotOwnerError",
    "RepositoryCollection",
    "ResultExporter",
    "SavedVehicleError",
    "SavedVehicleRepositories",
    "SavedVehicleRepository",
    "SavedVehicleUnitOfWork",
    "UnitOfWork",
]
