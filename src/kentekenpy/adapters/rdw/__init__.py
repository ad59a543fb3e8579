"""Public interface for the RDW adapter."""

from __future__ import annotations

from .client import RdwAPIError, RdwLookupClient, build_rdw_session_factory, has_matches
from .schema import RdwVehiclePayload, RdwVehicleResponse
from .translator import translate_vehicle

__all__ = [
    "RdwAPIError",
    "RdwLookupClient",
    "RdwVehiclePayload",
    "RdwVehicleResponse",
    "build_rdw_session_factory",
    "has_matches",
    "translate_vehicle",
]
