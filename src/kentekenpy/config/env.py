"""Environment variable readers."""

from __future__ import annotations

import os

from .errors import InvalidSettingError


def optional_env_var(name: str) -> str | None:
    """Return a stripped environment variable, treating blank values as unset."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def env_float(name: str, default: float | None) -> float | None:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise InvalidSettingError(name, value, "a number") from exc


def env_int(name: str, default: int | None) -> int | None:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidSettingError(name, value, "an integer") from exc
