"""Errors raised while reading kentekenpy settings."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when a setting cannot be used."""


class InvalidSettingError(ConfigurationError):
    """An environment variable is set to a value of the wrong kind or range."""

    def __init__(self, name: str, value: object, expected: str) -> None:
        super().__init__(f"{name} must be {expected}, got {value!r}")
        self.name = name
        self.value = value
