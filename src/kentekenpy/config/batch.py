"""Batch lookup defaults."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_float, env_int
from .errors import InvalidSettingError

DEFAULT_BATCH_SIZE = 50
LARGE_REQUEST_BATCH_SIZE = 100
HUGE_REQUEST_BATCH_SIZE = 200
LARGE_REQUEST_THRESHOLD = 1000
HUGE_REQUEST_THRESHOLD = 5000
DEFAULT_DISPATCH_DELAY_SECONDS = 0.1


@dataclass(frozen=True, slots=True)
class BatchConfig:
    default_batch_size: int = DEFAULT_BATCH_SIZE
    large_batch_size: int = LARGE_REQUEST_BATCH_SIZE
    huge_batch_size: int = HUGE_REQUEST_BATCH_SIZE
    large_request_threshold: int = LARGE_REQUEST_THRESHOLD
    huge_request_threshold: int = HUGE_REQUEST_THRESHOLD
    dispatch_delay_seconds: float = DEFAULT_DISPATCH_DELAY_SECONDS
    fixed_batch_size: int | None = None

    def batch_size_for(self, total: int) -> int:
        """Pick a chunk size for ``total`` plates: bigger inputs get bigger chunks."""

        if self.fixed_batch_size is not None:
            return self.fixed_batch_size
        if total >= self.huge_request_threshold:
            return self.huge_batch_size
        if total >= self.large_request_threshold:
            return self.large_batch_size
        return self.default_batch_size

    def is_large_request(self, total: int) -> bool:
        return total >= self.large_request_threshold


def get_batch_config() -> BatchConfig:
    delay = env_float("KENTEKENPY_DISPATCH_DELAY", DEFAULT_DISPATCH_DELAY_SECONDS)
    fixed = env_int("KENTEKENPY_BATCH_SIZE", None)
    if delay is not None and delay < 0:
        raise InvalidSettingError("KENTEKENPY_DISPATCH_DELAY", delay, "non-negative")
    if fixed is not None and fixed <= 0:
        raise InvalidSettingError("KENTEKENPY_BATCH_SIZE", fixed, "positive")
    return BatchConfig(
        dispatch_delay_seconds=DEFAULT_DISPATCH_DELAY_SECONDS if delay is None else delay,
        fixed_batch_size=fixed,
    )
