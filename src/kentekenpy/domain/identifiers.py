"""License plate normalization."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

_SEPARATORS = re.compile(r"[-\s]+")


def normalize_identifier(raw: str) -> str:
    """Trim and upper-case a plate, keeping its separators (``" 1-abc-23"`` -> ``"1-ABC-23"``)."""

    return raw.strip().upper()


def query_form(identifier: str) -> str:
    """Return the form sent upstream: separators stripped (``"1-ABC-23"`` -> ``"1ABC23"``)."""

    return _SEPARATORS.sub("", normalize_identifier(identifier))


def prepare_identifiers(raw_identifiers: Iterable[str]) -> list[str]:
    """Normalize plates in order and drop the ones that are empty after trimming."""

    prepared: list[str] = []
    for raw in raw_identifiers:
        identifier = normalize_identifier(raw)
        if identifier:
            prepared.append(identifier)
    return prepared
