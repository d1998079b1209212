"""Header name normalization and the single/multiple header value variant."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


def normalize_header_name(name: str) -> str:
    """Return the lookup key for a header name (trimmed, case-folded)."""

    return name.strip().lower()


@dataclass(frozen=True)
class Single:
    """A header received exactly once."""

    value: str

    def values(self) -> list[str]:
        return [self.value]

    def add(self, value: str) -> Multiple:
        return Multiple((self.value, value))


@dataclass(frozen=True)
class Multiple:
    """A header received more than once, values in arrival order."""

    items: tuple[str, ...]

    def values(self) -> list[str]:
        return list(self.items)

    def add(self, value: str) -> Multiple:
        return Multiple((*self.items, value))


HeaderValue = Union[Single, Multiple]
