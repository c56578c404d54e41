"""Precedence tables for manual sections and products.

A ``PrecedenceOrder`` is built once at startup from a fixed list (man(1)'s
section search order, or the configured product order) and passed
explicitly to the code that sorts by it.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")


class PrecedenceOrder:
    """Read-only ranking of known values.

    Known values sort by their position in the table; unknown values sort
    after all known ones, alphabetically among themselves.
    """

    __slots__ = ("_rank", "_values")

    def __init__(self, values: Iterable[str]) -> None:
        ranked: dict[str, int] = {}
        for value in values:
            # First occurrence wins so a repeated value keeps its earliest rank
            ranked.setdefault(value, len(ranked))
        self._rank = ranked
        self._values = tuple(ranked)

    @classmethod
    def from_string(cls, spec: str) -> "PrecedenceOrder":
        """Build from a whitespace-separated list, e.g. ``"1 n l 8 3"``."""
        return cls(spec.split())

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    def __contains__(self, value: str) -> bool:
        return value in self._rank

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"PrecedenceOrder({list(self._values)!r})"

    def key(self, value: str) -> tuple[int, int, str]:
        rank = self._rank.get(value)
        if rank is None:
            return (1, 0, value)
        return (0, rank, "")

    def sorted(self, items: Iterable[T], key: Callable[[T], str]) -> list[T]:
        """Stable sort of ``items`` by the precedence of ``key(item)``."""
        return sorted(items, key=lambda item: self.key(key(item)))

    def sort_values(self, values: Sequence[str]) -> list[str]:
        return sorted(values, key=self.key)
