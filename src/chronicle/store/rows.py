"""Raw results returned by a store client.

A RawRow is everything a get or scan returned for one row key: a flat
list of versioned cells. Readers never see the storage layout beyond
this.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Cell:
    """One version of one column: (family, qualifier, timestamp) -> value."""

    family: bytes
    qualifier: bytes
    timestamp: int
    value: Any


@dataclass(frozen=True)
class RawRow:
    """All cells returned for one row key, in store order."""

    key: bytes
    cells: tuple[Cell, ...]

    def is_empty(self) -> bool:
        return not self.cells

    def versions(self, family: bytes, qualifier: bytes) -> list[Cell]:
        """All versions of one column, oldest first."""
        found = [c for c in self.cells if c.family == family and c.qualifier == qualifier]
        return sorted(found, key=lambda c: c.timestamp)

    def latest(self, family: bytes, qualifier: bytes) -> Cell | None:
        """Newest version of one column, or None when the column is absent."""
        found = self.versions(family, qualifier)
        return found[-1] if found else None

    def with_prefix(self, family: bytes, prefix: bytes) -> Iterator[Cell]:
        """Cells in `family` whose qualifier starts with `prefix`."""
        for cell in self.cells:
            if cell.family == family and cell.qualifier.startswith(prefix):
                yield cell

    @classmethod
    def of(cls, key: bytes, cells: Iterable[Cell]) -> "RawRow":
        return cls(key=key, cells=tuple(cells))
