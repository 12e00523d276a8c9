"""Store client protocol consumed by readers.

Readers depend on this protocol only. CellStore is the bundled
implementation; any wide-column client offering the same two calls can
stand in for it.
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from chronicle.store.predicates import Predicate
    from chronicle.store.rows import RawRow


@runtime_checkable
class StoreClient(Protocol):
    """Point reads and prefix scans over a wide-column table.

    Both calls raise StoreError on transport or storage failure. Readers
    let that error through unchanged.
    """

    def get_one(
        self,
        key: bytes,
        predicate: "Predicate | None" = None,
        max_versions: int | None = 1,
    ) -> "RawRow | None":
        """Read one row.

        Args:
            key: Exact row key
            predicate: Optional predicate applied server-side
            max_versions: Versions kept per column (None = all)

        Returns:
            The surviving cells, or None if the row is absent or every
            cell was filtered out
        """
        ...

    def scan(
        self,
        key_prefix: bytes,
        predicate: "Predicate | None" = None,
        row_cap: int | None = None,
    ) -> Iterator["RawRow"]:
        """Lazily read every row whose key starts with `key_prefix`.

        Rows come back in key order with all versions of each column.
        The iterator is finite and cannot be restarted once consumed.

        Args:
            key_prefix: Row key prefix bounding the scan
            predicate: Optional predicate applied server-side
            row_cap: Stop after this many rows (None = unbounded)
        """
        ...
