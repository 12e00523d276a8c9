"""Apply predicate trees and version limits to raw rows."""

from collections import defaultdict
from collections.abc import Iterable, Iterator

from chronicle.store.predicates import EvaluationState, Predicate, is_empty
from chronicle.store.rows import Cell, RawRow


def limit_versions(cells: Iterable[Cell], max_versions: int | None) -> list[Cell]:
    """Keep the newest `max_versions` versions of each column.

    None keeps every version.
    """
    cells = list(cells)
    if max_versions is None:
        return cells
    by_column: dict[tuple[bytes, bytes], list[Cell]] = defaultdict(list)
    for cell in cells:
        by_column[(cell.family, cell.qualifier)].append(cell)
    kept: set[int] = set()
    for versions in by_column.values():
        versions.sort(key=lambda c: c.timestamp, reverse=True)
        kept.update(id(c) for c in versions[:max_versions])
    return [c for c in cells if id(c) in kept]


def filter_row(
    row: RawRow,
    predicate: Predicate | None,
    state: EvaluationState,
) -> RawRow | None:
    """Return the cells of `row` that pass `predicate`.

    Returns None when no cell survives; a row with no cells is not a
    result.
    """
    if row.is_empty():
        return None
    if predicate is None or is_empty(predicate):
        return row
    surviving = [c for c in row.cells if predicate.matches(c, row, state)]
    if not surviving:
        return None
    return RawRow.of(row.key, surviving)


def filter_rows(
    rows: Iterable[RawRow],
    predicate: Predicate | None,
    row_cap: int | None = None,
) -> Iterator[RawRow]:
    """Lazily filter a key-ordered stream of rows, stopping at `row_cap`."""
    state = EvaluationState()
    for row in rows:
        if row_cap is not None and state.rows_returned >= row_cap:
            return
        kept = filter_row(row, predicate, state)
        if kept is None:
            continue
        state.rows_returned += 1
        yield kept
