"""Tests for the SQLAlchemy-backed cell store."""

from pathlib import Path

import pytest

from chronicle.contracts.enums import CompareOp
from chronicle.store.database import CellStore, prefix_successor
from chronicle.store.predicates import (
    BinaryComparator,
    PageFilter,
    QualifierFilter,
    SingleColumnValueFilter,
)
from chronicle.store.rows import Cell


class TestCellStoreLifecycle:
    """Construction, connection, and closing."""

    def test_in_memory_creates_table(self) -> None:
        from sqlalchemy import inspect

        with CellStore.in_memory() as store:
            assert "cells" in inspect(store.engine).get_table_names()

    def test_file_backed_store(self, tmp_path: Path) -> None:
        url = f"sqlite:///{tmp_path / 'timeline.db'}"
        with CellStore(url) as store:
            store.put(b"row", b"i", b"q", 1, timestamp=1)

        with CellStore.from_url(url, create_tables=False) as reopened:
            row = reopened.get_one(b"row")
        assert row is not None
        assert row.cells[0].value == 1

    def test_closed_store_raises(self) -> None:
        store = CellStore.in_memory()
        store.close()
        with pytest.raises(RuntimeError, match="closed"):
            _ = store.engine

    def test_implements_store_client(self) -> None:
        from chronicle.store.protocols import StoreClient

        with CellStore.in_memory() as store:
            assert isinstance(store, StoreClient)

    def test_sql_failure_becomes_store_error(self, tmp_path: Path) -> None:
        from chronicle.contracts.errors import StoreError

        url = f"sqlite:///{tmp_path / 'empty.db'}"
        with CellStore.from_url(url, create_tables=False) as store:
            with pytest.raises(StoreError, match="Cell store operation failed"):
                store.get_one(b"row")


class TestGetOne:
    """Point reads."""

    def test_absent_row_is_none(self, store: CellStore) -> None:
        assert store.get_one(b"missing") is None

    def test_values_round_trip(self, store: CellStore) -> None:
        store.put(b"row", b"i", b"int", 7, timestamp=1)
        store.put(b"row", b"i", b"str", "3", timestamp=1)
        store.put(b"row", b"i", b"float", 1.5, timestamp=1)

        row = store.get_one(b"row")
        assert row is not None
        assert row.latest(b"i", b"int").value == 7  # type: ignore[union-attr]
        assert row.latest(b"i", b"str").value == "3"  # type: ignore[union-attr]
        assert row.latest(b"i", b"float").value == 1.5  # type: ignore[union-attr]

    def test_default_returns_newest_version_only(self, store: CellStore) -> None:
        store.put(b"row", b"i", b"m!M1", 5, timestamp=1)
        store.put(b"row", b"i", b"m!M1", 7, timestamp=2)

        row = store.get_one(b"row")
        assert row is not None
        assert [c.value for c in row.cells] == [7]

    def test_all_versions(self, store: CellStore) -> None:
        store.put(b"row", b"i", b"m!M1", 5, timestamp=1)
        store.put(b"row", b"i", b"m!M1", 7, timestamp=2)

        row = store.get_one(b"row", max_versions=None)
        assert row is not None
        assert [c.value for c in row.versions(b"i", b"m!M1")] == [5, 7]

    def test_same_timestamp_overwrites(self, store: CellStore) -> None:
        store.put(b"row", b"i", b"q", 1, timestamp=5)
        store.put(b"row", b"i", b"q", 2, timestamp=5)

        row = store.get_one(b"row", max_versions=None)
        assert row is not None
        assert row.cells == (Cell(b"i", b"q", 5, 2),)

    def test_default_timestamp_is_now(self, store: CellStore) -> None:
        store.put(b"row", b"i", b"q", 1)

        row = store.get_one(b"row")
        assert row is not None
        assert row.cells[0].timestamp > 1_600_000_000_000

    def test_predicate_filters_cells(self, store: CellStore) -> None:
        store.put_cells(
            b"row",
            [Cell(b"i", b"a", 1, 1), Cell(b"i", b"b", 1, 2)],
        )
        only_a = QualifierFilter(CompareOp.EQUAL, BinaryComparator(b"a"))

        row = store.get_one(b"row", only_a)
        assert row is not None
        assert [c.qualifier for c in row.cells] == [b"a"]

    def test_everything_filtered_is_none(self, store: CellStore) -> None:
        store.put(b"row", b"i", b"a", 1, timestamp=1)
        nothing = QualifierFilter(CompareOp.EQUAL, BinaryComparator(b"zzz"))

        assert store.get_one(b"row", nothing) is None


class TestScan:
    """Prefix scans."""

    def test_prefix_isolation(self, store: CellStore) -> None:
        store.put(b"c1!u1!f1!\x00", b"i", b"q", 1, timestamp=1)
        store.put(b"c1!u1!f10!\x00", b"i", b"q", 2, timestamp=1)
        store.put(b"c1!u1!f2!\x00", b"i", b"q", 3, timestamp=1)

        keys = [row.key for row in store.scan(b"c1!u1!f1!")]
        assert keys == [b"c1!u1!f1!\x00"]

    def test_rows_in_key_order(self, store: CellStore) -> None:
        for key in (b"p\x03", b"p\x01", b"p\x02"):
            store.put(key, b"i", b"q", 1, timestamp=1)

        assert [row.key for row in store.scan(b"p")] == [b"p\x01", b"p\x02", b"p\x03"]

    def test_scan_returns_all_versions(self, store: CellStore) -> None:
        store.put(b"p1", b"i", b"m!M1", 5, timestamp=1)
        store.put(b"p1", b"i", b"m!M1", 7, timestamp=2)

        (row,) = list(store.scan(b"p"))
        assert [c.value for c in row.versions(b"i", b"m!M1")] == [5, 7]

    def test_row_cap(self, store: CellStore) -> None:
        for i in range(5):
            store.put(b"p" + bytes([i]), b"i", b"q", i, timestamp=1)

        assert len(list(store.scan(b"p", row_cap=2))) == 2

    def test_page_filter(self, store: CellStore) -> None:
        for i in range(5):
            store.put(b"p" + bytes([i]), b"i", b"q", i, timestamp=1)

        assert len(list(store.scan(b"p", PageFilter(3)))) == 3

    def test_row_predicate(self, store: CellStore) -> None:
        for i in range(5):
            store.put(b"p" + bytes([i]), b"i", b"q", i, timestamp=1)
        at_least_three = SingleColumnValueFilter(
            b"i", b"q", CompareOp.GREATER_OR_EQUAL, 3
        )

        values = [row.cells[0].value for row in store.scan(b"p", at_least_three)]
        assert values == [3, 4]

    def test_empty_prefix_scans_everything(self, store: CellStore) -> None:
        store.put(b"a", b"i", b"q", 1, timestamp=1)
        store.put(b"\xff\xff", b"i", b"q", 2, timestamp=1)

        assert len(list(store.scan(b""))) == 2


class TestPrefixSuccessor:
    """Upper bound of a prefix range."""

    def test_increments_last_byte(self) -> None:
        assert prefix_successor(b"f1!") == b"f1\""

    def test_drops_trailing_ff(self) -> None:
        assert prefix_successor(b"a\xff\xff") == b"b"

    def test_unbounded(self) -> None:
        assert prefix_successor(b"") is None
        assert prefix_successor(b"\xff") is None
