# src/chronicle/store/__init__.py
"""Store: wide-column cells, predicates, and the SQL-backed cell store."""

from chronicle.store.database import CellStore
from chronicle.store.predicates import (
    BinaryComparator,
    BinaryPrefixComparator,
    FamilyFilter,
    ListOperator,
    PageFilter,
    Predicate,
    PredicateList,
    QualifierFilter,
    SingleColumnValueFilter,
)
from chronicle.store.protocols import StoreClient
from chronicle.store.rows import Cell, RawRow
from chronicle.store.schema import metadata

__all__ = [
    # Store
    "CellStore",
    "StoreClient",
    "metadata",
    # Rows
    "Cell",
    "RawRow",
    # Predicates
    "BinaryComparator",
    "BinaryPrefixComparator",
    "FamilyFilter",
    "ListOperator",
    "PageFilter",
    "Predicate",
    "PredicateList",
    "QualifierFilter",
    "SingleColumnValueFilter",
]
