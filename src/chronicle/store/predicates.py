"""Server-side predicates understood by the cell store.

A predicate is a tree: atomic comparators at the leaves, AND/OR groups
(PredicateList) above them. Every node is a frozen dataclass, so a tree
cannot change once a reader has built it.

Evaluation order:
- MUST_PASS_ALL stops at the first child that rejects
- MUST_PASS_ONE stops at the first child that accepts
- an empty group accepts everything, whatever its operator

Cell-level predicates (FamilyFilter, QualifierFilter) decide per cell.
Row-level predicates (SingleColumnValueFilter, PageFilter) decide for
every cell of a row at once.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

from chronicle.contracts.enums import CompareOp

if TYPE_CHECKING:
    from chronicle.store.rows import Cell, RawRow

# Operator table shared by byte comparators and value comparisons
_OPERATORS: dict[CompareOp, Callable[[Any, Any], bool]] = {
    CompareOp.LESS_THAN: operator.lt,
    CompareOp.LESS_OR_EQUAL: operator.le,
    CompareOp.EQUAL: operator.eq,
    CompareOp.NOT_EQUAL: operator.ne,
    CompareOp.GREATER_OR_EQUAL: operator.ge,
    CompareOp.GREATER_THAN: operator.gt,
}


def compare(op: CompareOp, candidate: Any, reference: Any) -> bool:
    """Apply `op` as `candidate <op> reference`."""
    return _OPERATORS[op](candidate, reference)


def _show(value: bytes) -> str:
    return value.decode("utf-8", errors="backslashreplace")


class ListOperator(Enum):
    """How a PredicateList combines its children."""

    MUST_PASS_ALL = "all"
    MUST_PASS_ONE = "one"


@dataclass
class EvaluationState:
    """Mutable per-scan state consulted by row-level predicates."""

    rows_returned: int = 0


# === Comparators ===


@dataclass(frozen=True)
class BinaryComparator:
    """Compares whole byte strings lexicographically."""

    value: bytes

    def project(self, candidate: bytes) -> bytes:
        return candidate

    def to_dict(self) -> dict[str, Any]:
        return {"type": "binary", "value": _show(self.value)}


@dataclass(frozen=True)
class BinaryPrefixComparator:
    """Compares only the first len(value) bytes of the candidate."""

    value: bytes

    def project(self, candidate: bytes) -> bytes:
        return candidate[: len(self.value)]

    def to_dict(self) -> dict[str, Any]:
        return {"type": "binary_prefix", "value": _show(self.value)}


Comparator = Union[BinaryComparator, BinaryPrefixComparator]


# === Atomic predicates ===


@dataclass(frozen=True)
class FamilyFilter:
    """Accept cells whose column family compares true against the comparator."""

    op: CompareOp
    comparator: Comparator

    def matches(self, cell: Cell, row: RawRow, state: EvaluationState) -> bool:
        return compare(self.op, self.comparator.project(cell.family), self.comparator.value)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "family",
            "op": self.op.value,
            "comparator": self.comparator.to_dict(),
        }


@dataclass(frozen=True)
class QualifierFilter:
    """Accept cells whose qualifier compares true against the comparator."""

    op: CompareOp
    comparator: Comparator

    def matches(self, cell: Cell, row: RawRow, state: EvaluationState) -> bool:
        return compare(
            self.op, self.comparator.project(cell.qualifier), self.comparator.value
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "qualifier",
            "op": self.op.value,
            "comparator": self.comparator.to_dict(),
        }


@dataclass(frozen=True)
class SingleColumnValueFilter:
    """Accept a whole row when one column's newest value compares true.

    Rows without the column are rejected when `filter_if_missing` is set,
    and accepted otherwise. A stored value that cannot be ordered against
    `value` (int against str) never matches.
    """

    family: bytes
    qualifier: bytes
    op: CompareOp
    value: Any
    filter_if_missing: bool = True

    def matches(self, cell: Cell, row: RawRow, state: EvaluationState) -> bool:
        stored = row.latest(self.family, self.qualifier)
        if stored is None:
            return not self.filter_if_missing
        try:
            return compare(self.op, stored.value, self.value)
        except TypeError:
            return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "single_column_value",
            "family": _show(self.family),
            "qualifier": _show(self.qualifier),
            "op": self.op.value,
            "value": self.value,
            "filter_if_missing": self.filter_if_missing,
        }


@dataclass(frozen=True)
class PageFilter:
    """Accept rows until `page_size` rows have been returned by the scan."""

    page_size: int

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {self.page_size}")

    def matches(self, cell: Cell, row: RawRow, state: EvaluationState) -> bool:
        return state.rows_returned < self.page_size

    def to_dict(self) -> dict[str, Any]:
        return {"type": "page", "page_size": self.page_size}


# === Groups ===


@dataclass(frozen=True)
class PredicateList:
    """AND (MUST_PASS_ALL) or OR (MUST_PASS_ONE) group of predicates."""

    operator: ListOperator = ListOperator.MUST_PASS_ALL
    predicates: tuple[Predicate, ...] = field(default_factory=tuple)

    @classmethod
    def all_of(cls, *predicates: Predicate) -> PredicateList:
        return cls(ListOperator.MUST_PASS_ALL, tuple(predicates))

    @classmethod
    def one_of(cls, *predicates: Predicate) -> PredicateList:
        return cls(ListOperator.MUST_PASS_ONE, tuple(predicates))

    def is_empty(self) -> bool:
        return not self.predicates

    def matches(self, cell: Cell, row: RawRow, state: EvaluationState) -> bool:
        if not self.predicates:
            return True
        if self.operator is ListOperator.MUST_PASS_ALL:
            return all(p.matches(cell, row, state) for p in self.predicates)
        return any(p.matches(cell, row, state) for p in self.predicates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "list",
            "operator": self.operator.value,
            "predicates": [p.to_dict() for p in self.predicates],
        }


Predicate = Union[
    FamilyFilter,
    QualifierFilter,
    SingleColumnValueFilter,
    PageFilter,
    PredicateList,
]


def is_empty(predicate: Predicate | None) -> bool:
    """True when `predicate` places no restriction at all."""
    return predicate is None or (
        isinstance(predicate, PredicateList) and predicate.is_empty()
    )
