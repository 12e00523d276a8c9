"""Caller-side filter language for metric filters and metric selectors.

These types describe WHAT a caller wants, independent of the store.
The reader translates them into store predicates scoped to a column
prefix (see chronicle.reader.filter_utils).

Example:
    # metrics whose name starts with "MAP_" or equals "HDFS_BYTES_READ"
    FilterList(
        FilterOperator.OR,
        (
            PrefixFilter(CompareOp.EQUAL, "MAP_"),
            PrefixFilter(CompareOp.EQUAL, "HDFS_BYTES_READ"),
        ),
    )

    # runs whose CPU metric is at least 100
    FilterList(
        FilterOperator.AND,
        (CompareFilter(CompareOp.GREATER_OR_EQUAL, "CPU", 100),),
    )
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from chronicle.contracts.enums import CompareOp, FilterOperator


@dataclass(frozen=True)
class CompareFilter:
    """Compare the value stored under `key` with `value`.

    When the column is missing, the row does not match unless
    `keep_if_missing` is set.
    """

    op: CompareOp
    key: str
    value: int | float | str
    keep_if_missing: bool = False


@dataclass(frozen=True)
class PrefixFilter:
    """Match column names that start (EQUAL) or do not start (NOT_EQUAL) with `prefix`."""

    op: CompareOp
    prefix: str

    def __post_init__(self) -> None:
        if self.op not in (CompareOp.EQUAL, CompareOp.NOT_EQUAL):
            raise ValueError(
                f"PrefixFilter only supports EQUAL or NOT_EQUAL, got {self.op.name}"
            )


@dataclass(frozen=True)
class FilterList:
    """A group of filters combined with AND or OR.

    An empty list places no restriction.
    """

    operator: FilterOperator = FilterOperator.AND
    filters: tuple[TimelineFilter, ...] = ()

    def is_empty(self) -> bool:
        return not self.filters


TimelineFilter = Union[CompareFilter, PrefixFilter, FilterList]


def is_empty(filters: FilterList | None) -> bool:
    """True when `filters` is absent or has no children."""
    return filters is None or filters.is_empty()
