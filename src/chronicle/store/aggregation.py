"""Merge strategies for columns that keep several versions of one value.

A column prefix declares an AggregationOperation; readers look up the
matching Aggregator and fold the versions of each qualifier through it,
oldest first. Readers never hard-code a merge rule.
"""

from typing import Any, Protocol, runtime_checkable

from chronicle.contracts.enums import AggregationOperation


@runtime_checkable
class Aggregator(Protocol):
    """Folds one more version into the value merged so far."""

    def merge(self, existing: Any, new: Any) -> Any:
        """Return the merge of `existing` with the next-newer version `new`."""
        ...


class SumAggregator:
    """Adds every version together."""

    def merge(self, existing: Any, new: Any) -> Any:
        return existing + new


class LastWriteWinsAggregator:
    """Keeps the newest version."""

    def merge(self, existing: Any, new: Any) -> Any:
        return new


class MinAggregator:
    def merge(self, existing: Any, new: Any) -> Any:
        return min(existing, new)


class MaxAggregator:
    def merge(self, existing: Any, new: Any) -> Any:
        return max(existing, new)


_AGGREGATORS: dict[AggregationOperation, Aggregator] = {
    AggregationOperation.SUM: SumAggregator(),
    AggregationOperation.LATEST: LastWriteWinsAggregator(),
    AggregationOperation.GLOBAL_MIN: MinAggregator(),
    AggregationOperation.GLOBAL_MAX: MaxAggregator(),
    AggregationOperation.NONE: LastWriteWinsAggregator(),
}


def aggregator_for(operation: AggregationOperation) -> Aggregator:
    """Return the aggregator implementing `operation`."""
    return _AGGREGATORS[operation]


def fold(aggregator: Aggregator, values: list[Any]) -> Any:
    """Merge `values` (oldest first) into one.

    Raises:
        ValueError: If `values` is empty
    """
    if not values:
        raise ValueError("Cannot fold an empty list of versions")
    merged = values[0]
    for value in values[1:]:
        merged = aggregator.merge(merged, value)
    return merged
