"""Query inputs handed to a reader by its caller.

QueryContext says WHICH entities (identity), EntityFilters says which of
them qualify, DataToRetrieve says how much of each to fetch.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from chronicle.contracts.enums import Field, ReadMode
from chronicle.contracts.filters import FilterList, is_empty

# Largest timestamp a column can carry (signed 64-bit, as stored).
MAX_TIMESTAMP = 2**63 - 1


@dataclass(frozen=True)
class QueryContext:
    """Identity of the flow (and optionally the run) being read.

    A run id selects exactly one flow run. Without one the reader scans
    every run of the flow. Identity checks live in the reader so that a
    bad context fails with QueryValidationError, not at construction.
    """

    cluster_id: str | None
    user_id: str | None
    flow_name: str | None
    flow_run_id: int | None = None

    @property
    def read_mode(self) -> ReadMode:
        if self.flow_run_id is None:
            return ReadMode.RANGE
        return ReadMode.SINGLE


@dataclass(frozen=True)
class EntityFilters:
    """Restrictions applied when reading a range of entities."""

    created_time_begin: int = 0
    created_time_end: int = MAX_TIMESTAMP
    metric_filters: FilterList | None = None
    limit: int | None = None  # None = use the configured default

    def __post_init__(self) -> None:
        if self.created_time_begin < 0:
            raise ValueError("created_time_begin must be >= 0")
        if self.created_time_end < self.created_time_begin:
            raise ValueError("created_time_end must be >= created_time_begin")
        if self.limit is not None and self.limit <= 0:
            raise ValueError("limit must be positive")

    @property
    def has_time_range(self) -> bool:
        return self.created_time_begin != 0 or self.created_time_end != MAX_TIMESTAMP


@dataclass(frozen=True)
class DataToRetrieve:
    """Which field groups and which metrics to return for each entity.

    The metric selector works independently of the METRICS flag: a
    selector restricts WHICH metrics come back, the flag only says
    whether metrics come back at all.
    """

    fields_to_retrieve: frozenset[Field] = field(default_factory=frozenset)
    metrics_to_retrieve: FilterList | None = None

    def has_field(self, wanted: Field) -> bool:
        """True when `wanted` (or ALL) was requested."""
        return Field.ALL in self.fields_to_retrieve or wanted in self.fields_to_retrieve

    @property
    def has_metric_selector(self) -> bool:
        return not is_empty(self.metrics_to_retrieve)

    def with_implied_fields(self) -> DataToRetrieve:
        """Return a copy with METRICS added when a metric selector is set.

        Asking for specific metrics means asking for metrics.
        """
        if self.has_metric_selector and not self.has_field(Field.METRICS):
            return replace(
                self, fields_to_retrieve=self.fields_to_retrieve | {Field.METRICS}
            )
        return self
