"""Shared contracts for cross-boundary data types.

Query inputs, entities, caller filters, enums and errors that cross
subsystem boundaries are defined here.

Import pattern:
    from chronicle.contracts import QueryContext, FlowRunEntity, Field
"""

from chronicle.contracts.entities import FlowRunEntity
from chronicle.contracts.enums import (
    AggregationOperation,
    CompareOp,
    Field,
    FilterOperator,
    ReadMode,
)
from chronicle.contracts.errors import (
    ChronicleError,
    MalformedRowError,
    QueryValidationError,
    StoreError,
)
from chronicle.contracts.filters import (
    CompareFilter,
    FilterList,
    PrefixFilter,
    TimelineFilter,
)
from chronicle.contracts.query import (
    MAX_TIMESTAMP,
    DataToRetrieve,
    EntityFilters,
    QueryContext,
)

__all__ = [
    # entities
    "FlowRunEntity",
    # enums
    "AggregationOperation",
    "CompareOp",
    "Field",
    "FilterOperator",
    "ReadMode",
    # errors
    "ChronicleError",
    "MalformedRowError",
    "QueryValidationError",
    "StoreError",
    # filters
    "CompareFilter",
    "FilterList",
    "PrefixFilter",
    "TimelineFilter",
    # query
    "MAX_TIMESTAMP",
    "DataToRetrieve",
    "EntityFilters",
    "QueryContext",
]
