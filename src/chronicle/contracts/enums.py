"""All flags, operators, and kinds used across subsystem boundaries.

Enums that name a stored value (aggregation operations written alongside
cells) use (str, Enum). Enums that only shape a query in memory are plain
Enum.
"""

from enum import Enum


class Field(str, Enum):
    """Logical field groups a caller can ask a reader to retrieve.

    ALL implies every other group. Uses (str, Enum) because fields arrive
    as strings from the CLI (--fields metrics,info).
    """

    ALL = "all"
    INFO = "info"
    CONFIGS = "configs"
    METRICS = "metrics"
    EVENTS = "events"
    RELATES_TO = "relates_to"
    IS_RELATED_TO = "is_related_to"


class CompareOp(Enum):
    """Comparison applied between a stored value and a reference value.

    Shared by the caller filter language and the store predicates.
    """

    LESS_THAN = "<"
    LESS_OR_EQUAL = "<="
    EQUAL = "=="
    NOT_EQUAL = "!="
    GREATER_OR_EQUAL = ">="
    GREATER_THAN = ">"


class FilterOperator(Enum):
    """How the children of a caller filter list combine."""

    AND = "and"
    OR = "or"


class ReadMode(Enum):
    """Whether a query targets one row or a range of rows.

    Derived from the query context (run id present or not), never stored.
    """

    SINGLE = "single"
    RANGE = "range"


class AggregationOperation(str, Enum):
    """How repeated versions of one column merge into a single value.

    Uses (str, Enum) because the operation is declared per column in the
    table schema and shown by the CLI.

    Values:
        SUM: Add all versions together (metrics)
        LATEST: Keep the version with the newest timestamp
        GLOBAL_MIN: Keep the smallest value (run start times)
        GLOBAL_MAX: Keep the largest value (run end times)
        NONE: Column is not aggregated, newest version wins on read
    """

    SUM = "sum"
    LATEST = "latest"
    GLOBAL_MIN = "global_min"
    GLOBAL_MAX = "global_max"
    NONE = "none"
