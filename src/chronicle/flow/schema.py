"""Layout of the flow run table.

One row per flow run. Everything lives in the info column family:
- three fixed columns (start time, end time, flow version)
- one column per metric, qualifier = metric prefix + metric id, one
  cell version per reported data point
"""

from dataclasses import dataclass
from enum import Enum

from chronicle.contracts.enums import AggregationOperation
from chronicle.store.aggregation import Aggregator, aggregator_for


class FlowRunColumnFamily(Enum):
    """Column families of the flow run table."""

    INFO = b"i"

    @property
    def family_bytes(self) -> bytes:
        return self.value


@dataclass(frozen=True)
class ColumnSpec:
    """A fixed column: family, qualifier, and how its versions merge."""

    family: FlowRunColumnFamily
    qualifier: bytes
    aggregation: AggregationOperation


class FlowRunColumn(Enum):
    """Fixed columns of the flow run table."""

    MIN_START_TIME = ColumnSpec(
        FlowRunColumnFamily.INFO, b"min_start_time", AggregationOperation.GLOBAL_MIN
    )
    MAX_END_TIME = ColumnSpec(
        FlowRunColumnFamily.INFO, b"max_end_time", AggregationOperation.GLOBAL_MAX
    )
    FLOW_VERSION = ColumnSpec(
        FlowRunColumnFamily.INFO, b"flow_version", AggregationOperation.NONE
    )

    @property
    def family_bytes(self) -> bytes:
        return self.value.family.family_bytes

    @property
    def qualifier_bytes(self) -> bytes:
        return self.value.qualifier

    @property
    def aggregator(self) -> Aggregator:
        return aggregator_for(self.value.aggregation)


@dataclass(frozen=True)
class PrefixSpec:
    """A column prefix: family, qualifier prefix, and how versions merge."""

    family: FlowRunColumnFamily
    prefix: bytes
    aggregation: AggregationOperation


class FlowRunColumnPrefix(Enum):
    """Column prefixes of the flow run table."""

    METRIC = PrefixSpec(FlowRunColumnFamily.INFO, b"m!", AggregationOperation.SUM)

    @property
    def family_bytes(self) -> bytes:
        return self.value.family.family_bytes

    @property
    def aggregator(self) -> Aggregator:
        return aggregator_for(self.value.aggregation)

    def column_prefix_bytes(self, qualifier: str = "") -> bytes:
        """Full qualifier for `qualifier` under this prefix.

        With no argument, the bare prefix shared by every column.
        """
        return self.value.prefix + qualifier.encode("utf-8")

    def strip_prefix(self, qualifier: bytes) -> str | None:
        """Column name under this prefix, or None if `qualifier` is not in it."""
        if not qualifier.startswith(self.value.prefix):
            return None
        return qualifier[len(self.value.prefix) :].decode("utf-8")
