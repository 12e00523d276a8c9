"""Reader for flow run entities stored in the flow run table.

The table-specific logic is written as plain functions over explicit
inputs so each step can be exercised without a store;
FlowRunEntityReader wires them into the TimelineEntityReader template.
"""

from collections import defaultdict
from typing import Any

from chronicle.contracts.entities import FlowRunEntity
from chronicle.contracts.enums import CompareOp, Field, ReadMode
from chronicle.contracts.errors import QueryValidationError
from chronicle.contracts.filters import is_empty
from chronicle.contracts.query import (
    MAX_TIMESTAMP,
    DataToRetrieve,
    EntityFilters,
    QueryContext,
)
from chronicle.flow.rowkey import FlowRunRowKey, encode_prefix
from chronicle.flow.schema import FlowRunColumn, FlowRunColumnFamily, FlowRunColumnPrefix
from chronicle.reader.base import ReadTarget, TimelineEntityReader
from chronicle.reader.field_policy import (
    FieldBranch,
    select_field_branch,
    should_read_metrics,
)
from chronicle.reader.filter_utils import (
    create_predicate_list,
    create_range_filter,
    fixed_column_filters,
)
from chronicle.store.aggregation import fold
from chronicle.store.predicates import (
    BinaryComparator,
    BinaryPrefixComparator,
    FamilyFilter,
    PageFilter,
    Predicate,
    PredicateList,
    QualifierFilter,
)
from chronicle.store.rows import RawRow

# === Validation ===


def _required(value: str | None, field: str) -> str:
    if not value:
        raise QueryValidationError(field)
    return value


def validate_context(context: QueryContext, mode: ReadMode) -> None:
    """Reject a context missing any identity field the read needs.

    Raises:
        QueryValidationError: cluster_id, user_id or flow_name missing or
            empty; or flow_run_id missing or outside [0, MAX_TIMESTAMP] for a
            single-entity read
    """
    _required(context.cluster_id, "cluster_id")
    _required(context.user_id, "user_id")
    _required(context.flow_name, "flow_name")
    if mode is ReadMode.SINGLE:
        run_id = context.flow_run_id
        if run_id is None:
            raise QueryValidationError("flow_run_id")
        if not 0 <= run_id <= MAX_TIMESTAMP:
            raise QueryValidationError(
                "flow_run_id", f"flow_run_id out of range: {run_id}"
            )


# === Filter builder ===


def build_time_and_metric_filter(filters: EntityFilters) -> PredicateList:
    """AND of the created-time range and the metric filters, when set.

    Empty when neither is set, which matches everything. Both tests
    compare a column's newest version, not its aggregated value: a run
    whose start times are [100, 500] passes a [400, 600] range on 500 yet
    reports start_time 100 (its GLOBAL_MIN).
    """
    predicates: list[Predicate] = []
    if filters.has_time_range:
        predicates.append(
            create_range_filter(
                FlowRunColumn.MIN_START_TIME,
                filters.created_time_begin,
                filters.created_time_end,
            )
        )
    if filters.metric_filters is not None and not filters.metric_filters.is_empty():
        predicates.append(
            create_predicate_list(FlowRunColumnPrefix.METRIC, filters.metric_filters)
        )
    return PredicateList.all_of(*predicates)


def build_field_selection_filter(
    data_to_retrieve: DataToRetrieve, mode: ReadMode
) -> PredicateList:
    """OR group deciding which columns a read fetches.

    See field_policy.FIELD_BRANCHES for when each branch applies. An
    empty group fetches everything.
    """
    selector = data_to_retrieve.metrics_to_retrieve
    branch = select_field_branch(
        mode, data_to_retrieve.has_field(Field.METRICS), not is_empty(selector)
    )
    info_family = FamilyFilter(
        CompareOp.EQUAL, BinaryComparator(FlowRunColumnFamily.INFO.family_bytes)
    )

    if branch is FieldBranch.EXCLUDE_METRICS:
        no_metrics = QualifierFilter(
            CompareOp.NOT_EQUAL,
            BinaryPrefixComparator(FlowRunColumnPrefix.METRIC.column_prefix_bytes()),
        )
        return PredicateList.one_of(PredicateList.all_of(info_family, no_metrics))

    if branch is FieldBranch.METRIC_SUBSET:
        assert selector is not None  # branch requires a selector
        columns = PredicateList.one_of(
            *fixed_column_filters().predicates,
            create_predicate_list(FlowRunColumnPrefix.METRIC, selector),
        )
        return PredicateList.one_of(PredicateList.all_of(info_family, columns))

    return PredicateList.one_of()


def resolve_read_target(
    context: QueryContext, predicate: PredicateList, limit: int, mode: ReadMode
) -> ReadTarget:
    """Turn a validated context and predicate into a store call.

    SINGLE: exact row key, every stored version, predicate only if it
    restricts something. RANGE: flow prefix, with a PageFilter(limit)
    always AND-ed in front of the predicate.
    """
    cluster = _required(context.cluster_id, "cluster_id")
    user = _required(context.user_id, "user_id")
    flow = _required(context.flow_name, "flow_name")

    if mode is ReadMode.SINGLE:
        if context.flow_run_id is None:
            raise QueryValidationError("flow_run_id")
        key = FlowRunRowKey(cluster, user, flow, context.flow_run_id)
        return ReadTarget(
            mode=mode,
            row_key=key.encode(),
            predicate=None if predicate.is_empty() else predicate,
            max_versions=None,
        )

    capped: list[Predicate] = [PageFilter(limit)]
    if not predicate.is_empty():
        capped.append(predicate)
    return ReadTarget(
        mode=mode,
        row_key=encode_prefix(cluster, user, flow),
        predicate=PredicateList.all_of(*capped),
        row_cap=limit,
    )


# === Result parser ===


def _read_column(row: RawRow, column: FlowRunColumn) -> Any:
    versions = row.versions(column.family_bytes, column.qualifier_bytes)
    if not versions:
        return None
    return fold(column.aggregator, [cell.value for cell in versions])


def read_metrics(row: RawRow, column_prefix: FlowRunColumnPrefix) -> dict[str, int | float]:
    """Merge every metric column's versions into one value per metric id.

    Versions are folded oldest first through the prefix's aggregator.
    """
    family = column_prefix.family_bytes
    series: dict[str, list[tuple[int, Any]]] = defaultdict(list)
    for cell in row.with_prefix(family, column_prefix.column_prefix_bytes()):
        metric_id = column_prefix.strip_prefix(cell.qualifier)
        assert metric_id is not None  # with_prefix only yields prefixed cells
        series[metric_id].append((cell.timestamp, cell.value))

    metrics: dict[str, int | float] = {}
    for metric_id, points in series.items():
        points.sort(key=lambda point: point[0])
        metrics[metric_id] = fold(column_prefix.aggregator, [v for _, v in points])
    return metrics


def parse_row(
    row: RawRow,
    context: QueryContext,
    data_to_retrieve: DataToRetrieve,
    mode: ReadMode,
) -> FlowRunEntity:
    """Rebuild a FlowRunEntity from whatever columns the row holds.

    Absent columns leave their field unset. For range reads the run id
    comes from the row key.

    Raises:
        MalformedRowError: If a range-read row key cannot be decoded
    """
    if mode is ReadMode.SINGLE:
        if context.flow_run_id is None:
            raise QueryValidationError("flow_run_id")
        run_id = context.flow_run_id
    else:
        run_id = FlowRunRowKey.decode(row.key).flow_run_id

    flow_run = FlowRunEntity(
        user=_required(context.user_id, "user_id"),
        name=_required(context.flow_name, "flow_name"),
        run_id=run_id,
    )

    start_time = _read_column(row, FlowRunColumn.MIN_START_TIME)
    if start_time is not None:
        flow_run.start_time = int(start_time)

    end_time = _read_column(row, FlowRunColumn.MAX_END_TIME)
    if end_time is not None:
        flow_run.max_end_time = int(end_time)

    version = _read_column(row, FlowRunColumn.FLOW_VERSION)
    if version is not None:
        flow_run.version = str(version)

    if should_read_metrics(mode, data_to_retrieve.has_field(Field.METRICS)):
        flow_run.metrics = read_metrics(row, FlowRunColumnPrefix.METRIC)

    return flow_run


# === Reader ===


class FlowRunEntityReader(TimelineEntityReader[FlowRunEntity]):
    """Reads flow runs: one run by id, or every run of a flow.

    Example:
        reader = FlowRunEntityReader(
            QueryContext("c1", "u1", "f1", flow_run_id=42),
        )
        flow_run = reader.read_entity(store)
    """

    def validate_params(self) -> None:
        validate_context(self.context, self.mode)

    def augment_params(self, data_to_retrieve: DataToRetrieve) -> DataToRetrieve:
        # A metric selector implies the METRICS field
        return data_to_retrieve.with_implied_fields()

    def build_time_and_metric_filter(self) -> PredicateList:
        return build_time_and_metric_filter(self.filters)

    def build_field_selection_filter(self) -> PredicateList:
        return build_field_selection_filter(self.data_to_retrieve, self.mode)

    def resolve_read_target(self, predicate: PredicateList) -> ReadTarget:
        return resolve_read_target(self.context, predicate, self.limit, self.mode)

    def parse_row(self, row: RawRow) -> FlowRunEntity:
        return parse_row(row, self.context, self.data_to_retrieve, self.mode)
