"""Translate caller filters into store predicates.

Caller filters name columns relative to a column prefix ("CPU"); store
predicates name full qualifiers ("m!CPU"). Every translation here is
scoped to one column prefix.
"""

from chronicle.contracts.enums import CompareOp, FilterOperator
from chronicle.contracts.filters import (
    CompareFilter,
    FilterList,
    PrefixFilter,
    TimelineFilter,
)
from chronicle.flow.schema import FlowRunColumn, FlowRunColumnPrefix
from chronicle.store.predicates import (
    BinaryComparator,
    BinaryPrefixComparator,
    ListOperator,
    Predicate,
    PredicateList,
    QualifierFilter,
    SingleColumnValueFilter,
)

_LIST_OPERATORS = {
    FilterOperator.AND: ListOperator.MUST_PASS_ALL,
    FilterOperator.OR: ListOperator.MUST_PASS_ONE,
}


def create_predicate_list(
    column_prefix: FlowRunColumnPrefix, filters: FilterList
) -> PredicateList:
    """Translate a caller filter list into a predicate list under `column_prefix`.

    Nested lists keep their operator; an empty list stays empty.
    """
    return PredicateList(
        _LIST_OPERATORS[filters.operator],
        tuple(_translate(column_prefix, f) for f in filters.filters),
    )


def _translate(column_prefix: FlowRunColumnPrefix, timeline_filter: TimelineFilter) -> Predicate:
    if isinstance(timeline_filter, FilterList):
        return create_predicate_list(column_prefix, timeline_filter)
    if isinstance(timeline_filter, CompareFilter):
        return SingleColumnValueFilter(
            family=column_prefix.family_bytes,
            qualifier=column_prefix.column_prefix_bytes(timeline_filter.key),
            op=timeline_filter.op,
            value=timeline_filter.value,
            filter_if_missing=not timeline_filter.keep_if_missing,
        )
    if isinstance(timeline_filter, PrefixFilter):
        return QualifierFilter(
            timeline_filter.op,
            BinaryPrefixComparator(
                column_prefix.column_prefix_bytes(timeline_filter.prefix)
            ),
        )
    raise TypeError(f"Unsupported filter type: {type(timeline_filter).__name__}")


def create_range_filter(column: FlowRunColumn, begin: int, end: int) -> PredicateList:
    """Rows whose `column` value lies in [begin, end]."""
    return PredicateList.all_of(
        SingleColumnValueFilter(
            column.family_bytes, column.qualifier_bytes, CompareOp.GREATER_OR_EQUAL, begin
        ),
        SingleColumnValueFilter(
            column.family_bytes, column.qualifier_bytes, CompareOp.LESS_OR_EQUAL, end
        ),
    )


def fixed_column_filters() -> PredicateList:
    """OR of exact qualifier matches, one per fixed flow run column."""
    return PredicateList.one_of(
        *(
            QualifierFilter(CompareOp.EQUAL, BinaryComparator(column.qualifier_bytes))
            for column in FlowRunColumn
        )
    )
