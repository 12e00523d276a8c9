"""Tests for caller filter translation."""

import pytest

from chronicle.contracts import (
    CompareFilter,
    CompareOp,
    FilterList,
    FilterOperator,
    PrefixFilter,
)
from chronicle.flow.schema import FlowRunColumn, FlowRunColumnPrefix
from chronicle.reader.filter_utils import (
    create_predicate_list,
    create_range_filter,
    fixed_column_filters,
)
from chronicle.store.predicates import (
    BinaryComparator,
    BinaryPrefixComparator,
    ListOperator,
    PredicateList,
    QualifierFilter,
    SingleColumnValueFilter,
)

METRIC = FlowRunColumnPrefix.METRIC


class TestCreatePredicateList:
    """Caller filters become predicates scoped to the column prefix."""

    def test_prefix_filter(self) -> None:
        filters = FilterList(FilterOperator.OR, (PrefixFilter(CompareOp.EQUAL, "MAP_"),))

        predicate = create_predicate_list(METRIC, filters)

        assert predicate == PredicateList.one_of(
            QualifierFilter(CompareOp.EQUAL, BinaryPrefixComparator(b"m!MAP_"))
        )

    def test_compare_filter(self) -> None:
        filters = FilterList(
            filters=(CompareFilter(CompareOp.GREATER_OR_EQUAL, "CPU", 100),)
        )

        predicate = create_predicate_list(METRIC, filters)

        assert predicate == PredicateList.all_of(
            SingleColumnValueFilter(
                b"i", b"m!CPU", CompareOp.GREATER_OR_EQUAL, 100, filter_if_missing=True
            )
        )

    def test_keep_if_missing_flips_filter_if_missing(self) -> None:
        filters = FilterList(
            filters=(CompareFilter(CompareOp.EQUAL, "CPU", 1, keep_if_missing=True),)
        )

        (predicate,) = create_predicate_list(METRIC, filters).predicates

        assert isinstance(predicate, SingleColumnValueFilter)
        assert predicate.filter_if_missing is False

    def test_nested_lists_keep_operators(self) -> None:
        inner = FilterList(
            FilterOperator.AND,
            (
                PrefixFilter(CompareOp.EQUAL, "MAP_"),
                PrefixFilter(CompareOp.NOT_EQUAL, "MAP_SKIPPED"),
            ),
        )
        outer = FilterList(FilterOperator.OR, (inner, PrefixFilter(CompareOp.EQUAL, "CPU")))

        predicate = create_predicate_list(METRIC, outer)

        assert predicate.operator is ListOperator.MUST_PASS_ONE
        nested = predicate.predicates[0]
        assert isinstance(nested, PredicateList)
        assert nested.operator is ListOperator.MUST_PASS_ALL
        assert len(nested.predicates) == 2

    def test_empty_list_stays_empty(self) -> None:
        assert create_predicate_list(METRIC, FilterList()).is_empty()

    def test_unknown_filter_type_rejected(self) -> None:
        bogus = FilterList(filters=("CPU",))  # type: ignore[arg-type]

        with pytest.raises(TypeError, match="Unsupported filter type"):
            create_predicate_list(METRIC, bogus)


class TestCreateRangeFilter:
    """Inclusive range over one fixed column."""

    def test_bounds(self) -> None:
        predicate = create_range_filter(FlowRunColumn.MIN_START_TIME, 10, 20)

        assert predicate == PredicateList.all_of(
            SingleColumnValueFilter(
                b"i", b"min_start_time", CompareOp.GREATER_OR_EQUAL, 10
            ),
            SingleColumnValueFilter(b"i", b"min_start_time", CompareOp.LESS_OR_EQUAL, 20),
        )


class TestFixedColumnFilters:
    """OR of exact fixed-column qualifiers."""

    def test_one_per_column(self) -> None:
        predicate = fixed_column_filters()

        assert predicate.operator is ListOperator.MUST_PASS_ONE
        assert set(predicate.predicates) == {
            QualifierFilter(CompareOp.EQUAL, BinaryComparator(c.qualifier_bytes))
            for c in FlowRunColumn
        }
