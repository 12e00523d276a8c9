"""Decision tables for what a flow run read fetches and parses.

Kept apart from predicate construction so the policy can be tested
without a store. Single-entity reads always return metrics: reading one
run means reading its full detail.
"""

from enum import Enum

from chronicle.contracts.enums import ReadMode


class FieldBranch(Enum):
    """Which field-selection predicate a read uses."""

    EXCLUDE_METRICS = "exclude_metrics"  # whole info family minus metric columns
    METRIC_SUBSET = "metric_subset"  # fixed columns plus the selected metrics
    FETCH_ALL = "fetch_all"  # no field predicate at all


# (mode, METRICS requested, metric selector present) -> branch
FIELD_BRANCHES: dict[tuple[ReadMode, bool, bool], FieldBranch] = {
    (ReadMode.RANGE, False, False): FieldBranch.EXCLUDE_METRICS,
    (ReadMode.RANGE, False, True): FieldBranch.METRIC_SUBSET,
    (ReadMode.RANGE, True, False): FieldBranch.FETCH_ALL,
    (ReadMode.RANGE, True, True): FieldBranch.METRIC_SUBSET,
    (ReadMode.SINGLE, False, False): FieldBranch.FETCH_ALL,
    (ReadMode.SINGLE, False, True): FieldBranch.METRIC_SUBSET,
    (ReadMode.SINGLE, True, False): FieldBranch.FETCH_ALL,
    (ReadMode.SINGLE, True, True): FieldBranch.METRIC_SUBSET,
}

# (mode, METRICS requested) -> parse metric columns?
READ_METRICS: dict[tuple[ReadMode, bool], bool] = {
    (ReadMode.RANGE, False): False,
    (ReadMode.RANGE, True): True,
    (ReadMode.SINGLE, False): True,
    (ReadMode.SINGLE, True): True,
}


def select_field_branch(
    mode: ReadMode, metrics_requested: bool, selector_present: bool
) -> FieldBranch:
    return FIELD_BRANCHES[(mode, metrics_requested, selector_present)]


def should_read_metrics(mode: ReadMode, metrics_requested: bool) -> bool:
    return READ_METRICS[(mode, metrics_requested)]
