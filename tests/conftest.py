# tests/conftest.py
"""Shared test fixtures.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/flow/
"""

import os
from collections.abc import Iterator

import pytest
from hypothesis import Phase, Verbosity, settings

from chronicle.flow.rowkey import FlowRunRowKey
from chronicle.flow.writer import FlowRunWriter
from chronicle.store.database import CellStore

# =============================================================================
# Hypothesis Configuration
# =============================================================================

# CI profile: Fast tests for continuous integration
settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

# Nightly profile: Thorough testing for scheduled runs
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Debug profile: Minimal examples with verbose output for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

# Load profile from environment, default to "ci"
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Store fixtures
# =============================================================================


@pytest.fixture
def store() -> Iterator[CellStore]:
    """Empty in-memory cell store, closed after the test."""
    with CellStore.in_memory() as cell_store:
        yield cell_store


@pytest.fixture
def writer(store: CellStore) -> FlowRunWriter:
    return FlowRunWriter(store)


@pytest.fixture
def seeded_store(store: CellStore, writer: FlowRunWriter) -> CellStore:
    """Store holding runs 42 and 43 of c1/u1/f1 and run 7 of c1/u1/f10.

    Run 42 has every fixed column and two metrics (M1 points 5 and 7,
    M2 point 3). Run 43 is still running: no end time, no metrics.
    """
    run_42 = FlowRunRowKey("c1", "u1", "f1", 42)
    writer.write_run(run_42, timestamp=1000, start_time=100, end_time=200, version="3")
    writer.write_metric(run_42, "M1", {1: 5, 2: 7})
    writer.write_metric(run_42, "M2", {1: 3})

    run_43 = FlowRunRowKey("c1", "u1", "f1", 43)
    writer.write_run(run_43, timestamp=1000, start_time=150, version="3")

    other_flow = FlowRunRowKey("c1", "u1", "f10", 7)
    writer.write_run(other_flow, timestamp=1000, start_time=50, end_time=60)
    return store
