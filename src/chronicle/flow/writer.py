"""Writes flow run rows in the layout readers expect.

Used to seed stores (CLI `seed`, tests). Every call appends cell
versions; merging happens on read through each column's aggregator.
"""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from chronicle.flow.rowkey import FlowRunRowKey
from chronicle.flow.schema import FlowRunColumn, FlowRunColumnPrefix
from chronicle.store.database import CellStore
from chronicle.store.rows import Cell


class FlowRunWriter:
    """Puts flow run columns and metric points into a cell store."""

    def __init__(self, store: CellStore) -> None:
        self._store = store

    def write_run(
        self,
        key: FlowRunRowKey,
        *,
        timestamp: int,
        start_time: int | None = None,
        end_time: int | None = None,
        version: str | None = None,
    ) -> None:
        """Write whichever fixed columns are given, at `timestamp`."""
        values: list[tuple[FlowRunColumn, Any]] = [
            (FlowRunColumn.MIN_START_TIME, start_time),
            (FlowRunColumn.MAX_END_TIME, end_time),
            (FlowRunColumn.FLOW_VERSION, version),
        ]
        cells = [
            Cell(column.family_bytes, column.qualifier_bytes, timestamp, value)
            for column, value in values
            if value is not None
        ]
        if cells:
            self._store.put_cells(key.encode(), cells)

    def write_metric(
        self,
        key: FlowRunRowKey,
        metric_id: str,
        points: Mapping[int, int | float],
    ) -> None:
        """Write metric data points, one cell version per timestamp."""
        prefix = FlowRunColumnPrefix.METRIC
        qualifier = prefix.column_prefix_bytes(metric_id)
        self._store.put_cells(
            key.encode(),
            [
                Cell(prefix.family_bytes, qualifier, ts, value)
                for ts, value in sorted(points.items())
            ],
        )

    def load_file(self, path: Path) -> int:
        """Load runs from a JSON file and return how many were written.

        Expected format:
            [
              {
                "cluster": "c1", "user": "u1", "flow": "f1", "run_id": 42,
                "timestamp": 1000,
                "start_time": 100, "end_time": 200, "version": "3",
                "metrics": {"M1": {"1": 5, "2": 7}}
              }
            ]
        """
        runs = json.loads(path.read_text())
        for run in runs:
            key = FlowRunRowKey(
                cluster_id=run["cluster"],
                user_id=run["user"],
                flow_name=run["flow"],
                flow_run_id=int(run["run_id"]),
            )
            self.write_run(
                key,
                timestamp=int(run["timestamp"]),
                start_time=run.get("start_time"),
                end_time=run.get("end_time"),
                version=run.get("version"),
            )
            for metric_id, points in run.get("metrics", {}).items():
                self.write_metric(
                    key, metric_id, {int(ts): v for ts, v in points.items()}
                )
        return len(runs)
