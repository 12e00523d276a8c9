"""Domain entities returned by readers."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FlowRunEntity:
    """One execution of a flow, rebuilt from a flow run row.

    Every field past run_id is optional: a run still in progress has no
    end time, and a filtered read may not have fetched the version or
    the metrics. Unset means "not present in the row", never zero.
    """

    user: str
    name: str
    run_id: int
    start_time: int | None = None
    max_end_time: int | None = None
    version: str | None = None
    metrics: dict[str, int | float] = field(default_factory=dict)

    @property
    def id(self) -> str:
        """Entity id, "user@flow/run"."""
        return f"{self.user}@{self.name}/{self.run_id}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user": self.user,
            "name": self.name,
            "run_id": self.run_id,
            "start_time": self.start_time,
            "max_end_time": self.max_end_time,
            "version": self.version,
            "metrics": dict(self.metrics),
        }
