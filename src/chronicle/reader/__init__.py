"""Entity readers: query -> store call -> entities."""

from chronicle.reader.base import ReadTarget, TimelineEntityReader
from chronicle.reader.flow_run import FlowRunEntityReader

__all__ = [
    "FlowRunEntityReader",
    "ReadTarget",
    "TimelineEntityReader",
]
