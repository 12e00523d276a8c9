"""Flow run table: schema, row keys, writer."""

from chronicle.flow.rowkey import FlowRunRowKey, encode_prefix
from chronicle.flow.schema import (
    FlowRunColumn,
    FlowRunColumnFamily,
    FlowRunColumnPrefix,
)
from chronicle.flow.writer import FlowRunWriter

__all__ = [
    "FlowRunColumn",
    "FlowRunColumnFamily",
    "FlowRunColumnPrefix",
    "FlowRunRowKey",
    "FlowRunWriter",
    "encode_prefix",
]
