"""Row keys of the flow run table.

Layout:
    cluster ! user ! flow ! <8-byte inverted run id>

String components are UTF-8 with "%" and "!" escaped, and each one is
terminated by "!". The three-component prefix therefore ends in a
separator, so a scan for flow "f1" can never pick up rows of flow
"f10". The run id is stored as MAX_TIMESTAMP - run_id, big-endian, so
newer runs sort first within a flow.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

from chronicle.contracts.errors import MalformedRowError
from chronicle.contracts.query import MAX_TIMESTAMP

SEPARATOR = b"!"
_RUN_ID = struct.Struct(">q")

_ESCAPES = (("%", "%25"), ("!", "%21"))


def _encode_component(value: str) -> bytes:
    # "%" first so the escapes added for "!" are not escaped again
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value.encode("utf-8") + SEPARATOR


def _decode_component(value: bytes) -> str:
    text = value.decode("utf-8")
    for raw, escaped in reversed(_ESCAPES):
        text = text.replace(escaped, raw)
    return text


def _encode_run_id(run_id: int) -> bytes:
    if not 0 <= run_id <= MAX_TIMESTAMP:
        raise ValueError(f"flow run id out of range: {run_id}")
    return _RUN_ID.pack(MAX_TIMESTAMP - run_id)


@dataclass(frozen=True)
class FlowRunRowKey:
    """Logical row key of one flow run."""

    cluster_id: str
    user_id: str
    flow_name: str
    flow_run_id: int

    def encode(self) -> bytes:
        return (
            encode_prefix(self.cluster_id, self.user_id, self.flow_name)
            + _encode_run_id(self.flow_run_id)
        )

    @classmethod
    def decode(cls, row_key: bytes) -> FlowRunRowKey:
        """Parse an encoded row key.

        Raises:
            MalformedRowError: If the key does not hold three separator-
                terminated components followed by an 8-byte run id
        """
        parts = row_key.split(SEPARATOR, 3)
        if len(parts) != 4:
            raise MalformedRowError(
                row_key, f"expected 3 identity components, found {len(parts) - 1}"
            )
        cluster, user, flow, run = parts
        if len(run) != _RUN_ID.size:
            raise MalformedRowError(
                row_key, f"expected {_RUN_ID.size}-byte run id, found {len(run)} bytes"
            )
        (inverted,) = _RUN_ID.unpack(run)
        if inverted < 0:
            raise MalformedRowError(row_key, "run id outside the stored range")
        try:
            return cls(
                cluster_id=_decode_component(cluster),
                user_id=_decode_component(user),
                flow_name=_decode_component(flow),
                flow_run_id=MAX_TIMESTAMP - inverted,
            )
        except UnicodeDecodeError as e:
            raise MalformedRowError(row_key, f"component is not UTF-8: {e}") from e


def encode_prefix(cluster_id: str, user_id: str, flow_name: str) -> bytes:
    """Key prefix shared by every run of one flow."""
    return (
        _encode_component(cluster_id)
        + _encode_component(user_id)
        + _encode_component(flow_name)
    )
