"""Error taxonomy for flow-run reads.

Callers tell the classes apart to decide what to do next:
- QueryValidationError: fix the request, never retry it
- StoreError: transport or storage failure, retrying may help
- MalformedRowError: stored data does not match the table schema

Missing optional fields (start time, end time, version, a metric) are
NOT errors. Only structural decode failures are.
"""

from __future__ import annotations


class ChronicleError(Exception):
    """Base class for all errors raised by chronicle."""


class QueryValidationError(ChronicleError, ValueError):
    """Raised when a query context is missing a required identity field.

    Raised before the store is touched. Subclasses ValueError so generic
    argument-checking callers still catch it.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        """Initialize with the offending field.

        Args:
            field: Name of the missing or empty context field
            message: Optional override for the error text
        """
        self.field = field
        super().__init__(message or f"{field} shouldn't be null")


class MalformedRowError(ChronicleError):
    """Raised when a stored row key does not decode to the expected tuple.

    This signals a schema mismatch between writer and reader. The row is
    never skipped silently.
    """

    def __init__(self, row_key: bytes, reason: str) -> None:
        """Initialize with the undecodable key.

        Args:
            row_key: Raw row key bytes as returned by the store
            reason: What was wrong with the key
        """
        self.row_key = row_key
        self.reason = reason
        super().__init__(f"Malformed row key {row_key!r}: {reason}")


class StoreError(ChronicleError):
    """Raised by a store client when a get or scan fails.

    Readers propagate this unchanged. There is no retry policy here.
    """
