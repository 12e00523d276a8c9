"""Base class for timeline entity readers.

A reader turns one query (context + filters + data to retrieve) into one
store call and parses what comes back. The base class owns the
single-vs-range decision and the order of steps; subclasses supply the
table-specific pieces:

    validate_params()                  reject bad queries before any I/O
    build_time_and_metric_filter()     predicates from EntityFilters
    build_field_selection_filter()     predicates from DataToRetrieve
    resolve_read_target(predicate)     row key / prefix + execution plan
    parse_row(row)                     raw row -> entity

Readers hold only frozen inputs and build a new predicate tree per call,
so one instance can serve concurrent reads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from chronicle.contracts.enums import ReadMode
from chronicle.contracts.errors import MalformedRowError
from chronicle.contracts.query import DataToRetrieve, EntityFilters, QueryContext
from chronicle.core.config import DEFAULT_LIMIT
from chronicle.core.logging import get_logger
from chronicle.store.predicates import Predicate, PredicateList
from chronicle.store.protocols import StoreClient
from chronicle.store.rows import RawRow

logger = get_logger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class ReadTarget:
    """Everything needed to issue one store call.

    For SINGLE reads `row_key` is the exact key; for RANGE reads it is
    the prefix bounding the scan.
    """

    mode: ReadMode
    row_key: bytes
    predicate: Predicate | None
    max_versions: int | None = None  # SINGLE only; None = all versions
    row_cap: int | None = None  # RANGE only

    def to_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode.value,
            "row_key": self.row_key.hex(),
            "predicate": self.predicate.to_dict() if self.predicate is not None else None,
            "max_versions": self.max_versions,
            "row_cap": self.row_cap,
        }


class TimelineEntityReader(ABC, Generic[E]):
    """Template for reading one entity type from one table."""

    def __init__(
        self,
        context: QueryContext,
        data_to_retrieve: DataToRetrieve | None = None,
        filters: EntityFilters | None = None,
        *,
        mode: ReadMode | None = None,
        default_limit: int = DEFAULT_LIMIT,
    ) -> None:
        """Initialize with the query.

        Args:
            context: Identity of the entity or entities to read
            data_to_retrieve: Fields and metrics to fetch (default: none extra)
            filters: Restrictions for range reads (default: no restriction)
            mode: Force SINGLE or RANGE; derived from the context when omitted
            default_limit: Row cap for range reads when filters carry no limit
        """
        self.context = context
        self.mode = mode or context.read_mode
        self.filters = filters if filters is not None else EntityFilters()
        self.data_to_retrieve = self.augment_params(data_to_retrieve or DataToRetrieve())
        self.default_limit = default_limit

    @property
    def is_single_entity_read(self) -> bool:
        return self.mode is ReadMode.SINGLE

    @property
    def limit(self) -> int:
        """Row cap for range reads; always set."""
        if self.filters.limit is not None:
            return self.filters.limit
        return self.default_limit

    # === Hooks ===

    @abstractmethod
    def validate_params(self) -> None:
        """Raise QueryValidationError if the query cannot be executed."""

    def augment_params(self, data_to_retrieve: DataToRetrieve) -> DataToRetrieve:
        """Adjust what to retrieve before any predicate is built."""
        return data_to_retrieve

    @abstractmethod
    def build_time_and_metric_filter(self) -> PredicateList:
        """Predicates derived from the entity filters (range reads only)."""

    @abstractmethod
    def build_field_selection_filter(self) -> PredicateList:
        """Predicates restricting which columns come back."""

    @abstractmethod
    def resolve_read_target(self, predicate: PredicateList) -> ReadTarget:
        """Row key or prefix, versions, and cap for the store call."""

    @abstractmethod
    def parse_row(self, row: RawRow) -> E:
        """Build one entity from one raw row."""

    # === Template ===

    def create_filter_list(self) -> PredicateList:
        """Combine filter-based and field-based predicates.

        Single reads ignore entity filters. The two groups are AND-ed only
        when both restrict something.
        """
        by_fields = self.build_field_selection_filter()
        if self.is_single_entity_read:
            return by_fields
        by_filters = self.build_time_and_metric_filter()
        if by_filters.is_empty():
            return by_fields
        if by_fields.is_empty():
            return by_filters
        return PredicateList.all_of(by_filters, by_fields)

    def plan(self) -> ReadTarget:
        """Validate the query and build its store call. Touches no store."""
        self.validate_params()
        target = self.resolve_read_target(self.create_filter_list())
        logger.debug(
            "Built read plan",
            reader=type(self).__name__,
            mode=target.mode.value,
            row_key=target.row_key.hex(),
            row_cap=target.row_cap,
        )
        return target

    def read_entity(self, store: StoreClient) -> E | None:
        """Read a single entity, or None if its row is absent.

        Store errors propagate unchanged.
        """
        target = self.plan()
        if target.mode is not ReadMode.SINGLE:
            raise ValueError("read_entity requires a single-entity query")
        row = store.get_one(target.row_key, target.predicate, target.max_versions)
        if row is None or row.is_empty():
            return None
        return self._parse(row)

    def read_entities(self, store: StoreClient) -> list[E]:
        """Read every matching entity, at most `limit` of them.

        Store errors propagate unchanged.
        """
        target = self.plan()
        if target.mode is not ReadMode.RANGE:
            raise ValueError("read_entities requires a range query")
        entities: list[E] = []
        for row in store.scan(target.row_key, target.predicate, target.row_cap):
            entities.append(self._parse(row))
            if len(entities) >= self.limit:
                break
        return entities

    def read(self, store: StoreClient) -> list[E]:
        """Dispatch to read_entity or read_entities by mode."""
        if self.is_single_entity_read:
            entity = self.read_entity(store)
            return [] if entity is None else [entity]
        return self.read_entities(store)

    def _parse(self, row: RawRow) -> E:
        try:
            return self.parse_row(row)
        except MalformedRowError as e:
            logger.error(
                "Malformed row",
                reader=type(self).__name__,
                row_key=e.row_key.hex(),
                reason=e.reason,
            )
            raise
