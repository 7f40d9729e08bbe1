"""Protocols for the cache capability required by hydration.

dehydrate and hydrate depend only on these structural interfaces, so any
cache that exposes enumeration, lookup, get-or-create, and a timestamped
compare-and-set of a query's value can take part in a transfer.
``QueryCache`` and ``Query`` satisfy them through structural typing.
"""

from typing import Any, Optional, Protocol, Sequence

from queryhydrate.cache.keys import QueryKey
from queryhydrate.cache.query import QueryOptions, QueryState


class QueryLike(Protocol):
    """Protocol for a single cache entry."""

    query_key: QueryKey
    cache_time: int

    @property
    def state(self) -> QueryState:
        ...

    def set_data_if_newer(self, data: Any, updated_at: int) -> bool:
        """Set the value and timestamp if updated_at is strictly newer.

        The comparison and the write must be atomic with respect to other
        writers of the same entry.

        Args:
            data: The new value
            updated_at: Freshness timestamp in epoch ms

        Returns:
            True if the value was applied
        """
        ...

    def mark_updated_if_newer(self, updated_at: int) -> bool:
        """Advance the freshness timestamp without a value, atomically."""
        ...


class QueryCacheLike(Protocol):
    """Protocol for the cache a snapshot is produced from or applied to."""

    @property
    def default_cache_time(self) -> int:
        ...

    def get_queries(self) -> Sequence[QueryLike]:
        ...

    def get_query(self, query_key: QueryKey) -> Optional[QueryLike]:
        ...

    def build_query(self, query_key: QueryKey, options: Optional[QueryOptions] = None) -> QueryLike:
        ...
