"""Live query cache.

This module provides the in-memory cache that snapshots are produced from
and applied to:
- Query / QueryState: a keyed entry and an immutable view of its state
- QueryCache: thread-safe index of queries with change listeners
- hash_query_key: canonical key equality shared by producer and consumer
"""

from queryhydrate.cache.keys import QueryKey, hash_query_key
from queryhydrate.cache.protocols import QueryCacheLike, QueryLike
from queryhydrate.cache.query import Query, QueryOptions, QueryState, QueryStatus, now_ms
from queryhydrate.cache.query_cache import QueryCache

__all__ = [
    "Query",
    "QueryCache",
    "QueryCacheLike",
    "QueryKey",
    "QueryLike",
    "QueryOptions",
    "QueryState",
    "QueryStatus",
    "hash_query_key",
    "now_ms",
]
