"""Snapshot producer.

Projects the queries of a live cache into a DehydratedState. Most query
configuration is expected to be supplied again by whoever consumes the data,
so only the retention duration travels with a record, and only when it
differs from the default.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from queryhydrate.cache.protocols import QueryCacheLike, QueryLike
from queryhydrate.cache.query import QueryStatus
from queryhydrate.config import HydrationSettings
from queryhydrate.hydration.models import (
    DehydratedQuery,
    DehydratedQueryConfig,
    DehydratedState,
)
from queryhydrate.observability.logging import get_logger

logger = get_logger(__name__)

ShouldDehydrateFunction = Callable[[QueryLike], bool]


def default_should_dehydrate(query: QueryLike) -> bool:
    """Accept only queries whose last fetch completed successfully."""
    return query.state.status == QueryStatus.SUCCESS


@dataclass(frozen=True)
class DehydrateOptions:
    """Options for dehydrate.

    Attributes:
        should_dehydrate: Predicate selecting which queries to include
        settings: Settings supplying the default cache time; when None the
            source cache's default is used
    """

    should_dehydrate: ShouldDehydrateFunction = field(default=default_should_dehydrate)
    settings: Optional[HydrationSettings] = None


def dehydrate_query(query: QueryLike, default_cache_time: int) -> DehydratedQuery:
    """Project a single query into a record.

    Args:
        query: The query to project
        default_cache_time: Cache time that is left out of the record

    Returns:
        DehydratedQuery for the query
    """
    state = query.state
    config = DehydratedQueryConfig()
    if query.cache_time != default_cache_time:
        config = DehydratedQueryConfig(cache_time=query.cache_time)

    return DehydratedQuery(
        query_key=query.query_key,
        data=state.data if state.has_data else None,
        has_data=state.has_data,
        updated_at=state.updated_at,
        config=config,
    )


def dehydrate(
    query_cache: QueryCacheLike,
    options: Optional[DehydrateOptions] = None,
) -> DehydratedState:
    """Build a snapshot of the queries in a cache.

    Args:
        query_cache: Cache to read from (not modified)
        options: Predicate and settings; defaults to successful queries only

    Returns:
        DehydratedState with one record per accepted query, in cache order

    Example:
        >>> cache = QueryCache()
        >>> cache.build_query("a").set_data(5, updated_at=100)
        >>> dehydrate(cache).to_dict()
        {'records': [{'key': 'a', 'data': 5, 'updatedAt': 100, 'config': {}}]}
    """
    options = options or DehydrateOptions()
    if options.settings is not None:
        default_cache_time = options.settings.default_cache_time_ms
    else:
        default_cache_time = query_cache.default_cache_time

    queries = query_cache.get_queries()
    records = tuple(
        dehydrate_query(query, default_cache_time)
        for query in queries
        if options.should_dehydrate(query)
    )

    logger.debug(
        "dehydrate_completed",
        query_count=len(queries),
        record_count=len(records),
        default_cache_time=default_cache_time,
    )
    return DehydratedState(records=records)
