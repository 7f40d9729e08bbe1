"""Pytest configuration and shared fixtures for the test suite."""

from typing import Any, Callable, Optional

import pytest

from queryhydrate.cache import Query, QueryCache, QueryKey, QueryOptions
from queryhydrate.config import HydrationSettings

NO_DATA = object()


@pytest.fixture
def settings() -> HydrationSettings:
    """Settings using the standard five minute default cache time."""
    return HydrationSettings(default_cache_time_ms=300_000)


@pytest.fixture
def query_cache(settings: HydrationSettings) -> QueryCache:
    """Create an empty query cache."""
    return QueryCache(settings=settings)


@pytest.fixture
def target_cache(settings: HydrationSettings) -> QueryCache:
    """Create a second, independent cache to hydrate into."""
    return QueryCache(settings=settings)


@pytest.fixture
def add_query() -> Callable[..., Query]:
    """Factory adding a query with a given state to a cache.

    Pass ``data=NO_DATA`` to leave the query without a value.
    """

    def _add(
        cache: QueryCache,
        key: QueryKey,
        data: Any = NO_DATA,
        updated_at: int = 0,
        cache_time: Optional[int] = None,
        status: str = "success",
    ) -> Query:
        query = cache.build_query(key, QueryOptions(cache_time=cache_time))
        if data is not NO_DATA:
            query.set_data(data, updated_at=updated_at)
        elif updated_at:
            query.mark_updated(updated_at)
        if status == "loading":
            query.set_loading()
        elif status == "error":
            query.set_error(RuntimeError("fetch failed"))
        return query

    return _add
