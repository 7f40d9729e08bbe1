"""In-memory query cache.

This module provides the live cache that dehydrate reads from and hydrate
writes into. Queries are indexed by the canonical hash of their key and
enumerated in insertion order. An optional bound turns the index into an
LRU cache.
"""

import logging
import threading
from typing import Callable, Optional, Union

import cachetools

from queryhydrate.cache.keys import QueryKey, hash_query_key
from queryhydrate.cache.query import Query, QueryListener, QueryOptions
from queryhydrate.config import HydrationSettings, get_default_settings
from queryhydrate.errors import QueryConfigError

logger = logging.getLogger(__name__)


class QueryCache:
    """Thread-safe in-memory store of queries.

    Attributes:
        settings: Settings supplying the default cache time
        _queries: Index of queries by key hash
        _listeners: Callbacks invoked whenever a query's state changes
        _lock: Re-entrant lock guarding the index and listener list
    """

    def __init__(
        self,
        settings: Optional[HydrationSettings] = None,
        max_queries: Optional[int] = None,
    ) -> None:
        """Initialize the query cache.

        Args:
            settings: Hydration settings (defaults to built-in settings)
            max_queries: Optional upper bound; least recently used queries are
                dropped once it is reached

        Raises:
            QueryConfigError: If max_queries is not positive
        """
        if max_queries is not None and max_queries <= 0:
            raise QueryConfigError("must be a positive integer", field="max_queries")

        self.settings = settings or get_default_settings()
        self._queries: Union[dict[str, Query], cachetools.LRUCache[str, Query]]
        if max_queries is None:
            self._queries = {}
        else:
            self._queries = cachetools.LRUCache(maxsize=max_queries)
        self._listeners: list[QueryListener] = []
        self._lock = threading.RLock()

        logger.debug(
            f"QueryCache initialized with max_queries={max_queries}, "
            f"default_cache_time_ms={self.settings.default_cache_time_ms}"
        )

    @property
    def default_cache_time(self) -> int:
        """Cache time in milliseconds for queries built without an override."""
        return self.settings.default_cache_time_ms

    def get_queries(self) -> list[Query]:
        """Return a snapshot list of all queries in insertion order.

        Enumeration does not count as use for LRU purposes.
        """
        with self._lock:
            if isinstance(self._queries, cachetools.LRUCache):
                # Cache.__getitem__ skips the LRU recency update
                return [cachetools.Cache.__getitem__(self._queries, h) for h in self._queries]
            return list(self._queries.values())

    def get_query(self, query_key: QueryKey) -> Optional[Query]:
        """Look up a query by key.

        Args:
            query_key: Key to look up

        Returns:
            The query if present, None otherwise

        Raises:
            QueryKeyError: If the key cannot be hashed
        """
        query_hash = hash_query_key(query_key)
        with self._lock:
            return self._queries.get(query_hash)

    def build_query(self, query_key: QueryKey, options: Optional[QueryOptions] = None) -> Query:
        """Return the query for a key, creating it if needed.

        An existing query keeps its original options.

        Args:
            query_key: Key of the query
            options: Options for a newly created query

        Returns:
            The existing or newly created query

        Raises:
            QueryKeyError: If the key cannot be hashed
        """
        query_hash = hash_query_key(query_key)
        options = options or QueryOptions()

        with self._lock:
            query = self._queries.get(query_hash)
            if query is not None:
                return query

            cache_time = (
                options.cache_time if options.cache_time is not None else self.default_cache_time
            )
            query = Query(
                query_key=query_key,
                query_hash=query_hash,
                cache_time=cache_time,
                notify=self._notify,
            )
            self._queries[query_hash] = query
            logger.debug(f"Built query {query_hash} with cache_time={cache_time}")
            return query

    def remove_query(self, query_key: QueryKey) -> bool:
        """Remove a query by key.

        Returns:
            True if a query was removed, False if none existed
        """
        query_hash = hash_query_key(query_key)
        with self._lock:
            if query_hash not in self._queries:
                return False
            del self._queries[query_hash]
            logger.debug(f"Removed query {query_hash}")
            return True

    def clear(self) -> None:
        with self._lock:
            self._queries.clear()
        logger.debug("Cleared query cache")

    def subscribe(self, listener: QueryListener) -> Callable[[], None]:
        """Register a listener for query state changes.

        Args:
            listener: Callback receiving the changed query

        Returns:
            A callable that unregisters the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, query: Query) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(query)

    def __len__(self) -> int:
        with self._lock:
            return len(self._queries)

    def __contains__(self, query_key: QueryKey) -> bool:
        return self.get_query(query_key) is not None
