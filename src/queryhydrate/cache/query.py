"""Query entries held by the query cache.

A query owns a single current value, the time it was last set, and the
tuning options it was built with. State changes go through the methods on
``Query`` so that each change is applied under the query's lock and reported
to the owning cache's listeners.
"""

import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from queryhydrate.cache.keys import QueryKey


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class QueryStatus(str, Enum):
    """Lifecycle status of a query's most recent fetch."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryState:
    """Immutable view of a query's state.

    ``has_data`` distinguishes "no data yet" from "data is None".

    Attributes:
        data: Current value (meaningful only when has_data is True)
        has_data: Whether a value has been set
        updated_at: Epoch milliseconds when data was last set (0 if never)
        status: Status of the most recent fetch
        error: Error from the most recent failed fetch, if any
    """

    data: Any = None
    has_data: bool = False
    updated_at: int = 0
    status: QueryStatus = QueryStatus.IDLE
    error: Optional[BaseException] = None


class QueryOptions(BaseModel):
    """Options used when building a query.

    Attributes:
        cache_time: Retention for the idle query in milliseconds (None = cache default)
    """

    model_config = ConfigDict(frozen=True)

    cache_time: Optional[int] = Field(default=None, ge=0)


QueryListener = Callable[["Query"], None]


class Query:
    """A keyed, mutable cache entry.

    Attributes:
        query_key: The key the query was built with
        query_hash: Canonical hash of the key
        cache_time: Retention duration in milliseconds
    """

    def __init__(
        self,
        query_key: QueryKey,
        query_hash: str,
        cache_time: int,
        notify: Optional[QueryListener] = None,
    ) -> None:
        self.query_key = query_key
        self.query_hash = query_hash
        self.cache_time = cache_time
        self._notify = notify
        self._state = QueryState()
        self._lock = threading.Lock()

    @property
    def state(self) -> QueryState:
        return self._state

    def set_data(self, data: Any, updated_at: Optional[int] = None) -> None:
        """Set the query's value and mark the fetch as successful.

        Args:
            data: The new value (None is a valid value)
            updated_at: Freshness timestamp in epoch ms (defaults to now)
        """
        with self._lock:
            self._state = QueryState(
                data=data,
                has_data=True,
                updated_at=now_ms() if updated_at is None else updated_at,
                status=QueryStatus.SUCCESS,
            )
        self._dispatch()

    def set_data_if_newer(self, data: Any, updated_at: int) -> bool:
        """Set the value only if it is fresher than the current one.

        The timestamp comparison and the write happen under the query's lock,
        so a concurrent set_data cannot be overwritten by older data. A query
        that has never held a value or a timestamp accepts any updated_at.

        Args:
            data: The new value (None is a valid value)
            updated_at: Freshness timestamp in epoch ms

        Returns:
            True if the value was applied, False if the query was at least as fresh
        """
        with self._lock:
            if not (self._is_unset() or self._state.updated_at < updated_at):
                return False
            self._state = QueryState(
                data=data,
                has_data=True,
                updated_at=updated_at,
                status=QueryStatus.SUCCESS,
            )
        self._dispatch()
        return True

    def mark_updated(self, updated_at: int) -> None:
        """Record a freshness timestamp without setting a value."""
        with self._lock:
            self._state = replace(self._state, updated_at=updated_at)
        self._dispatch()

    def mark_updated_if_newer(self, updated_at: int) -> bool:
        """Advance the freshness timestamp only if updated_at is strictly newer."""
        with self._lock:
            if self._state.updated_at >= updated_at:
                return False
            self._state = replace(self._state, updated_at=updated_at)
        self._dispatch()
        return True

    def set_loading(self) -> None:
        with self._lock:
            self._state = replace(self._state, status=QueryStatus.LOADING, error=None)
        self._dispatch()

    def set_error(self, error: BaseException) -> None:
        """Mark the most recent fetch as failed, keeping any previous data."""
        with self._lock:
            self._state = replace(self._state, status=QueryStatus.ERROR, error=error)
        self._dispatch()

    def _is_unset(self) -> bool:
        # Caller holds self._lock
        return not self._state.has_data and self._state.updated_at == 0

    def _dispatch(self) -> None:
        if self._notify is not None:
            self._notify(self)

    def __repr__(self) -> str:
        return (
            f"Query(key={self.query_key!r}, status={self._state.status.value}, "
            f"updated_at={self._state.updated_at})"
        )
