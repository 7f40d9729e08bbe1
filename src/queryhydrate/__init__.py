"""queryhydrate - transfer a live query cache across a process boundary.

A producing process dehydrates its cache into a portable snapshot; a
consuming process hydrates that snapshot into its own cache, keeping
whichever side holds the fresher data.
"""

from queryhydrate.cache import (
    Query,
    QueryCache,
    QueryCacheLike,
    QueryKey,
    QueryLike,
    QueryOptions,
    QueryState,
    QueryStatus,
    hash_query_key,
)
from queryhydrate.config import (
    DEFAULT_CACHE_TIME_MS,
    HydrationSettings,
    get_default_settings,
    load_settings_from_env,
)
from queryhydrate.errors import (
    HydrationError,
    QueryConfigError,
    QueryKeyError,
    SnapshotRecordError,
)
from queryhydrate.hydration import (
    DehydratedQuery,
    DehydratedQueryConfig,
    DehydratedState,
    DehydrateOptions,
    MalformedSnapshot,
    default_should_dehydrate,
    dehydrate,
    hydrate,
    parse_dehydrated_state,
)

__version__ = "0.1.0"

__all__ = [
    # Cache
    "Query",
    "QueryCache",
    "QueryCacheLike",
    "QueryKey",
    "QueryLike",
    "QueryOptions",
    "QueryState",
    "QueryStatus",
    "hash_query_key",
    # Config
    "DEFAULT_CACHE_TIME_MS",
    "HydrationSettings",
    "get_default_settings",
    "load_settings_from_env",
    # Errors
    "HydrationError",
    "QueryConfigError",
    "QueryKeyError",
    "SnapshotRecordError",
    # Hydration
    "DehydratedQuery",
    "DehydratedQueryConfig",
    "DehydratedState",
    "DehydrateOptions",
    "MalformedSnapshot",
    "default_should_dehydrate",
    "dehydrate",
    "hydrate",
    "parse_dehydrated_state",
]
