"""Dehydration and hydration of query cache state.

This module provides:
- dehydrate: project the queries of a cache into a portable snapshot
- hydrate: merge a received snapshot into a cache without regressing freshness
- DehydratedState / DehydratedQuery: the snapshot format
- parse_dehydrated_state: tolerant parsing of snapshots from untrusted sources
"""

from queryhydrate.hydration.dehydrate import (
    DehydrateOptions,
    ShouldDehydrateFunction,
    default_should_dehydrate,
    dehydrate,
    dehydrate_query,
)
from queryhydrate.hydration.hydrate import hydrate
from queryhydrate.hydration.models import (
    DehydratedQuery,
    DehydratedQueryConfig,
    DehydratedState,
    MalformedSnapshot,
    SnapshotParseResult,
    parse_dehydrated_state,
)

__all__ = [
    "DehydrateOptions",
    "DehydratedQuery",
    "DehydratedQueryConfig",
    "DehydratedState",
    "MalformedSnapshot",
    "ShouldDehydrateFunction",
    "SnapshotParseResult",
    "default_should_dehydrate",
    "dehydrate",
    "dehydrate_query",
    "hydrate",
    "parse_dehydrated_state",
]
