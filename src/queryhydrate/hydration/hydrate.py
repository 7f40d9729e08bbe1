"""Snapshot consumer.

Merges a received snapshot into a live cache. A record only replaces local
data when it is strictly newer, so a racing import of slightly stale data
never clobbers a local update with the same timestamp. Records for unknown
keys create new queries configured from the defaults plus the record's
overrides.
"""

from typing import Any, Optional

from queryhydrate.cache.protocols import QueryCacheLike
from queryhydrate.cache.query import QueryOptions
from queryhydrate.config import HydrationSettings
from queryhydrate.hydration.models import MalformedSnapshot, coerce_record, read_records
from queryhydrate.observability.logging import get_logger

logger = get_logger(__name__)


def hydrate(
    query_cache: QueryCacheLike,
    dehydrated_state: Any,
    settings: Optional[HydrationSettings] = None,
) -> None:
    """Apply a snapshot to a cache.

    A value that is not a snapshot (None, a number, a mapping without a
    ``records`` list, undecodable JSON) is logged and ignored. Errors from
    individual records or from the cache propagate; records applied before
    the failure stay applied.

    Args:
        query_cache: Cache to update
        dehydrated_state: DehydratedState, wire-format mapping, or JSON text
        settings: Settings supplying the default cache time for new queries;
            when None the target cache's default is used

    Raises:
        SnapshotRecordError: If a record fails validation
        QueryKeyError: If the cache cannot hash a record's key
    """
    raw_records = read_records(dehydrated_state)
    if isinstance(raw_records, MalformedSnapshot):
        logger.warning("hydrate_skipped_malformed_snapshot", reason=raw_records.reason)
        return

    if settings is not None:
        default_cache_time = settings.default_cache_time_ms
    else:
        default_cache_time = query_cache.default_cache_time

    created = updated = skipped = 0

    for index, raw in enumerate(raw_records):
        record = coerce_record(raw, index)
        query = query_cache.get_query(record.query_key)

        if query is not None:
            # Equal timestamps keep the local entry; absent data never
            # overwrites a present value
            if record.has_data and query.set_data_if_newer(record.data, record.updated_at):
                updated += 1
            else:
                skipped += 1
            continue

        cache_time = record.config.cache_time
        query = query_cache.build_query(
            record.query_key,
            QueryOptions(
                cache_time=cache_time if cache_time is not None else default_cache_time
            ),
        )
        # Another writer may have created the key since get_query, so the
        # freshness check still applies
        if not record.has_data:
            query.mark_updated_if_newer(record.updated_at)
            created += 1
        elif query.set_data_if_newer(record.data, record.updated_at):
            created += 1
        else:
            skipped += 1

    logger.info(
        "hydrate_completed",
        record_count=len(raw_records),
        created=created,
        updated=updated,
        skipped=skipped,
    )
