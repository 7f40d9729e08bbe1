"""Query key hashing.

Query keys are opaque to the hydration layer, but the producing and the
consuming cache must agree on equality. Keys are reduced to a canonical JSON
string: mapping keys are sorted, tuples and lists are equivalent, and no
insignificant whitespace is emitted.
"""

import json
from typing import Any, Union

from queryhydrate.errors import QueryKeyError

QueryKey = Union[str, int, float, bool, None, list, tuple, dict]


def _normalize_key_part(part: Any, query_key: Any) -> Any:
    if part is None or isinstance(part, (str, bool, int, float)):
        return part

    if isinstance(part, (list, tuple)):
        return [_normalize_key_part(item, query_key) for item in part]

    if isinstance(part, dict):
        normalized = {}
        for name, value in part.items():
            if not isinstance(name, str):
                raise QueryKeyError(query_key, f"mapping key {name!r} is not a string")
            normalized[name] = _normalize_key_part(value, query_key)
        return normalized

    raise QueryKeyError(query_key, f"unsupported key part of type {type(part).__name__}")


def hash_query_key(query_key: QueryKey) -> str:
    """Generate a deterministic hash string for a query key.

    Args:
        query_key: The key to hash

    Returns:
        Canonical JSON string identifying the key

    Raises:
        QueryKeyError: If the key contains values that are not JSON-compatible

    Example:
        >>> hash_query_key(("todos", {"page": 1, "done": False}))
        '["todos",{"done":false,"page":1}]'
        >>> hash_query_key(["todos", {"done": False, "page": 1}])
        '["todos",{"done":false,"page":1}]'
    """
    normalized = _normalize_key_part(query_key, query_key)
    try:
        return json.dumps(
            normalized,
            sort_keys=True,
            ensure_ascii=False,
            separators=(",", ":"),
            allow_nan=False,
        )
    except ValueError as e:
        raise QueryKeyError(query_key, str(e)) from e
