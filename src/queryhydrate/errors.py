"""Custom exceptions for cache hydration.

This module defines the exception hierarchy raised by the query cache and
the hydration layer. Malformed snapshots are not represented here: they are
an expected input and are reported through ``MalformedSnapshot`` instead.
"""

from typing import Any, Optional


class HydrationError(Exception):
    """Base exception for all hydration-related errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
    """

    def __init__(self, message: str, code: str) -> None:
        """Initialize hydration error.

        Args:
            message: Human-readable error description
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code


class QueryKeyError(HydrationError):
    """Raised when a query key cannot be turned into a stable hash.

    Query keys must be built from JSON-compatible values (strings, numbers,
    booleans, None, and lists, tuples or string-keyed dicts of those).
    """

    def __init__(self, query_key: Any, reason: str) -> None:
        """Initialize query key error.

        Args:
            query_key: The offending key
            reason: Why the key could not be hashed
        """
        super().__init__(
            message=f"Invalid query key {query_key!r}: {reason}",
            code="invalid_query_key",
        )
        self.query_key = query_key
        self.reason = reason


class QueryConfigError(HydrationError):
    """Raised when a query is built with invalid options."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        """Initialize query config error.

        Args:
            message: Description of the problem
            field: Optional name of the offending option
        """
        if field:
            full_message = f"Invalid query option '{field}': {message}"
        else:
            full_message = f"Invalid query options: {message}"

        super().__init__(message=full_message, code="invalid_query_config")
        self.field = field


class SnapshotRecordError(HydrationError):
    """Raised when a single snapshot record fails validation.

    The enclosing snapshot was well-formed, so the failure is not silently
    ignored. Records before ``index`` have already been applied.
    """

    def __init__(self, index: int, reason: str, details: Optional[list] = None) -> None:
        """Initialize snapshot record error.

        Args:
            index: Position of the record within the snapshot
            reason: Summary of the validation failure
            details: Optional list of structured validation errors
        """
        super().__init__(
            message=f"Snapshot record {index} is invalid: {reason}",
            code="invalid_snapshot_record",
        )
        self.index = index
        self.reason = reason
        self.details = details or []
