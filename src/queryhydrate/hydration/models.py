"""Pydantic models for dehydrated cache state.

This module defines the portable snapshot format and the structural checks
applied to snapshots received from outside the process.

Wire shape::

    {"records": [{"key": ..., "data": ..., "updatedAt": 100,
                  "config": {"cacheTime": 60000}}]}

``data`` is present only when the source query held a value, and
``config.cacheTime`` only when it differed from the default cache time.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    model_serializer,
    model_validator,
)
from pydantic_core import to_json

from queryhydrate.errors import SnapshotRecordError


class DehydratedQueryConfig(BaseModel):
    """Sparse per-query configuration carried in a snapshot.

    Attributes:
        cache_time: Retention in milliseconds, set only when non-default
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    cache_time: Optional[int] = Field(default=None, alias="cacheTime", ge=0, strict=True)

    @model_serializer
    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation, leaving out unset overrides."""
        if self.cache_time is None:
            return {}
        return {"cacheTime": self.cache_time}


class DehydratedQuery(BaseModel):
    """Serializable projection of one query.

    ``model_dump`` and ``model_dump_json`` produce the wire shape. When
    has_data is not given it follows the presence of ``data`` in the input,
    so ``{"data": None}`` is a present null value.

    Attributes:
        query_key: Key of the source query
        data: Value of the source query (meaningful only when has_data is True)
        has_data: Whether the source query held a value
        updated_at: Freshness timestamp of the value in epoch milliseconds
        config: Sparse configuration overrides
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    query_key: Any = Field(..., alias="key")
    data: Any = None
    has_data: bool = False
    updated_at: int = Field(..., alias="updatedAt", strict=True)
    config: DehydratedQueryConfig = Field(default_factory=DehydratedQueryConfig)

    @model_validator(mode="before")
    @classmethod
    def derive_has_data(cls, values: Any) -> Any:
        """Set has_data from the presence of ``data`` unless given explicitly."""
        if isinstance(values, Mapping) and "has_data" not in values:
            values = dict(values)
            values["has_data"] = "data" in values
        return values

    @classmethod
    def from_wire(cls, payload: Mapping[str, Any]) -> "DehydratedQuery":
        """Create a record from its wire representation.

        Presence of the ``data`` field, not its value, decides has_data.

        Raises:
            pydantic.ValidationError: If required fields are missing or invalid
        """
        fields = dict(payload)
        fields["has_data"] = "data" in payload
        return cls.model_validate(fields)

    @model_serializer
    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        wire: dict[str, Any] = {"key": self.query_key}
        if self.has_data:
            wire["data"] = self.data
        wire["updatedAt"] = self.updated_at
        wire["config"] = self.config.to_wire()
        return wire


class DehydratedState(BaseModel):
    """Ordered, immutable collection of dehydrated queries.

    Attributes:
        records: Records in the producing cache's enumeration order
    """

    model_config = ConfigDict(frozen=True)

    records: tuple[DehydratedQuery, ...] = ()

    @model_serializer
    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {"records": [record.to_wire() for record in self.records]}

    def to_json(self) -> str:
        """Serialize the wire representation to a JSON string."""
        return to_json(self.to_dict()).decode("utf-8")

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class MalformedSnapshot:
    """Result of checking a value that is not a usable snapshot.

    Attributes:
        reason: Why the value was rejected
    """

    reason: str


SnapshotParseResult = Union[DehydratedState, MalformedSnapshot]


def read_records(value: Any) -> Union[tuple[Any, ...], MalformedSnapshot]:
    """Check the top-level shape of a snapshot and return its raw records.

    Accepts a DehydratedState, a mapping with a ``records`` list, or JSON
    text (str or bytes) encoding such a mapping. Individual records are not
    validated here.

    Args:
        value: Candidate snapshot from an untrusted source

    Returns:
        Tuple of raw records, or MalformedSnapshot describing the problem
    """
    if isinstance(value, DehydratedState):
        return value.records

    if isinstance(value, (str, bytes, bytearray)):
        try:
            value = json.loads(value)
        except ValueError:
            return MalformedSnapshot("snapshot is not valid JSON")

    if not isinstance(value, Mapping):
        return MalformedSnapshot(f"expected a mapping, got {type(value).__name__}")

    if "records" not in value:
        return MalformedSnapshot("snapshot has no 'records' field")

    records = value["records"]
    if not isinstance(records, (list, tuple)):
        return MalformedSnapshot(
            f"'records' must be a list, got {type(records).__name__}"
        )

    return tuple(records)


def coerce_record(raw: Any, index: int) -> DehydratedQuery:
    """Validate one raw record.

    Args:
        raw: A DehydratedQuery or a wire-format mapping
        index: Position of the record, used in error reports

    Returns:
        The validated record

    Raises:
        SnapshotRecordError: If the record is not a mapping or fails validation
    """
    if isinstance(raw, DehydratedQuery):
        return raw

    if not isinstance(raw, Mapping):
        raise SnapshotRecordError(index, f"expected a mapping, got {type(raw).__name__}")

    try:
        return DehydratedQuery.from_wire(raw)
    except ValidationError as e:
        raise SnapshotRecordError(
            index,
            f"{e.error_count()} validation error(s)",
            details=e.errors(include_url=False),
        ) from e


def parse_dehydrated_state(value: Any) -> SnapshotParseResult:
    """Parse a snapshot received from outside the process.

    A value with the wrong top-level shape is an expected input and yields
    MalformedSnapshot. A well-formed snapshot with an invalid record raises.

    Args:
        value: Candidate snapshot

    Returns:
        DehydratedState, or MalformedSnapshot for a wrong top-level shape

    Raises:
        SnapshotRecordError: If any record fails validation

    Example:
        >>> state = parse_dehydrated_state({"records": [{"key": "a", "updatedAt": 1}]})
        >>> state.records[0].has_data
        False
        >>> parse_dehydrated_state(None)
        MalformedSnapshot(reason='expected a mapping, got NoneType')
    """
    records = read_records(value)
    if isinstance(records, MalformedSnapshot):
        return records
    if isinstance(value, DehydratedState):
        return value
    return DehydratedState(
        records=tuple(coerce_record(raw, index) for index, raw in enumerate(records))
    )
