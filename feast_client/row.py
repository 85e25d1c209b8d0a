"""Row: a set of named feature/entity values sharing one entity timestamp."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Dict, Iterator, Optional, Union

from feast_client.mappers.values import from_value, to_value
from feast_client.protos import value_pb2


class FieldStatus(IntEnum):
    """Per-field status reported by the serving API."""

    INVALID = 0
    PRESENT = 1
    NULL_VALUE = 2
    NOT_FOUND = 3
    OUTSIDE_MAX_AGE = 4

    @classmethod
    def _missing_(cls, value):
        # proto3 enums are open: numbers from a newer server read as INVALID
        if isinstance(value, int):
            return cls.INVALID
        return None


def _utc(dt: datetime) -> datetime:
    # naive datetimes are taken as UTC
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class Row:
    """Mutable row of fields, built fluently.

    Example::

        row = Row.create().set("driver_id", 123).set("city", "Jakarta")
    """

    __slots__ = ("_entity_timestamp", "_fields", "_statuses")

    def __init__(self, entity_timestamp: Optional[datetime] = None) -> None:
        self._entity_timestamp = _utc(entity_timestamp or datetime.now(timezone.utc))
        self._fields: Dict[str, value_pb2.Value] = {}
        self._statuses: Dict[str, FieldStatus] = {}

    @classmethod
    def create(cls) -> "Row":
        return cls()

    def set_entity_timestamp(self, timestamp: Union[datetime, str]) -> "Row":
        if isinstance(timestamp, str):
            if timestamp.endswith(("Z", "z")):
                timestamp = timestamp[:-1] + "+00:00"
            timestamp = datetime.fromisoformat(timestamp)
        self._entity_timestamp = _utc(timestamp)
        return self

    def get_entity_timestamp(self) -> datetime:
        return self._entity_timestamp

    def set(self, field_name: str, value: Any, status: Optional[FieldStatus] = FieldStatus.PRESENT) -> "Row":
        self._fields[field_name] = to_value(value)
        self._statuses[field_name] = FieldStatus(status) if status is not None else FieldStatus.INVALID
        return self

    def get_fields(self) -> Dict[str, value_pb2.Value]:
        return dict(self._fields)

    def get_statuses(self) -> Dict[str, FieldStatus]:
        return dict(self._statuses)

    def get_value(self, field_name: str) -> Optional[value_pb2.Value]:
        return self._fields.get(field_name)

    def get_status(self, field_name: str) -> Optional[FieldStatus]:
        return self._statuses.get(field_name)

    def get(self, field_name: str, default: Any = None) -> Any:
        """Decoded Python value of ``field_name``; ``default`` if absent."""
        value = self._fields.get(field_name)
        if value is None:
            return default
        return from_value(value)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return (
            self._entity_timestamp == other._entity_timestamp
            and self._fields == other._fields
            and self._statuses == other._statuses
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={self.get(name)!r} ({self._statuses[name].name})" for name in self._fields
        )
        return f"Row(entity_timestamp={self._entity_timestamp.isoformat()}, {fields})"
