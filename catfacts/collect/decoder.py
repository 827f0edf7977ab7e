"""Decode fact JSON bodies into typed records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable

from catfacts.common.errors import DecodeError
from catfacts.common.models import Record, Status


@dataclass(frozen=True)
class FieldSpec:
    target: str
    source: str
    coerce: Callable[[Any, str], Any]

    def names(self) -> tuple[str, ...]:
        # API spelling first, then the normalised spelling used in persisted entries.
        if self.source == self.target:
            return (self.source,)
        return (self.source, self.target)


def _as_bool(value: Any, field: str) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"field {field!r} must be a boolean, got {type(value).__name__}")
    return value


def _as_str(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"field {field!r} must be a string, got {type(value).__name__}")
    return value


def _as_non_empty_str(value: Any, field: str) -> str:
    value = _as_str(value, field)
    if not value:
        raise DecodeError(f"field {field!r} must not be empty")
    return value


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(f"field {field!r} must be an integer, got {type(value).__name__}")
    return value


def _as_unsigned(value: Any, field: str) -> int:
    value = _as_int(value, field)
    if value < 0:
        raise DecodeError(f"field {field!r} must be non-negative, got {value}")
    return value


STATUS_FIELDS = (
    FieldSpec("verified", "verified", _as_bool),
    FieldSpec("sent_count", "sentCount", _as_unsigned),
)


def _as_status(value: Any, field: str) -> Status:
    if not isinstance(value, dict):
        raise DecodeError(f"field {field!r} must be an object, got {type(value).__name__}")
    return Status(**_map_fields(value, STATUS_FIELDS, prefix=f"{field}."))


RECORD_FIELDS = (
    FieldSpec("used", "used", _as_bool),
    FieldSpec("source", "source", _as_str),
    FieldSpec("animal_type", "type", _as_str),
    FieldSpec("deleted", "deleted", _as_bool),
    FieldSpec("id", "_id", _as_non_empty_str),
    FieldSpec("version", "__v", _as_int),
    FieldSpec("text", "text", _as_str),
    FieldSpec("updated_at", "updatedAt", _as_str),
    FieldSpec("created_at", "createdAt", _as_str),
    FieldSpec("status", "status", _as_status),
    FieldSpec("user", "user", _as_str),
)


def _map_fields(payload: dict, table: tuple[FieldSpec, ...], prefix: str = "") -> dict[str, Any]:
    out: dict[str, Any] = {}
    for spec in table:
        for name in spec.names():
            if name in payload:
                out[spec.target] = spec.coerce(payload[name], f"{prefix}{name}")
                break
        else:
            raise DecodeError(f"missing required field {prefix + spec.source!r}")
    return out


def decode_payload(payload: Any) -> Record:
    if not isinstance(payload, dict):
        raise DecodeError(f"expected a JSON object, got {type(payload).__name__}")
    return Record(**_map_fields(payload, RECORD_FIELDS))


def decode(body: str) -> Record:
    """Parse ``body`` and map it onto a :class:`Record`.

    Unknown fields are ignored; a missing or mistyped field raises
    :class:`DecodeError` and no record is produced.
    """
    try:
        payload = json.loads(body)
    except (TypeError, ValueError, RecursionError) as exc:
        raise DecodeError(f"body is not valid JSON: {exc}") from exc
    return decode_payload(payload)
