# core/status_decoder.py
import json
from datetime import datetime, timedelta, timezone
from typing import Any, cast
from pydantic import ValidationError
from model.process_status import ProcessStatus
from util.constants import TIMESTAMP_FIELDS, TIMESTAMP_PARTS
from util.errors import DecodeError
from util.types import RawProcessStatus


def _describe(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(x) for x in e.get("loc", []))
        parts.append(f"{loc}: {e.get('msg', '')}")
    return "; ".join(parts)


def _civil_to_utc(
    year: int, month: int, day: int, hour: int, minute: int, second: int, nanosecond: int
) -> datetime:
    """
    Build a UTC datetime, carrying out-of-range components into the next
    larger unit (month 13 -> January of the next year, Feb 30 -> March).
    Nanoseconds are truncated to microsecond resolution.
    """
    year += (month - 1) // 12
    month = (month - 1) % 12 + 1
    base = datetime(year, month, 1, tzinfo=timezone.utc)
    return base + timedelta(
        days=day - 1,
        hours=hour,
        minutes=minute,
        seconds=second,
        microseconds=nanosecond // 1000,
    )


def decode_timestamp(value: Any, field: str = "timestamp") -> datetime | None:
    """
    Decode `[year, month, day, hour, minute, second, nanosecond]`.
    Absent values and lists of any other length yield None.
    """
    if value is None:
        return None
    if not isinstance(value, list):
        raise DecodeError(f"{field}: expected an array, got {type(value).__name__}")
    if len(value) != TIMESTAMP_PARTS:
        return None
    if not all(isinstance(p, int) and not isinstance(p, bool) for p in value):
        raise DecodeError(f"{field}: timestamp parts must be integers")
    try:
        return _civil_to_utc(*value)
    except (ValueError, OverflowError) as e:
        raise DecodeError(f"{field}: timestamp out of range ({e})") from e


def decode(raw: bytes | str) -> ProcessStatus:
    """
    Two passes over the status document:
      1. scalar fields and counters straight into ProcessStatus
      2. createdAt / finishedAt from their array encoding
    Raises DecodeError for anything that is not a well-formed status object.
    """
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"status payload is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise DecodeError(
            f"status payload must be an object, got {type(payload).__name__}"
        )

    doc = cast(RawProcessStatus, payload)
    scalars = {k: v for k, v in doc.items() if k not in TIMESTAMP_FIELDS}
    try:
        status = ProcessStatus.model_validate(scalars)
    except ValidationError as e:
        raise DecodeError(f"invalid status payload: {_describe(e)}") from e

    stamps = {name: decode_timestamp(doc.get(name), name) for name in TIMESTAMP_FIELDS}
    return status.model_copy(update=stamps)
