# logitrack/store/timestamps.py
"""
Timestamp normalization.

Documents carry dates in several shapes depending on who wrote them and how
they were read back:
  - a native datetime (Firestore's DatetimeWithNanoseconds, or anything
    exposing to_datetime() / ToDatetime())
  - a millis accessor (to_millis() / ToMilliseconds())
  - an epoch-seconds wrapper ({"seconds": ..., "nanoseconds": ...}, the
    serialized {"_seconds": ...} form, or an object with a `seconds` field)

Store adapters tag what they read with one of the three dataclasses below;
raw values are classified here with the same ordered checks. Anything else
is a TimestampShapeError, never a pass-through.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from logitrack.errors import TimestampShapeError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_TO_DATE_METHODS = ("to_datetime", "ToDatetime")
_TO_MILLIS_METHODS = ("to_millis", "ToMilliseconds")
_SECONDS_KEYS = ("seconds", "_seconds")
_NANOS_KEYS = ("nanoseconds", "_nanoseconds", "nanos")


@dataclass(frozen=True)
class NativeDate:
    value: datetime


@dataclass(frozen=True)
class EpochSeconds:
    seconds: float
    nanoseconds: int = 0


@dataclass(frozen=True)
class MillisAccessor:
    millis: float


Timestamp = Union[NativeDate, EpochSeconds, MillisAccessor]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _call(value, names: tuple[str, ...]):
    for name in names:
        method = getattr(value, name, None)
        if callable(method):
            return True, method()
    return False, None


def _seconds_of(value) -> tuple[Optional[float], int]:
    if isinstance(value, Mapping):
        seconds = next((value[k] for k in _SECONDS_KEYS if k in value), None)
        nanos = next((value[k] for k in _NANOS_KEYS if k in value), 0)
    else:
        seconds = getattr(value, "seconds", None)
        nanos = next((getattr(value, k) for k in _NANOS_KEYS if hasattr(value, k)), 0)
    if not _is_number(seconds):
        return None, 0
    return seconds, int(nanos) if _is_number(nanos) else 0


def classify_timestamp(value) -> Optional[Timestamp]:
    """Tag a raw stored value. First match wins; None stays None."""
    if value is None:
        return None
    if isinstance(value, (NativeDate, EpochSeconds, MillisAccessor)):
        return value
    if isinstance(value, datetime):
        return NativeDate(value)
    if isinstance(value, date):
        return NativeDate(datetime.combine(value, time.min))

    found, result = _call(value, _TO_DATE_METHODS)
    if found:
        if not isinstance(result, datetime):
            raise TimestampShapeError(f"to-date conversion returned {type(result).__name__}")
        return NativeDate(result)

    found, result = _call(value, _TO_MILLIS_METHODS)
    if found:
        if not _is_number(result):
            raise TimestampShapeError(f"to-millis conversion returned {type(result).__name__}")
        return MillisAccessor(result)

    seconds, nanos = _seconds_of(value)
    if seconds is not None:
        return EpochSeconds(seconds, nanos)

    raise TimestampShapeError(f"Unrecognized timestamp shape: {type(value).__name__} {value!r}")


def to_datetime(ts: Timestamp) -> datetime:
    """Convert a tagged timestamp to an aware UTC datetime. Naive datetimes are read as UTC."""
    if isinstance(ts, NativeDate):
        if ts.value.tzinfo is None:
            return ts.value.replace(tzinfo=timezone.utc)
        return ts.value.astimezone(timezone.utc)
    if isinstance(ts, EpochSeconds):
        return EPOCH + timedelta(seconds=ts.seconds, microseconds=ts.nanoseconds // 1000)
    if isinstance(ts, MillisAccessor):
        return EPOCH + timedelta(milliseconds=ts.millis)
    raise TimestampShapeError(f"Not a tagged timestamp: {type(ts).__name__}")


def normalize_timestamp(value) -> Optional[datetime]:
    """Any supported shape (tagged or raw) -> aware UTC datetime, or None for None."""
    ts = classify_timestamp(value)
    return to_datetime(ts) if ts is not None else None


def to_epoch_seconds(value: datetime) -> EpochSeconds:
    """Inverse used by stores that persist timestamps as seconds + nanoseconds."""
    delta = to_datetime(NativeDate(value)) - EPOCH
    whole = delta.days * 86400 + delta.seconds
    return EpochSeconds(whole, delta.microseconds * 1000)
