# tests/test_timestamps.py
"""Unit tests for timestamp classification and normalization."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import date, datetime, timezone
from types import SimpleNamespace
from logitrack.errors import TimestampShapeError
from logitrack.store.timestamps import (
    EpochSeconds,
    MillisAccessor,
    NativeDate,
    classify_timestamp,
    normalize_timestamp,
    to_epoch_seconds,
)

INSTANT = datetime(2024, 5, 17, 8, 30, 15, tzinfo=timezone.utc)
SECONDS = int(INSTANT.timestamp())


class FakeFirestoreTimestamp:
    """Exposes the to-date conversion the way client SDK timestamps do."""

    def __init__(self, dt):
        self._dt = dt

    def to_datetime(self):
        return self._dt


class FakeMillisTimestamp:
    def __init__(self, millis):
        self._millis = millis

    def to_millis(self):
        return self._millis


class TestClassify:
    def test_none_stays_none(self):
        assert classify_timestamp(None) is None
        assert normalize_timestamp(None) is None

    def test_native_datetime(self):
        assert classify_timestamp(INSTANT) == NativeDate(INSTANT)

    def test_plain_date_is_midnight(self):
        assert normalize_timestamp(date(2024, 5, 17)) == datetime(2024, 5, 17, tzinfo=timezone.utc)

    def test_to_date_method(self):
        assert classify_timestamp(FakeFirestoreTimestamp(INSTANT)) == NativeDate(INSTANT)

    def test_millis_accessor(self):
        assert classify_timestamp(FakeMillisTimestamp(SECONDS * 1000)) == MillisAccessor(SECONDS * 1000)

    def test_seconds_mapping_and_serialized_form(self):
        assert classify_timestamp({"seconds": SECONDS, "nanoseconds": 5}) == EpochSeconds(SECONDS, 5)
        assert classify_timestamp({"_seconds": SECONDS, "_nanoseconds": 0}) == EpochSeconds(SECONDS, 0)

    def test_seconds_attribute(self):
        assert classify_timestamp(SimpleNamespace(seconds=SECONDS, nanos=0)) == EpochSeconds(SECONDS, 0)

    def test_tagged_value_passes_through(self):
        tagged = EpochSeconds(SECONDS)
        assert classify_timestamp(tagged) is tagged

    @pytest.mark.parametrize("value", ["2024-05-17", 1715934615, {"when": 1}, ["x"]])
    def test_unknown_shape_raises(self, value):
        with pytest.raises(TimestampShapeError):
            classify_timestamp(value)

    def test_to_date_returning_garbage_raises(self):
        with pytest.raises(TimestampShapeError):
            classify_timestamp(SimpleNamespace(to_datetime=lambda: "yesterday"))


class TestNormalize:
    def test_all_shapes_agree_on_the_same_instant(self):
        shapes = [
            INSTANT,
            FakeFirestoreTimestamp(INSTANT),
            {"seconds": SECONDS, "nanoseconds": 0},
            FakeMillisTimestamp(SECONDS * 1000),
        ]
        assert {normalize_timestamp(s) for s in shapes} == {INSTANT}

    def test_naive_datetime_is_read_as_utc(self):
        naive = INSTANT.replace(tzinfo=None)
        assert normalize_timestamp(naive) == INSTANT
        assert normalize_timestamp(naive).tzinfo is not None

    def test_nanoseconds_keep_microsecond_precision(self):
        result = normalize_timestamp({"seconds": SECONDS, "nanoseconds": 250_000_000})
        assert result.microsecond == 250_000

    def test_epoch_seconds_round_trip(self):
        precise = INSTANT.replace(microsecond=123456)
        assert normalize_timestamp(to_epoch_seconds(precise)) == precise
