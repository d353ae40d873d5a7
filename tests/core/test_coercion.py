"""Tests for the type coercion engine."""

import math
from datetime import date, datetime, timedelta, timezone

import numpy as np
import pandas as pd
import pytest

from catalog_query.core.coercion import (
    coerce_boolean,
    coerce_date,
    coerce_number,
    coerce_object,
    coerce_string,
    coerce_string_array,
    coerce_value,
    is_missing,
    value_kind,
)
from catalog_query.core.enums import FieldType
from catalog_query.core.schemas import SchemaField


def _field(field_type: FieldType) -> SchemaField:
    return SchemaField("f", "F", field_type)


@pytest.mark.parametrize("raw", [None, float("nan"), np.nan, pd.NaT, pd.NA])
def test_missing_raw_values_are_absent_for_every_type(raw):
    """Null-like raw input never produces a value, whatever the declared type."""
    for field_type in FieldType:
        assert coerce_value(raw, _field(field_type)) is None


def test_scenario_coercions():
    """Invalid dates are rejected, numeric strings parse and objects never become strings."""
    assert coerce_value("2024-13-40", _field(FieldType.DATE)) is None
    assert coerce_value("456", _field(FieldType.NUMBER)) == 456
    assert coerce_value({"a": 1}, _field(FieldType.STRING)) is None


class TestNumber:
    """Number coercion."""

    def test_integer_literal_stays_int(self):
        """Integer strings give int, decimal strings give float."""
        assert coerce_number(" 42 ") == 42
        assert isinstance(coerce_number("42"), int)
        assert coerce_number("12.5") == 12.5

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "nan", "inf", "-Infinity", "1_000", [], {}, True, False])
    def test_rejected_inputs(self, raw):
        """Non-numeric input, NaN/infinity and booleans are absent."""
        assert coerce_number(raw) is None

    def test_never_nan(self):
        """Coerced numbers are always finite."""
        for raw in [float("inf"), float("-inf"), np.float64("nan"), "NaN", 1e308 * 10]:
            result = coerce_number(raw)
            assert result is None or math.isfinite(result)

    def test_numpy_scalars_are_normalized(self):
        """numpy integers and floats become plain Python numbers."""
        assert type(coerce_number(np.int64(7))) is int
        assert type(coerce_number(np.float32(1.5))) is float


class TestString:
    """String coercion."""

    def test_primitives_stringify(self):
        """Numbers, booleans and dates become strings."""
        assert coerce_string("x") == "x"
        assert coerce_string(3) == "3"
        assert coerce_string(3.0) == "3"
        assert coerce_string(2.5) == "2.5"
        assert coerce_string(False) == "false"
        assert coerce_string(date(2024, 1, 2)) == "2024-01-02"

    def test_empty_string_is_a_value(self):
        """An empty string is kept, not treated as missing."""
        assert coerce_string("") == ""

    @pytest.mark.parametrize("raw", [["a"], ("a",), {"a": 1}, {"a"}])
    def test_containers_are_absent(self, raw):
        """Containers are never stringified into a field value."""
        assert coerce_string(raw) is None


class TestBoolean:
    """Boolean coercion."""

    def test_strings(self):
        """Only "true" (any case) is true among strings."""
        assert coerce_boolean("TRUE") is True
        assert coerce_boolean(" true ") is True
        assert coerce_boolean("yes") is False
        assert coerce_boolean("false") is False

    def test_truthiness(self):
        """Other values use truthiness; False stays a value."""
        assert coerce_boolean(False) is False
        assert coerce_boolean(0) is False
        assert coerce_boolean(2) is True
        assert coerce_boolean([1]) is True


class TestDate:
    """Date coercion."""

    def test_iso_string_is_utc_aware(self):
        """ISO strings become aware UTC datetimes."""
        result = coerce_date("2024-03-05")
        assert result == datetime(2024, 3, 5, tzinfo=timezone.utc)

    def test_offset_is_converted_to_utc(self):
        """Offsets are normalized to UTC."""
        result = coerce_date("2024-03-05T12:00:00+02:00")
        assert result == datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)
        assert result.utcoffset() == timedelta(0)

    def test_date_and_naive_datetime(self):
        """date values become midnight UTC, naive datetimes are read as UTC."""
        assert coerce_date(date(2020, 1, 1)) == datetime(2020, 1, 1, tzinfo=timezone.utc)
        assert coerce_date(datetime(2020, 1, 1, 8)) == datetime(2020, 1, 1, 8, tzinfo=timezone.utc)

    def test_numbers_parse_like_their_text(self):
        """A numeric year gives the same date as the year written as text."""
        assert coerce_date(2024) == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert coerce_date(2024) == coerce_date("2024")
        assert coerce_date(2024.0) == coerce_date("2024")

    def test_numeric_year_in_date_field(self):
        """A YAML year under a date field is that year, not an epoch offset."""
        field = SchemaField("published", "Published", FieldType.DATE)
        assert coerce_value(2024, field) == coerce_value("2024", field)
        assert coerce_value(2024, field).year == 2024

    @pytest.mark.parametrize("raw", ["2024-13-40", "not a date", "", True, {"y": 2024}, float("inf")])
    def test_invalid_dates_are_absent(self, raw):
        """Invalid input never yields an invalid date object."""
        assert coerce_date(raw) is None


class TestArrayAndObject:
    """Array and object coercion."""

    def test_elements_are_stringified_and_bad_ones_dropped(self):
        """Primitives stringify; nulls, mappings and nested lists are dropped."""
        assert coerce_string_array(["a", 1, None, {"x": 1}, ["n"], True]) == ["a", "1", "true"]

    def test_scalar_is_wrapped(self):
        """A single primitive becomes a one-element array."""
        assert coerce_string_array("solo") == ["solo"]

    def test_empty_array_is_a_value(self):
        """An empty array is present, not absent."""
        assert coerce_string_array([]) == []

    def test_mapping_is_not_an_array(self):
        """Mappings are absent for array fields."""
        assert coerce_string_array({"a": 1}) is None

    def test_object_requires_mapping(self):
        """Only mappings pass object coercion, copied into a dict."""
        raw = {"a": 1}
        result = coerce_object(raw)
        assert result == {"a": 1}
        assert result is not raw
        assert coerce_object(["a"]) is None
        assert coerce_object("a") is None


def test_value_kind_checks_bool_before_number():
    """bool is its own kind even though it subclasses int."""
    assert value_kind(True) is FieldType.BOOLEAN
    assert value_kind(1) is FieldType.NUMBER
    assert value_kind(datetime.now(timezone.utc)) is FieldType.DATE
    assert value_kind(["a"]) is FieldType.ARRAY
    assert value_kind({}) is FieldType.OBJECT
    assert value_kind(None) is None


def test_is_missing():
    """None, NaN, NaT and NA are missing; falsy values are not."""
    assert is_missing(None)
    assert is_missing(float("nan"))
    assert is_missing(pd.NaT)
    assert not is_missing(0)
    assert not is_missing("")
    assert not is_missing(False)
