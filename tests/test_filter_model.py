"""Tests for the canonical filter value and its size input helpers."""

import math

import pytest

from ui.filters.model import (
    DEFAULT_FILTERS,
    EDITABLE_FIELDS,
    SIZE_MAX_UNBOUNDED,
    SIZE_MIN_UNBOUNDED,
    DateRange,
    FileFilters,
    SizeRange,
    default_filters,
    filters_equal,
    format_size_input,
    parse_size_input,
)


class TestFileFilters:
    """Test the filter value itself."""

    def test_default_is_fully_neutral(self):
        filters = default_filters()
        assert filters.search == ""
        assert filters.file_type == ""
        assert filters.size_range.min == SIZE_MIN_UNBOUNDED
        assert filters.size_range.max == SIZE_MAX_UNBOUNDED
        assert filters.date_range == DateRange("", "")
        assert filters.is_default
        assert filters.active_field_count() == 0

    def test_default_filters_returns_shared_value(self):
        assert default_filters() is DEFAULT_FILTERS

    def test_values_are_immutable(self):
        with pytest.raises(AttributeError):
            DEFAULT_FILTERS.search = "x"

    @pytest.mark.parametrize(
        "field,value,check",
        [
            ("search", "inv", lambda f: f.search == "inv"),
            ("file_type", "image/png", lambda f: f.file_type == "image/png"),
            ("size_min", 10, lambda f: f.size_range.min == 10),
            ("size_max", 99, lambda f: f.size_range.max == 99),
            ("date_start", "2024-01-01", lambda f: f.date_range.start == "2024-01-01"),
            ("date_end", "2024-12-31", lambda f: f.date_range.end == "2024-12-31"),
        ],
    )
    def test_replace_field_changes_only_that_field(self, field, value, check):
        updated = DEFAULT_FILTERS.replace_field(field, value)
        assert check(updated)
        assert updated.active_field_count() == 1
        assert DEFAULT_FILTERS.is_default

    def test_replace_field_covers_every_editable_field(self):
        filters = DEFAULT_FILTERS
        for name, value in zip(EDITABLE_FIELDS, ["a", "b", 1, 2, "2024-01-01", "2024-01-02"]):
            filters = filters.replace_field(name, value)
        assert filters.active_field_count() == len(EDITABLE_FIELDS)

    def test_replace_unknown_field_raises(self):
        with pytest.raises(KeyError):
            DEFAULT_FILTERS.replace_field("owner", "bob")

    def test_zero_minimum_is_not_a_constraint(self):
        filters = FileFilters(size_range=SizeRange(min=0))
        assert not filters.size_range.has_min
        assert filters.is_default

    def test_finite_maximum_is_a_constraint(self):
        assert FileFilters(size_range=SizeRange(max=0)).size_range.has_max


class TestFiltersEqual:
    def test_equal_values(self):
        a = FileFilters(search="x", size_range=SizeRange(1, 2))
        b = FileFilters(search="x", size_range=SizeRange(1, 2))
        assert filters_equal(a, b)

    def test_nested_bound_difference(self):
        a = FileFilters(date_range=DateRange(end="2024-01-01"))
        b = FileFilters(date_range=DateRange(end="2024-01-02"))
        assert not filters_equal(a, b)

    def test_int_and_float_bounds_compare_by_value(self):
        assert filters_equal(FileFilters(size_range=SizeRange(min=5)), FileFilters(size_range=SizeRange(min=5.0)))


class TestSizeInput:
    """Test parsing and formatting of the size text boxes."""

    @pytest.mark.parametrize("text", ["", "   ", None, "abc", "1e", "--3"])
    def test_empty_or_invalid_min_is_neutral(self, text):
        assert parse_size_input("min", text) == SIZE_MIN_UNBOUNDED

    @pytest.mark.parametrize("text", ["", None, "abc"])
    def test_empty_or_invalid_max_is_neutral(self, text):
        assert math.isinf(parse_size_input("max", text))

    def test_integer_text(self):
        assert parse_size_input("min", "1024") == 1024
        assert parse_size_input("max", " 2048 ") == 2048

    def test_decimal_is_truncated(self):
        assert parse_size_input("min", "10.9") == 10

    def test_numeric_values_pass_through(self):
        assert parse_size_input("max", 512) == 512
        assert parse_size_input("max", 512.7) == 512

    def test_infinite_input_is_neutral(self):
        assert parse_size_input("min", "inf") == SIZE_MIN_UNBOUNDED
        assert math.isinf(parse_size_input("max", float("inf")))

    def test_zero_maximum_is_kept(self):
        assert parse_size_input("max", "0") == 0

    def test_unknown_bound_raises(self):
        with pytest.raises(ValueError):
            parse_size_input("middle", "1")

    def test_neutral_bounds_display_empty(self):
        assert format_size_input("min", SIZE_MIN_UNBOUNDED) == ""
        assert format_size_input("max", SIZE_MAX_UNBOUNDED) == ""

    def test_constrained_bounds_display_as_integers(self):
        assert format_size_input("min", 100) == "100"
        assert format_size_input("max", 0) == "0"

    def test_cleared_box_round_trips_to_neutral(self):
        for bound in ("min", "max"):
            neutral = parse_size_input(bound, "")
            assert parse_size_input(bound, format_size_input(bound, neutral)) == neutral
