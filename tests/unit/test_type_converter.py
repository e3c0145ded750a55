"""Tests for Coercer.convert — the strategy precedence chain."""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from fractions import Fraction

import pytest

from param_coerce import (
    DATA_FORMAT,
    TIMEZONE,
    ConversionError,
    ParameterDeclaration,
    ResultSet,
    ResultSetTableModel,
    SchemaError,
    TableModel,
)


class _Rows(ResultSet):
    def __init__(self, headers, rows):
        self._headers = headers
        self._rows = rows

    def row_count(self):
        return len(self._rows)

    def column_count(self):
        return len(self._headers)

    def column_headers(self):
        return self._headers

    def value_at(self, row, column):
        return self._rows[row][column]


class _Opaque:
    """A type nobody knows how to convert to."""


def _decl(target, **attributes):
    return ParameterDeclaration("p", target, attributes)


class TestContract:
    """Test preconditions and trivial cases."""

    def test_unset_target_fails_fast(self, coercer):
        """A missing target type is a schema error."""
        with pytest.raises(SchemaError):
            coercer.convert(_decl(None), None, "42")

    def test_none_value(self, coercer):
        """None converts to None."""
        assert coercer.convert(_decl(int), int, None) is None

    @pytest.mark.parametrize("target", [int, float, Decimal, bool, str, date, time, datetime, _Opaque])
    def test_empty_string_is_none(self, coercer, target):
        """'' is None for every target type, never an error."""
        assert coercer.convert(_decl(target), target, "") is None

    def test_empty_string_with_format(self, coercer):
        """'' is None even when a dataFormat is set."""
        assert coercer.convert(_decl(Decimal, dataFormat="#,##0.00"), Decimal, "") is None


class TestIdentity:
    """Test the instance shortcut."""

    @pytest.mark.parametrize("value,target", [
        (Decimal("1.50"), Decimal),
        (42, int),
        (datetime(2024, 7, 20), datetime),
        ("text", str),
        ([1, 2], list[int]),
    ])
    def test_returns_same_object(self, coercer, value, target):
        """An instance of the target type is returned unchanged."""
        assert coercer.convert(_decl(target), target, value) is value


class TestTableAdapter:
    """Test the ResultSet → TableModel adapter."""

    def test_wraps_result_set(self, coercer):
        """A ResultSet becomes a TableModel."""
        rows = _Rows(["id", "name"], [[1, "a"], [2, "b"]])

        table = coercer.convert(_decl(TableModel), TableModel, rows)

        assert isinstance(table, ResultSetTableModel)
        assert table.row_count() == 2
        assert table.column_count() == 2
        assert table.column_name(1) == "name"
        assert table.value_at(1, 1) == "b"
        assert table.column_type(0) is object


class TestRegistryConversion:
    """Test the converter-registry fallback."""

    def test_integer(self, coercer):
        """'42' → 42."""
        assert coercer.convert(_decl(int), int, "42") == 42

    def test_non_string_raw(self, coercer):
        """Raw values are stringified first."""
        assert coercer.convert(_decl(str), str, 42) == "42"
        assert coercer.convert(_decl(Decimal), Decimal, 1.5) == Decimal("1.5")

    def test_bool(self, coercer):
        """'true' → True."""
        assert coercer.convert(_decl(bool), bool, "true") is True

    def test_failure_is_terminal(self, coercer):
        """A rejected value raises ConversionError naming the parameter."""
        with pytest.raises(ConversionError) as info:
            coercer.convert(_decl(int), int, "abc")

        assert info.value.parameter == "p"
        assert info.value.value == "abc"
        assert "'p'" in str(info.value)
        assert "'abc'" in str(info.value)

    def test_pass_through_unknown_type(self, coercer):
        """Without a converter the raw value is returned unchanged."""
        assert coercer.convert(_decl(_Opaque), _Opaque, "foo") == "foo"

    def test_pass_through_non_class_target(self, coercer):
        """Exotic target objects pass through too."""
        assert coercer.convert(_decl("anything"), "anything", "foo") == "foo"


class TestDateShortcut:
    """Test date-family targets."""

    def test_timestamp_server(self, coercer):
        """Naive local timestamp for server timezone."""
        decl = _decl(datetime, timezone="server")

        assert coercer.convert(decl, datetime, "2024-07-20T10:15:00.000") == datetime(2024, 7, 20, 10, 15)

    def test_date_target(self, coercer):
        """date targets keep only the calendar day."""
        value = coercer.convert(_decl(date), date, "2024-07-20T10:15:00.000")

        assert value == date(2024, 7, 20)
        assert type(value) is date

    def test_time_target(self, coercer):
        """time targets keep only the time of day."""
        assert coercer.convert(_decl(time), time, "2024-07-20T10:15:00.000") == time(10, 15)

    def test_time_keeps_zone(self, coercer):
        """utc times stay aware."""
        value = coercer.convert(_decl(time, timezone="utc"), time, "2024-07-20T10:15:00.000")

        assert value.tzinfo is not None

    def test_epoch(self, coercer):
        """Legacy epoch milliseconds."""
        value = coercer.convert(_decl(datetime), datetime, "1700000000000")

        assert value == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_cascade_failure_falls_through_to_pattern(self, coercer):
        """A dataFormat still gets its turn after the cascade failed."""
        decl = _decl(date, dataFormat="dd/MM/yyyy")

        assert coercer.convert(decl, date, "20/07/2024") == date(2024, 7, 20)

    def test_cascade_failure_falls_through_to_registry(self, coercer):
        """A bare ISO time is left to the registry converter."""
        assert coercer.convert(_decl(time), time, "10:15:00") == time(10, 15)

    def test_date_only_fallback_drops_time(self, coercer):
        """Text with a space separator only matches the yyyy-MM-dd prefix."""
        decl = _decl(datetime, **{TIMEZONE: "utc"})

        assert coercer.convert(decl, datetime, "2024-07-20 10:15") == datetime(2024, 7, 20)

    def test_unparseable_date(self, coercer):
        """Garbage for a date target ends in ConversionError."""
        with pytest.raises(ConversionError):
            coercer.convert(_decl(datetime), datetime, "soon")


class TestPatternConversion:
    """Test dataFormat handling."""

    def test_decimal_pattern(self, coercer):
        """'1,234.50' with #,##0.00 → Decimal('1234.50')."""
        decl = _decl(Decimal, **{DATA_FORMAT: "#,##0.00"})

        value = coercer.convert(decl, Decimal, "1,234.50")

        assert value == Decimal("1234.50")
        assert isinstance(value, Decimal)

    def test_normalised_to_int(self, coercer):
        """The parsed Decimal is normalised to the precise target type."""
        value = coercer.convert(_decl(int, dataFormat="#,##0"), int, "1,234")

        assert value == 1234
        assert type(value) is int

    def test_normalised_to_float(self, coercer):
        """Floats too."""
        assert coercer.convert(_decl(float, dataFormat="#0%"), float, "45%") == pytest.approx(0.45)

    def test_mismatch_falls_back_to_registry(self, coercer):
        """A pattern that does not fit degrades to the registry."""
        assert coercer.convert(_decl(float, dataFormat="#0%"), float, "0.5") == 0.5

    def test_mismatch_and_registry_failure(self, coercer):
        """When both fail the registry error is raised."""
        with pytest.raises(ConversionError):
            coercer.convert(_decl(Decimal, dataFormat="#,##0.00"), Decimal, "12abc")

    def test_not_normalisable_falls_back(self, coercer):
        """'1,234.5' cannot be an int: pattern fails, registry fails."""
        with pytest.raises(ConversionError):
            coercer.convert(_decl(int, dataFormat="#,##0.0"), int, "1,234.5")

    def test_numeric_without_converter(self, coercer):
        """A numeric type with no converter passes through."""
        assert coercer.convert(_decl(Fraction, dataFormat="#0"), Fraction, "3") == "3"

    def test_non_lenient_date_pattern(self, coercer):
        """An impossible date is not rolled over."""
        with pytest.raises(ConversionError):
            coercer.convert(_decl(date, dataFormat="dd/MM/yyyy"), date, "31/02/2024")

    def test_month_name_pattern(self, coercer):
        """Locale month names."""
        decl = _decl(datetime, dataFormat="dd MMM yyyy")

        assert coercer.convert(decl, datetime, "20 Jul 2024") == datetime(2024, 7, 20)

    def test_format_ignored_for_strings(self, coercer):
        """dataFormat only applies to numeric and date targets."""
        assert coercer.convert(_decl(str, dataFormat="#,##0"), str, 1234) == "1234"

    def test_round_trip_property(self, coercer):
        """format(p, n) == s implies convert(p, s) == n."""
        pattern = "#,##0.00"
        decl = _decl(Decimal, dataFormat=pattern)
        for number in (Decimal("0.00"), Decimal("7.10"), Decimal("1234567.89"), Decimal("-42.00")):
            text = coercer.formatter.format_number(pattern, number)

            assert coercer.convert(decl, Decimal, text) == number
