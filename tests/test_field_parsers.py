# tests/test_field_parsers.py
import math
from datetime import date

import pytest

from fondos.domain.errors import FormatError
from fondos.utils.row_context import RowContext
from fondos.utils.type_utils import (
    format_cents, parse_cents, parse_fund_name, parse_percent, parse_report_date
)


def ctx(raw_line: str = "Fondo Renta Fija\t$1,000.00") -> RowContext:
    return RowContext(section="account status", line_number=7, raw_line=raw_line)


class TestParseCents:

    @pytest.mark.parametrize("raw, expected", [
        ("$.00", 0),
        ("$0.05", 5),
        ("$1,231.74", 123174),
        ("$211,231.74", 21123174),
        ("$1,234,567.89", 123456789),
        ("$1234.56", 123456),
        (" $10.00 ", 1000),
    ])
    def test_valid_amounts(self, raw, expected):
        assert parse_cents(raw, ctx()) == expected

    @pytest.mark.parametrize("raw, message", [
        ("1,000.00", "must start with '\\$'"),
        ("$", "empty after"),
        ("$1,000", "no decimal point"),
        ("$,211,231.74", "starts with a comma"),
        ("$1211,231.74", "more than 3 digits before the first comma"),
        ("$1,2,1,231.74", "exactly 3 digits"),
        ("$1,,231.74", "empty digit group"),
        ("$12a.00", "non-digit characters in its integer part"),
        ("$-5.00", "non-digit characters in its integer part"),
        ("$1.0a", "non-digit characters after the decimal point"),
        ("$1,211,231.7", "exactly 2 decimal digits, found 1"),
        ("$1.234", "exactly 2 decimal digits, found 3"),
    ])
    def test_malformed_amounts_fail_with_specific_message(self, raw, message):
        with pytest.raises(FormatError, match=message):
            parse_cents(raw, ctx())

    def test_error_carries_row_context(self):
        """The message names the section, line, raw line and the fields read so far."""
        context = ctx("Fondo Renta Fija\t$1,2.00").with_field("fund", "Fondo Renta Fija").with_field("balance", "$1,2.00")
        with pytest.raises(FormatError) as exc_info:
            parse_cents("$1,2.00", context)
        text = str(exc_info.value)
        assert "account status, line 7" in text
        assert "fund = 'Fondo Renta Fija'" in text
        assert "balance = '$1,2.00'" in text
        assert exc_info.value.raw == "$1,2.00"
        assert exc_info.value.context is context

    @pytest.mark.parametrize("cents", [0, 1, 99, 100, 123456, 100000000, 98765432101])
    def test_format_cents_is_left_inverse(self, cents):
        assert parse_cents(format_cents(cents), ctx()) == cents

    def test_format_cents_matches_bank_layout(self):
        assert format_cents(123456) == "$1,234.56"
        assert format_cents(0) == "$0.00"
        assert format_cents(-5000) == "-$50.00"


class TestParsePercent:

    def test_na_is_nan_not_zero(self):
        value = parse_percent("NA", ctx())
        assert math.isnan(value)

    @pytest.mark.parametrize("raw, expected", [
        ("3 %EA", 3.0),
        ("-.003 %EA", -0.003),
        ("12.5%", 12.5),
        ("1,204.50 % E.A.", 1204.5),
        ("0%", 0.0),
        ("7.%", 7.0),
        ("-1,234,567.25 %EA", -1234567.25),
    ])
    def test_valid_percentages(self, raw, expected):
        assert parse_percent(raw, ctx()) == pytest.approx(expected)

    @pytest.mark.parametrize("raw, message", [
        ("", "empty"),
        ("3", "must end with a space or '%'"),
        ("%", "no digits"),
        ("-%", "no digits"),
        ("1.2.3%", "more than one decimal point"),
        ("1.2,3%", "comma after the decimal point"),
        ("abc%", "unexpected character 'a'"),
        (",,5%", "starts with a comma"),
        (",5%", "starts with a comma"),
        ("1,2,3%", "exactly 3 digits"),
        ("1,,234%", "empty digit group"),
        ("1234,567%", "more than 3 digits before the first comma"),
        ("1,23.5 %EA", "exactly 3 digits"),
    ])
    def test_malformed_percentages(self, raw, message):
        with pytest.raises(FormatError, match=message):
            parse_percent(raw, ctx())


class TestParseReportDate:

    def test_two_and_four_digit_years_agree(self):
        assert parse_report_date("31/12/2021", ctx()) == parse_report_date("31 / 12 / 21", ctx()) == date(2021, 12, 31)

    def test_currency_noise_is_stripped(self):
        assert parse_report_date("$5/1/2024,", ctx()) == date(2024, 1, 5)

    @pytest.mark.parametrize("raw", ["31/13/2021", "30/02/2024", "2021-12-31", "31/12/021", "31/12", ""])
    def test_invalid_dates_echo_input_and_format(self, raw):
        with pytest.raises(FormatError, match="day/month/year"):
            parse_report_date(raw, ctx())

    def test_invalid_month_is_echoed(self):
        with pytest.raises(FormatError, match="Invalid date '31/13/2021'"):
            parse_report_date("31/13/2021", ctx())


class TestParseFundName:

    def test_name_is_trimmed(self):
        assert parse_fund_name("  Fondo Renta Fija  ", ctx()) == "Fondo Renta Fija"

    def test_blank_name_fails(self):
        with pytest.raises(FormatError, match="Fund name is empty"):
            parse_fund_name("   ", ctx())


class TestRowContext:

    def test_with_field_does_not_mutate(self):
        base = ctx()
        extended = base.with_field("fund", "Fondo A")
        assert base.fields == ()
        assert extended.fields == (("fund", "Fondo A"),)
        assert extended.line_number == base.line_number
