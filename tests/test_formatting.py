"""
Tests for number and currency text helpers.
"""
import math
import pytest
from retireplan.core.formatting import (
    clamp,
    format_currency,
    format_duration_months,
    format_number,
    format_percent,
    parse_digits,
    parse_number,
    parse_signed_digits,
    reformat_signed_with_caret,
    reformat_with_caret,
    safe,
)


@pytest.mark.unit
class TestFormatting:
    """Tests for display formatting."""

    def test_grouping(self):
        """Thousands grouped per locale, rounded to the decimals asked."""
        assert format_number(1234567.8) == "1,234,568"
        assert format_number(1234567.8, 0, "pt-BR") == "1.234.568"
        assert format_number(1234.5, 2, "pt-BR") == "1.234,50"

    def test_currency(self):
        """Currency symbol, spacing and sign per locale."""
        assert format_currency(3_000_000) == "$3,000,000"
        assert format_currency(3_000_000, 0, "pt-BR") == "R$ 3.000.000"
        assert format_currency(-1_500) == "-$1,500"

    def test_currency_no_negative_zero(self):
        """Values rounding to zero carry no sign."""
        assert format_currency(-0.4) == "$0"

    def test_non_finite_shown_as_zero(self):
        """NaN and inf never reach the label."""
        assert format_currency(float("nan")) == "$0"
        assert format_number(math.inf) == "0"

    def test_percent(self):
        """Percent on a 0-100 scale."""
        assert format_percent(3.5) == "3.5%"
        assert format_percent(3.5, 1, "pt-BR") == "3,5%"

    def test_duration(self):
        """Up to two years in months, longer in years."""
        assert format_duration_months(24) == "24 months"
        assert format_duration_months(30) == "2.5 years"
        assert format_duration_months(math.inf) == "—"

    def test_unknown_locale_falls_back(self):
        """Unknown locales use en-US."""
        assert format_currency(1000, 0, "xx-XX") == "$1,000"


@pytest.mark.unit
class TestParsing:
    """Tests for parsing typed text."""

    def test_parse_digits(self):
        """Only digits survive."""
        assert parse_digits("$1,2a3") == 123
        assert parse_digits("") == 0
        assert parse_digits(None) == 0

    def test_parse_signed_digits(self):
        """A leading minus keeps the amount negative."""
        assert parse_signed_digits("-500,000") == -500_000
        assert parse_signed_digits("  -12") == -12
        assert parse_signed_digits("1-2") == 12
        assert parse_signed_digits("-") == 0

    def test_parse_number(self):
        """Separators, sign and parentheses per locale."""
        assert parse_number("1,234.5") == 1234.5
        assert parse_number("1.234,5", "pt-BR") == 1234.5
        assert parse_number("-1,000") == -1000
        assert parse_number("(250)") == -250

    def test_parse_number_without_digits(self):
        """No digits at all is NaN."""
        assert math.isnan(parse_number("abc"))
        assert math.isnan(parse_number(""))


@pytest.mark.unit
class TestCaret:
    """Tests for caret-preserving regrouping."""

    def test_typing_at_end(self):
        """Caret stays at the end while typing."""
        assert reformat_with_caret("1,0005", 6) == ("10,005", 6)

    def test_caret_in_middle(self):
        """Caret stays after the same digit when a separator appears."""
        assert reformat_with_caret("1234", 2) == ("1,234", 3)

    def test_leading_zeros_dropped(self):
        """Stripped leading zeros pull the caret back."""
        assert reformat_with_caret("0012", 4) == ("12", 2)

    def test_all_digits_removed(self):
        """Empty input stays empty."""
        assert reformat_with_caret("", 0) == ("", 0)
        assert reformat_with_caret("$", 1) == ("", 0)

    def test_pt_br_grouping(self):
        """Brazilian grouping uses dots."""
        assert reformat_with_caret("12345", 5, "pt-BR") == ("12.345", 6)

    def test_signed_keeps_minus(self):
        """The minus sign survives regrouping and the caret shifts past it."""
        assert reformat_signed_with_caret("-1234", 5) == ("-1,234", 6)
        assert reformat_signed_with_caret("-1234", 3) == ("-1,234", 4)

    def test_signed_lone_minus(self):
        """A lone minus is kept so the user can keep typing."""
        assert reformat_signed_with_caret("-", 1) == ("-", 1)

    def test_signed_caret_before_minus(self):
        """Caret in front of the sign stays there."""
        assert reformat_signed_with_caret("-1234", 0) == ("-1,234", 0)

    def test_signed_without_minus(self):
        """Unsigned text regroups as usual."""
        assert reformat_signed_with_caret("1234", 2) == ("1,234", 3)


@pytest.mark.unit
class TestHelpers:
    """Tests for safe and clamp."""

    def test_safe(self):
        """Only finite real numbers pass through."""
        assert safe(2.5) == 2.5
        assert safe(float("nan")) == 0.0
        assert safe(math.inf, -1.0) == -1.0
        assert safe(True) == 0.0
        assert safe("3") == 0.0

    def test_clamp(self):
        """Values are pinned to the range."""
        assert clamp(5, 0, 3) == 3
        assert clamp(-1, 0, 3) == 0
        assert clamp(2, 0, 3) == 2
