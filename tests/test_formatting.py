"""Tests for report formatting helpers."""
import math

import pytest

from mortgage_analyzer.services.formatting import (
    format_break_even,
    format_currency,
    format_months_as_years,
    format_months_as_years_months,
    format_number,
    format_percentage,
)


@pytest.mark.parametrize("value, expected", [
    (1234.567, "$1,234.57"),
    (-1234.5, "-$1,234.50"),
    (0, "$0.00"),
    (1_000_000, "$1,000,000.00"),
    (math.nan, "$0.00"),
    (math.inf, "$0.00"),
    (None, "$0.00"),
])
def test_format_currency(value, expected):
    assert format_currency(value) == expected


@pytest.mark.parametrize("value, expected", [
    (1234.5, "1,234.5"),
    (1000, "1,000"),
    (0.125, "0.12"),
    (0, "0"),
    (-math.inf, "0"),
])
def test_format_number(value, expected):
    assert format_number(value) == expected


def test_format_percentage():
    assert format_percentage(6.5) == "6.50%"
    assert format_percentage(6.125, 3) == "6.125%"
    assert format_percentage(math.nan) == "0%"


@pytest.mark.parametrize("months, expected", [
    (25, "2 years 1 month"),
    (12, "1 year"),
    (1, "1 month"),
    (38, "3 years 2 months"),
    (0, "0 months"),
    (math.inf, "0 months"),
])
def test_format_months_as_years_months(months, expected):
    assert format_months_as_years_months(months) == expected


def test_format_months_as_years():
    assert format_months_as_years(25) == "2.08 years"
    assert format_months_as_years(360, 0) == "30 years"
    assert format_months_as_years(None) == "0.00 years"


def test_format_break_even():
    assert format_break_even(45.13) == "45 months"
    assert format_break_even(None) == "N/A"
    assert format_break_even(math.inf) == "N/A"
