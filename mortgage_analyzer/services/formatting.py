"""Display formatting for reports. Non-finite values render as zero."""
from __future__ import annotations

import math


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def format_currency(value: float | None) -> str:
    """$1,234.56 / -$1,234.56"""
    if not _finite(value):
        return "$0.00"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_number(value: float | None) -> str:
    """Thousands separators, at most two decimals, trailing zeros dropped."""
    if not _finite(value):
        return "0"
    text = f"{value:,.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def format_percentage(value: float | None, decimal_places: int = 2) -> str:
    if not _finite(value):
        return "0%"
    return f"{value:.{decimal_places}f}%"


def format_months_as_years_months(months: float | None) -> str:
    """25 -> '2 years 1 month'"""
    if not _finite(months):
        return "0 months"
    years = int(months // 12)
    remaining = round(months % 12)
    if remaining == 12:
        years, remaining = years + 1, 0

    parts = []
    if years > 0:
        parts.append(f"{years} year{'s' if years != 1 else ''}")
    if remaining > 0:
        parts.append(f"{remaining} month{'s' if remaining != 1 else ''}")
    return " ".join(parts) if parts else "0 months"


def format_months_as_years(months: float | None, decimal_places: int = 2) -> str:
    """25 -> '2.08 years'"""
    if not _finite(months):
        return f"{0:.{decimal_places}f} years"
    return f"{months / 12:.{decimal_places}f} years"


def format_break_even(months: float | None) -> str:
    """Break-even month count for reports; 'N/A' when there is none."""
    if not _finite(months):
        return "N/A"
    return f"{round(months)} months"
