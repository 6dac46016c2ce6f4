"""Mortgage analysis engine: amortization schedules, points comparison and refinance analysis."""

__version__ = "0.1.0"
