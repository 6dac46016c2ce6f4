"""Numeric thresholds shared by the amortization, points and refinance engines."""
from __future__ import annotations

# Loop termination
MINIMUM_BALANCE = 0.01  # balance at or below this is paid off
MAX_ITERATIONS = 10_000  # hard bound on simulated periods

# PMI is dropped once LTV reaches 78%
PMI_LTV_THRESHOLD = 78.0

MONTHS_PER_YEAR = 12
BIWEEKLY_PERIODS_PER_YEAR = 26

# Break-even tiers (months)
BREAK_EVEN_EXCELLENT = 24
BREAK_EVEN_GOOD = 60
BREAK_EVEN_MARGINAL = 120

# Term-reduction tiers (months) and interest-savings tiers (dollars)
TERM_REDUCTION_MAJOR = 60
TERM_REDUCTION_MINOR = 24
INTEREST_SAVINGS_EXCELLENT = 50_000.0
INTEREST_SAVINGS_GOOD = 20_000.0

# Horizon analysis periods (months)
TIME_HORIZON_5_YEARS = 60
TIME_HORIZON_10_YEARS = 120

# Input validation limits
MIN_INTEREST_RATE = 0.0
MAX_INTEREST_RATE = 30.0
MIN_LOAN_AMOUNT = 1_000.0
MAX_LOAN_AMOUNT = 100_000_000.0
MIN_LOAN_TERM = 1  # years
MAX_LOAN_TERM = 50  # years
MIN_CLOSING_COSTS = 0.0
MAX_CLOSING_COSTS = 1_000_000.0
MAX_POINTS = 10.0
MAX_CASH_OUT_RATIO = 0.8
MAX_SCENARIO_NAME_LENGTH = 50
