# retireplan/core/rates.py
"""
Annual <-> monthly real rate conversion.

All rates in the planner are real (already inflation-adjusted) and are
entered as annual percentages (5.0 = 5% a year). The engine compounds
monthly, so every annual rate goes through `monthly_rate` first.
"""

import math

MONTHS_PER_YEAR = 12


def is_valid_annual_pct(annual_pct: float) -> bool:
    """True when the annual percentage converts to a real monthly rate."""
    return math.isfinite(annual_pct) and annual_pct > -100.0


def monthly_rate(annual_real_pct: float) -> float:
    """Effective monthly rate equivalent to an annual real rate in %.

    (1 + annual/100) ** (1/12) - 1. Rates at or below -100% a year have no
    real monthly equivalent; NaN is returned so the caller can flag it.
    """
    if not is_valid_annual_pct(annual_real_pct):
        return float("nan")
    return (1.0 + annual_real_pct / 100.0) ** (1.0 / MONTHS_PER_YEAR) - 1.0


def annual_rate(monthly: float) -> float:
    """Inverse of `monthly_rate`: annual % from an effective monthly rate."""
    return ((1.0 + monthly) ** MONTHS_PER_YEAR - 1.0) * 100.0
