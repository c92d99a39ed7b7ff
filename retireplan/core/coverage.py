# retireplan/core/coverage.py
"""
Target wealth ("magic number"), perpetuity test and runway.

- target_wealth: annual spend / SWR. Infinite when SWR <= 0.
- has_perpetuity: monthly yield at retirement covers monthly spend.
  This is independent of the SWR target; the two can disagree whenever
  the retirement return differs from the SWR.
- runway_years: closed-form depletion time of a balance paying a fixed
  annual spend at a fixed real return:

      ratio = 1 - W * r / A
      years = -ln(ratio) / ln(1 + r)        (ratio > 0)

  ratio <= 0 means the yield already covers the spend (infinite runway).
"""

from enum import Enum
import math

from .rates import MONTHS_PER_YEAR

NEAR_PERPETUITY_YEARS = 120.0
CENTENARIAN_AGE = 100.0
RECORD_AGE = 123.0


class EndAgeFlag(Enum):
    """Labels for very long runways."""

    NONE = "none"
    OVER_100 = "over_100"      # money outlives a 100-year-old
    OVER_123 = "over_123"      # beyond the oldest recorded human


def target_wealth(monthly_spend: float, swr_pct: float) -> float:
    if not swr_pct > 0:
        return math.inf
    return (monthly_spend * MONTHS_PER_YEAR) / (swr_pct / 100.0)


def has_perpetuity(wealth_at_retire: float, monthly_retire_rate: float, monthly_spend: float) -> bool:
    if monthly_spend <= 0:
        return True
    return wealth_at_retire * monthly_retire_rate >= monthly_spend


def runway_years(starting_wealth: float, annual_spend: float, real_return_annual_pct: float) -> float:
    """Years until `starting_wealth` is exhausted by `annual_spend`.

    Returns inf for no spend or a self-sustaining balance, 0.0 for an
    already empty (or negative) balance, NaN for returns <= -100%.
    """
    if annual_spend <= 0:
        return math.inf
    r = real_return_annual_pct / 100.0
    if r <= -1.0 or not math.isfinite(r):
        return float("nan")
    if starting_wealth <= 0:
        return 0.0
    if r == 0:
        return starting_wealth / annual_spend
    ratio = 1.0 - (starting_wealth * r) / annual_spend
    if ratio <= 0:
        return math.inf
    return -math.log(ratio) / math.log(1.0 + r)


def end_age(retire_age: float, runway: float) -> float:
    if math.isnan(runway):
        return float("nan")
    return retire_age + runway


def is_near_perpetuity(runway: float) -> bool:
    if math.isnan(runway):
        return False
    return not math.isfinite(runway) or runway > NEAR_PERPETUITY_YEARS


def end_age_flag(age: float) -> EndAgeFlag:
    if not math.isfinite(age):
        return EndAgeFlag.NONE
    if age > RECORD_AGE:
        return EndAgeFlag.OVER_123
    if age > CENTENARIAN_AGE:
        return EndAgeFlag.OVER_100
    return EndAgeFlag.NONE


def shortfall(wealth: float, target: float) -> float:
    """How far `wealth` is below `target` (0 when met)."""
    return max(0.0, target - wealth)


def progress_pct(wealth: float, target: float) -> float:
    """Share of the target reached, clamped to [0, 100].

    Agrees with `wealth >= target`: 100 exactly when the target is met.
    An infinite target or a NaN wealth reports 0, never NaN.
    """
    if math.isnan(wealth) or not math.isfinite(target):
        return 0.0
    if wealth >= target:
        return 100.0
    if target <= 0:
        return 0.0
    return min(100.0, max(0.0, wealth / target * 100.0))
