# retireplan/core/goal.py
"""
Inverse questions against the forward projection.

- extra_monthly_saving_needed: closed-form annuity inversion. The future
  value at retirement of today's wealth, the current saving annuity and
  each scheduled lump is compared with the target; the gap is divided by
  the annuity factor ((1+r)^n - 1) / r (n when r == 0).
- months_to_goal / months_to_goal_bisect: first month m >= 0 at which
  accumulation-only wealth reaches the target. Both run the same monthly
  stepper as the projector, so they agree on monotone paths. Unreachable
  targets (within MAX_GOAL_MONTHS) return inf.

Both solvers assume wealth rises during accumulation. A negative saving
large enough to shrink wealth makes "first crossing" a poor notion of
goal; callers can check `is_monotonic_accumulation`.
"""

from typing import Dict
import math

from .projection import accumulate, accumulation_step, opening_wealth

MAX_GOAL_MONTHS = 1200


def compound(rate: float, n: int) -> float:
    """(1 + rate) ** n, saturating to inf where float power would overflow."""
    try:
        return (1.0 + rate) ** n
    except OverflowError:
        return math.inf


def _scaled(amount: float, factor: float) -> float:
    # 0 * inf would be NaN; a zero amount contributes nothing however large the factor
    return 0.0 if amount == 0 else amount * factor


def fv_factor(rate: float, n: int) -> float:
    """Future value of 1 paid at the end of each of n months."""
    if n <= 0:
        return 0.0
    if rate == 0:
        return float(n)
    return (compound(rate, n) - 1.0) / rate


def future_value_at(current_wealth: float, monthly_saving: float,
                    lump_schedule: Dict[int, float], months: int, monthly_rate: float) -> float:
    """Closed-form wealth after `months` months of accumulation."""
    n = max(0, int(months))
    fv = _scaled(current_wealth, compound(monthly_rate, n))
    fv += _scaled(monthly_saving, fv_factor(monthly_rate, n))
    for month, amount in lump_schedule.items():
        if 0 <= month <= n:
            fv += _scaled(amount, compound(monthly_rate, n - month))
    return fv


def extra_monthly_saving_needed(target_wealth: float, current_wealth: float, monthly_saving: float,
                                lump_schedule: Dict[int, float], months_to_retire: int,
                                monthly_accum_rate: float) -> float:
    """Additional level monthly saving that lands exactly on the target.

    0 when the target is already met. With no months left the full gap is
    returned: it would have to be found at once. NaN when the projection
    itself is undefined (return <= -100%).
    """
    if math.isinf(target_wealth) and target_wealth > 0:
        return math.inf
    n = max(0, int(months_to_retire))
    fv = future_value_at(current_wealth, monthly_saving, lump_schedule, n, monthly_accum_rate)
    gap = target_wealth - fv
    if math.isnan(gap):
        return float("nan")
    if gap <= 0:
        return 0.0
    if n == 0:
        return gap
    return gap / fv_factor(monthly_accum_rate, n)


def is_monotonic_accumulation(current_wealth: float, monthly_saving: float,
                              lump_schedule: Dict[int, float], monthly_rate: float) -> bool:
    """True when no accumulation step can lower wealth.

    The step gains w * r + saving. With r >= 0 that gain only grows once
    it is non-negative; with r < 0 wealth creeps up towards -saving / r and
    a positive lump could overshoot it, so lumps break the guarantee.
    """
    if any(amount < 0 for amount in lump_schedule.values()):
        return False
    w = opening_wealth(current_wealth, lump_schedule)
    if w * monthly_rate + monthly_saving < 0:
        return False
    return monthly_rate >= 0 or not any(m > 0 for m in lump_schedule)


def months_to_goal(current_wealth: float, monthly_saving: float, lump_schedule: Dict[int, float],
                   target_wealth: float, monthly_accum_rate: float,
                   max_months: int = MAX_GOAL_MONTHS) -> float:
    """First month at which wealth >= target, by direct forward simulation."""
    if math.isnan(target_wealth) or (math.isinf(target_wealth) and target_wealth > 0):
        return math.inf
    w = opening_wealth(current_wealth, lump_schedule)
    for m in range(max_months + 1):
        if w >= target_wealth:
            return m
        w = accumulation_step(w, monthly_accum_rate, monthly_saving, lump_schedule, m)
    return math.inf


def months_to_goal_bisect(current_wealth: float, monthly_saving: float, lump_schedule: Dict[int, float],
                          target_wealth: float, monthly_accum_rate: float,
                          max_months: int = MAX_GOAL_MONTHS) -> float:
    """Same answer as `months_to_goal` for monotone paths, via bisection."""
    if math.isnan(target_wealth) or (math.isinf(target_wealth) and target_wealth > 0):
        return math.inf

    def reached(m: int) -> bool:
        return accumulate(current_wealth, monthly_saving, lump_schedule, monthly_accum_rate, m) >= target_wealth

    if not reached(max_months):
        return math.inf
    lo, hi = 0, max_months
    while lo < hi:
        mid = (lo + hi) // 2
        if reached(mid):
            hi = mid
        else:
            lo = mid + 1
    return lo
