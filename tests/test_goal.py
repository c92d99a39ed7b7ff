"""
Tests for the goal solvers.
"""
import math
import pytest
from retireplan.core.goal import (
    MAX_GOAL_MONTHS,
    compound,
    extra_monthly_saving_needed,
    future_value_at,
    fv_factor,
    is_monotonic_accumulation,
    months_to_goal,
    months_to_goal_bisect,
)
from retireplan.core.projection import accumulate
from retireplan.core.rates import monthly_rate


@pytest.mark.unit
class TestFutureValue:
    """Tests for the closed-form future value."""

    def test_fv_factor_zero_rate(self):
        """At 0% the annuity factor is the month count."""
        assert fv_factor(0.0, 12) == 12.0

    def test_fv_factor_no_months(self):
        """No months, no accumulated saving."""
        assert fv_factor(0.01, 0) == 0.0

    def test_fv_factor_two_months(self):
        """Second payment has one month of growth."""
        assert fv_factor(0.01, 2) == pytest.approx(2.01)

    def test_closed_form_matches_simulation(self):
        """Closed form agrees with the month-by-month stepper."""
        m = monthly_rate(5.0)
        schedule = {0: 1000, 12: 5_000_000, 60: 25_000, 200: 9e9}  # month 200 is past n
        fv = future_value_at(3_000_000, 120_000, schedule, 120, m)
        sim = accumulate(3_000_000, 120_000, {k: v for k, v in schedule.items() if k <= 120}, m, 120)
        assert fv == pytest.approx(sim, rel=1e-10)

    def test_compound_saturates(self):
        """Growth beyond float range is inf, not OverflowError."""
        assert compound(2.0, 900) == math.inf
        assert compound(0.01, 12) == pytest.approx(1.01 ** 12)

    def test_fv_factor_saturates(self):
        """The annuity factor saturates like the growth factor."""
        assert fv_factor(2.0, 900) == math.inf

    def test_future_value_saturates(self):
        """Runaway returns give an infinite future value."""
        assert future_value_at(1, 1, {5: 10}, 900, 2.0) == math.inf

    def test_zero_amounts_stay_zero_under_saturation(self):
        """Nothing invested stays nothing, even when growth overflows."""
        assert future_value_at(0, 0, {}, 900, 2.0) == 0.0


@pytest.mark.unit
class TestExtraMonthlySaving:
    """Tests for extra_monthly_saving_needed."""

    def test_zero_when_target_met(self):
        """No extra needed once the target is reached."""
        assert extra_monthly_saving_needed(1_000, 5_000, 0, {}, 12, 0.0) == 0.0

    def test_zero_rate_splits_gap_evenly(self):
        """At 0% the gap is spread evenly across the months."""
        assert extra_monthly_saving_needed(1_000, 0, 0, {}, 10, 0.0) == 100.0

    def test_extra_saving_lands_on_target(self):
        """Saving the extra reaches the target exactly at retirement."""
        m = monthly_rate(5.0)
        schedule = {12: 5_000_000}
        target = 34_285_714.29
        extra = extra_monthly_saving_needed(target, 3_000_000, 120_000, schedule, 120, m)
        assert extra > 0
        reached = accumulate(3_000_000, 120_000 + extra, schedule, m, 120)
        assert reached == pytest.approx(target, rel=1e-9)

    def test_lumps_reduce_extra(self):
        """Scheduled lumps reduce the saving needed."""
        m = monthly_rate(4.0)
        without = extra_monthly_saving_needed(1e6, 0, 1000, {}, 120, m)
        with_lump = extra_monthly_saving_needed(1e6, 0, 1000, {24: 1e5}, 120, m)
        assert with_lump < without

    def test_no_months_left_returns_whole_gap(self):
        """Retiring now, the whole gap must be found at once."""
        assert extra_monthly_saving_needed(1_000, 400, 50, {}, 0, 0.01) == 600.0

    def test_infinite_target(self):
        """An undefined target needs unbounded saving."""
        assert extra_monthly_saving_needed(math.inf, 0, 0, {}, 120, 0.01) == math.inf

    def test_undefined_projection(self):
        """A NaN rate gives a NaN answer."""
        assert math.isnan(extra_monthly_saving_needed(1_000, 0, 0, {}, 12, float("nan")))

    def test_runaway_growth_needs_nothing(self):
        """Saturated growth clears any finite target."""
        assert extra_monthly_saving_needed(1e12, 1, 1, {}, 900, 2.0) == 0.0


@pytest.mark.unit
class TestMonthsToGoal:
    """Tests for months_to_goal and its bisection twin."""

    def test_already_there(self):
        """Wealth already at target means month 0."""
        assert months_to_goal(1_000, 0, {}, 500, 0.0) == 0

    def test_month_zero_lump_counts_today(self):
        """A lump dated today can meet the target at month 0."""
        assert months_to_goal(0, 0, {0: 600}, 500, 0.0) == 0

    def test_zero_rate_linear(self):
        """At 0% the goal is target / saving months away."""
        assert months_to_goal(0, 100, {}, 1_000, 0.0) == 10

    def test_lump_brings_goal_forward(self):
        """A lump reaching the target ends the search on its month."""
        assert months_to_goal(0, 100, {3: 10_000}, 1_000, 0.0) == 3

    def test_unreachable(self):
        """No saving, no growth, no goal."""
        assert months_to_goal(0, 0, {}, 1, 0.0) == math.inf

    def test_cap_respected(self):
        """Goals beyond the cap are unreachable."""
        assert months_to_goal(0, 1, {}, 100, 0.0, max_months=50) == math.inf
        assert months_to_goal(0, 1, {}, 100, 0.0, max_months=100) == 100

    def test_infinite_target(self):
        """An undefined target is never reached."""
        assert months_to_goal(0, 1e6, {}, math.inf, 0.01) == math.inf

    def test_more_saving_never_slower(self):
        """Saving more never delays the goal."""
        m = monthly_rate(5.0)
        slow = months_to_goal(10_000, 500, {}, 1e6, m)
        fast = months_to_goal(10_000, 800, {}, 1e6, m)
        assert fast <= slow

    @pytest.mark.parametrize("wealth,saving,schedule,target,annual", [
        (3_000_000, 120_000, {12: 5_000_000}, 34_285_714.29, 5.0),
        (0, 1_000, {}, 250_000, 0.0),
        (50_000, 2_000, {6: 10_000, 48: 20_000}, 1_000_000, 7.0),
        (0, 100, {}, 1e9, 1.0),            # unreachable within the cap
        (5e5, 0, {}, 1e6, 3.0),             # growth only
    ])
    def test_bisection_agrees_with_scan(self, wealth, saving, schedule, target, annual):
        """Both solvers return the same month on rising paths."""
        m = monthly_rate(annual)
        assert months_to_goal_bisect(wealth, saving, schedule, target, m) == \
            months_to_goal(wealth, saving, schedule, target, m)

    def test_default_cap(self):
        """The search stops after 100 years."""
        assert MAX_GOAL_MONTHS == 1200


@pytest.mark.unit
class TestMonotonicity:
    """Tests for is_monotonic_accumulation."""

    def test_positive_saving_and_rate(self):
        """Saving and growth only push wealth up."""
        assert is_monotonic_accumulation(1_000, 100, {12: 500}, 0.004)

    def test_heavy_withdrawal(self):
        """Withdrawals above the yield shrink wealth."""
        assert not is_monotonic_accumulation(1_000, -500, {}, 0.004)

    def test_negative_lump(self):
        """A negative lump is a drop."""
        assert not is_monotonic_accumulation(1_000, 100, {12: -50}, 0.004)

    def test_negative_rate_with_later_lump(self):
        """A lump can overshoot the level a negative rate pulls back to."""
        assert not is_monotonic_accumulation(1_000, 100, {12: 50_000}, -0.01)
