"""
Retirement projection core.

Deterministic month-by-month real-terms model of wealth accumulation and
decumulation, with the SWR target ("magic number"), a perpetuity test,
closed-form runway and goal solvers. No Qt imports live here.

Modules:
- rates: annual % <-> effective monthly rate
- projection: lump schedule + two-regime forward projection
- coverage: target wealth, perpetuity, runway, end-age labels
- goal: extra monthly saving needed, months to goal
- plan: PlanInputs -> compute_plan -> PlanResult
"""

from .rates import monthly_rate, annual_rate, is_valid_annual_pct
from .projection import (
    LumpSum,
    Trajectory,
    TrajectoryPoint,
    build_lump_schedule,
    project,
    depletion_month,
)
from .coverage import (
    EndAgeFlag,
    target_wealth,
    has_perpetuity,
    runway_years,
    progress_pct,
)
from .goal import (
    extra_monthly_saving_needed,
    months_to_goal,
    months_to_goal_bisect,
    MAX_GOAL_MONTHS,
)
from .plan import PlanInputs, PlanResult, PlanIssue, compute_plan

__all__ = [
    # Rates
    "monthly_rate",
    "annual_rate",
    "is_valid_annual_pct",
    # Projection
    "LumpSum",
    "Trajectory",
    "TrajectoryPoint",
    "build_lump_schedule",
    "project",
    "depletion_month",
    # Coverage
    "EndAgeFlag",
    "target_wealth",
    "has_perpetuity",
    "runway_years",
    "progress_pct",
    # Goal
    "extra_monthly_saving_needed",
    "months_to_goal",
    "months_to_goal_bisect",
    "MAX_GOAL_MONTHS",
    # Plan
    "PlanInputs",
    "PlanResult",
    "PlanIssue",
    "compute_plan",
]
