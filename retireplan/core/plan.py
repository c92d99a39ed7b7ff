# retireplan/core/plan.py
"""
compute_plan: PlanInputs snapshot -> PlanResult.

Pure and deterministic; nothing is cached or kept between calls.
Degenerate inputs (SWR <= 0, returns <= -100%, retire age not after the
current age, unreachable goals) never raise. They come back as
non-finite numbers plus a PlanIssue in `PlanResult.issues`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple
import math

from .rates import MONTHS_PER_YEAR, is_valid_annual_pct, monthly_rate
from .projection import (
    END_AGE,
    LumpSum,
    Trajectory,
    TrajectoryPoint,
    build_lump_schedule,
    depletion_month,
    horizon_months,
    months_between,
    project,
)
from .coverage import (
    EndAgeFlag,
    end_age,
    end_age_flag,
    has_perpetuity,
    is_near_perpetuity,
    progress_pct,
    runway_years,
    shortfall,
    target_wealth,
)
from .goal import extra_monthly_saving_needed, is_monotonic_accumulation, months_to_goal
from .formatting import format_currency, format_duration_months, format_number, format_percent, safe


class PlanIssue(Enum):
    """Degenerate conditions surfaced alongside a result."""

    UNDEFINED_TARGET = "undefined_target"                  # SWR <= 0
    INVALID_ACCUM_RATE = "invalid_accum_rate"              # accumulation return <= -100%
    INVALID_RETIRE_RATE = "invalid_retire_rate"            # retirement return <= -100%
    NO_ACCUMULATION_PHASE = "no_accumulation_phase"        # retire age <= current age
    GOAL_UNREACHABLE = "goal_unreachable"                  # months_to_goal hit its cap
    TARGET_PERPETUITY_DIVERGENCE = "target_perpetuity_divergence"
    NON_MONOTONIC_ACCUMULATION = "non_monotonic_accumulation"


@dataclass(frozen=True)
class PlanInputs:
    """One snapshot of the planner form. Percentages are annual, real."""

    current_age: int
    retire_age: int
    current_wealth: float
    monthly_saving: float
    monthly_spend: float
    swr_pct: float
    accum_real_return_pct: float
    retire_real_return_pct: float
    lump_sums: Tuple[LumpSum, ...] = ()

    def __post_init__(self):
        if self.current_age < 0:
            raise ValueError("current_age must be >= 0")
        # accept any sequence of LumpSum/dicts, store an immutable tuple
        lumps = tuple(
            ls if isinstance(ls, LumpSum) else LumpSum.from_dict(ls)
            for ls in (self.lump_sums or ())
        )
        object.__setattr__(self, "lump_sums", lumps)

    @classmethod
    def build(cls, *, advanced_mode: bool = False, retire_real_return_pct: Optional[float] = None,
              **kwargs) -> "PlanInputs":
        """Resolve simple/advanced mode into a fully specified snapshot.

        Simple mode ties the retirement return to the SWR; advanced mode
        takes `retire_real_return_pct` as given and requires it.
        """
        if advanced_mode:
            if retire_real_return_pct is None:
                raise ValueError("advanced mode needs retire_real_return_pct")
            rr = retire_real_return_pct
        else:
            rr = kwargs["swr_pct"]
        return cls(retire_real_return_pct=rr, **kwargs)

    @property
    def months_to_retire(self) -> int:
        return months_between(self.current_age, self.retire_age)

    def to_dict(self) -> dict:
        return {
            "current_age": self.current_age,
            "retire_age": self.retire_age,
            "current_wealth": self.current_wealth,
            "monthly_saving": self.monthly_saving,
            "monthly_spend": self.monthly_spend,
            "swr_pct": self.swr_pct,
            "accum_real_return_pct": self.accum_real_return_pct,
            "retire_real_return_pct": self.retire_real_return_pct,
            "lump_sums": [ls.to_dict() for ls in self.lump_sums],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlanInputs":
        return cls(
            current_age=int(data["current_age"]),
            retire_age=int(data["retire_age"]),
            current_wealth=float(data["current_wealth"]),
            monthly_saving=float(data["monthly_saving"]),
            monthly_spend=float(data["monthly_spend"]),
            swr_pct=float(data["swr_pct"]),
            accum_real_return_pct=float(data["accum_real_return_pct"]),
            retire_real_return_pct=float(data.get("retire_real_return_pct", data["swr_pct"])),
            lump_sums=tuple(LumpSum.from_dict(d) for d in data.get("lump_sums", [])),
        )


@dataclass
class PlanResult:
    """Everything the planner screen shows, derived from one PlanInputs."""

    target_wealth: float
    wealth_at_retire: float
    has_perpetuity: bool
    meets_target: bool
    runway_years: float            # inf when perpetual
    end_age: float                 # inf when perpetual
    near_perpetuity: bool
    end_age_flag: EndAgeFlag
    extra_monthly_saving_needed: float
    months_to_goal: float          # inf when unreachable
    goal_age: float
    progress_pct: float
    shortfall: float
    months_to_retire: int
    depletion_month: Optional[int]
    trajectory: Trajectory
    issues: Tuple[PlanIssue, ...] = field(default_factory=tuple)

    @property
    def target_defined(self) -> bool:
        return math.isfinite(self.target_wealth)

    @property
    def points(self) -> List[TrajectoryPoint]:
        return self.trajectory.points()

    def has_issue(self, issue: PlanIssue) -> bool:
        return issue in self.issues

    def to_dict(self) -> dict:
        """Raw scalar KPIs (may contain inf/NaN)."""
        return {
            "Target Wealth": self.target_wealth,
            "Wealth at Retirement": self.wealth_at_retire,
            "Progress (%)": self.progress_pct,
            "Shortfall": self.shortfall,
            "Perpetuity": self.has_perpetuity,
            "Meets Target": self.meets_target,
            "Runway (years)": self.runway_years,
            "End Age": self.end_age,
            "Extra Monthly Saving": self.extra_monthly_saving_needed,
            "Months to Goal": self.months_to_goal,
            "Goal Age": self.goal_age,
            "Issues": [i.value for i in self.issues],
        }

    def format_dict(self, locale: Optional[str] = None) -> dict:
        """Display strings; non-finite values get a readable fallback."""
        def money(x):
            return format_currency(x, 0, locale) if math.isfinite(x) else "N/A"

        if self.has_perpetuity:
            runway = "Sustainable"
        elif self.near_perpetuity:
            runway = "Perpetuity practically reached"
        elif math.isnan(self.runway_years):
            runway = "N/A"
        else:
            runway = f"{format_number(self.runway_years, 1, locale)} years"

        end = "N/A"
        if math.isfinite(self.end_age) and not self.near_perpetuity:
            end = format_number(self.end_age, 1, locale)
            if self.end_age_flag is EndAgeFlag.OVER_123:
                end += " (beyond the oldest recorded age)"
            elif self.end_age_flag is EndAgeFlag.OVER_100:
                end += " (past 100)"

        goal = format_duration_months(self.months_to_goal, locale) if math.isfinite(self.months_to_goal) else "Not reachable"
        goal_age = format_number(self.goal_age, 1, locale) if math.isfinite(self.goal_age) else "N/A"

        return {
            "Target Wealth": money(self.target_wealth),
            "Wealth at Retirement": money(self.wealth_at_retire),
            "Progress": format_percent(safe(self.progress_pct), 0, locale),
            "Shortfall": money(self.shortfall),
            "Coverage": runway,
            "End Age": end,
            "Extra Monthly Saving": money(self.extra_monthly_saving_needed),
            "Time to Goal": goal,
            "Goal Age": goal_age,
        }


def _issues(inputs: PlanInputs, target: float, perpetual: bool, meets: bool,
            goal_months: float, monotonic: bool) -> Tuple[PlanIssue, ...]:
    out = []
    if not math.isfinite(target):
        out.append(PlanIssue.UNDEFINED_TARGET)
    if not is_valid_annual_pct(inputs.accum_real_return_pct):
        out.append(PlanIssue.INVALID_ACCUM_RATE)
    if not is_valid_annual_pct(inputs.retire_real_return_pct):
        out.append(PlanIssue.INVALID_RETIRE_RATE)
    if inputs.retire_age <= inputs.current_age:
        out.append(PlanIssue.NO_ACCUMULATION_PHASE)
    if math.isinf(goal_months):
        out.append(PlanIssue.GOAL_UNREACHABLE)
    if perpetual != meets:
        out.append(PlanIssue.TARGET_PERPETUITY_DIVERGENCE)
    if not monotonic:
        out.append(PlanIssue.NON_MONOTONIC_ACCUMULATION)
    return tuple(out)


def compute_plan(inputs: PlanInputs, end_age_years: int = END_AGE) -> PlanResult:
    m_accum = monthly_rate(inputs.accum_real_return_pct)
    m_retire = monthly_rate(inputs.retire_real_return_pct)
    n_ret = inputs.months_to_retire
    horizon = horizon_months(inputs.current_age, n_ret, end_age_years)
    schedule = build_lump_schedule(inputs.lump_sums)

    traj = project(
        inputs.current_wealth, inputs.monthly_saving, inputs.monthly_spend,
        n_ret, horizon, m_accum, m_retire, schedule,
    )
    w_ret = traj.at(n_ret)
    target = target_wealth(inputs.monthly_spend, inputs.swr_pct)

    perpetual = has_perpetuity(w_ret, m_retire, inputs.monthly_spend)
    meets = w_ret >= target
    if perpetual:
        runway = math.inf
    else:
        runway = runway_years(w_ret, inputs.monthly_spend * MONTHS_PER_YEAR, inputs.retire_real_return_pct)
    retire_at = inputs.current_age + n_ret / MONTHS_PER_YEAR
    finish = end_age(retire_at, runway)

    # the closed form can drift from the simulated balance; the simulation decides "met"
    if meets:
        extra = 0.0
    else:
        extra = extra_monthly_saving_needed(target, inputs.current_wealth, inputs.monthly_saving,
                                            schedule, n_ret, m_accum)
    goal_m = months_to_goal(inputs.current_wealth, inputs.monthly_saving, schedule, target, m_accum)
    goal_age = inputs.current_age + goal_m / MONTHS_PER_YEAR
    monotonic = is_monotonic_accumulation(inputs.current_wealth, inputs.monthly_saving, schedule, m_accum)

    return PlanResult(
        target_wealth=target,
        wealth_at_retire=w_ret,
        has_perpetuity=perpetual,
        meets_target=meets,
        runway_years=runway,
        end_age=finish,
        near_perpetuity=is_near_perpetuity(runway),
        end_age_flag=end_age_flag(finish),
        extra_monthly_saving_needed=extra,
        months_to_goal=goal_m,
        goal_age=goal_age,
        progress_pct=progress_pct(w_ret, target),
        shortfall=shortfall(w_ret, target),
        months_to_retire=n_ret,
        depletion_month=depletion_month(traj, n_ret),
        trajectory=traj,
        issues=_issues(inputs, target, perpetual, meets, goal_m, monotonic),
    )
