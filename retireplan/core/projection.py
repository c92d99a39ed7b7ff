# retireplan/core/projection.py
"""
Month-by-month wealth projection (real terms).

Two regimes:
- accumulation (t < months_to_retire):
      w = w * (1 + accum_rate) + monthly_saving + lump[t + 1]
- decumulation (t >= months_to_retire):
      w = w * (1 + retire_rate) - monthly_spend

Point t always records the wealth *before* the update of month t, so
point 0 is the opening balance. Lumps dated month 0 are folded into that
opening balance; a lump dated month m >= 1 lands on the transition
m-1 -> m, and only while that transition is still in accumulation.

Outputs:
- Trajectory with numpy arrays `months` (0..horizon) and `wealth`
  (unclamped; may go negative).
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional
import numpy as np
import pandas as pd

from .rates import MONTHS_PER_YEAR

END_AGE = 100


@dataclass(frozen=True)
class LumpSum:
    """One-time contribution `month` months from today."""

    month: int
    amount: float

    def __post_init__(self):
        if int(self.month) != self.month:
            raise ValueError("LumpSum.month must be a whole number of months")
        if self.month < 0:
            raise ValueError("LumpSum.month must be >= 0")

    def to_dict(self) -> dict:
        return {"month": int(self.month), "amount": float(self.amount)}

    @classmethod
    def from_dict(cls, data: dict) -> "LumpSum":
        return cls(month=int(data["month"]), amount=float(data["amount"]))


@dataclass(frozen=True)
class TrajectoryPoint:
    month_index: int
    wealth: float


@dataclass
class Trajectory:
    months: np.ndarray   # (horizon + 1,) int
    wealth: np.ndarray   # (horizon + 1,) float, unclamped

    def __len__(self) -> int:
        return len(self.months)

    @property
    def horizon(self) -> int:
        return int(self.months[-1])

    def at(self, month: int) -> float:
        """Wealth recorded at `month` (clipped to the simulated range)."""
        month = min(max(int(month), 0), self.horizon)
        return float(self.wealth[month])

    def points(self) -> List[TrajectoryPoint]:
        return [
            TrajectoryPoint(month_index=int(m), wealth=float(w))
            for m, w in zip(self.months, self.wealth)
        ]

    def display_wealth(self) -> np.ndarray:
        """Presentation copy: negatives clamped to 0, NaN/inf replaced by 0."""
        shown = np.where(np.isfinite(self.wealth), self.wealth, 0.0)
        return np.maximum(shown, 0.0)

    def ages(self, current_age: float) -> np.ndarray:
        return current_age + self.months / MONTHS_PER_YEAR

    def to_frame(self, current_age: Optional[float] = None,
                 target: Optional[float] = None) -> pd.DataFrame:
        """Tabular view for charts and CSV export."""
        df = pd.DataFrame({
            "month": self.months,
            "wealth": self.wealth,
            "wealth_display": self.display_wealth(),
        })
        if current_age is not None:
            df.insert(1, "age", self.ages(current_age))
        if target is not None:
            df["target"] = target
        return df


def build_lump_schedule(lumps: Iterable[LumpSum]) -> Dict[int, float]:
    """Aggregate lumps by month; several lumps in one month add up."""
    schedule: Dict[int, float] = {}
    for lump in lumps:
        schedule[int(lump.month)] = schedule.get(int(lump.month), 0.0) + float(lump.amount)
    return schedule


def months_between(current_age: float, retire_age: float) -> int:
    """Whole months to retirement, never negative."""
    return max(0, int(round((retire_age - current_age) * MONTHS_PER_YEAR)))


def horizon_months(current_age: float, months_to_retire: int, end_age: int = END_AGE) -> int:
    """Last simulated month: age `end_age`, and always past retirement."""
    to_end = int(round((end_age - current_age) * MONTHS_PER_YEAR))
    return max(months_to_retire + 1, to_end)


def opening_wealth(current_wealth: float, lump_schedule: Dict[int, float]) -> float:
    return current_wealth + lump_schedule.get(0, 0.0)


def accumulation_step(wealth: float, rate: float, saving: float,
                      lump_schedule: Dict[int, float], t: int) -> float:
    """Advance month t -> t+1 in the accumulation regime."""
    return wealth * (1.0 + rate) + saving + lump_schedule.get(t + 1, 0.0)


def accumulate(current_wealth: float, monthly_saving: float,
               lump_schedule: Dict[int, float], monthly_rate: float, months: int) -> float:
    """Wealth after `months` accumulation steps (no retirement switch)."""
    w = opening_wealth(current_wealth, lump_schedule)
    for t in range(max(0, int(months))):
        w = accumulation_step(w, monthly_rate, monthly_saving, lump_schedule, t)
    return w


def project(current_wealth: float, monthly_saving: float, monthly_spend: float,
            months_to_retire: int, months_horizon: int,
            monthly_accum_rate: float, monthly_retire_rate: float,
            lump_schedule: Dict[int, float]) -> Trajectory:
    """Simulate wealth for months 0..months_horizon inclusive."""
    n_ret = max(0, int(months_to_retire))
    T = max(0, int(months_horizon))

    wealth = np.empty(T + 1, dtype=float)
    w = opening_wealth(current_wealth, lump_schedule)

    for t in range(T + 1):
        wealth[t] = w
        if t < n_ret:
            w = accumulation_step(w, monthly_accum_rate, monthly_saving, lump_schedule, t)
        else:
            w = w * (1.0 + monthly_retire_rate) - monthly_spend

    return Trajectory(months=np.arange(T + 1), wealth=wealth)


def depletion_month(trajectory: Trajectory, months_to_retire: int) -> Optional[int]:
    """First month at/after retirement where unclamped wealth is <= 0."""
    start = min(max(0, int(months_to_retire)), trajectory.horizon)
    tail = trajectory.wealth[start:]
    hits = np.flatnonzero(tail <= 0.0)
    if len(hits) == 0:
        return None
    return int(start + hits[0])
