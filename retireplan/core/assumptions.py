# retireplan/core/assumptions.py
"""
Planner defaults and form field ranges.

Exports:
- DEFAULT_PLAN                  -> starting form values
- FIELD_RANGES                  -> min/max per form field (UI clamping)
- clamp_form(...)               -> raw form values -> clamped values
- save_defaults_json, load_defaults_json
"""

from __future__ import annotations
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Optional
import json, os, datetime

DEFAULTS_PATH = "data/plan_defaults.json"

@dataclass
class FieldRange:
    lo: float
    hi: float
    step: float = 1.0

    def clamp(self, x: float) -> float:
        return max(self.lo, min(self.hi, x))

# Form ranges (the engine itself accepts anything; these only bound the UI)
FIELD_RANGES: Dict[str, FieldRange] = {
    "current_age": FieldRange(15, 90),
    "retire_age": FieldRange(16, 90),          # lower bound is current_age + 1
    "lump_month": FieldRange(0, 240),
    "swr_pct": FieldRange(1.0, 7.0, 0.1),
    "accum_real_return_pct": FieldRange(0.0, 10.0, 0.1),
    "retire_real_return_pct": FieldRange(0.0, 10.0, 0.1),
}

@dataclass
class PlanDefaults:
    current_age: int = 24
    retire_age: int = 34
    current_wealth: float = 3_000_000
    monthly_saving: float = 120_000
    monthly_spend: float = 100_000
    swr_pct: float = 3.5
    accum_real_return_pct: float = 5.0
    retire_real_return_pct: float = 3.5
    advanced_mode: bool = False
    lump_sums: List[Dict[str, Any]] = field(
        default_factory=lambda: [{"month": 12, "amount": 5_000_000}]
    )
    locale: str = "en-US"
    meta: Optional[dict] = None  # saved_at, source

DEFAULT_PLAN = PlanDefaults()

def clamp_form(values: Dict[str, Any]) -> Dict[str, Any]:
    """
    Clamp raw form values to FIELD_RANGES.
    - current_age in [15, 90]
    - retire_age in [current_age + 1, 90]
    - lump months in [0, 240]
    - sliders (SWR, returns) to their ranges
    Currency amounts are passed through untouched.
    """
    out = dict(values)
    r = FIELD_RANGES
    if "current_age" in out:
        out["current_age"] = int(r["current_age"].clamp(int(out["current_age"])))
    if "retire_age" in out:
        lo = int(out.get("current_age", r["current_age"].lo)) + 1
        out["retire_age"] = int(max(lo, min(r["retire_age"].hi, int(out["retire_age"]))))
    for key in ("swr_pct", "accum_real_return_pct", "retire_real_return_pct"):
        if key in out:
            out[key] = float(r[key].clamp(float(out[key])))
    if "lump_sums" in out:
        out["lump_sums"] = [
            {**ls, "month": int(r["lump_month"].clamp(int(ls.get("month", 0))))}
            for ls in (out["lump_sums"] or [])
        ]
    return out

def save_defaults_json(defaults: PlanDefaults, path: str = DEFAULTS_PATH):
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    obj = asdict(defaults)
    obj["meta"] = {**(defaults.meta or {}), "saved_at": datetime.datetime.now().isoformat(timespec="seconds")}
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)

def load_defaults_json(path: str = DEFAULTS_PATH) -> PlanDefaults:
    """Saved defaults, or the built-in ones if the file is missing/unreadable."""
    if not os.path.exists(path):
        return PlanDefaults()
    try:
        with open(path, "r", encoding="utf-8") as f:
            obj = json.load(f)
        known = PlanDefaults.__dataclass_fields__.keys()
        return PlanDefaults(**{k: v for k, v in obj.items() if k in known})
    except (OSError, ValueError, TypeError) as e:
        print(f"[PlanDefaults] failed to load {path}: {e}")
        return PlanDefaults()
