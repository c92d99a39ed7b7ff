# retireplan/core/store.py
from __future__ import annotations
import os, json, uuid, datetime, csv
from dataclasses import dataclass, asdict, field
from typing import Optional, List, Dict, Any

from .plan import PlanInputs, PlanResult

DATA_DIR = "data/scenarios"

@dataclass
class Scenario:
    scenario_id: str
    name: str
    # PlanInputs.to_dict() snapshot
    inputs: Dict[str, Any] = field(default_factory=dict)
    advanced_mode: bool = False
    locale: str = "en-US"
    notes: str = ""
    created_at: str = field(default_factory=lambda: datetime.date.today().isoformat())
    updated_at: str = field(default_factory=lambda: datetime.date.today().isoformat())

    def plan_inputs(self) -> PlanInputs:
        return PlanInputs.from_dict(self.inputs)

def _path(sid: str) -> str:
    return os.path.join(DATA_DIR, f"{sid}.json")

def new_scenario(inputs: Optional[PlanInputs] = None, name: str = "") -> Scenario:
    sid = str(uuid.uuid4())
    return Scenario(scenario_id=sid, name=name, inputs=inputs.to_dict() if inputs else {})

def save_scenario(s: Scenario):
    os.makedirs(DATA_DIR, exist_ok=True)
    s.updated_at = datetime.date.today().isoformat()
    with open(_path(s.scenario_id), "w", encoding="utf-8") as f:
        json.dump(asdict(s), f, indent=2)

def load_scenario(sid: str) -> Optional[Scenario]:
    p = _path(sid)
    if not os.path.exists(p): return None
    try:
        with open(p, "r", encoding="utf-8") as f:
            obj = json.load(f)
        return Scenario(**obj)
    except (ValueError, TypeError) as e:
        print(f"[ScenarioStore] skipping unreadable {p}: {e}")
        return None

def delete_scenario(sid: str) -> bool:
    p = _path(sid)
    if not os.path.exists(p): return False
    os.remove(p)
    return True

def list_scenarios() -> List[Scenario]:
    if not os.path.isdir(DATA_DIR):
        return []
    out = []
    for name in os.listdir(DATA_DIR):
        if not name.endswith(".json"): continue
        s = load_scenario(name[:-5])
        if s: out.append(s)
    # sort by updated desc
    out.sort(key=lambda x: x.updated_at, reverse=True)
    return out

def export_scenarios_csv(path: str = "data/scenarios_export.csv"):
    rows = []
    for s in list_scenarios():
        row = {k: v for k, v in asdict(s).items() if k != "inputs"}
        for k, v in s.inputs.items():
            row[k] = json.dumps(v) if isinstance(v, (list, dict)) else v
        rows.append(row)
    if not rows:
        return
    cols = sorted({k for r in rows for k in r.keys()})
    with open(path, "w", newline="", encoding="utf-8") as f:
        w = csv.DictWriter(f, fieldnames=cols)
        w.writeheader()
        for r in rows: w.writerow(r)

def export_trajectory_csv(result: PlanResult, current_age: float, path: str):
    """Month/age/wealth table of one computed plan."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    target = result.target_wealth if result.target_defined else None
    df = result.trajectory.to_frame(current_age=current_age, target=target)
    df.to_csv(path, index=False)
