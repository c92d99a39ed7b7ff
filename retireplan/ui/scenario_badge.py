# retireplan/ui/scenario_badge.py
from PyQt6.QtWidgets import QLabel
from .event_bus import bus, get_current_scenario

def format_scenario(s) -> str:
    if not s:
        return "Unsaved scenario"
    name = (s.name or "").strip() or "Untitled"
    short = s.scenario_id[:8] if getattr(s, "scenario_id", None) else "—"
    return f"Scenario: {name}  [{short}]"

class ScenarioBadge(QLabel):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet("color:#666; font-style: italic;")
        self.setText(format_scenario(get_current_scenario()))
        bus.scenarioChanged.connect(self._on_scenario_changed)

    def _on_scenario_changed(self, s):
        self.setText(format_scenario(s))
