# retireplan/ui/event_bus.py
from PyQt6.QtCore import QObject, pyqtSignal

class EventBus(QObject):
    scenarioChanged = pyqtSignal(object)   # emits a Scenario or None
    planComputed = pyqtSignal(object)      # emits the latest PlanResult

bus = EventBus()

# simple in-memory holder so late subscribers can read current scenario
_current_scenario = None

def set_current_scenario(s):
    global _current_scenario
    _current_scenario = s
    bus.scenarioChanged.emit(s)

def get_current_scenario():
    return _current_scenario
