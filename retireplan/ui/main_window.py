from PyQt6.QtWidgets import (
    QApplication, QMainWindow, QWidget, QHBoxLayout, QListWidget,
    QListWidgetItem, QStackedWidget
)
import sys

from ..core.formatting import format_currency
from .event_bus import bus
from .views.plan_view import PlanView
from .views.scenarios_view import ScenariosView

SECTIONS = [
    ("Planner", PlanView),
    ("Saved Scenarios", ScenariosView),
]

def plan_status(res) -> str:
    """One-line status-bar summary of a PlanResult."""
    if res is None:
        return ""
    target = format_currency(res.target_wealth, 0) if res.target_defined else "undefined"
    verdict = "on track" if res.meets_target else f"{res.progress_pct:.0f}% of target"
    text = f"Target {target} | {verdict}"
    if res.issues:
        text += " | " + ", ".join(i.value.replace("_", " ") for i in res.issues)
    return text

class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Retirement Planner")
        self.resize(1200, 800)

        # Central layout
        central = QWidget()
        outer = QHBoxLayout(central)
        outer.setContentsMargins(0, 0, 0, 0)

        # Sidebar
        self.sidebar = QListWidget()
        self.sidebar.setFixedWidth(200)
        self.sidebar.setStyleSheet("QListWidget { border-right: 1px solid #ddd; }")
        for name, _ in SECTIONS:
            self.sidebar.addItem(QListWidgetItem(name))

        # Stack
        self.stack = QStackedWidget()
        self.views = []
        for _, view_cls in SECTIONS:
            view = view_cls()
            self.views.append(view)
            self.stack.addWidget(view)

        self.sidebar.currentRowChanged.connect(self.stack.setCurrentIndex)
        self.sidebar.setCurrentRow(0)
        # opening a saved scenario jumps back to the planner
        self.views[1].btn_load.clicked.connect(lambda: self.sidebar.setCurrentRow(0))

        outer.addWidget(self.sidebar)
        outer.addWidget(self.stack, 1)
        self.setCentralWidget(central)

        # the planner computed once before we subscribed
        bus.planComputed.connect(self._on_plan_computed)
        self._on_plan_computed(self.views[0].result)

    def _on_plan_computed(self, res):
        self.statusBar().showMessage(plan_status(res))

def launch_app():
    app = QApplication(sys.argv)
    win = MainWindow()
    win.show()
    sys.exit(app.exec())
