# retireplan/ui/views/scenarios_view.py
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QTableWidget,
    QTableWidgetItem, QHeaderView, QMessageBox, QFileDialog
)

from ...core import store
from ...core.formatting import format_currency
from ...core.plan import compute_plan
from ..event_bus import bus, set_current_scenario

class ScenariosView(QWidget):
    def __init__(self):
        super().__init__()
        self.setObjectName("ScenariosView")
        self._rows = []

        root = QVBoxLayout(self)
        title = QLabel("Saved Scenarios")
        title.setStyleSheet("font-size:20px; font-weight:600;")
        root.addWidget(title)

        self.tbl = QTableWidget(0, 5, self)
        self.tbl.setHorizontalHeaderLabels(["Name", "Updated", "Target", "Wealth at Retirement", "Perpetuity"])
        self.tbl.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        self.tbl.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.tbl.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        root.addWidget(self.tbl, 1)

        row = QHBoxLayout()
        self.btn_load = QPushButton("Open in Planner")
        self.btn_load.clicked.connect(self.open_selected)
        self.btn_delete = QPushButton("Delete")
        self.btn_delete.clicked.connect(self.delete_selected)
        self.btn_export = QPushButton("Export All (CSV)")
        self.btn_export.clicked.connect(self.export_all)
        row.addWidget(self.btn_load); row.addWidget(self.btn_delete); row.addStretch(1); row.addWidget(self.btn_export)
        root.addLayout(row)

        bus.scenarioChanged.connect(lambda _s: self.refresh())
        self.refresh()

    def showEvent(self, e):
        super().showEvent(e)
        self.refresh()

    def refresh(self):
        self._rows = store.list_scenarios()
        self.tbl.setRowCount(len(self._rows))
        for i, s in enumerate(self._rows):
            self.tbl.setItem(i, 0, QTableWidgetItem(s.name or "Untitled"))
            self.tbl.setItem(i, 1, QTableWidgetItem(s.updated_at))
            try:
                res = compute_plan(s.plan_inputs())
            except (KeyError, ValueError) as ex:
                print(f"[ScenariosView] cannot compute {s.scenario_id[:8]}: {ex}")
                for c in (2, 3, 4):
                    self.tbl.setItem(i, c, QTableWidgetItem("—"))
                continue
            fmt = res.format_dict(s.locale)
            self.tbl.setItem(i, 2, QTableWidgetItem(fmt["Target Wealth"]))
            self.tbl.setItem(i, 3, QTableWidgetItem(format_currency(res.wealth_at_retire, 0, s.locale)))
            self.tbl.setItem(i, 4, QTableWidgetItem("Yes" if res.has_perpetuity else "No"))

    def _selected(self):
        r = self.tbl.currentRow()
        if r < 0 or r >= len(self._rows):
            return None
        return self._rows[r]

    def open_selected(self):
        s = self._selected()
        if s is None:
            QMessageBox.information(self, "Scenarios", "Select a scenario first.")
            return
        set_current_scenario(s)

    def delete_selected(self):
        s = self._selected()
        if s is None:
            return
        store.delete_scenario(s.scenario_id)
        self.refresh()

    def export_all(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export scenarios", "data/scenarios_export.csv", "CSV (*.csv)")
        if path:
            store.export_scenarios_csv(path)
