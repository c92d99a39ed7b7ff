"""KPI table widget for the planner."""

from typing import Dict
from PyQt6.QtWidgets import (
    QWidget,
    QVBoxLayout,
    QTableWidget,
    QTableWidgetItem,
    QHeaderView,
    QLabel,
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor, QFont


class KpiTableWidget(QWidget):
    """Two-column table: KPI name, formatted value."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._init_ui()

    def _init_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.title_label = QLabel("Plan Summary")
        self.title_label.setStyleSheet("font-weight: bold; font-size: 14px;")
        layout.addWidget(self.title_label)

        self.table = QTableWidget()
        self.table.setColumnCount(2)
        self.table.setHorizontalHeaderLabels(["KPI", "Value"])

        header = self.table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)

        self.table.verticalHeader().setVisible(False)
        self.table.setAlternatingRowColors(True)
        self.table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)

        layout.addWidget(self.table)

    def set_title(self, title: str):
        self.title_label.setText(title)

    def set_kpis(self, kpis: Dict[str, str], highlight: Dict[str, bool] | None = None):
        """Populate the table.

        Args:
            kpis: KPI name -> formatted value (PlanResult.format_dict())
            highlight: KPI name -> True (good, green) / False (attention, amber)
        """
        highlight = highlight or {}
        self.table.setRowCount(len(kpis))

        for row, (name, value) in enumerate(kpis.items()):
            name_item = QTableWidgetItem(name)
            name_item.setFont(QFont("", -1, QFont.Weight.Bold))
            self.table.setItem(row, 0, name_item)

            value_item = QTableWidgetItem(value)
            value_item.setTextAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
            if name in highlight:
                color = QColor(0, 128, 0) if highlight[name] else QColor(180, 110, 0)
                value_item.setForeground(color)
                value_item.setFont(QFont("", -1, QFont.Weight.Bold))
            self.table.setItem(row, 1, value_item)

        self.table.resizeRowsToContents()

    def clear(self):
        self.table.setRowCount(0)
