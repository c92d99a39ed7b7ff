"""Reusable UI widgets for the planner."""

from retireplan.ui.widgets.currency_input import CurrencyLineEdit
from retireplan.ui.widgets.kpi_table import KpiTableWidget

__all__ = [
    "CurrencyLineEdit",
    "KpiTableWidget",
]
