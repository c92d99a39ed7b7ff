# retireplan/ui/views/plan_view.py
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QSpinBox,
    QDoubleSpinBox, QGroupBox, QGridLayout, QCheckBox, QLineEdit, QFileDialog,
    QMessageBox
)

from matplotlib.backends.backend_qtagg import FigureCanvasQTAgg as FigureCanvas
from matplotlib.figure import Figure
from matplotlib.ticker import StrMethodFormatter, MaxNLocator

from ...core.assumptions import FIELD_RANGES, clamp_form, load_defaults_json
from ...core.formatting import format_currency, format_number
from ...core.plan import PlanInputs, PlanIssue, compute_plan
from ...core.projection import LumpSum
from ...core import store
from ..event_bus import bus, set_current_scenario, get_current_scenario
from ..scenario_badge import ScenarioBadge
from ..widgets.currency_input import CurrencyLineEdit
from ..widgets.kpi_table import KpiTableWidget

def _pct_spin(key: str, value: float) -> QDoubleSpinBox:
    r = FIELD_RANGES[key]
    sb = QDoubleSpinBox()
    sb.setRange(r.lo, r.hi); sb.setSingleStep(r.step); sb.setDecimals(1); sb.setSuffix(" %")
    sb.setValue(value)
    return sb

class PlanView(QWidget):
    def __init__(self):
        super().__init__()
        self.setObjectName("PlanView")

        d = load_defaults_json()
        self.locale = d.locale
        self.result = None
        self.inputs = None

        root = QVBoxLayout(self)

        title = QLabel("Retirement Planner")
        title.setStyleSheet("font-size:20px; font-weight:600;")
        root.addWidget(title)

        desc = QLabel("Real (inflation-adjusted) projection of savings until retirement and withdrawals after, "
                      "with the safe-withdrawal 'magic number' as the target.")
        desc.setWordWrap(True)
        desc.setStyleSheet("color:#555;")
        root.addWidget(desc)
        root.addWidget(ScenarioBadge())

        # --- Inputs panel ---
        form_box = QGroupBox("Inputs")
        form = QGridLayout(form_box)

        ra = FIELD_RANGES["current_age"]
        self.in_age = QSpinBox();        self.in_age.setRange(int(ra.lo), int(ra.hi)); self.in_age.setValue(d.current_age)
        self.in_ret_age = QSpinBox();    self.in_ret_age.setRange(d.current_age + 1, int(FIELD_RANGES["retire_age"].hi)); self.in_ret_age.setValue(d.retire_age)

        self.in_wealth = CurrencyLineEdit(d.current_wealth, self.locale)
        self.in_save = CurrencyLineEdit(d.monthly_saving, self.locale)
        self.in_spend = CurrencyLineEdit(d.monthly_spend, self.locale)

        lump = (d.lump_sums or [{"month": 0, "amount": 0}])[0]
        self.in_lump = CurrencyLineEdit(lump.get("amount", 0), self.locale)
        rl = FIELD_RANGES["lump_month"]
        self.in_lump_month = QSpinBox(); self.in_lump_month.setRange(int(rl.lo), int(rl.hi)); self.in_lump_month.setValue(int(lump.get("month", 0)))

        self.in_swr = _pct_spin("swr_pct", d.swr_pct)
        self.in_accum = _pct_spin("accum_real_return_pct", d.accum_real_return_pct)
        self.in_retire = _pct_spin("retire_real_return_pct", d.retire_real_return_pct)
        self.chk_adv = QCheckBox("Advanced (set retirement return separately)")
        self.chk_adv.setChecked(d.advanced_mode)
        self.in_retire.setEnabled(d.advanced_mode)

        r = 0
        form.addWidget(QLabel("<b>You</b>"), r, 0, 1, 2); r+=1
        form.addWidget(QLabel("Current age"), r, 0);            form.addWidget(self.in_age, r, 1); r+=1
        form.addWidget(QLabel("Retirement age"), r, 0);         form.addWidget(self.in_ret_age, r, 1); r+=1
        form.addWidget(QLabel("Current wealth"), r, 0);         form.addWidget(self.in_wealth, r, 1); r+=1
        form.addWidget(QLabel("Monthly saving"), r, 0);         form.addWidget(self.in_save, r, 1); r+=1
        form.addWidget(QLabel("Monthly spend in retirement"), r, 0); form.addWidget(self.in_spend, r, 1); r+=1
        form.addWidget(QLabel("One-time contribution"), r, 0)
        lump_row = QHBoxLayout(); lump_row.addWidget(self.in_lump, 2); lump_row.addWidget(QLabel("month:")); lump_row.addWidget(self.in_lump_month, 1)
        form.addLayout(lump_row, r, 1); r+=1

        r = 0
        form.addWidget(QLabel("<b>Rates (real, % a year)</b>"), r, 2, 1, 2); r+=1
        form.addWidget(QLabel("Safe withdrawal rate"), r, 2);   form.addWidget(self.in_swr, r, 3); r+=1
        form.addWidget(QLabel("Return while accumulating"), r, 2); form.addWidget(self.in_accum, r, 3); r+=1
        form.addWidget(QLabel("Return in retirement"), r, 2);   form.addWidget(self.in_retire, r, 3); r+=1
        form.addWidget(self.chk_adv, r, 2, 1, 2); r+=1
        hint = QLabel("3.5% is a historically realistic SWR; above 5% tends to be aggressive.")
        hint.setWordWrap(True); hint.setStyleSheet("color:#777; font-size:11px;")
        form.addWidget(hint, r, 2, 1, 2); r+=1

        root.addWidget(form_box)

        # Headline + actions
        row = QHBoxLayout()
        self.lbl_headline = QLabel("Magic number: —")
        self.lbl_headline.setStyleSheet("font-size:16px; font-weight:600;")
        row.addWidget(self.lbl_headline)
        row.addStretch(1)
        self.in_name = QLineEdit(); self.in_name.setPlaceholderText("Scenario name"); self.in_name.setFixedWidth(200)
        self.btn_save = QPushButton("Save Scenario")
        self.btn_save.clicked.connect(self.save_scenario)
        self.btn_export = QPushButton("Export CSV")
        self.btn_export.clicked.connect(self.export_csv)
        row.addWidget(self.in_name); row.addWidget(self.btn_save); row.addWidget(self.btn_export)
        root.addLayout(row)

        # Chart + KPIs
        body = QHBoxLayout()
        self.fig = Figure(figsize=(6,4), constrained_layout=True)
        self.canvas = FigureCanvas(self.fig)
        body.addWidget(self.canvas, 3)
        self.kpis = KpiTableWidget()
        body.addWidget(self.kpis, 2)
        root.addLayout(body, 2)

        self.lbl_notes = QLabel("")
        self.lbl_notes.setWordWrap(True)
        self.lbl_notes.setStyleSheet("color:#8a5a00;")
        root.addWidget(self.lbl_notes)

        # recompute on every change
        for sb in (self.in_age, self.in_ret_age, self.in_lump_month):
            sb.valueChanged.connect(self.recompute)
        for sb in (self.in_swr, self.in_accum, self.in_retire):
            sb.valueChanged.connect(self.recompute)
        for le in (self.in_wealth, self.in_save, self.in_spend, self.in_lump):
            le.valueChanged.connect(self.recompute)
        self.chk_adv.toggled.connect(self._on_mode_toggled)
        bus.scenarioChanged.connect(self.load_scenario)

        self.recompute()

    # --------------------------
    def _on_mode_toggled(self, advanced: bool):
        self.in_retire.setEnabled(advanced)
        self.recompute()

    def collect_inputs(self) -> PlanInputs:
        """Read the form, clamp it, and resolve simple/advanced mode."""
        raw = clamp_form({
            "current_age": self.in_age.value(),
            "retire_age": self.in_ret_age.value(),
            "swr_pct": self.in_swr.value(),
            "accum_real_return_pct": self.in_accum.value(),
            "retire_real_return_pct": self.in_retire.value(),
            "lump_sums": [{"month": self.in_lump_month.value(), "amount": self.in_lump.value()}],
        })
        lumps = tuple(LumpSum.from_dict(ls) for ls in raw["lump_sums"] if ls["amount"])
        return PlanInputs.build(
            advanced_mode=self.chk_adv.isChecked(),
            retire_real_return_pct=raw["retire_real_return_pct"],
            current_age=raw["current_age"],
            retire_age=raw["retire_age"],
            current_wealth=self.in_wealth.value(),
            monthly_saving=self.in_save.value(),
            monthly_spend=self.in_spend.value(),
            swr_pct=raw["swr_pct"],
            accum_real_return_pct=raw["accum_real_return_pct"],
            lump_sums=lumps,
        )

    def recompute(self, *_):
        # keep retire age strictly after current age
        self.in_ret_age.blockSignals(True)
        self.in_ret_age.setMinimum(self.in_age.value() + 1)
        self.in_ret_age.blockSignals(False)
        if not self.chk_adv.isChecked():
            self.in_retire.blockSignals(True)
            self.in_retire.setValue(self.in_swr.value())
            self.in_retire.blockSignals(False)

        self.inputs = self.collect_inputs()
        self.result = compute_plan(self.inputs)
        self.render()
        bus.planComputed.emit(self.result)

    # --------------------------
    def render(self):
        p, res = self.inputs, self.result
        loc = self.locale

        if res.target_defined:
            self.lbl_headline.setText(
                f"Magic number: {format_currency(res.target_wealth, 0, loc)}   |   "
                f"Progress: {format_number(res.progress_pct, 0, loc)}%"
            )
        else:
            self.lbl_headline.setText("Magic number: undefined (SWR must be above 0%)")

        highlight = {
            "Coverage": res.has_perpetuity,
            "Progress": res.meets_target,
        }
        self.kpis.set_kpis(res.format_dict(loc), highlight)

        notes = []
        if res.has_issue(PlanIssue.TARGET_PERPETUITY_DIVERGENCE):
            if res.meets_target:
                notes.append("The SWR target is reached, but the retirement return does not cover the spend on its own.")
            else:
                notes.append("The target is not reached, yet the retirement return already covers the spend.")
        if res.has_issue(PlanIssue.NON_MONOTONIC_ACCUMULATION):
            notes.append("Wealth shrinks while accumulating; time-to-goal may not be meaningful.")
        if res.meets_target:
            notes.append("Target reached with the current assumptions.")
        self.lbl_notes.setText("  ".join(notes))

        # Area chart: clamped display series vs age, target line, retirement marker
        self.fig.clear()
        ax = self.fig.add_subplot(111)
        traj = res.trajectory
        ages = traj.ages(p.current_age)
        shown = traj.display_wealth()
        ax.fill_between(ages, shown, alpha=0.35, color="#a7f3d0")
        ax.plot(ages, shown, color="#065f46", lw=2, label="Projected wealth (real)")
        if res.target_defined:
            ax.axhline(res.target_wealth, color="#d97706", lw=1.5, ls="--", label="Target (SWR)")
        retire_at = p.current_age + res.months_to_retire / 12
        ax.axvline(retire_at, color="#374151", lw=1, label=f"Retirement ({retire_at:.0f})")
        if res.depletion_month is not None:
            ax.axvline(p.current_age + res.depletion_month / 12, color="#b91c1c", lw=1, ls=":", label="Depleted")
        ax.set_xlabel("Age")
        ax.set_ylabel("Wealth (real)")
        ax.grid(True, alpha=0.3)
        ax.legend(loc="best")
        ax.yaxis.set_major_formatter(StrMethodFormatter('{x:,.0f}'))
        ax.yaxis.set_major_locator(MaxNLocator(6))
        self.canvas.draw_idle()

    # --------------------------
    def save_scenario(self):
        s = get_current_scenario() or store.new_scenario()
        s.name = self.in_name.text().strip() or s.name or "Untitled"
        s.inputs = self.inputs.to_dict()
        s.advanced_mode = self.chk_adv.isChecked()
        s.locale = self.locale
        store.save_scenario(s)
        print(f"[PlanView] saved scenario {s.scenario_id[:8]} ({s.name})")
        set_current_scenario(s)

    def load_scenario(self, s):
        if s is None:
            return
        try:
            p = s.plan_inputs()
        except (KeyError, ValueError) as e:
            QMessageBox.warning(self, "Scenario", f"Could not load scenario: {e}")
            return
        widgets = (self.in_age, self.in_ret_age, self.in_swr, self.in_accum, self.in_retire,
                   self.in_lump_month, self.in_wealth, self.in_save, self.in_spend, self.in_lump, self.chk_adv)
        for w in widgets:
            w.blockSignals(True)
        self.in_age.setValue(p.current_age)
        self.in_ret_age.setMinimum(p.current_age + 1)
        self.in_ret_age.setValue(p.retire_age)
        self.in_swr.setValue(p.swr_pct)
        self.in_accum.setValue(p.accum_real_return_pct)
        self.in_retire.setValue(p.retire_real_return_pct)
        self.chk_adv.setChecked(s.advanced_mode)
        self.in_retire.setEnabled(s.advanced_mode)
        self.in_wealth.setValue(p.current_wealth)
        self.in_save.setValue(p.monthly_saving)
        self.in_spend.setValue(p.monthly_spend)
        if len(p.lump_sums) > 1:
            print(f"[PlanView] scenario {s.scenario_id[:8]} has {len(p.lump_sums)} one-time contributions; "
                  f"only the first is editable here")
        first = p.lump_sums[0] if p.lump_sums else LumpSum(0, 0)
        self.in_lump.setValue(first.amount)
        self.in_lump_month.setValue(first.month)
        for w in widgets:
            w.blockSignals(False)
        self.in_name.setText(s.name)
        self.recompute()

    def export_csv(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export trajectory", "data/trajectory.csv", "CSV (*.csv)")
        if not path:
            return
        try:
            store.export_trajectory_csv(self.result, self.inputs.current_age, path)
        except OSError as e:
            QMessageBox.warning(self, "Export", f"Export failed: {e}")
