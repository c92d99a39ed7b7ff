"""
Tests for saved scenarios and CSV export.
"""
import pytest
import tempfile
import json
import os
import pandas as pd
from retireplan.core import store
from retireplan.core.plan import PlanInputs, compute_plan
from retireplan.core.projection import LumpSum


@pytest.fixture
def temp_data_dir(monkeypatch):
    """Create a temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        test_dir = os.path.join(tmpdir, "scenarios")
        monkeypatch.setattr(store, "DATA_DIR", test_dir)
        yield test_dir


def sample_inputs(**overrides) -> PlanInputs:
    values = dict(
        current_age=30, retire_age=45, current_wealth=100_000, monthly_saving=2_000,
        monthly_spend=4_000, swr_pct=4.0, accum_real_return_pct=5.0,
        retire_real_return_pct=4.0, lump_sums=(LumpSum(24, 20_000),),
    )
    values.update(overrides)
    return PlanInputs(**values)


@pytest.mark.unit
class TestScenario:
    """Tests for Scenario dataclass."""

    def test_new_scenario_has_uuid(self):
        """New scenarios get a UUID."""
        scenario = store.new_scenario()
        assert len(scenario.scenario_id) == 36
        assert "-" in scenario.scenario_id

    def test_new_scenario_defaults(self):
        """New scenarios start empty in en-US simple mode."""
        scenario = store.new_scenario()
        assert scenario.name == ""
        assert scenario.inputs == {}
        assert scenario.locale == "en-US"
        assert not scenario.advanced_mode

    def test_inputs_snapshot(self):
        """The inputs snapshot rebuilds the same PlanInputs."""
        inputs = sample_inputs()
        scenario = store.new_scenario(inputs, name="Base")
        assert scenario.plan_inputs() == inputs


@pytest.mark.unit
class TestScenarioPersistence:
    """Tests for saving, loading and deleting scenarios."""

    def test_save_and_load(self, temp_data_dir):
        """Saved scenarios load back intact."""
        scenario = store.new_scenario(sample_inputs(), name="Early retirement")
        scenario.advanced_mode = True
        scenario.notes = "bonus in year two"
        store.save_scenario(scenario)

        loaded = store.load_scenario(scenario.scenario_id)
        assert loaded is not None
        assert loaded.name == "Early retirement"
        assert loaded.advanced_mode
        assert loaded.notes == "bonus in year two"
        assert loaded.plan_inputs() == sample_inputs()

    def test_load_nonexistent(self, temp_data_dir):
        """Loading an unknown id returns None."""
        assert store.load_scenario("nonexistent-id") is None

    def test_load_unreadable(self, temp_data_dir, capsys):
        """A corrupt file is reported and skipped."""
        os.makedirs(temp_data_dir, exist_ok=True)
        with open(os.path.join(temp_data_dir, "broken.json"), "w") as f:
            f.write("{")
        assert store.load_scenario("broken") is None
        assert "[ScenarioStore]" in capsys.readouterr().out

    def test_delete(self, temp_data_dir):
        """Deleting removes the file once."""
        scenario = store.new_scenario(sample_inputs())
        store.save_scenario(scenario)
        assert store.delete_scenario(scenario.scenario_id)
        assert store.load_scenario(scenario.scenario_id) is None
        assert not store.delete_scenario(scenario.scenario_id)


@pytest.mark.unit
class TestScenarioListing:
    """Tests for listing and exporting scenarios."""

    def test_list_empty(self, temp_data_dir):
        """No saved scenarios, empty list."""
        assert store.list_scenarios() == []

    def test_list_sorted_by_updated(self, temp_data_dir):
        """Most recently updated comes first."""
        first = store.new_scenario(sample_inputs(), name="First")
        store.save_scenario(first)
        second = store.new_scenario(sample_inputs(), name="Second")
        store.save_scenario(second)

        for scenario, date in ((first, "2023-01-01"), (second, "2023-12-31")):
            path = os.path.join(temp_data_dir, f"{scenario.scenario_id}.json")
            with open(path, "r") as f:
                data = json.load(f)
            data["updated_at"] = date
            with open(path, "w") as f:
                json.dump(data, f, indent=2)

        names = [s.name for s in store.list_scenarios()]
        assert names == ["Second", "First"]

    def test_export_scenarios_csv(self, temp_data_dir):
        """Inputs are flattened into CSV columns."""
        store.save_scenario(store.new_scenario(sample_inputs(), name="Export"))
        export_path = os.path.join(temp_data_dir, "export.csv")
        store.export_scenarios_csv(export_path)

        df = pd.read_csv(export_path)
        assert list(df["name"]) == ["Export"]
        assert df.loc[0, "current_age"] == 30
        assert json.loads(df.loc[0, "lump_sums"]) == [{"month": 24, "amount": 20000.0}]

    def test_export_nothing_when_empty(self, temp_data_dir):
        """No scenarios, no file."""
        export_path = os.path.join(temp_data_dir, "export.csv")
        store.export_scenarios_csv(export_path)
        assert not os.path.exists(export_path)

    def test_export_trajectory_csv(self, temp_data_dir):
        """The trajectory exports month, age and wealth columns."""
        result = compute_plan(sample_inputs())
        path = os.path.join(temp_data_dir, "out", "trajectory.csv")
        store.export_trajectory_csv(result, 30, path)

        df = pd.read_csv(path)
        assert list(df.columns) == ["month", "age", "wealth", "wealth_display", "target"]
        assert len(df) == len(result.trajectory)
        assert df.loc[0, "wealth"] == pytest.approx(100_000)
        assert df.loc[12, "age"] == pytest.approx(31)
