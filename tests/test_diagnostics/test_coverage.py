"""Tests for WindowCoverage."""

import pandas as pd
import pytest

from did_dlm import WindowSpec
from did_dlm.diagnostics import WindowCoverage


@pytest.fixture
def window() -> WindowSpec:
    return WindowSpec(from_=-3, to=3)


class TestWindowCoverage:
    def test_compute_returns_expected_columns(self, small_panel, config, window):
        result = WindowCoverage(config=config, window=window).compute(small_panel)
        expected = ["unit", "n_periods", "time_span", "n_gaps", "n_complete",
                    "complete_rate", "min_time", "max_time"]
        for col in expected:
            assert col in result.columns

    def test_compute_one_row_per_unit(self, small_panel, config, window):
        result = WindowCoverage(config=config, window=window).compute(small_panel)
        assert len(result) == small_panel["unit"].nunique()

    def test_balanced_panel(self, small_panel, config, window):
        result = WindowCoverage(config=config, window=window).compute(small_panel)
        assert (result["n_periods"] == 8).all()
        assert (result["n_gaps"] == 0).all()
        assert (result["n_complete"] == 3).all()

    def test_gaps_reduce_complete_rows(self, config, window):
        df = pd.DataFrame({
            "unit": ["A"] * 9 + ["B"] * 4,
            "time": [1, 2, 3, 4, 5, 6, 7, 8, 9] + [1, 2, 4, 5],
            "treat": [0] * 13,
        })
        result = WindowCoverage(config=config, window=window).compute(df).set_index("unit")
        assert result.loc["A", "n_complete"] == 4
        assert result.loc["B", "n_gaps"] == 1
        assert result.loc["B", "n_complete"] == 0

    def test_summary(self, small_panel, config):
        long_window = WindowSpec(from_=-5, to=5)
        result = WindowCoverage(config=config, window=long_window).summary(small_panel)
        assert isinstance(result, pd.DataFrame)
        assert result.loc[0, "n_units"] == 4
        assert result.loc[0, "n_units_contributing"] == 0
        assert result.loc[0, "n_complete"] == 0
