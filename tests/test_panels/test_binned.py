"""Tests for BinnedEventStudyPanel."""

import pandas as pd
import pytest

from did_dlm import BinnedEventStudyPanel, WindowSpec
from did_dlm.panels.binned import event_label


@pytest.fixture
def window() -> WindowSpec:
    return WindowSpec(from_=-2, to=2)


class TestBinnedBuild:
    def test_dummy_columns_omit_reference(self, small_panel, config, window):
        panel = BinnedEventStudyPanel(small_panel, config=config, window=window)
        assert list(panel.dummy_columns) == [-2, 0, 1, 2]
        assert panel.dummy_columns[-2] == "treat_es_m2"
        assert panel.dummy_columns[0] == "treat_es_p0"

    def test_event_time_arithmetic(self, small_panel, config, window):
        df = BinnedEventStudyPanel(small_panel, config=config, window=window).build()
        u2 = df[df["unit"] == "2"].set_index("time")  # first exposed at 6
        assert (u2["first_event_time"] == 6).all()
        assert u2.loc[4, "event_time"] == -2
        assert u2.loc[6, "event_time"] == 0
        assert u2.loc[8, "event_time"] == 2

    def test_never_exposed_sentinel_and_zero_dummies(self, small_panel, config, window):
        panel = BinnedEventStudyPanel(small_panel, config=config, window=window)
        df = panel.build()
        never = df[df["unit"].isin(["3", "4"])]
        assert (never["first_event_time"] == config.fill_value).all()
        assert never["event_time"].isna().all()
        assert (never[list(panel.dummy_columns.values())] == 0).all().all()

    def test_endpoints_binned(self, small_panel, config, window):
        df = BinnedEventStudyPanel(small_panel, config=config, window=window).build()
        u1 = df[df["unit"] == "1"].set_index("time")  # first exposed at 4
        # event_time <= -2 collects t = 1, 2
        assert u1.loc[[1, 2], "treat_es_m2"].tolist() == [1, 1]
        assert u1.loc[3, "treat_es_m2"] == 0
        # event_time >= 2 collects t = 6, 7, 8
        assert u1.loc[[6, 7, 8], "treat_es_p2"].tolist() == [1, 1, 1]
        assert u1.loc[5, "treat_es_p2"] == 0

    def test_interior_dummies_exact(self, small_panel, config, window):
        df = BinnedEventStudyPanel(small_panel, config=config, window=window).build()
        u1 = df[df["unit"] == "1"].set_index("time")
        assert u1["treat_es_p0"].tolist() == [0, 0, 0, 1, 0, 0, 0, 0]
        assert u1["treat_es_p1"].tolist() == [0, 0, 0, 0, 1, 0, 0, 0]

    def test_each_exposed_row_hits_at_most_one_dummy(self, small_panel, config, window):
        panel = BinnedEventStudyPanel(small_panel, config=config, window=window)
        df = panel.build()
        hits = df[list(panel.dummy_columns.values())].sum(axis=1)
        assert hits.max() <= 1
        # only the reference event time (-1) is left without a dummy
        exposed = df[df["event_time"].notna()]
        assert (exposed.loc[hits[exposed.index] == 0, "event_time"] == -1).all()

    def test_reference_at_left_edge_drops_lower_bin(self, small_panel, config):
        w = WindowSpec(from_=-2, to=4, ref=-2)
        panel = BinnedEventStudyPanel(small_panel, config=config, window=w)
        assert list(panel.dummy_columns) == [-1, 0, 1, 2, 3, 4]


class TestBinnedSample:
    def test_time_range(self, small_panel, config, window):
        panel = BinnedEventStudyPanel(small_panel, config=config, window=window)
        # periods 1-8, to = 2, one lead
        assert panel.time_range() == (3, 7)

    def test_estimation_sample_restricted(self, small_panel, config, window):
        panel = BinnedEventStudyPanel(small_panel, config=config, window=window)
        sample = panel.estimation_sample()
        assert sample["time"].between(3, 7).all()
        assert len(sample) == 4 * 5

    def test_input_not_mutated(self, small_panel, config, window):
        snapshot = small_panel.copy()
        BinnedEventStudyPanel(small_panel, config=config, window=window).estimation_sample()
        pd.testing.assert_frame_equal(small_panel, snapshot)


def test_event_label():
    assert event_label(-3) == "m3"
    assert event_label(0) == "p0"
    assert event_label(4) == "p4"
