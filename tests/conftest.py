"""Shared fixtures for did-dlm tests."""

import numpy as np
import pandas as pd
import pytest

from did_dlm import PanelConfig
from did_dlm.estimation import EngineResult


def make_staggered_panel(
    n_units: int = 676,
    n_periods: int = 20,
    share_treated: float = 0.4,
    onsets: tuple[int, ...] = (7, 8, 9),
    effect: float = -3.0,
    seed: int = 42,
) -> pd.DataFrame:
    """Balanced panel with staggered, absorbing binary treatment.

    Columns: unit, time, treat, treatment_time, years_to_treatment, post,
    outcome. ``treat`` is the exposure (1 from onset on); the outcome is
    unit effect + time effect + ``effect * treat`` + noise.
    """
    rng = np.random.default_rng(seed)
    units = np.arange(1, n_units + 1)
    times = np.arange(1, n_periods + 1)

    treated = rng.random(n_units) < share_treated
    onset = np.where(treated, rng.choice(onsets, size=n_units), np.nan)
    alpha = rng.normal(0, 1, n_units)
    lam = rng.normal(0, 1, n_periods)

    unit_col = np.repeat(units, n_periods)
    time_col = np.tile(times, n_units)
    onset_col = np.repeat(onset, n_periods)
    post = (time_col >= onset_col).astype(int)

    outcome = (
        np.repeat(alpha, n_periods)
        + np.tile(lam, n_units)
        + effect * post
        + rng.normal(0, 1, n_units * n_periods)
    )
    return pd.DataFrame({
        "unit": unit_col,
        "time": time_col,
        "treat": post,
        "treatment_time": onset_col,
        "years_to_treatment": time_col - onset_col,
        "post": post,
        "outcome": outcome,
    })


class FakeEngine:
    """Regression engine returning preset coefficients for whatever it is asked to fit.

    Coefficient ``i`` (in the order of ``regressors``) is ``0.5 * (i + 1)``;
    the covariance is ``0.01 * I``. Names in ``drop`` are left out of the
    output, mimicking a collinear regressor.
    """

    def __init__(self, drop=(), reverse=False):
        self.drop = set(drop)
        self.reverse = reverse
        self.calls = []

    def fit(self, data, outcome, regressors, absorb, cluster):
        self.calls.append({
            "n_rows": len(data),
            "outcome": outcome,
            "regressors": list(regressors),
            "absorb": list(absorb),
            "cluster": cluster,
        })
        names = [r for r in regressors if r not in self.drop]
        values = [0.5 * (regressors.index(r) + 1) for r in names]
        if self.reverse:
            names, values = names[::-1], values[::-1]
        coef = pd.Series(values, index=names, dtype=float)
        vcov = pd.DataFrame(0.01 * np.eye(len(names)), index=names, columns=names)
        return EngineResult(
            coef=coef,
            vcov=vcov,
            n_obs=len(data),
            n_clusters=data[cluster].nunique(),
        )


class FailingEngine:
    def fit(self, data, outcome, regressors, absorb, cluster):
        raise RuntimeError("solver blew up")


@pytest.fixture
def config() -> PanelConfig:
    return PanelConfig(unit_col="unit", time_col="time", exposure_col="treat")


@pytest.fixture
def small_panel() -> pd.DataFrame:
    """Panel with 4 units, periods 1-8.

    - Units 1, 2: treated from periods 4 and 6
    - Units 3, 4: never treated
    """
    rng = np.random.default_rng(7)
    onsets = {1: 4, 2: 6}
    rows = []
    for unit in range(1, 5):
        for t in range(1, 9):
            onset = onsets.get(unit)
            rows.append({
                "unit": unit,
                "time": t,
                "treat": int(onset is not None and t >= onset),
                "outcome": rng.normal(0, 1),
                "x1": rng.normal(0, 1),
                "region": "north" if unit <= 2 else "south",
            })
    return pd.DataFrame(rows)


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture(scope="session")
def scenario_panel() -> pd.DataFrame:
    """676 units x 20 periods, ~40% treated with onset in {7, 8, 9}, effect -3."""
    return make_staggered_panel()


@pytest.fixture
def engine_factory():
    """Build a ``FakeEngine`` with custom ``drop``/``reverse`` settings."""
    return FakeEngine


@pytest.fixture
def failing_engine() -> FailingEngine:
    return FailingEngine()


@pytest.fixture(scope="session")
def panel_factory():
    """Build a synthetic staggered panel with custom size and seed."""
    return make_staggered_panel
