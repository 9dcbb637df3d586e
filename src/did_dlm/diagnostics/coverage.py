"""Window coverage: which units contribute rows to a distributed-lag sample."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .._types import PanelConfig, WindowSpec
from ..panels.lead_lag import COMPLETE_COL, LeadLagPanel


class WindowCoverage:
    """Analyze how much of each unit's panel survives the lead/lag window.

    A row only enters the estimation sample when every lead and lag is
    defined, so short panels and gaps cost ``|from_| - 1 + to`` or more
    periods per unit. Units with no complete row make the model
    underdetermined for that window.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping.
    window : WindowSpec
        Event window.
    """

    def __init__(self, config: PanelConfig | None = None, window: WindowSpec | None = None):
        self.config = config or PanelConfig()
        self.window = window

    def compute(self, df: pd.DataFrame) -> pd.DataFrame:
        """Compute unit-level window coverage statistics.

        Returns
        -------
        pd.DataFrame
            One row per unit with columns: n_periods, time_span, n_gaps,
            n_complete, complete_rate, min_time, max_time.
        """
        c = self.config
        built = LeadLagPanel(df, config=c, window=self.window).build()

        def _unit_stats(group: pd.DataFrame) -> pd.Series:
            times = np.sort(group[c.time_col].unique())
            n_periods = len(times)
            time_span = int(times[-1] - times[0]) + 1
            n_complete = int(group[COMPLETE_COL].sum())
            return pd.Series({
                "n_periods": n_periods,
                "time_span": time_span,
                "n_gaps": int(np.sum(np.diff(times) > 1)),
                "n_complete": n_complete,
                "complete_rate": round(n_complete / n_periods, 4),
                "min_time": times[0],
                "max_time": times[-1],
            })

        return (
            built.groupby(c.unit_col)[[c.time_col, COMPLETE_COL]]
            .apply(_unit_stats)
            .reset_index()
        )

    def summary(self, df: pd.DataFrame) -> pd.DataFrame:
        """Aggregate window coverage across all units.

        Parameters
        ----------
        df : pd.DataFrame
            Panel data (not pre-computed coverage stats).

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with sample totals and unit counts.
        """
        coverage = self.compute(df)
        n_units = len(coverage)
        n_contributing = int((coverage["n_complete"] > 0).sum())
        stats = {
            "n_obs": int(coverage["n_periods"].sum()),
            "n_complete": int(coverage["n_complete"].sum()),
            "n_units": n_units,
            "n_units_contributing": n_contributing,
            "n_units_with_gaps": int((coverage["n_gaps"] > 0).sum()),
            "pct_contributing": round(n_contributing / n_units * 100, 1) if n_units else 0.0,
        }
        return pd.DataFrame([stats])
