"""Binned-endpoint event-study panel.

The event-study design that a distributed-lag model with the same window is
algebraically equivalent to: one dummy per non-reference event time, with
the two window endpoints binned so that ``from_`` collects every event time
at or before it and ``to`` every event time at or after it. Never-exposed
units carry the ``fill_value`` sentinel as first exposure time and are zero
on every dummy.

The equivalence requires an absorbing binary exposure (0 before first
exposure, 1 from then on) and the same estimation sample, which for a
balanced panel is the time range ``[t_min + to, t_max - num_leads]``.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from ._base import BasePanelBuilder

logger = logging.getLogger(__name__)


def event_label(event_time: int) -> str:
    """``-3 -> 'm3'``, ``2 -> 'p2'``."""
    return f"m{-event_time}" if event_time < 0 else f"p{event_time}"


class BinnedEventStudyPanel(BasePanelBuilder):
    """Build binned-endpoint event-time dummies for a window.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data with ``unit_col``, ``time_col``, and ``exposure_col``.
    config : PanelConfig, optional
        Column name mapping.
    window : WindowSpec
        Event window; the dummy for ``window.ref`` is omitted.

    Example
    -------
    >>> panel = BinnedEventStudyPanel(df, config=config, window=WindowSpec(-3, 3))
    >>> sample = panel.estimation_sample()
    >>> panel.dummy_columns
    {-3: 'treat_es_m3', -2: 'treat_es_m2', 0: 'treat_es_p0', ...}
    """

    def __init__(self, df, config=None, window=None):
        super().__init__(df, config=config, window=window)
        w = self.window
        self.dummy_columns: dict[int, str] = {
            e: f"{self.config.exposure_col}_es_{event_label(e)}"
            for e in w.event_times
            if e != w.ref
        }
        self._check_new_columns(
            list(self.dummy_columns.values()) + ["first_event_time", "event_time"]
        )

    def build(self) -> pd.DataFrame:
        """Build the event-study panel.

        Returns
        -------
        pd.DataFrame
            Panel with added columns:

            - ``first_event_time``: first exposure time (fill_value for never-exposed)
            - ``event_time``: periods relative to first exposure (NaN for never-exposed)
            - one 0/1 dummy per non-reference event time, endpoints binned
        """
        c = self.config
        w = self.window
        df = self._df.sort_values([c.unit_col, c.time_col], kind="mergesort")

        first_event = self._compute_first_event()
        df["first_event_time"] = (
            df[c.unit_col].map(first_event).fillna(c.fill_value).astype(int)
        )
        df["event_time"] = np.where(
            df["first_event_time"] != c.fill_value,
            df[c.time_col] - df["first_event_time"],
            np.nan,
        )

        et = df["event_time"]
        for e, col in self.dummy_columns.items():
            if e == w.from_:
                hit = et <= e
            elif e == w.to:
                hit = et >= e
            else:
                hit = et == e
            df[col] = hit.astype(int)

        self._panel = df
        self._log_summary(df)
        return df

    def time_range(self) -> tuple[float, float]:
        """Calendar periods kept in the estimation sample, inclusive."""
        c = self.config
        t_min = self._df[c.time_col].min()
        t_max = self._df[c.time_col].max()
        return t_min + self.window.to, t_max - self.window.num_leads

    def estimation_sample(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Restrict the panel to the window's calendar time range.

        Parameters
        ----------
        df : pd.DataFrame, optional
            Panel from ``build()``. If None, uses cached panel.
        """
        if df is None:
            df = self.panel
        lo, hi = self.time_range()
        t = df[self.config.time_col]
        sample = df[(t >= lo) & (t <= hi)]
        logger.info(
            "Event-study sample (time in [%s, %s]): %s -> %s rows",
            lo,
            hi,
            f"{len(df):,}",
            f"{len(sample):,}",
        )
        return sample

    def _log_summary(self, df: pd.DataFrame) -> None:
        c = self.config
        units = df.drop_duplicates(c.unit_col)
        n_exposed = int((units["first_event_time"] != c.fill_value).sum())
        logger.info("Binned event-study panel built")
        logger.info("  exposed: %s units", f"{n_exposed:,}")
        logger.info("  never exposed: %s units", f"{len(units) - n_exposed:,}")
