"""Lead/lag panel for distributed-lag estimation.

For each unit the exposure is shifted in calendar time, not by row position,
so a gap in a unit's periods leaves the affected leads and lags undefined
rather than silently borrowing a non-adjacent period.

Reference:
    Schmidheiny, K., & Siegloch, S. (2023). On event studies and distributed-
    lags in two-way fixed effects models: Identification, equivalence, and
    generalization. Journal of Applied Econometrics.
"""

from __future__ import annotations

import logging

import pandas as pd

from ..regressors import Regressor, canonical_regressors
from ._base import BasePanelBuilder

logger = logging.getLogger(__name__)

COMPLETE_COL = "dlm_complete"


class LeadLagPanel(BasePanelBuilder):
    """Append lead and lag columns of the exposure for an event window.

    Produces ``num_leads = |from_| - 1`` lead columns and ``to + 1`` lag
    columns in canonical order (``lead{num_leads}, ..., lead1, lag0, ...,
    lag{to}``). A lead/lag value is undefined (NaN) when the neighbouring
    period does not exist for the unit or its exposure is missing; such rows
    are flagged incomplete and left out of ``estimation_sample()``.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data with ``unit_col``, ``time_col``, and ``exposure_col``.
    config : PanelConfig, optional
        Column name mapping.
    window : WindowSpec
        Event window defining which leads and lags are built.

    Example
    -------
    >>> window = WindowSpec(from_=-3, to=3)
    >>> panel = LeadLagPanel(df, config=config, window=window)
    >>> sample = panel.estimation_sample()
    >>> panel.columns[Lag(0)]
    'treat_lag0'
    """

    def __init__(self, df, config=None, window=None):
        super().__init__(df, config=config, window=window)
        self.regressors: tuple[Regressor, ...] = canonical_regressors(self.window)
        self.columns: dict[Regressor, str] = {
            r: r.column(self.config.exposure_col) for r in self.regressors
        }
        self._check_new_columns(list(self.columns.values()) + [COMPLETE_COL])

    def build(self) -> pd.DataFrame:
        """Build the panel with lead/lag columns and a completeness flag.

        Returns
        -------
        pd.DataFrame
            Input rows sorted by unit and time, with the K regressor columns
            appended in canonical order followed by ``dlm_complete`` (True
            where every regressor is defined).
        """
        c = self.config
        df = self._df.sort_values([c.unit_col, c.time_col], kind="mergesort")

        exposure = pd.Series(
            df[c.exposure_col].to_numpy(dtype=float),
            index=pd.MultiIndex.from_arrays([df[c.unit_col], df[c.time_col]]),
        )
        units = df[c.unit_col].to_numpy()
        times = df[c.time_col].to_numpy()

        new_cols = {}
        for reg in self.regressors:
            source = pd.MultiIndex.from_arrays([units, times - reg.offset])
            new_cols[self.columns[reg]] = exposure.reindex(source).to_numpy()

        lagged = pd.DataFrame(new_cols, index=df.index)
        df = pd.concat([df, lagged], axis=1)
        df[COMPLETE_COL] = lagged.notna().all(axis=1).to_numpy()

        self._panel = df
        self._log_summary(df)
        return df

    def estimation_sample(self, df: pd.DataFrame | None = None) -> pd.DataFrame:
        """Keep only rows where every lead and lag is defined.

        Parameters
        ----------
        df : pd.DataFrame, optional
            Panel from ``build()``. If None, uses cached panel.

        Returns
        -------
        pd.DataFrame
            Complete rows, without the ``dlm_complete`` flag.
        """
        if df is None:
            df = self.panel
        sample = df[df[COMPLETE_COL]].drop(columns=COMPLETE_COL)
        logger.info(
            "Estimation sample: %s -> %s rows", f"{len(df):,}", f"{len(sample):,}"
        )
        return sample

    def _log_summary(self, df: pd.DataFrame) -> None:
        n_incomplete = int((~df[COMPLETE_COL]).sum())
        logger.info(
            "Lead/lag panel built: %d leads, %d lags, %s incomplete rows",
            self.window.num_leads,
            self.window.num_lags,
            f"{n_incomplete:,}",
        )
        logger.debug("Regressor columns: %s", list(self.columns.values()))
