"""Distributed-lag event-study estimator.

Orchestrates one estimation: validate the window, build leads and lags on an
owned copy of the panel, fit the fixed-effects regression, pick the gammas
by regressor identity and transform them into event-study betas.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .._types import PanelConfig, WindowSpec
from ..exceptions import UnderdeterminedModel
from ..panels import LeadLagPanel
from .engine import FixestEngine, RegressionEngine, build_formula
from .gamma import extract_gamma
from .transform import beta_covariance, gamma_to_beta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DLMResult:
    """Results of a distributed-lag estimation.

    Attributes
    ----------
    betas : pd.DataFrame
        Event-study table with columns ``time_to_event``, ``coef``, ``se``,
        ``ci_lo``, ``ci_hi``; one row per event time in ``[from_, to]``.
    gamma : pd.Series
        Lead/lag coefficients labelled ``lead{k}`` / ``lag{k}``.
    gamma_vcov : pd.DataFrame
        Covariance of ``gamma``.
    beta_vcov : pd.DataFrame
        Covariance of the betas, labelled by event time.
    n_obs, n_clusters : int
        Estimation sample size and number of unit clusters.
    """

    betas: pd.DataFrame
    gamma: pd.Series
    gamma_vcov: pd.DataFrame
    beta_vcov: pd.DataFrame
    n_obs: int
    n_clusters: int
    window: WindowSpec
    outcome: str
    exposure: str
    unit: str
    time: str

    @property
    def from_(self) -> int:
        return self.window.from_

    @property
    def to(self) -> int:
        return self.window.to

    @property
    def ref_period(self) -> int:
        return self.window.ref

    def summary(self) -> str:
        """Formatted event-study table with sample information."""
        header = (
            f"Distributed-lag event study: {self.outcome} on {self.exposure}\n"
            f"Window [{self.from_}, {self.to}], reference period {self.ref_period}\n"
            f"Fixed effects: {self.unit}, {self.time}; SE clustered by {self.unit}\n"
            f"N = {self.n_obs:,}, clusters = {self.n_clusters:,}\n"
        )
        table = self.betas.to_string(index=False, float_format=lambda x: f"{x:.4f}")
        return header + table


def _subset_mask(df: pd.DataFrame, subset: pd.Series | np.ndarray | str | None) -> np.ndarray | None:
    """Resolve a row filter into a boolean array aligned with ``df`` by position."""
    if subset is None:
        return None
    if isinstance(subset, str):
        mask = np.asarray(df.eval(subset))
    elif isinstance(subset, pd.Series):
        if not subset.index.equals(df.index):
            raise ValueError("subset mask must share the DataFrame's index")
        mask = subset.to_numpy()
    else:
        arr = np.asarray(subset)
        if arr.shape != (len(df),):
            raise ValueError(f"subset mask has shape {arr.shape}, expected ({len(df)},)")
        mask = arr
    if mask.dtype != bool:
        raise ValueError("subset must evaluate to a boolean mask")
    return mask


class DistributedLagModel:
    """Estimate a distributed-lag model and report event-study betas.

    Parameters
    ----------
    config : PanelConfig, optional
        Column name mapping for unit, time and exposure.
    window : WindowSpec
        Event window and reference period.
    engine : RegressionEngine, optional
        Fixed-effects solver. Defaults to ``FixestEngine``.
    level : float
        Confidence level of the reported intervals. Default 0.95.
    verbose : bool
        Log the formula, sample and gamma table at INFO instead of DEBUG.

    Example
    -------
    >>> model = DistributedLagModel(config, WindowSpec(from_=-3, to=3))
    >>> res = model.fit(df, outcome="y")
    >>> res.betas
    """

    def __init__(
        self,
        config: PanelConfig | None = None,
        window: WindowSpec | None = None,
        engine: RegressionEngine | None = None,
        level: float = 0.95,
        verbose: bool = False,
    ):
        if not isinstance(window, WindowSpec):
            raise TypeError(f"window must be a WindowSpec, got {type(window).__name__}")
        self.config = config or PanelConfig()
        self.window = window
        self.engine = engine or FixestEngine()
        self.level = level
        self.verbose = verbose

    def fit(
        self,
        df: pd.DataFrame,
        outcome: str,
        covariates: Sequence[str] | None = None,
        absorb: Sequence[str] | None = None,
        subset: pd.Series | np.ndarray | str | None = None,
    ) -> DLMResult:
        """Run the estimation on ``df`` without modifying it.

        Parameters
        ----------
        df : pd.DataFrame
            Panel with unit, time, exposure, outcome and any covariates.
        outcome : str
            Dependent variable.
        covariates : sequence of str, optional
            Additional regressors estimated alongside the leads and lags.
        absorb : sequence of str, optional
            Fixed effects absorbed in addition to unit and time.
        subset : boolean mask or str, optional
            Row filter, either a boolean mask indexed like ``df`` or a
            ``DataFrame.eval`` expression. Leads and lags are still built
            from the full panel; the filter only restricts the sample.

        Returns
        -------
        DLMResult

        Raises
        ------
        MissingDependency
            If the default engine's library is not installed.
        UnderdeterminedModel
            If no complete rows remain or the regression does not identify
            every lead and lag.
        """
        c = self.config
        covariates = list(covariates or [])
        absorb = list(absorb or [])
        log = logger.info if self.verbose else logger.debug

        needed = [outcome] + covariates + absorb
        missing = [col for col in needed if col not in df.columns]
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Available: {sorted(df.columns.tolist())}"
            )
        mask = _subset_mask(df, subset)

        panel = LeadLagPanel(df, config=c, window=self.window)
        sample = panel.estimation_sample(panel.build())
        if mask is not None:
            # panel rows are labelled by position in df
            sample = sample[mask[sample.index.to_numpy()]]
            log("Row filter applied: %s rows remain", f"{len(sample):,}")

        before = len(sample)
        sample = sample.dropna(subset=needed)
        if len(sample) < before:
            log("Dropped %s rows with missing outcome or covariates", f"{before - len(sample):,}")
        if sample.empty:
            raise UnderdeterminedModel(
                f"No observations have every lead and lag defined for window "
                f"[{self.window.from_}, {self.window.to}]"
            )

        regressors = [panel.columns[r] for r in panel.regressors]
        fe = [c.unit_col, c.time_col] + absorb
        log("Formula: %s (clustered by %s)", build_formula(outcome, regressors + covariates, fe), c.unit_col)

        result = self.engine.fit(
            sample,
            outcome=outcome,
            regressors=regressors + covariates,
            absorb=fe,
            cluster=c.unit_col,
        )
        gamma, gamma_vcov = extract_gamma(result, panel.columns)
        betas = gamma_to_beta(gamma, gamma_vcov, self.window, level=self.level)
        beta_vcov = beta_covariance(gamma_vcov, self.window)

        log("N = %s, clusters = %s", f"{result.n_obs:,}", f"{result.n_clusters:,}")
        log("Gamma coefficients:\n%s", gamma.to_string())

        return DLMResult(
            betas=betas,
            gamma=gamma,
            gamma_vcov=gamma_vcov,
            beta_vcov=beta_vcov,
            n_obs=result.n_obs,
            n_clusters=result.n_clusters,
            window=self.window,
            outcome=outcome,
            exposure=c.exposure_col,
            unit=c.unit_col,
            time=c.time_col,
        )


def dlm(
    df: pd.DataFrame,
    outcome: str,
    exposure: str,
    unit: str,
    time: str,
    from_: int,
    to: int,
    ref: int = -1,
    covariates: Sequence[str] | None = None,
    absorb: Sequence[str] | None = None,
    subset: pd.Series | np.ndarray | str | None = None,
    verbose: bool = False,
    level: float = 0.95,
    engine: RegressionEngine | None = None,
) -> DLMResult:
    """Estimate a distributed-lag model and return event-study betas.

    The window is validated before any data is touched. See
    ``DistributedLagModel.fit`` for the remaining parameters.

    Example
    -------
    >>> res = dlm(df, "y", "treat", "unit", "time", from_=-3, to=3)
    >>> print(res.summary())
    """
    window = WindowSpec(from_=from_, to=to, ref=ref)
    config = PanelConfig(unit_col=unit, time_col=time, exposure_col=exposure)
    model = DistributedLagModel(config, window, engine=engine, level=level, verbose=verbose)
    return model.fit(df, outcome, covariates=covariates, absorb=absorb, subset=subset)
