"""Binned-endpoint event-study equivalence check.

A distributed-lag model and a binned-endpoint event study with the same
window, fixed effects, clustering and estimation sample are two
parametrizations of one regression, so the cumulative-sum betas and the
event-study coefficients agree up to floating-point error. This module fits
the event-study side and compares the two.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from .._types import PanelConfig, WindowSpec
from ..estimation.engine import FixestEngine, RegressionEngine
from ..estimation.estimator import DLMResult
from ..estimation.transform import get_z
from ..exceptions import SampleMismatch, UnderdeterminedModel
from ..panels.binned import BinnedEventStudyPanel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EventStudyResult:
    """Binned-endpoint event-study estimates in the beta-table layout."""

    betas: pd.DataFrame
    n_obs: int
    n_clusters: int


@dataclass(frozen=True)
class EquivalenceReport:
    """Largest absolute differences between the two sets of estimates."""

    max_coef_diff: float
    max_se_diff: float
    n_obs: int
    atol: float

    @property
    def passed(self) -> bool:
        return self.max_coef_diff <= self.atol and self.max_se_diff <= self.atol


def expected_sample_size(
    df: pd.DataFrame,
    config: PanelConfig | None,
    window: WindowSpec,
) -> int:
    """Rows in the window's calendar time range ``[t_min + to, t_max - num_leads]``."""
    panel = BinnedEventStudyPanel(df, config=config, window=window)
    return len(panel.estimation_sample(panel.build()))


def fit_binned_event_study(
    df: pd.DataFrame,
    outcome: str,
    config: PanelConfig | None,
    window: WindowSpec,
    covariates: Sequence[str] | None = None,
    absorb: Sequence[str] | None = None,
    engine: RegressionEngine | None = None,
    level: float = 0.95,
) -> EventStudyResult:
    """Estimate the binned-endpoint event study for ``window``.

    Uses the same absorbed fixed effects (unit, time and ``absorb``) and
    unit clustering as ``DistributedLagModel``.

    Returns
    -------
    EventStudyResult
        ``betas`` has columns ``time_to_event``, ``coef``, ``se``, ``ci_lo``,
        ``ci_hi``, with the reference row fixed at zero.
    """
    engine = engine or FixestEngine()
    covariates = list(covariates or [])
    absorb = list(absorb or [])
    z = get_z(level)

    panel = BinnedEventStudyPanel(df, config=config, window=window)
    c = panel.config
    sample = panel.estimation_sample(panel.build()).dropna(subset=[outcome] + covariates + absorb)

    dummies = list(panel.dummy_columns.values())
    result = engine.fit(
        sample,
        outcome=outcome,
        regressors=dummies + covariates,
        absorb=[c.unit_col, c.time_col] + absorb,
        cluster=c.unit_col,
    )
    missing = [d for d in dummies if d not in result.coef.index]
    if missing:
        raise UnderdeterminedModel(f"Event-time dummies {missing} were not estimated")

    coefs, ses = [], []
    for e in window.event_times:
        if e == window.ref:
            coefs.append(0.0)
            ses.append(0.0)
            continue
        col = panel.dummy_columns[e]
        coefs.append(float(result.coef[col]))
        ses.append(float(np.sqrt(result.vcov.loc[col, col])))

    coefs = np.asarray(coefs)
    ses = np.asarray(ses)
    betas = pd.DataFrame({
        "time_to_event": np.asarray(list(window.event_times), dtype=int),
        "coef": coefs,
        "se": ses,
        "ci_lo": coefs - z * ses,
        "ci_hi": coefs + z * ses,
    })
    return EventStudyResult(betas=betas, n_obs=result.n_obs, n_clusters=result.n_clusters)


def compare_to_event_study(
    dlm_result: DLMResult,
    es_result: EventStudyResult,
    atol: float = 1e-6,
    expected_n: int | None = None,
) -> EquivalenceReport:
    """Compare distributed-lag betas with binned event-study coefficients.

    Parameters
    ----------
    dlm_result : DLMResult
        Output of ``dlm`` / ``DistributedLagModel.fit``.
    es_result : EventStudyResult
        Output of ``fit_binned_event_study`` for the same window.
    atol : float
        Tolerance reported through ``EquivalenceReport.passed``.
    expected_n : int, optional
        Independently computed sample size (see ``expected_sample_size``).

    Raises
    ------
    SampleMismatch
        If the two samples (or ``expected_n``) differ in size.
    """
    if dlm_result.n_obs != es_result.n_obs:
        raise SampleMismatch(
            f"Distributed-lag sample has {dlm_result.n_obs:,} rows, "
            f"event-study sample has {es_result.n_obs:,}"
        )
    if expected_n is not None and dlm_result.n_obs != expected_n:
        raise SampleMismatch(
            f"Estimation sample has {dlm_result.n_obs:,} rows, expected {expected_n:,}"
        )

    left = dlm_result.betas.set_index("time_to_event")
    right = es_result.betas.set_index("time_to_event")
    if not left.index.equals(right.index):
        raise ValueError("Beta tables cover different event times")

    report = EquivalenceReport(
        max_coef_diff=float((left["coef"] - right["coef"]).abs().max()),
        max_se_diff=float((left["se"] - right["se"]).abs().max()),
        n_obs=dlm_result.n_obs,
        atol=atol,
    )
    logger.info(
        "Equivalence check on %s rows: max |coef diff| %.2e, max |se diff| %.2e",
        f"{report.n_obs:,}",
        report.max_coef_diff,
        report.max_se_diff,
    )
    return report
