"""Fixed-effects regression engine.

The estimator never solves the regression itself. It hands the prepared
sample to a ``RegressionEngine`` and consumes the labelled coefficients and
covariance matrix it returns. ``FixestEngine`` is the default engine and
wraps ``pyfixest.feols``; any object with a matching ``fit`` method can be
used instead.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
import pandas as pd

from ..exceptions import MissingDependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineResult:
    """Output of one fixed-effects regression.

    ``coef`` and ``vcov`` are labelled by regressor column name, with
    ``vcov`` carrying the same labels on both axes.
    """

    coef: pd.Series
    vcov: pd.DataFrame
    n_obs: int
    n_clusters: int


@runtime_checkable
class RegressionEngine(Protocol):
    """Protocol for absorbed, cluster-robust linear regression."""

    def fit(
        self,
        data: pd.DataFrame,
        outcome: str,
        regressors: Sequence[str],
        absorb: Sequence[str],
        cluster: str,
    ) -> EngineResult:
        """Regress ``outcome`` on ``regressors`` absorbing ``absorb``, clustered by ``cluster``."""
        ...


def build_formula(outcome: str, regressors: Sequence[str], absorb: Sequence[str]) -> str:
    """Build a pyfixest formula, e.g. ``y ~ x_lead1 + x_lag0 | unit + time``."""
    formula = f"{outcome} ~ " + " + ".join(regressors)
    if absorb:
        formula += " | " + " + ".join(absorb)
    return formula


class FixestEngine:
    """``RegressionEngine`` backed by ``pyfixest.feols`` with CRV1 clustering."""

    def fit(
        self,
        data: pd.DataFrame,
        outcome: str,
        regressors: Sequence[str],
        absorb: Sequence[str],
        cluster: str,
    ) -> EngineResult:
        try:
            import pyfixest as pf
        except ImportError as exc:
            raise MissingDependency(
                "pyfixest is required for estimation: pip install pyfixest"
            ) from exc

        formula = build_formula(outcome, regressors, absorb)
        logger.debug("feols: %s, vcov CRV1 by %s", formula, cluster)

        fit = pf.feols(fml=formula, data=data, vcov={"CRV1": cluster})

        coef = fit.coef().astype(float)
        names = coef.index.tolist()
        # pyfixest (>=0.18,<1) has no public accessor for the full matrix;
        # _vcov is stored in coef() order.
        vcov = pd.DataFrame(np.asarray(fit._vcov, dtype=float), index=names, columns=names)
        n_obs = int(fit._N)
        n_clusters = int(data[cluster].nunique())

        return EngineResult(coef=coef, vcov=vcov, n_obs=n_obs, n_clusters=n_clusters)

