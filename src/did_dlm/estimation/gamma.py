"""Select the distributed-lag block from a regression's full output."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import pandas as pd

from ..exceptions import UnderdeterminedModel
from ..regressors import Regressor
from .engine import EngineResult

logger = logging.getLogger(__name__)


def extract_gamma(
    result: EngineResult,
    columns: Mapping[Regressor, str],
) -> tuple[pd.Series, pd.DataFrame]:
    """Slice gamma and its covariance out of an engine result by regressor identity.

    Parameters
    ----------
    result : EngineResult
        Full regression output, possibly including covariates.
    columns : Mapping[Regressor, str]
        Regressor identity to the column name it was estimated under.

    Returns
    -------
    gamma : pd.Series
        K coefficients in canonical regressor order, labelled ``lead2``, ...
        ``lag0``, ...
    vcov : pd.DataFrame
        K x K covariance block with the same labels on both axes.

    Raises
    ------
    UnderdeterminedModel
        If the regression returned fewer than K coefficients, or any
        regressor is missing from its output (e.g. dropped as collinear).
    """
    regressors = sorted(columns)
    k = len(regressors)
    if len(result.coef) < k:
        raise UnderdeterminedModel(
            f"Regression returned {len(result.coef)} coefficients, "
            f"the window requires {k} leads and lags"
        )

    names = [columns[r] for r in regressors]
    missing = [n for n in names if n not in result.coef.index or n not in result.vcov.index]
    if missing:
        raise UnderdeterminedModel(
            f"Regressors {missing} are missing from the regression output "
            "(collinear or too few periods for the window)"
        )

    labels = [r.label for r in regressors]
    gamma = pd.Series(result.coef.loc[names].to_numpy(dtype=float), index=labels, name="gamma")
    vcov = pd.DataFrame(
        result.vcov.loc[names, names].to_numpy(dtype=float), index=labels, columns=labels
    )
    logger.debug("Extracted %d gamma coefficients", k)
    return gamma, vcov
