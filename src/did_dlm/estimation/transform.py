"""Gamma-to-beta transformation.

Distributed-lag coefficients (gammas) on ``Lead(num_leads), ..., Lead(1),
Lag(0), ..., Lag(to)`` are turned into event-study coefficients (betas) on
event times ``from_, ..., to`` by cumulative sums anchored at the reference
period:

- after the reference, ``beta[ref + i]`` is the forward sum of the first
  ``i`` gammas following the before-block;
- before the reference, ``beta[from_ + i - 1]`` is minus the sum of the
  before-block gammas from position ``i`` up to the reference;
- ``beta[ref]`` is 0 with standard error 0.

Variances follow from the delta method: for a ones-vector ``a`` over the
summed block, ``var = a' V[block, block] a``. The resulting betas coincide
with the coefficients of a binned-endpoint event-study regression estimated
on the same sample.
"""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd

from .._types import WindowSpec
from ..exceptions import UnderdeterminedModel

logger = logging.getLogger(__name__)

BETA_COLUMNS = ["time_to_event", "coef", "se", "ci_lo", "ci_hi"]

# Normal critical values; the interval is coef +/- z * se, not a t interval.
Z_VALUES = {
    0.80: 1.282,
    0.90: 1.645,
    0.95: 1.960,
    0.99: 2.576,
}


def get_z(level: float) -> float:
    """Get z-value for a confidence level."""
    if level in Z_VALUES:
        return Z_VALUES[level]
    raise ValueError(f"Unsupported CI level: {level}. Use one of {list(Z_VALUES.keys())}")


def _as_arrays(
    gamma: pd.Series | np.ndarray,
    vcov: pd.DataFrame | np.ndarray,
    window: WindowSpec,
) -> tuple[np.ndarray, np.ndarray]:
    g = np.asarray(gamma, dtype=float)
    v = np.asarray(vcov, dtype=float)
    k = window.n_regressors
    if g.ndim != 1 or g.shape[0] != k:
        raise UnderdeterminedModel(
            f"Window {window.from_}..{window.to} (ref {window.ref}) needs "
            f"{k} gamma coefficients, got {g.size}"
        )
    if v.shape != (k, k):
        raise UnderdeterminedModel(f"Gamma covariance must be {k}x{k}, got {v.shape}")
    if isinstance(gamma, pd.Series) and isinstance(vcov, pd.DataFrame):
        if not (vcov.index.equals(gamma.index) and vcov.columns.equals(gamma.index)):
            raise UnderdeterminedModel("Gamma covariance labels do not match gamma labels")
    return g, v


def _block_sum(g: np.ndarray, v: np.ndarray, block: slice) -> tuple[float, float]:
    a = np.ones(block.stop - block.start)
    return float(g[block].sum()), float(a @ v[block, block] @ a)


def gamma_to_beta(
    gamma: pd.Series | np.ndarray,
    vcov: pd.DataFrame | np.ndarray,
    window: WindowSpec,
    level: float = 0.95,
) -> pd.DataFrame:
    """Transform gamma coefficients into the event-study beta table.

    Parameters
    ----------
    gamma : pd.Series or np.ndarray
        K coefficients in canonical regressor order.
    vcov : pd.DataFrame or np.ndarray
        K x K covariance of ``gamma``, index-aligned.
    window : WindowSpec
        Event window the gammas were estimated for.
    level : float
        Confidence level for the normal-approximation interval. Default 0.95
        (z = 1.96).

    Returns
    -------
    pd.DataFrame
        One row per event time in ``[from_, to]`` with columns
        ``time_to_event``, ``coef``, ``se``, ``ci_lo``, ``ci_hi``.

    Raises
    ------
    UnderdeterminedModel
        If the gamma length or covariance shape does not match the window.
    """
    g, v = _as_arrays(gamma, vcov, window)
    z = get_z(level)
    nb, na = window.num_before, window.num_after

    times, coefs, variances = [], [], []
    for i in range(1, nb + 1):
        coef, var = _block_sum(g, v, slice(i - 1, nb))
        times.append(window.from_ + i - 1)
        coefs.append(-coef)
        variances.append(var)

    times.append(window.ref)
    coefs.append(0.0)
    variances.append(0.0)

    for i in range(1, na + 1):
        coef, var = _block_sum(g, v, slice(nb, nb + i))
        times.append(window.ref + i)
        coefs.append(coef)
        variances.append(var)

    variances = np.asarray(variances)
    negative = variances < 0
    if negative.any():
        logger.warning(
            "Negative variance at event times %s (min %.3g); standard errors set to NaN",
            [t for t, neg in zip(times, negative) if neg],
            variances.min(),
        )
    with np.errstate(invalid="ignore"):
        se = np.sqrt(variances)

    coefs = np.asarray(coefs)
    return pd.DataFrame({
        "time_to_event": np.asarray(times, dtype=int),
        "coef": coefs,
        "se": se,
        "ci_lo": coefs - z * se,
        "ci_hi": coefs + z * se,
    })


def transformation_matrix(window: WindowSpec, labels: list[str] | None = None) -> pd.DataFrame:
    """Linear map ``A`` with ``betas = A @ gamma``.

    Rows are event times ``from_..to``; columns are gamma positions (or
    ``labels``). The reference row is all zeros.
    """
    k = window.n_regressors
    nb = window.num_before
    a = np.zeros((window.total_periods, k))
    for row, t in enumerate(window.event_times):
        if t < window.ref:
            a[row, t - window.from_:nb] = -1.0
        elif t > window.ref:
            a[row, nb:nb + t - window.ref] = 1.0
    columns = labels if labels is not None else list(range(k))
    return pd.DataFrame(a, index=pd.Index(list(window.event_times), name="time_to_event"), columns=columns)


def beta_covariance(vcov: pd.DataFrame | np.ndarray, window: WindowSpec) -> pd.DataFrame:
    """Full covariance ``A V A'`` of the betas, labelled by event time."""
    v = np.asarray(vcov, dtype=float)
    k = window.n_regressors
    if v.shape != (k, k):
        raise UnderdeterminedModel(f"Gamma covariance must be {k}x{k}, got {v.shape}")
    a = transformation_matrix(window)
    out = a.to_numpy() @ v @ a.to_numpy().T
    return pd.DataFrame(out, index=a.index, columns=a.index.rename(None))
