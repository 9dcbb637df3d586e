"""Estimation: regression engine adapter, gamma extraction and beta transformation."""

from .engine import EngineResult, FixestEngine, RegressionEngine
from .estimator import DistributedLagModel, DLMResult, dlm
from .gamma import extract_gamma
from .transform import beta_covariance, gamma_to_beta, transformation_matrix

__all__ = [
    "DistributedLagModel",
    "DLMResult",
    "dlm",
    "EngineResult",
    "FixestEngine",
    "RegressionEngine",
    "extract_gamma",
    "gamma_to_beta",
    "beta_covariance",
    "transformation_matrix",
]
