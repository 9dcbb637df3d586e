"""did-dlm: Distributed-lag event-study estimation with fixed effects."""

from ._types import PanelConfig, WindowSpec
from .estimation import DistributedLagModel, DLMResult, dlm
from .exceptions import (
    DLMError,
    InvalidWindow,
    MissingDependency,
    SampleMismatch,
    UnderdeterminedModel,
)
from .panels import BinnedEventStudyPanel, LeadLagPanel
from .regressors import Lag, Lead, Regressor, canonical_regressors

__all__ = [
    "PanelConfig",
    "WindowSpec",
    "DistributedLagModel",
    "DLMResult",
    "dlm",
    "LeadLagPanel",
    "BinnedEventStudyPanel",
    "Regressor",
    "Lead",
    "Lag",
    "canonical_regressors",
    "DLMError",
    "InvalidWindow",
    "MissingDependency",
    "UnderdeterminedModel",
    "SampleMismatch",
]

__version__ = "0.1.0"
