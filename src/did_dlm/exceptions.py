"""Exceptions raised by did-dlm."""


class DLMError(Exception):
    """Base class for all did-dlm errors."""


class InvalidWindow(DLMError, ValueError):
    """The (from, to, ref) event window violates its constraints."""


class MissingDependency(DLMError, ImportError):
    """The fixed-effects regression engine is not installed."""


class UnderdeterminedModel(DLMError):
    """The regression returned fewer coefficients than the window requires.

    Typical causes are collinear leads/lags or a panel too short for the
    requested window.
    """


class SampleMismatch(DLMError):
    """Two estimation samples that should coincide differ in size."""
