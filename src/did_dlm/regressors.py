"""Tagged identities for distributed-lag regressors.

A regressor is either ``Lead(k)`` (exposure ``k`` periods in the future,
``k >= 1``) or ``Lag(k)`` (exposure ``k`` periods in the past, ``k >= 0``).
Regressors sort by their signed event offset, so all leads precede all lags,
``Lead(3) < Lead(1)`` and ``Lag(0) < Lag(2)``. That order is the canonical
column order of the lead/lag panel and the row order of the gamma vector.
"""

from __future__ import annotations

import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass

from ._types import WindowSpec


@functools.total_ordering
@dataclass(frozen=True)
class Regressor(ABC):
    """Base class for ``Lead`` and ``Lag``."""

    k: int

    @property
    @abstractmethod
    def offset(self) -> int:
        """Signed event offset. The value at ``(unit, t)`` is the exposure at ``t - offset``."""

    @property
    @abstractmethod
    def label(self) -> str:
        """Short name, e.g. ``lead2`` or ``lag0``."""

    def column(self, exposure: str) -> str:
        """Column name of this regressor for the given exposure variable."""
        return f"{exposure}_{self.label}"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Regressor):
            return NotImplemented
        return self.offset < other.offset


@dataclass(frozen=True)
class Lead(Regressor):
    def __post_init__(self) -> None:
        if self.k < 1:
            raise ValueError(f"Lead order must be >= 1, got {self.k}")

    @property
    def offset(self) -> int:
        return -self.k

    @property
    def label(self) -> str:
        return f"lead{self.k}"


@dataclass(frozen=True)
class Lag(Regressor):
    def __post_init__(self) -> None:
        if self.k < 0:
            raise ValueError(f"Lag order must be >= 0, got {self.k}")

    @property
    def offset(self) -> int:
        return self.k

    @property
    def label(self) -> str:
        return f"lag{self.k}"


def canonical_regressors(window: WindowSpec) -> tuple[Regressor, ...]:
    """Regressors for ``window`` in canonical order.

    ``Lead(num_leads), ..., Lead(1), Lag(0), ..., Lag(to)``. Position ``p``
    (1-based) carries event offset ``window.from_ + p``.
    """
    leads = [Lead(k) for k in range(1, window.num_leads + 1)]
    lags = [Lag(k) for k in range(0, window.num_lags)]
    return tuple(sorted(leads + lags))
