"""Shared types and configuration for did-dlm."""

from __future__ import annotations

import numbers
from dataclasses import dataclass

from .exceptions import InvalidWindow


@dataclass(frozen=True)
class PanelConfig:
    """Column name mapping for panel data.

    Every panel builder and estimator takes this as its configuration
    argument.

    Parameters
    ----------
    unit_col : str
        Column name for the unit identifier (e.g., firm, county, individual).
    time_col : str
        Column name for the integer time period (e.g., year, quarter).
    exposure_col : str
        Column name for the exposure (treatment) variable whose leads and
        lags enter the distributed-lag model.
    fill_value : int
        Sentinel first-exposure time for never-exposed units. Must be a value
        that cannot appear as a real time period.

    Example
    -------
    >>> config = PanelConfig(unit_col="county_id", time_col="year", exposure_col="policy")
    """

    unit_col: str = "unit_id"
    time_col: str = "time"
    exposure_col: str = "exposure"
    fill_value: int = -1000


@dataclass(frozen=True)
class WindowSpec:
    """Event-time window ``[from_, to]`` with omitted reference period ``ref``.

    Construction validates the window, so holding a ``WindowSpec`` means the
    window is usable.

    Parameters
    ----------
    from_ : int
        First event time, strictly negative.
    to : int
        Last event time, strictly positive.
    ref : int
        Reference event time whose beta is normalized to zero. Must lie in
        ``[from_, to]``. Default -1.

    Raises
    ------
    InvalidWindow
        If ``from_ >= 0``, ``to <= 0``, ``from_ >= to`` or ``ref`` is outside
        the window.
    """

    from_: int
    to: int
    ref: int = -1

    def __post_init__(self) -> None:
        for name in ("from_", "to", "ref"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidWindow(f"{name} must be an integer, got {value!r}")
            object.__setattr__(self, name, int(value))

        if self.from_ >= 0:
            raise InvalidWindow(f"from_ must be negative, got {self.from_}")
        if self.to <= 0:
            raise InvalidWindow(f"to must be positive, got {self.to}")
        if self.from_ >= self.to:
            raise InvalidWindow(f"from_ ({self.from_}) must be < to ({self.to})")
        if not self.from_ <= self.ref <= self.to:
            raise InvalidWindow(
                f"ref ({self.ref}) must lie in [{self.from_}, {self.to}]"
            )

    @property
    def num_leads(self) -> int:
        return -self.from_ - 1

    @property
    def num_lags(self) -> int:
        return self.to + 1

    @property
    def num_before(self) -> int:
        """Gamma positions that accumulate backward into pre-reference betas."""
        return self.ref - self.from_

    @property
    def num_after(self) -> int:
        return self.to - self.ref

    @property
    def n_regressors(self) -> int:
        """K, the number of lead/lag regressors (and gamma coefficients)."""
        return self.num_before + self.num_after

    @property
    def total_periods(self) -> int:
        return self.to - self.from_ + 1

    @property
    def event_times(self) -> range:
        return range(self.from_, self.to + 1)
