"""Base class for did-dlm panel builders."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import pandas as pd

from .._types import PanelConfig, WindowSpec

logger = logging.getLogger(__name__)


class BasePanelBuilder(ABC):
    """Abstract base for window-aware panel construction.

    The caller's frame is copied once on construction; every later step works
    on that owned copy, so the caller's data is never mutated. The copy is
    labelled by row position in the caller's frame. Subclasses
    implement ``build()`` to append their design columns.

    Parameters
    ----------
    df : pd.DataFrame
        Panel data with at least ``unit_col``, ``time_col``, and ``exposure_col``.
    config : PanelConfig, optional
        Column name mapping. Uses defaults if not provided.
    window : WindowSpec
        Validated event window. Validation happens when the ``WindowSpec``
        is created, i.e. before the data is copied.
    """

    def __init__(
        self,
        df: pd.DataFrame,
        config: PanelConfig | None = None,
        window: WindowSpec | None = None,
    ):
        if not isinstance(window, WindowSpec):
            raise TypeError(f"window must be a WindowSpec, got {type(window).__name__}")
        self.config = config or PanelConfig()
        self.window = window
        self._df = df.reset_index(drop=True)
        self._validate_input()
        self._panel: pd.DataFrame | None = None

    def _validate_input(self) -> None:
        """Check required columns exist, coerce types and reject duplicate periods."""
        c = self.config
        required = [c.unit_col, c.time_col, c.exposure_col]
        missing = [col for col in required if col not in self._df.columns]
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Available: {sorted(self._df.columns.tolist())}"
            )

        self._df[c.unit_col] = self._df[c.unit_col].astype(str)
        self._df[c.time_col] = pd.to_numeric(self._df[c.time_col], errors="coerce")
        self._df[c.exposure_col] = pd.to_numeric(self._df[c.exposure_col], errors="coerce")

        if self._df[c.time_col].isna().any():
            raise ValueError(f"Column '{c.time_col}' has missing or non-numeric values")

        dupes = self._df.duplicated([c.unit_col, c.time_col])
        if dupes.any():
            raise ValueError(
                f"{int(dupes.sum()):,} duplicated ({c.unit_col}, {c.time_col}) pairs; "
                "panel observations must be unique per unit and period"
            )

        n_obs = len(self._df)
        n_units = self._df[c.unit_col].nunique()
        logger.info(
            "%s initialized: %s observations, %s units",
            type(self).__name__,
            f"{n_obs:,}",
            f"{n_units:,}",
        )

    @abstractmethod
    def build(self) -> pd.DataFrame:
        """Construct the panel. Returns a DataFrame with design-specific columns."""
        ...

    @property
    def panel(self) -> pd.DataFrame:
        """Lazily build and cache the panel."""
        if self._panel is None:
            self._panel = self.build()
        return self._panel

    def _check_new_columns(self, names: list[str]) -> None:
        clashes = [name for name in names if name in self._df.columns]
        if clashes:
            raise ValueError(
                f"Columns {clashes} already exist in the panel; rename them before estimation"
            )

    def _compute_first_event(self) -> dict:
        """Compute first exposure time per unit. Returns {unit_id: first_time}."""
        c = self.config
        exposed = self._df[self._df[c.exposure_col].fillna(0) != 0]
        return exposed.groupby(c.unit_col)[c.time_col].min().to_dict()

    def summary(self) -> pd.DataFrame:
        """Return panel summary statistics.

        Returns
        -------
        pd.DataFrame
            One-row DataFrame with n_obs, n_units, time_min and time_max.
        """
        c = self.config
        df = self.panel
        stats = {
            "n_obs": len(df),
            "n_units": df[c.unit_col].nunique(),
            "time_min": df[c.time_col].min(),
            "time_max": df[c.time_col].max(),
        }
        return pd.DataFrame([stats])
