"""Diagnostics for window coverage and event-study equivalence."""

from .coverage import WindowCoverage
from .equivalence import (
    EquivalenceReport,
    EventStudyResult,
    compare_to_event_study,
    expected_sample_size,
    fit_binned_event_study,
)

__all__ = [
    "WindowCoverage",
    "EquivalenceReport",
    "EventStudyResult",
    "compare_to_event_study",
    "expected_sample_size",
    "fit_binned_event_study",
]
