"""Panel builders for distributed-lag and event-study designs."""

from .binned import BinnedEventStudyPanel
from .lead_lag import LeadLagPanel

__all__ = ["LeadLagPanel", "BinnedEventStudyPanel"]
