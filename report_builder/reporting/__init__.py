"""Report configuration session: one editable report and its live preview."""

from .schemas import AxisItem, PublishedReport, ReportConfiguration
from .service import ReportConfigService

__all__ = ["AxisItem", "PublishedReport", "ReportConfiguration", "ReportConfigService"]
