"""Metric grouping and association configuration."""

from .schemas import DisplayMode, MetricConfig
from .service import MetricConfigService

__all__ = ["DisplayMode", "MetricConfig", "MetricConfigService"]
