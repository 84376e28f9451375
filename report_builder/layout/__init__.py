"""Axis layout - placement of fields on the row, column and value axes."""

from .schemas import AxisPosition, AxisAssignment, AxisLayout
from .service import AxisLayoutService

__all__ = ["AxisPosition", "AxisAssignment", "AxisLayout", "AxisLayoutService"]
