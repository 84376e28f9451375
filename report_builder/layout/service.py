# report_builder/layout/service.py
"""Axis assignment model: which fields occupy the row, column and value axes."""

import logging
from typing import List, Union

from report_builder.catalog.schemas import FieldType
from report_builder.core.exceptions import FixedFieldError
from .schemas import AxisAssignment, AxisLayout, AxisPosition

logger = logging.getLogger(__name__)


class AxisLayoutService:
    """Reducer-style operations over an AxisLayout.

    Field-type policy (for example, keeping metrics off the row axis) belongs to
    the caller; any field may be placed on any axis here.
    """

    def assign(
        self,
        layout: AxisLayout,
        field_id: str,
        field_type: Union[FieldType, str],
        position: Union[AxisPosition, str],
    ) -> AxisLayout:
        """Place a field on an axis, replacing any earlier placement of the same field."""
        self._reject_fixed(layout, field_id, "moved")
        position = AxisPosition(position)
        remaining = tuple(a for a in layout.assignments if a.field_id != field_id)
        assignment = AxisAssignment(field_id=field_id, field_type=FieldType(field_type), position=position)
        logger.info(f"Assigned field {field_id} to {position.value} axis")
        return layout.model_copy(update={"assignments": remaining + (assignment,)})

    def unassign(self, layout: AxisLayout, field_id: str) -> AxisLayout:
        """Remove a field from its axis. Unplaced fields are ignored."""
        self._reject_fixed(layout, field_id, "removed")
        remaining = tuple(a for a in layout.assignments if a.field_id != field_id)
        if len(remaining) != len(layout.assignments):
            logger.info(f"Removed field {field_id} from layout")
        return layout.model_copy(update={"assignments": remaining})

    def clear(self, layout: AxisLayout) -> AxisLayout:
        """Remove all user assignments; fixed row fields stay."""
        return layout.model_copy(update={"assignments": ()})

    def fields_at(self, layout: AxisLayout, position: Union[AxisPosition, str]) -> List[AxisAssignment]:
        """User assignments on one axis, in placement order."""
        position = AxisPosition(position)
        return [a for a in layout.assignments if a.position == position]

    def row_field_ids(self, layout: AxisLayout) -> List[str]:
        """Fixed row fields followed by user row fields."""
        return list(layout.fixed_row_fields) + [a.field_id for a in self.fields_at(layout, AxisPosition.ROW)]

    def assigned_field_ids(self, layout: AxisLayout) -> List[str]:
        """Field ids already placed by the user."""
        return layout.field_ids()

    @staticmethod
    def _reject_fixed(layout: AxisLayout, field_id: str, action: str) -> None:
        if field_id in layout.fixed_row_fields:
            raise FixedFieldError(f"Fixed row field '{field_id}' cannot be {action}")
