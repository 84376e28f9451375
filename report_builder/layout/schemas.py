"""Schemas for axis placement of report fields."""

from typing import List, Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from report_builder.catalog.schemas import FieldType


class AxisPosition(str, Enum):
    """Placement slot of the pivot output."""

    ROW = "row"
    COLUMN = "column"
    VALUE = "value"


class AxisAssignment(BaseModel):
    """A field dropped onto one axis."""

    field_id: str = Field(alias="fieldId")
    field_type: FieldType = Field(alias="fieldType")
    position: AxisPosition

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AxisLayout(BaseModel):
    """User axis assignments plus the fixed fields leading the row axis."""

    assignments: Tuple[AxisAssignment, ...] = ()
    fixed_row_fields: Tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True)

    def position_of(self, field_id: str):
        for assignment in self.assignments:
            if assignment.field_id == field_id:
                return assignment.position
        return None

    def field_ids(self) -> List[str]:
        return [a.field_id for a in self.assignments]
