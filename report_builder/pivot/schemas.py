"""Input and output schemas of the pivot aggregation engine."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator

from report_builder.catalog.schemas import FieldType
from report_builder.core.config import DEFAULT_GROUP_NAME, GROUP_LABEL_COLUMN
from report_builder.metrics.schemas import MetricConfig


class PivotFieldRef(BaseModel):
    """A field placed on an axis, identified by id and shown by display name."""

    field_id: str = Field(alias="fieldId")
    name: str
    field_type: FieldType = Field(default=FieldType.DIMENSION, alias="fieldType")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def default_id_to_name(cls, data: Any) -> Any:
        # Fields known only by display name use it as their id
        if isinstance(data, dict) and "field_id" not in data and "fieldId" not in data and "name" in data:
            data = {**data, "field_id": data["name"]}
        return data


class ValueField(PivotFieldRef):
    """A value-axis field with its optional metric configuration."""

    field_type: FieldType = Field(default=FieldType.METRIC, alias="fieldType")
    config: Optional[MetricConfig] = None


class PivotRequest(BaseModel):
    """Everything the engine needs besides the value source."""

    row_fields: List[PivotFieldRef] = []
    column_fields: List[PivotFieldRef] = []
    value_fields: List[ValueField] = []
    default_group_name: str = DEFAULT_GROUP_NAME
    group_label: str = GROUP_LABEL_COLUMN

    model_config = ConfigDict(frozen=True)


class PivotFields(BaseModel):
    """Display names on each axis, as consumed by the grid renderer."""

    rows: List[str] = []
    columns: List[str] = []
    values: List[str] = []


class PivotResult(BaseModel):
    """Output rows plus the axis field names."""

    data: List[Dict[str, Any]] = []
    fields: PivotFields = Field(default_factory=PivotFields)

    def to_dict(self) -> Dict[str, Any]:
        return {"data": [dict(row) for row in self.data], "fields": self.fields.model_dump()}
