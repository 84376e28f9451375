"""Field metadata schemas shared by conditions, layout and pivot modules."""

from typing import Optional, List
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldType(str, Enum):
    """Category of a selectable field."""

    DIMENSION = "dimension"
    METRIC = "metric"
    BASELINE = "baseline"
    CALCULATED = "calculated"


# Field types that can sit on the value axis and carry a MetricConfig
METRIC_FIELD_TYPES = frozenset({FieldType.METRIC, FieldType.BASELINE, FieldType.CALCULATED})

# Field types a metric-compare condition or an association may point at
COMPARABLE_METRIC_TYPES = frozenset({FieldType.METRIC, FieldType.BASELINE})


class ComponentType(str, Enum):
    """Input control used to edit a field's condition value."""

    INPUT = "input"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"
    DATE_PICKER = "datePicker"
    DATE_RANGE_PICKER = "dateRangePicker"
    NUMBER_RANGE = "numberRange"
    MODAL_SELECTOR = "modalSelector"
    METRIC_COMPARE = "metricCompare"


class FieldMetadata(BaseModel):
    """Catalog entry describing a selectable field."""

    id: str
    name: str
    field_type: FieldType = Field(alias="fieldType")
    # Kept as a plain string: unknown control types fall back to text input
    component_type: str = Field(default=ComponentType.INPUT.value, alias="componentType")
    options: Optional[List[str]] = None
    description: Optional[str] = None
    category: Optional[str] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=False)

    @field_validator("id", "name")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field id and name cannot be empty")
        return v

    @field_validator("component_type", mode="before")
    @classmethod
    def normalize_component_type(cls, v):
        if isinstance(v, ComponentType):
            return v.value
        return v

    @property
    def is_dimension(self) -> bool:
        return self.field_type == FieldType.DIMENSION

    @property
    def is_metric_like(self) -> bool:
        """True for fields that may carry a metric configuration."""
        return self.field_type in METRIC_FIELD_TYPES
