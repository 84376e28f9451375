"""Field catalog - metadata of the fields a report can filter on or display."""

from .schemas import (
    FieldType,
    ComponentType,
    FieldMetadata,
    METRIC_FIELD_TYPES,
    COMPARABLE_METRIC_TYPES,
)
from .registry import (
    FieldCatalog,
    FIXED_ROW_FIELD_IDS,
    build_default_catalog,
    component_type_label,
)

__all__ = [
    "FieldType",
    "ComponentType",
    "FieldMetadata",
    "METRIC_FIELD_TYPES",
    "COMPARABLE_METRIC_TYPES",
    "FieldCatalog",
    "FIXED_ROW_FIELD_IDS",
    "build_default_catalog",
    "component_type_label",
]
