"""
Value codecs for condition input controls.

Each component type has one codec in ``CODEC_REGISTRY`` providing the default
value, shape validation and the emptiness test that decides whether a
condition contributes to filtering. Adding a control type means registering
one more codec; call sites only go through ``get_codec``.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError

from report_builder.catalog.schemas import ComponentType, COMPARABLE_METRIC_TYPES
from report_builder.catalog.registry import FieldCatalog
from report_builder.core.exceptions import ShapeError
from .schemas import NumberRangeValue, DateRangeValue, MetricCompareValue

logger = logging.getLogger(__name__)

_SCALAR_TYPES = (str, int, float)


class ValueCodec:
    """Base codec: plain text value."""

    component_type: str = ComponentType.INPUT.value

    def default_value(self) -> Any:
        return None

    def validate(self, value: Any, catalog: Optional[FieldCatalog] = None) -> None:
        """Raise ShapeError if ``value`` does not fit this control. ``None`` always fits."""
        if value is None:
            return
        if not isinstance(value, str):
            raise ShapeError(f"{self.component_type} expects text, got {type(value).__name__}")

    def is_empty(self, value: Any) -> bool:
        return value is None or (isinstance(value, str) and not value.strip())


class SelectCodec(ValueCodec):
    """Single choice from an option list."""

    component_type = ComponentType.SELECT.value

    def validate(self, value: Any, catalog: Optional[FieldCatalog] = None) -> None:
        if value is None:
            return
        if isinstance(value, bool) or not isinstance(value, _SCALAR_TYPES):
            raise ShapeError(f"{self.component_type} expects a single value, got {type(value).__name__}")

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""


class MultiSelectCodec(ValueCodec):
    """List of chosen options."""

    component_type = ComponentType.MULTI_SELECT.value

    def default_value(self) -> Any:
        return []

    def validate(self, value: Any, catalog: Optional[FieldCatalog] = None) -> None:
        if value is None:
            return
        if not isinstance(value, (list, tuple)):
            raise ShapeError(f"{self.component_type} expects a list, got {type(value).__name__}")
        for item in value:
            if isinstance(item, bool) or not isinstance(item, _SCALAR_TYPES):
                raise ShapeError(f"{self.component_type} items must be scalars, got {type(item).__name__}")

    def is_empty(self, value: Any) -> bool:
        return not value


class ModalSelectorCodec(MultiSelectCodec):
    """Keys picked from a tree dialog."""

    component_type = ComponentType.MODAL_SELECTOR.value


class DatePickerCodec(ValueCodec):
    """A single date or datetime, or its ISO string."""

    component_type = ComponentType.DATE_PICKER.value

    def validate(self, value: Any, catalog: Optional[FieldCatalog] = None) -> None:
        if value is None or isinstance(value, (date, datetime)):
            return
        if isinstance(value, str):
            try:
                datetime.fromisoformat(value)
                return
            except ValueError:
                pass
        raise ShapeError(f"{self.component_type} expects a date, got {value!r}")

    def is_empty(self, value: Any) -> bool:
        return value is None or value == ""


class _ModelCodec(ValueCodec):
    """Codec whose shape is described by a pydantic model."""

    shape: Type[BaseModel]

    def default_value(self) -> Any:
        return self.shape().model_dump(by_alias=True, mode="json")

    def parse(self, value: Any) -> Optional[BaseModel]:
        """Parse a value into its shape model; ``None`` stays ``None``."""
        if value is None or isinstance(value, self.shape):
            return value
        if not isinstance(value, dict):
            raise ShapeError(f"{self.component_type} expects an object, got {type(value).__name__}")
        try:
            return self.shape.model_validate(value)
        except ValidationError as e:
            raise ShapeError(f"Invalid {self.component_type} value: {e.errors()[0]['msg']}") from e

    def validate(self, value: Any, catalog: Optional[FieldCatalog] = None) -> None:
        self.parse(value)


class NumberRangeCodec(_ModelCodec):
    """``{min, max}``; either bound may be open."""

    component_type = ComponentType.NUMBER_RANGE.value
    shape = NumberRangeValue

    def is_empty(self, value: Any) -> bool:
        parsed = self.parse(value)
        return parsed is None or (parsed.min is None and parsed.max is None)

    def is_inverted(self, value: Any) -> bool:
        """True when both bounds are set and min > max. Not rejected by ``validate``."""
        parsed = self.parse(value)
        return (
            parsed is not None
            and parsed.min is not None
            and parsed.max is not None
            and parsed.min > parsed.max
        )


class DateRangeCodec(_ModelCodec):
    """``{start, end}``; either end may be open."""

    component_type = ComponentType.DATE_RANGE_PICKER.value
    shape = DateRangeValue

    def is_empty(self, value: Any) -> bool:
        parsed = self.parse(value)
        return parsed is None or (parsed.start is None and parsed.end is None)


class MetricCompareCodec(_ModelCodec):
    """``{leftMetricId, rightMetricId, op}`` relating two metric or baseline fields."""

    component_type = ComponentType.METRIC_COMPARE.value
    shape = MetricCompareValue

    def validate(self, value: Any, catalog: Optional[FieldCatalog] = None) -> None:
        parsed = self.parse(value)
        if parsed is None or catalog is None:
            return
        for metric_id in (parsed.left_metric_id, parsed.right_metric_id):
            if metric_id is None:
                continue
            field = catalog.by_id(metric_id)
            if field is None:
                raise ShapeError(f"Metric '{metric_id}' not found in catalog")
            if field.field_type not in COMPARABLE_METRIC_TYPES:
                raise ShapeError(
                    f"Field '{field.name}' is a {field.field_type.value} field; "
                    "only metric and baseline fields can be compared"
                )

    def is_empty(self, value: Any) -> bool:
        parsed = self.parse(value)
        return parsed is None or parsed.left_metric_id is None or parsed.right_metric_id is None


# ===== REGISTRY =====

CODEC_REGISTRY: Dict[str, ValueCodec] = {}

# Older configurations spell the date range control differently
COMPONENT_TYPE_ALIASES: Dict[str, str] = {
    "dateRange": ComponentType.DATE_RANGE_PICKER.value,
}

_FALLBACK_CODEC = ValueCodec()


def register_codec(codec: ValueCodec) -> None:
    """Register a codec for its component type."""
    CODEC_REGISTRY[codec.component_type] = codec


def get_codec(component_type: str) -> ValueCodec:
    """Get the codec of a component type; unknown types fall back to plain text."""
    key = component_type.value if isinstance(component_type, ComponentType) else component_type
    key = COMPONENT_TYPE_ALIASES.get(key, key)
    codec = CODEC_REGISTRY.get(key)
    if codec is None:
        logger.warning(f"Unknown component type '{component_type}', using text input")
        return _FALLBACK_CODEC
    return codec


for _codec in (
    ValueCodec(),
    SelectCodec(),
    MultiSelectCodec(),
    DatePickerCodec(),
    DateRangeCodec(),
    NumberRangeCodec(),
    ModalSelectorCodec(),
    MetricCompareCodec(),
):
    register_codec(_codec)
