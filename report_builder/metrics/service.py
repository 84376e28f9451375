# report_builder/metrics/service.py
"""Metric grouping and association transitions.

Metric and baseline fields use the grouped shape: Ungrouped -> Grouped(name,
attributes, independent group, display mode). Calculated fields use the
association shape: Unassociated -> Associated(target). Every transition returns
a new MetricConfig; a rejected transition raises ConfigValidationError and the
caller keeps its prior configuration.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

from report_builder.catalog.registry import FieldCatalog
from report_builder.catalog.schemas import COMPARABLE_METRIC_TYPES, FieldMetadata, FieldType
from report_builder.core.config import GROUP_NAME_MAX_LENGTH
from report_builder.core.exceptions import ConfigValidationError
from .schemas import DisplayMode, MetricConfig

logger = logging.getLogger(__name__)


class MetricConfigService:
    """Validated transitions of per-field metric configuration."""

    def __init__(self, catalog: FieldCatalog):
        self.catalog = catalog

    def default_config(self, field_id: str) -> MetricConfig:
        self._metric_field(field_id)
        return MetricConfig()

    # ===== GROUPED SHAPE =====

    def enable_group(self, field_id: str, config: Optional[MetricConfig], name: str) -> MetricConfig:
        """Turn on grouped display under ``name``."""
        field = self._grouping_field(field_id)
        config = config or MetricConfig()

        name = (name or "").strip()
        if not name:
            raise ConfigValidationError("Group name cannot be empty when grouping is enabled")
        if len(name) > GROUP_NAME_MAX_LENGTH:
            raise ConfigValidationError(f"Group name cannot exceed {GROUP_NAME_MAX_LENGTH} characters")

        independent = config.independent_group if config.group_enabled else False
        logger.info(f"Enabled grouping '{name}' for metric {field_id}")
        return config.model_copy(update={
            "group_enabled": True,
            "group_name": name,
            "independent_group": self._independent_allowed(field) and independent,
        })

    def disable_group(self, field_id: str, config: Optional[MetricConfig]) -> MetricConfig:
        """Turn off grouped display, clearing name and attributes."""
        self._grouping_field(field_id)
        config = config or MetricConfig()
        return config.model_copy(update={
            "group_enabled": False,
            "group_name": "",
            "attributes": (),
            "independent_group": False,
        })

    def set_independent_group(self, field_id: str, config: Optional[MetricConfig], enabled: bool) -> MetricConfig:
        """Toggle independent grouping. No effect while ungrouped.

        Comparison metrics are always kept out of independent groups; baseline
        metrics may use them.
        """
        field = self._grouping_field(field_id)
        config = config or MetricConfig()
        if not config.group_enabled:
            return config
        return config.model_copy(update={"independent_group": self._independent_allowed(field) and bool(enabled)})

    def set_attributes(
        self, field_id: str, config: Optional[MetricConfig], attribute_ids: Iterable[str]
    ) -> MetricConfig:
        """Set the dimension attributes shown next to a grouped metric. No effect while ungrouped."""
        self._grouping_field(field_id)
        config = config or MetricConfig()
        if not config.group_enabled:
            return config

        attributes = []
        for attribute_id in attribute_ids:
            attribute = self.catalog.by_id(attribute_id)
            if attribute is None or attribute.field_type != FieldType.DIMENSION:
                raise ConfigValidationError(f"Attribute '{attribute_id}' is not a dimension field")
            if attribute_id not in attributes:
                attributes.append(attribute_id)
        return config.model_copy(update={"attributes": tuple(attributes)})

    def set_display_mode(
        self, field_id: str, config: Optional[MetricConfig], mode: Union[DisplayMode, str]
    ) -> MetricConfig:
        """Choose detail or aggregate display. No effect while ungrouped."""
        self._grouping_field(field_id)
        config = config or MetricConfig()
        if not config.group_enabled:
            return config
        try:
            mode = DisplayMode(mode)
        except ValueError as e:
            raise ConfigValidationError(f"Unknown display mode '{mode}'") from e
        return config.model_copy(update={"display_mode": mode})

    # ===== ASSOCIATION SHAPE =====

    def enable_association(self, field_id: str, config: Optional[MetricConfig], target_id: Optional[str]) -> MetricConfig:
        """Link a calculated metric to a metric or baseline field."""
        self._association_field(field_id)
        if not target_id:
            raise ConfigValidationError("An association target must be selected when association is enabled")

        target = self.catalog.by_id(target_id)
        if target is None or target.field_type not in COMPARABLE_METRIC_TYPES:
            raise ConfigValidationError(f"Association target '{target_id}' must be a metric or baseline field")

        logger.info(f"Associated calculated metric {field_id} with {target_id}")
        return MetricConfig(association_enabled=True, association_target_id=target_id)

    def disable_association(self, field_id: str, config: Optional[MetricConfig]) -> MetricConfig:
        self._association_field(field_id)
        config = config or MetricConfig()
        return config.model_copy(update={"association_enabled": False, "association_target_id": None})

    # ===== FULL SAVE =====

    def save(self, field_id: str, values: Union[MetricConfig, Dict[str, Any]]) -> MetricConfig:
        """Validate and normalise a whole configuration form in one transition."""
        field = self._metric_field(field_id)
        submitted = values if isinstance(values, MetricConfig) else MetricConfig.model_validate(values)

        if field.field_type == FieldType.CALCULATED:
            if not submitted.association_enabled:
                return MetricConfig()
            return self.enable_association(field_id, None, submitted.association_target_id)

        if not submitted.group_enabled:
            return MetricConfig()

        config = self.enable_group(field_id, None, submitted.group_name)
        config = self.set_attributes(field_id, config, submitted.attributes)
        config = self.set_display_mode(field_id, config, submitted.display_mode)
        return self.set_independent_group(field_id, config, submitted.independent_group)

    def validate(self, field_id: str, config: MetricConfig) -> None:
        """Raise ConfigValidationError if ``config`` breaks its field's invariants."""
        field = self._metric_field(field_id)
        if field.field_type == FieldType.CALCULATED:
            if config.group_enabled or config.attributes:
                raise ConfigValidationError(f"Calculated metric '{field.name}' cannot be grouped")
            if config.association_enabled:
                self.enable_association(field_id, None, config.association_target_id)
            return

        if config.association_enabled:
            raise ConfigValidationError(f"Only calculated metrics can be associated, not '{field.name}'")
        if config.group_enabled and not config.group_name.strip():
            raise ConfigValidationError(f"Grouped metric '{field.name}' needs a group name")

    # ===== HELPERS =====

    def _metric_field(self, field_id: str) -> FieldMetadata:
        field = self.catalog.require(field_id)
        if not field.is_metric_like:
            raise ConfigValidationError(f"Field '{field.name}' is a dimension and has no metric configuration")
        return field

    def _grouping_field(self, field_id: str) -> FieldMetadata:
        field = self._metric_field(field_id)
        if field.field_type == FieldType.CALCULATED:
            raise ConfigValidationError(f"Calculated metric '{field.name}' uses association, not grouping")
        return field

    def _association_field(self, field_id: str) -> FieldMetadata:
        field = self._metric_field(field_id)
        if field.field_type != FieldType.CALCULATED:
            raise ConfigValidationError(f"Only calculated metrics can be associated, not '{field.name}'")
        return field

    @staticmethod
    def _independent_allowed(field: FieldMetadata) -> bool:
        return field.field_type != FieldType.METRIC
