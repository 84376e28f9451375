# report_builder/reporting/service.py
"""
Report configuration session.

Owns one ReportConfiguration and routes every edit through the condition, axis
and metric services. After each successful edit the pivot preview is rebuilt
from scratch, so the preview always reflects the current configuration.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from report_builder.catalog.registry import FieldCatalog, build_default_catalog
from report_builder.catalog.schemas import FieldMetadata
from report_builder.conditions.codec import get_codec
from report_builder.conditions.schemas import ConditionGroup, GroupType, QueryCondition
from report_builder.conditions.service import ConditionService
from report_builder.core.exceptions import ConditionNotFoundError, ConfigValidationError
from report_builder.layout.schemas import AxisPosition
from report_builder.layout.service import AxisLayoutService
from report_builder.metrics.schemas import DisplayMode, MetricConfig
from report_builder.metrics.service import MetricConfigService
from report_builder.pivot.engine import PivotEngine
from report_builder.pivot.export import export_xlsx
from report_builder.pivot.schemas import PivotFieldRef, PivotRequest, PivotResult, ValueField
from report_builder.pivot.totals import TotalsSettings, apply_totals
from report_builder.pivot.value_source import MockValueSource, ValueSource
from .schemas import AxisItem, PublishedReport, ReportConfiguration

logger = logging.getLogger(__name__)


class ReportConfigService:
    """Stateful editing session over one report configuration."""

    def __init__(
        self,
        catalog: Optional[FieldCatalog] = None,
        value_source: Optional[ValueSource] = None,
        configuration: Optional[ReportConfiguration] = None,
        predefined_conditions: Iterable[Union[QueryCondition, Dict[str, Any]]] = (),
    ):
        self.catalog = catalog if catalog is not None else build_default_catalog()
        self.value_source = value_source if value_source is not None else MockValueSource()

        self.condition_service = ConditionService(self.catalog)
        self.layout_service = AxisLayoutService()
        self.metric_service = MetricConfigService(self.catalog)
        self.engine = PivotEngine(self.catalog)

        initial = configuration or ReportConfiguration()
        conditions = self.condition_service.merge_predefined(initial.conditions, predefined_conditions)
        layout = initial.layout.model_copy(update={"fixed_row_fields": self._registered_fixed_fields(initial)})
        self._initial = initial.model_copy(update={"conditions": conditions, "layout": layout})

        self.configuration = self._initial
        self.preview_result = PivotResult()
        self._recompute()

    # ===== REPORT METADATA =====

    def rename(self, name: str, description: Optional[str] = None) -> ReportConfiguration:
        # Re-validate through the model so the name rules apply
        data = self.configuration.model_dump()
        data.update({"name": name, "description": description})
        try:
            updated = ReportConfiguration.model_validate(data)
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e
        return self._commit(updated, recompute=False)

    def select_scheme(self, scheme_id: Optional[str]) -> ReportConfiguration:
        return self._commit(self.configuration.model_copy(update={"scheme_id": scheme_id}), recompute=False)

    def set_default_group_name(self, name: str) -> ReportConfiguration:
        name = (name or "").strip()
        if not name:
            raise ConfigValidationError("Default group name cannot be empty")
        return self._commit(self.configuration.model_copy(update={"default_group_name": name}))

    def set_totals(self, settings: Union[TotalsSettings, Dict[str, Any]]) -> ReportConfiguration:
        if not isinstance(settings, TotalsSettings):
            settings = TotalsSettings.model_validate(settings)
        return self._commit(self.configuration.model_copy(update={"totals": settings}))

    # ===== CONDITIONS =====

    def add_condition(self, group_type: Union[GroupType, str], field_id: str) -> QueryCondition:
        """Add a custom condition and return it."""
        conditions = self.condition_service.add_condition(self.configuration.conditions, group_type, field_id)
        self._commit(self.configuration.model_copy(update={"conditions": conditions}))
        return conditions.conditions[-1]

    def update_condition_value(self, condition_id: str, value: Any) -> QueryCondition:
        """Set a condition's value after checking it against the component shape."""
        condition = self.configuration.conditions.get(condition_id)
        if condition is None:
            raise ConditionNotFoundError(f"Condition '{condition_id}' not found")

        get_codec(condition.component_type).validate(value, self.catalog)
        conditions = self.condition_service.update_condition_value(
            self.configuration.conditions, condition_id, value
        )
        self._commit(self.configuration.model_copy(update={"conditions": conditions}))
        return conditions.get(condition_id)

    def remove_condition(self, condition_id: str) -> ReportConfiguration:
        conditions = self.condition_service.remove_condition(self.configuration.conditions, condition_id)
        return self._commit(self.configuration.model_copy(update={"conditions": conditions}))

    def merge_predefined(self, predefined: Iterable[Union[QueryCondition, Dict[str, Any]]]) -> ReportConfiguration:
        conditions = self.condition_service.merge_predefined(self.configuration.conditions, predefined)
        return self._commit(self.configuration.model_copy(update={"conditions": conditions}))

    def condition_groups(self) -> List[ConditionGroup]:
        return self.condition_service.organize_by_group(self.configuration.conditions)

    def available_condition_fields(self, group_type: Union[GroupType, str]) -> List[FieldMetadata]:
        return self.condition_service.available_fields(self.configuration.conditions, group_type)

    def active_conditions(self) -> List[QueryCondition]:
        return self.condition_service.active_conditions(self.configuration.conditions)

    # ===== AXES =====

    def assign_field(self, field_id: str, position: Union[AxisPosition, str]) -> ReportConfiguration:
        """Place a catalog field on an axis, moving it if it is already placed."""
        field = self.catalog.require(field_id)
        layout = self.layout_service.assign(self.configuration.layout, field.id, field.field_type, position)
        return self._commit(self.configuration.model_copy(update={"layout": layout}))

    def unassign_field(self, field_id: str) -> ReportConfiguration:
        """Take a field off its axis. Its metric configuration is kept for a later re-add."""
        layout = self.layout_service.unassign(self.configuration.layout, field_id)
        return self._commit(self.configuration.model_copy(update={"layout": layout}))

    def clear_layout(self) -> ReportConfiguration:
        layout = self.layout_service.clear(self.configuration.layout)
        return self._commit(self.configuration.model_copy(update={"layout": layout}))

    # ===== METRIC CONFIGURATION =====

    def metric_config(self, field_id: str) -> MetricConfig:
        config = self.configuration.metric_configs.get(field_id)
        return config if config is not None else self.metric_service.default_config(field_id)

    def save_metric_config(self, field_id: str, values: Union[MetricConfig, Dict[str, Any]]) -> MetricConfig:
        """Validate a whole metric configuration form and store it."""
        config = self.metric_service.save(field_id, values)
        self._store_metric_config(field_id, config)
        return config

    def enable_group(self, field_id: str, name: str) -> MetricConfig:
        config = self.metric_service.enable_group(field_id, self.configuration.metric_configs.get(field_id), name)
        return self._store_metric_config(field_id, config)

    def disable_group(self, field_id: str) -> MetricConfig:
        config = self.metric_service.disable_group(field_id, self.configuration.metric_configs.get(field_id))
        return self._store_metric_config(field_id, config)

    def set_attributes(self, field_id: str, attribute_ids: Iterable[str]) -> MetricConfig:
        config = self.metric_service.set_attributes(
            field_id, self.configuration.metric_configs.get(field_id), attribute_ids
        )
        return self._store_metric_config(field_id, config)

    def set_display_mode(self, field_id: str, mode: Union[DisplayMode, str]) -> MetricConfig:
        config = self.metric_service.set_display_mode(field_id, self.configuration.metric_configs.get(field_id), mode)
        return self._store_metric_config(field_id, config)

    def set_independent_group(self, field_id: str, enabled: bool) -> MetricConfig:
        config = self.metric_service.set_independent_group(
            field_id, self.configuration.metric_configs.get(field_id), enabled
        )
        return self._store_metric_config(field_id, config)

    def enable_association(self, field_id: str, target_id: str) -> MetricConfig:
        config = self.metric_service.enable_association(
            field_id, self.configuration.metric_configs.get(field_id), target_id
        )
        return self._store_metric_config(field_id, config)

    def disable_association(self, field_id: str) -> MetricConfig:
        config = self.metric_service.disable_association(field_id, self.configuration.metric_configs.get(field_id))
        return self._store_metric_config(field_id, config)

    # ===== PREVIEW AND PUBLISH =====

    def build_pivot_request(self) -> PivotRequest:
        """Translate the current axes and metric configuration into an engine request."""
        configuration = self.configuration
        layout = configuration.layout

        row_fields = [self._field_ref(fid) for fid in self.layout_service.row_field_ids(layout)]
        column_fields = [
            self._field_ref(a.field_id) for a in self.layout_service.fields_at(layout, AxisPosition.COLUMN)
        ]
        value_fields = []
        for assignment in self.layout_service.fields_at(layout, AxisPosition.VALUE):
            field = self.catalog.require(assignment.field_id)
            value_fields.append(ValueField(
                field_id=field.id,
                name=field.name,
                field_type=field.field_type,
                config=configuration.metric_configs.get(field.id),
            ))

        return PivotRequest(
            row_fields=row_fields,
            column_fields=column_fields,
            value_fields=value_fields,
            default_group_name=configuration.default_group_name,
        )

    def preview(self) -> PivotResult:
        return self.preview_result

    def export_preview(self, sheet_name: Optional[str] = None) -> bytes:
        return export_xlsx(self.preview_result, sheet_name or self.configuration.name or "Report")

    def build_publish_payload(self) -> Dict[str, Any]:
        """Validate the report for publishing and return it as a plain dict."""
        configuration = self.configuration
        if not configuration.name:
            raise ConfigValidationError("Report name cannot be empty")
        if not configuration.layout.assignments:
            raise ConfigValidationError("Report must place at least one field on an axis")

        for field_id, config in configuration.metric_configs.items():
            if configuration.layout.position_of(field_id) == AxisPosition.VALUE:
                self.metric_service.validate(field_id, config)

        axis_items = [
            AxisItem(
                field_id=field_id,
                name=self.catalog.display_name(field_id),
                field_type=self.catalog.require(field_id).field_type.value,
                position=AxisPosition.ROW.value,
                fixed=True,
            )
            for field_id in configuration.layout.fixed_row_fields
        ]
        for assignment in configuration.layout.assignments:
            axis_items.append(AxisItem(
                field_id=assignment.field_id,
                name=self.catalog.display_name(assignment.field_id),
                field_type=assignment.field_type.value,
                position=assignment.position.value,
                config=configuration.metric_configs.get(assignment.field_id),
            ))

        payload = PublishedReport(
            name=configuration.name,
            description=configuration.description,
            scheme_id=configuration.scheme_id,
            conditions=[c.model_dump(by_alias=True, mode="json") for c in configuration.conditions.conditions],
            axis_items=axis_items,
            default_group_name=configuration.default_group_name,
            totals=configuration.totals.model_dump(by_alias=True, mode="json"),
        )
        logger.info(f"Prepared report '{configuration.name}' for publishing with {len(axis_items)} axis items")
        return payload.model_dump(by_alias=True, mode="json")

    def reset(self) -> ReportConfiguration:
        """Discard all edits; predefined conditions and fixed row fields remain."""
        logger.info("Reset report configuration")
        return self._commit(self._initial)

    # ===== HELPERS =====

    def _registered_fixed_fields(self, configuration: ReportConfiguration) -> tuple:
        """Fixed row fields known to the catalog; the others are dropped with a warning."""
        fixed = []
        for field_id in configuration.layout.fixed_row_fields:
            if field_id in self.catalog:
                fixed.append(field_id)
            else:
                logger.warning(f"Fixed row field '{field_id}' is not in the catalog and will not be shown")
        return tuple(fixed)

    def _field_ref(self, field_id: str) -> PivotFieldRef:
        field = self.catalog.require(field_id)
        return PivotFieldRef(field_id=field.id, name=field.name, field_type=field.field_type)

    def _store_metric_config(self, field_id: str, config: MetricConfig) -> MetricConfig:
        metric_configs = {**self.configuration.metric_configs, field_id: config}
        self._commit(self.configuration.model_copy(update={"metric_configs": metric_configs}))
        return config

    def _commit(self, configuration: ReportConfiguration, recompute: bool = True) -> ReportConfiguration:
        self.configuration = configuration
        if recompute:
            self._recompute()
        return configuration

    def _recompute(self) -> None:
        result = self.engine.build(self.build_pivot_request(), self.value_source)
        self.preview_result = apply_totals(result, self.configuration.totals)
        logger.debug(f"Recomputed preview: {len(self.preview_result.data)} rows")
