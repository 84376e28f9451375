"""
Functional tests for complete report configuration workflows.
Tests condition editing, axis layout, metric grouping, preview recomputation and publishing.
"""

import pytest

from report_builder import create_session
from report_builder.conditions import GroupType
from report_builder.core.config import GROUP_LABEL_COLUMN
from report_builder.core.exceptions import (
    ConditionNotFoundError,
    ConfigValidationError,
    FieldAlreadyUsedError,
    FixedFieldError,
    ShapeError,
)
from report_builder.metrics import MetricConfig
from report_builder.pivot import RecordValueSource
from report_builder.reporting import ReportConfigService


PREDEFINED = [
    {
        "id": "pre_hist_province",
        "fieldId": "dim4",
        "fieldName": "省份",
        "fieldType": "dimension",
        "groupType": "baseline",
        "componentType": "select",
        "value": "上海",
        "baselineName": "历史价",
    },
]


class TestSessionConditions:
    """Test condition editing through the session"""

    def test_add_and_update_condition(self, report_session):
        condition = report_session.add_condition("comparison", "dim2")
        updated = report_session.update_condition_value(condition.id, "A型")

        assert updated.value == "A型"
        assert [c.id for c in report_session.active_conditions()] == [condition.id]

    def test_value_shape_checked_before_update(self, report_session):
        condition = report_session.add_condition(GroupType.METRIC, "met1")
        before = report_session.configuration

        with pytest.raises(ShapeError):
            report_session.update_condition_value(condition.id, {"min": "cheap"})
        assert report_session.configuration == before

    def test_metric_compare_value_checked_against_catalog(self, report_session):
        condition = report_session.add_condition(GroupType.METRIC, "metric_compare")
        with pytest.raises(ShapeError):
            report_session.update_condition_value(condition.id, {"leftMetricId": "met1", "rightMetricId": "calc1"})
        report_session.update_condition_value(condition.id, {"leftMetricId": "met1", "rightMetricId": "base4"})

    def test_unknown_condition(self, report_session):
        with pytest.raises(ConditionNotFoundError):
            report_session.update_condition_value("ghost_1", None)

    def test_duplicate_dimension_rejected(self, report_session):
        report_session.add_condition(GroupType.COMPARISON, "dim3")
        with pytest.raises(FieldAlreadyUsedError):
            report_session.add_condition(GroupType.HISTORY_PRICE, "dim3")
        assert len(report_session.configuration.conditions) == 1

    def test_predefined_conditions_loaded_into_groups(self):
        session = create_session(predefined_conditions=PREDEFINED)
        groups = {g.type: g for g in session.condition_groups()}

        assert [c.id for c in groups[GroupType.HISTORY_PRICE].conditions] == ["pre_hist_province"]
        assert "dim4" in [f.id for f in session.available_condition_fields(GroupType.COMPARISON)]


class TestSessionPreview:
    """Test eager preview recomputation"""

    def test_initial_preview_is_empty(self, report_session):
        assert report_session.preview().data == []

    def test_preview_follows_layout(self, report_session):
        report_session.assign_field("dim4", "column")
        report_session.assign_field("met1", "value")

        preview = report_session.preview()
        assert preview.fields.rows == ["SKU编码", "产品名称", "产品类别"]
        assert preview.fields.columns == ["省份"]
        assert preview.fields.values == ["中标价格"]
        assert len(preview.data) == 8

    def test_grouping_adds_label_and_attributes(self, report_session):
        report_session.assign_field("met1", "value")
        report_session.assign_field("base1", "value")
        report_session.enable_group("met1", "集团价")
        report_session.set_attributes("met1", ["dim8"])

        preview = report_session.preview()
        assert preview.fields.columns == [GROUP_LABEL_COLUMN, "供应商"]
        assert len(preview.data) == 16
        assert {row[GROUP_LABEL_COLUMN] for row in preview.data} == {"集团价", "默认分组"}

    def test_aggregate_mode_never_adds_rows(self, report_session):
        report_session.assign_field("met1", "value")
        report_session.enable_group("met1", "G")
        report_session.set_attributes("met1", ["dim8"])
        detail_rows = len(report_session.preview().data)

        report_session.set_display_mode("met1", "aggregate")
        assert len(report_session.preview().data) <= detail_rows

    def test_default_group_name_flows_into_preview(self, report_session):
        report_session.assign_field("met1", "value")
        report_session.assign_field("met2", "value")
        report_session.enable_group("met1", "G")
        report_session.set_default_group_name("其他指标")

        labels = {row[GROUP_LABEL_COLUMN] for row in report_session.preview().data}
        assert labels == {"G", "其他指标"}

    def test_metric_config_survives_unassign(self, report_session):
        report_session.assign_field("met1", "value")
        report_session.enable_group("met1", "G")
        report_session.unassign_field("met1")

        assert report_session.preview().data == []
        report_session.assign_field("met1", "value")
        assert report_session.metric_config("met1").group_name == "G"
        assert GROUP_LABEL_COLUMN in report_session.preview().fields.columns

    def test_fixed_row_fields_protected(self, report_session):
        with pytest.raises(FixedFieldError):
            report_session.unassign_field("comp-sku")

    def test_totals_row(self, report_session):
        report_session.assign_field("met1", "value")
        report_session.set_totals({"rowTotalEnabled": True, "aggregations": {"中标价格": "sum"}})

        preview = report_session.preview()
        assert len(preview.data) == 9
        assert preview.data[-1]["SKU编码"] == "总计"

    def test_export_preview(self, report_session):
        report_session.assign_field("met1", "value")
        assert report_session.export_preview("预览").startswith(b"PK")

    def test_record_source_preview(self):
        records = [
            {"SKU编码": "SKU100", "产品名称": "试剂A", "产品类别": "生化试剂", "省份": "北京", "中标价格": 12.5},
        ]
        session = create_session(records=records)
        session.assign_field("dim4", "column")
        session.assign_field("met1", "value")

        assert session.preview().data == records


    def test_session_over_catalog_without_fixed_fields(self, scenario_catalog, region_records):
        session = ReportConfigService(catalog=scenario_catalog, value_source=RecordValueSource(region_records))

        assert session.configuration.layout.fixed_row_fields == ()
        assert session.preview().data == []

        session.assign_field("SKU", "row")
        session.assign_field("Region", "column")
        session.assign_field("Price", "value")
        preview = session.preview()
        assert preview.fields.rows == ["SKU"]
        assert preview.data == region_records


class TestAssociationScenario:
    """Test association transitions through the session"""

    def test_association_without_target_keeps_prior_config(self, report_session):
        prior = report_session.metric_config("calc1")
        assert prior == MetricConfig()

        with pytest.raises(ConfigValidationError):
            report_session.save_metric_config("calc1", {"associationEnabled": True})
        with pytest.raises(ConfigValidationError):
            report_session.enable_association("calc1", None)

        assert report_session.metric_config("calc1") == prior
        assert not report_session.metric_config("calc1").association_enabled

    def test_associated_metric_stays_in_default_group(self, report_session):
        report_session.assign_field("met1", "value")
        report_session.assign_field("calc1", "value")
        report_session.enable_group("met1", "集团价")
        report_session.enable_association("calc1", "met1")

        labels = [row[GROUP_LABEL_COLUMN] for row in report_session.preview().data]
        assert labels[:2] == ["集团价", "默认分组"]
        assert set(labels) == {"集团价", "默认分组"}


class TestPublishAndReset:
    """Test publishing validation and reset"""

    def test_publish_requires_name(self, report_session):
        report_session.assign_field("met1", "value")
        with pytest.raises(ConfigValidationError):
            report_session.build_publish_payload()

    def test_publish_requires_axis_items(self, report_session):
        report_session.rename("价格比对")
        with pytest.raises(ConfigValidationError):
            report_session.build_publish_payload()

    def test_rename_rejects_long_names(self, report_session):
        with pytest.raises(ConfigValidationError):
            report_session.rename("x" * 256)
        assert report_session.configuration.name == ""

    def test_publish_payload(self):
        session = create_session(predefined_conditions=PREDEFINED)
        session.rename("  省份价格比对  ", "按省份比对中标价")
        session.select_scheme("scheme_001")
        session.assign_field("dim4", "column")
        session.assign_field("met1", "value")
        session.enable_group("met1", "集团价")

        payload = session.build_publish_payload()

        assert payload["name"] == "省份价格比对"
        assert payload["schemeId"] == "scheme_001"
        assert [item["fieldId"] for item in payload["axisItems"]] == [
            "comp-sku", "comp-name", "comp-category", "dim4", "met1",
        ]
        assert payload["axisItems"][0]["fixed"] is True
        assert payload["axisItems"][-1]["config"]["groupName"] == "集团价"
        assert payload["conditions"][0]["groupType"] == "historyPrice"

    def test_reset_keeps_predefined_and_fixed(self):
        session = create_session(predefined_conditions=PREDEFINED)
        session.add_condition(GroupType.METRIC, "met2")
        session.assign_field("met1", "value")
        session.rename("临时")

        session.reset()

        configuration = session.configuration
        assert [c.id for c in configuration.conditions.conditions] == ["pre_hist_province"]
        assert configuration.layout.assignments == ()
        assert configuration.layout.fixed_row_fields == ("comp-sku", "comp-name", "comp-category")
        assert configuration.name == ""
        assert session.preview().data == []

    def test_session_without_arguments(self):
        session = ReportConfigService()
        session.assign_field("dim1", "column")
        assert len(session.preview().data) == 8
