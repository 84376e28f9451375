"""
Test configuration and shared fixtures for the report builder test suite.
Provides catalogs, services and small record sets used across unit and functional tests.
"""

import pytest
from typing import Any, Dict, List

from report_builder.catalog import FieldCatalog, FieldMetadata, FieldType, build_default_catalog
from report_builder.conditions import ConditionService, ConditionSet
from report_builder.layout import AxisLayout, AxisLayoutService
from report_builder.metrics import MetricConfigService
from report_builder.pivot import MockValueSource, PivotEngine, RecordValueSource
from report_builder.reporting import ReportConfigService


# ===== CATALOG FIXTURES =====

@pytest.fixture
def catalog() -> FieldCatalog:
    """The sample price-comparison catalog"""
    return build_default_catalog()


@pytest.fixture
def scenario_catalog() -> FieldCatalog:
    """Small catalog whose display names match the scenario records"""
    return FieldCatalog([
        FieldMetadata(id="SKU", name="SKU", field_type=FieldType.DIMENSION),
        FieldMetadata(id="Region", name="Region", field_type=FieldType.DIMENSION),
        FieldMetadata(id="supplier", name="supplier", field_type=FieldType.DIMENSION),
        FieldMetadata(id="Price", name="Price", field_type=FieldType.METRIC, component_type="numberRange"),
        FieldMetadata(id="Cost", name="Cost", field_type=FieldType.BASELINE, component_type="numberRange"),
    ])


# ===== SERVICE FIXTURES =====

@pytest.fixture
def condition_service(catalog) -> ConditionService:
    return ConditionService(catalog)


@pytest.fixture
def layout_service() -> AxisLayoutService:
    return AxisLayoutService()


@pytest.fixture
def metric_service(catalog) -> MetricConfigService:
    return MetricConfigService(catalog)


@pytest.fixture
def engine(scenario_catalog) -> PivotEngine:
    return PivotEngine(scenario_catalog)


@pytest.fixture
def empty_conditions() -> ConditionSet:
    return ConditionSet()


@pytest.fixture
def fixed_layout() -> AxisLayout:
    return AxisLayout(fixed_row_fields=("comp-sku", "comp-name", "comp-category"))


# ===== SAMPLE DATA FIXTURES =====

@pytest.fixture
def region_records() -> List[Dict[str, Any]]:
    return [
        {"SKU": "S1", "Region": "East", "Price": 10},
        {"SKU": "S1", "Region": "West", "Price": 12},
    ]


@pytest.fixture
def supplier_records() -> List[Dict[str, Any]]:
    return [
        {"SKU": "S1", "Price": 10, "supplier": "供应商A"},
        {"SKU": "S1", "Price": 10, "supplier": "供应商B"},
    ]


@pytest.fixture
def report_session(catalog) -> ReportConfigService:
    """Report session over the sample catalog with seeded mock preview data"""
    return ReportConfigService(catalog=catalog, value_source=MockValueSource(seed=7))


@pytest.fixture
def record_source(region_records) -> RecordValueSource:
    return RecordValueSource(region_records)
