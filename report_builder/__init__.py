"""
Report builder for price-comparison reports.

Field catalog, query conditions, axis layout, metric grouping and the pivot
engine that turns a configuration into preview rows.
"""

from report_builder.catalog import FieldCatalog, build_default_catalog
from report_builder.core.config import configure_logging
from report_builder.pivot import MockValueSource, PivotEngine, RecordValueSource
from report_builder.reporting import ReportConfigService, ReportConfiguration


def create_session(predefined_conditions=(), records=None, seed: int = 0) -> ReportConfigService:
    """Create a report session over the default catalog.

    Preview rows come from ``records`` when given, otherwise from seeded mock data.
    """
    value_source = RecordValueSource(records) if records is not None else MockValueSource(seed=seed)
    return ReportConfigService(
        catalog=build_default_catalog(),
        value_source=value_source,
        predefined_conditions=predefined_conditions,
    )


__all__ = [
    "FieldCatalog",
    "build_default_catalog",
    "configure_logging",
    "PivotEngine",
    "MockValueSource",
    "RecordValueSource",
    "ReportConfigService",
    "ReportConfiguration",
    "create_session",
]
