"""Pivot aggregation: engine, value sources, totals and export."""

from .engine import PivotEngine
from .export import XLSX_MEDIA_TYPE, export_xlsx, to_dataframe
from .schemas import PivotFieldRef, PivotFields, PivotRequest, PivotResult, ValueField
from .totals import TotalAggregation, TotalPosition, TotalsSettings, apply_totals, build_total_row
from .value_source import MockValueSource, RecordValueSource, RowContext, SAMPLE_SKUS, ValueSource

__all__ = [
    "PivotEngine",
    "PivotFieldRef",
    "PivotFields",
    "PivotRequest",
    "PivotResult",
    "ValueField",
    "ValueSource",
    "RowContext",
    "RecordValueSource",
    "MockValueSource",
    "SAMPLE_SKUS",
    "TotalAggregation",
    "TotalPosition",
    "TotalsSettings",
    "apply_totals",
    "build_total_row",
    "to_dataframe",
    "export_xlsx",
    "XLSX_MEDIA_TYPE",
]
