"""Optional total row appended to pivot output."""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

from report_builder.core.config import TOTAL_ROW_LABEL
from .schemas import PivotResult

logger = logging.getLogger(__name__)


class TotalAggregation(str, Enum):
    """How a value column is summarised in the total row."""

    SUM = "sum"
    AVG = "avg"
    MAX = "max"
    MIN = "min"
    COUNT = "count"


class TotalPosition(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"


class TotalsSettings(BaseModel):
    """Row-total settings of a report."""

    row_total_enabled: bool = Field(default=False, alias="rowTotalEnabled")
    row_total_position: TotalPosition = Field(default=TotalPosition.BOTTOM, alias="rowTotalPosition")
    # Per value field display name; missing fields use the default aggregation
    aggregations: Dict[str, TotalAggregation] = {}
    default_aggregation: TotalAggregation = Field(default=TotalAggregation.AVG, alias="defaultAggregation")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def aggregation_for(self, value_name: str) -> TotalAggregation:
        return self.aggregations.get(value_name, self.default_aggregation)


def _aggregate(series: pd.Series, aggregation: TotalAggregation) -> Optional[Union[int, float]]:
    numeric = pd.to_numeric(series, errors="coerce").dropna()
    if aggregation == TotalAggregation.COUNT:
        return int(numeric.count())
    if numeric.empty:
        return None

    if aggregation == TotalAggregation.SUM:
        value = numeric.sum()
    elif aggregation == TotalAggregation.MAX:
        value = numeric.max()
    elif aggregation == TotalAggregation.MIN:
        value = numeric.min()
    else:
        value = numeric.mean()
    return round(float(value), 2)


def build_total_row(result: PivotResult, settings: TotalsSettings, label: str = TOTAL_ROW_LABEL) -> Dict[str, Any]:
    """Summarise every value column of ``result``; non-numeric cells are ignored."""
    df = pd.DataFrame(result.data)
    row: Dict[str, Any] = {}

    label_column = result.fields.rows[0] if result.fields.rows else None
    if label_column is None and result.fields.columns:
        label_column = result.fields.columns[0]
    if label_column is not None:
        row[label_column] = label

    for value_name in result.fields.values:
        if value_name not in df.columns:
            row[value_name] = None
            continue
        row[value_name] = _aggregate(df[value_name], settings.aggregation_for(value_name))
    return row


def apply_totals(result: PivotResult, settings: TotalsSettings) -> PivotResult:
    """Return ``result`` with a total row added where the settings enable one."""
    if not settings.row_total_enabled or not result.data or not result.fields.values:
        return result

    total = build_total_row(result, settings)
    data: List[Dict[str, Any]] = [dict(row) for row in result.data]
    if settings.row_total_position == TotalPosition.TOP:
        data.insert(0, total)
    else:
        data.append(total)

    logger.debug(f"Added {settings.row_total_position.value} total row over {len(result.fields.values)} value fields")
    return PivotResult(data=data, fields=result.fields)
