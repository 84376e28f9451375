"""Pydantic schemas for query conditions and their value shapes."""

from typing import Any, Dict, List, Optional, Tuple, Union
from datetime import date, datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt

from report_builder.catalog.schemas import FieldType


class GroupType(str, Enum):
    """Named section a query condition belongs to."""

    COMPARISON = "comparison"
    GROUP_PRICE = "groupPrice"
    HISTORY_PRICE = "historyPrice"
    METRIC = "metric"
    # Only seen on incoming predefined conditions; re-bucketed on merge
    BASELINE = "baseline"


# Sections of a condition set, in display order
CONDITION_GROUPS: Tuple[GroupType, ...] = (
    GroupType.COMPARISON,
    GroupType.GROUP_PRICE,
    GroupType.HISTORY_PRICE,
    GroupType.METRIC,
)

GROUP_ALLOWED_FIELD_TYPES: Dict[GroupType, frozenset] = {
    GroupType.COMPARISON: frozenset({FieldType.DIMENSION}),
    GroupType.GROUP_PRICE: frozenset({FieldType.DIMENSION}),
    GroupType.HISTORY_PRICE: frozenset({FieldType.DIMENSION}),
    GroupType.METRIC: frozenset({FieldType.METRIC, FieldType.BASELINE, FieldType.CALCULATED}),
}

GROUP_TITLES: Dict[GroupType, Tuple[str, str]] = {
    GroupType.COMPARISON: ("比对对象", "设置比对对象的查询条件"),
    GroupType.GROUP_PRICE: ("集团价", "设置集团采购价格基准条件"),
    GroupType.HISTORY_PRICE: ("历史价", "设置历史采购价格基准条件"),
    GroupType.METRIC: ("指标", "设置指标的数值区间条件"),
}


class CompareOperator(str, Enum):
    """Comparators of a metric-compare condition."""

    EQ = "="
    NE = "≠"
    GT = ">"
    GE = "≥"
    LT = "<"
    LE = "≤"


# ===== VALUE SHAPES =====

Number = Union[StrictInt, StrictFloat]
DateLike = Union[datetime, date]


class NumberRangeValue(BaseModel):
    """Value of a numberRange control."""

    min: Optional[Number] = None
    max: Optional[Number] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class DateRangeValue(BaseModel):
    """Value of a dateRangePicker control."""

    start: Optional[DateLike] = None
    end: Optional[DateLike] = None

    model_config = ConfigDict(extra="forbid", frozen=True)


class MetricCompareValue(BaseModel):
    """Value of a metricCompare control: left metric <op> right metric."""

    left_metric_id: Optional[str] = Field(default=None, alias="leftMetricId")
    right_metric_id: Optional[str] = Field(default=None, alias="rightMetricId")
    op: CompareOperator = CompareOperator.EQ

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)


# ===== CONDITIONS =====


class QueryCondition(BaseModel):
    """A single filter condition on one field."""

    id: str
    field_id: str = Field(alias="fieldId")
    field_name: str = Field(alias="fieldName")
    field_type: FieldType = Field(alias="fieldType")
    group_type: GroupType = Field(alias="groupType")
    component_type: str = Field(alias="componentType")
    value: Any = None
    is_predefined: bool = Field(default=False, alias="isPredefined")
    options: Optional[List[str]] = None
    # Label of the baseline a predefined baseline condition belongs to
    baseline_name: Optional[str] = Field(default=None, alias="baselineName")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class ConditionSet(BaseModel):
    """All query conditions of a report, in insertion order."""

    conditions: Tuple[QueryCondition, ...] = ()
    # Sequence used to build deterministic ids for new custom conditions
    next_sequence: int = 1

    model_config = ConfigDict(frozen=True)

    def get(self, condition_id: str) -> Optional[QueryCondition]:
        for condition in self.conditions:
            if condition.id == condition_id:
                return condition
        return None

    @property
    def custom(self) -> List[QueryCondition]:
        return [c for c in self.conditions if not c.is_predefined]

    @property
    def predefined(self) -> List[QueryCondition]:
        return [c for c in self.conditions if c.is_predefined]

    def __len__(self) -> int:
        return len(self.conditions)


class ConditionGroup(BaseModel):
    """Conditions of one section, predefined first."""

    type: GroupType
    title: str
    description: str
    conditions: List[QueryCondition] = []
