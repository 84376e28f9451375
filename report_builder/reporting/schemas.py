"""Schemas of a whole report configuration and its published form."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from report_builder.catalog.registry import FIXED_ROW_FIELD_IDS
from report_builder.conditions.schemas import ConditionSet
from report_builder.core.config import DEFAULT_GROUP_NAME, REPORT_NAME_MAX_LENGTH
from report_builder.layout.schemas import AxisLayout
from report_builder.metrics.schemas import MetricConfig
from report_builder.pivot.totals import TotalsSettings


class ReportConfiguration(BaseModel):
    """Everything a user has configured for one report."""

    name: str = ""
    description: Optional[str] = None
    scheme_id: Optional[str] = Field(default=None, alias="schemeId")
    conditions: ConditionSet = Field(default_factory=ConditionSet)
    layout: AxisLayout = Field(default_factory=lambda: AxisLayout(fixed_row_fields=FIXED_ROW_FIELD_IDS))
    metric_configs: Dict[str, MetricConfig] = Field(default_factory=dict, alias="metricConfigs")
    default_group_name: str = Field(default=DEFAULT_GROUP_NAME, alias="defaultGroupName")
    totals: TotalsSettings = Field(default_factory=TotalsSettings)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        # Drafts may be unnamed; publishing requires a name
        if len(v.strip()) > REPORT_NAME_MAX_LENGTH:
            raise ValueError(f"Report name cannot exceed {REPORT_NAME_MAX_LENGTH} characters")
        return v.strip()


class AxisItem(BaseModel):
    """One placed field of a published report."""

    field_id: str = Field(alias="fieldId")
    name: str
    field_type: str = Field(alias="fieldType")
    position: str
    fixed: bool = False
    config: Optional[MetricConfig] = None

    model_config = ConfigDict(populate_by_name=True)


class PublishedReport(BaseModel):
    """Payload handed to an external report saver."""

    name: str
    description: Optional[str] = None
    scheme_id: Optional[str] = Field(default=None, alias="schemeId")
    conditions: List[Dict[str, Any]] = []
    axis_items: List[AxisItem] = Field(default_factory=list, alias="axisItems")
    default_group_name: str = Field(default=DEFAULT_GROUP_NAME, alias="defaultGroupName")
    totals: Dict[str, Any] = {}

    model_config = ConfigDict(populate_by_name=True)
