"""Per-value-field display configuration schemas."""

from typing import Optional, Tuple
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class DisplayMode(str, Enum):
    """How rows of a grouped metric are presented."""

    DETAIL = "detail"  # One row per source row
    AGGREGATE = "aggregate"  # Rows sharing a key merged, attribute values joined


class MetricConfig(BaseModel):
    """Grouping (metric, baseline) or association (calculated) settings of a value field."""

    # Grouped shape
    group_enabled: bool = Field(default=False, alias="groupEnabled")
    group_name: str = Field(default="", alias="groupName")
    attributes: Tuple[str, ...] = ()
    independent_group: bool = Field(default=False, alias="independentGroup")
    display_mode: DisplayMode = Field(default=DisplayMode.DETAIL, alias="displayMode")

    # Association shape
    association_enabled: bool = Field(default=False, alias="associationEnabled")
    association_target_id: Optional[str] = Field(default=None, alias="associationTargetId")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def is_aggregate(self) -> bool:
        return self.group_enabled and self.display_mode == DisplayMode.AGGREGATE
