"""Query conditions: value codecs, condition schemas and the group organizer."""

from .schemas import (
    GroupType,
    CompareOperator,
    CONDITION_GROUPS,
    GROUP_ALLOWED_FIELD_TYPES,
    NumberRangeValue,
    DateRangeValue,
    MetricCompareValue,
    QueryCondition,
    ConditionSet,
    ConditionGroup,
)
from .codec import ValueCodec, CODEC_REGISTRY, get_codec, register_codec
from .service import ConditionService

__all__ = [
    "GroupType",
    "CompareOperator",
    "CONDITION_GROUPS",
    "GROUP_ALLOWED_FIELD_TYPES",
    "NumberRangeValue",
    "DateRangeValue",
    "MetricCompareValue",
    "QueryCondition",
    "ConditionSet",
    "ConditionGroup",
    "ValueCodec",
    "CODEC_REGISTRY",
    "get_codec",
    "register_codec",
    "ConditionService",
]
