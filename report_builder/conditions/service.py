# report_builder/conditions/service.py
"""Condition model and group organizer."""

import logging
from typing import Any, Dict, Iterable, List, Union

from report_builder.catalog.registry import FieldCatalog
from report_builder.catalog.schemas import FieldMetadata, FieldType
from report_builder.core.config import HISTORY_BASELINE_NAMES
from report_builder.core.exceptions import (
    CannotRemovePredefinedError,
    ConditionNotFoundError,
    FieldAlreadyUsedError,
    FieldNotAllowedError,
)
from .codec import get_codec
from .schemas import (
    CONDITION_GROUPS,
    GROUP_ALLOWED_FIELD_TYPES,
    GROUP_TITLES,
    ConditionGroup,
    ConditionSet,
    GroupType,
    QueryCondition,
)

logger = logging.getLogger(__name__)


class ConditionService:
    """Reducer-style operations over a ConditionSet.

    Every method takes a condition set and returns a new one; the input is never
    modified, so a rejected operation leaves the caller's state as it was.
    """

    def __init__(self, catalog: FieldCatalog):
        self.catalog = catalog

    # ===== MUTATIONS =====

    def add_condition(
        self,
        conditions: ConditionSet,
        group_type: Union[GroupType, str],
        field: Union[FieldMetadata, str],
    ) -> ConditionSet:
        """Add a custom condition for ``field`` to ``group_type``."""
        group_type = GroupType(group_type)
        if isinstance(field, str):
            field = self.catalog.require(field)

        allowed = GROUP_ALLOWED_FIELD_TYPES.get(group_type)
        if allowed is None:
            raise FieldNotAllowedError(f"Conditions cannot be added to the '{group_type.value}' group")
        if field.field_type not in allowed:
            raise FieldNotAllowedError(
                f"Group '{group_type.value}' does not accept {field.field_type.value} field '{field.name}'"
            )

        # Only dimensions are exclusive; metrics may carry several comparisons
        if field.field_type == FieldType.DIMENSION and field.id in self.used_field_ids(conditions):
            raise FieldAlreadyUsedError(field.id, field.name)

        condition = QueryCondition(
            id=f"{field.id}_{conditions.next_sequence}",
            field_id=field.id,
            field_name=field.name,
            field_type=field.field_type,
            group_type=group_type,
            component_type=field.component_type,
            value=get_codec(field.component_type).default_value(),
            is_predefined=False,
            options=field.options,
        )
        logger.info(f"Added {group_type.value} condition {condition.id} on field {field.id}")
        return ConditionSet(
            conditions=conditions.conditions + (condition,),
            next_sequence=conditions.next_sequence + 1,
        )

    def update_condition_value(self, conditions: ConditionSet, condition_id: str, value: Any) -> ConditionSet:
        """Replace a condition's value in place. The shape is not re-validated here."""
        self._require(conditions, condition_id)
        updated = tuple(
            c.model_copy(update={"value": value}) if c.id == condition_id else c
            for c in conditions.conditions
        )
        return conditions.model_copy(update={"conditions": updated})

    def remove_condition(self, conditions: ConditionSet, condition_id: str) -> ConditionSet:
        """Remove a custom condition."""
        condition = self._require(conditions, condition_id)
        if condition.is_predefined:
            raise CannotRemovePredefinedError(condition_id)
        logger.info(f"Removed condition {condition_id}")
        remaining = tuple(c for c in conditions.conditions if c.id != condition_id)
        return conditions.model_copy(update={"conditions": remaining})

    def merge_predefined(
        self,
        conditions: ConditionSet,
        predefined: Iterable[Union[QueryCondition, Dict[str, Any]]],
    ) -> ConditionSet:
        """Distribute predefined conditions into the condition groups.

        Baseline conditions go to the history-price group when their baseline is
        the history price and to the group-price group otherwise. A predefined
        condition whose field is already predefined in the target group is
        skipped, so repeated merges do not duplicate anything. A value that does
        not fit its component type raises ShapeError and nothing is merged.
        """
        merged = list(conditions.conditions)
        added = 0
        for item in predefined:
            condition = item if isinstance(item, QueryCondition) else QueryCondition.model_validate(item)
            get_codec(condition.component_type).validate(condition.value, self.catalog)
            target = self._target_group(condition)

            exists = any(
                c.is_predefined and c.group_type == target and c.field_id == condition.field_id
                for c in merged
            )
            if exists:
                continue

            merged.append(condition.model_copy(update={"group_type": target, "is_predefined": True}))
            added += 1

        if added:
            logger.info(f"Merged {added} predefined conditions")
        return conditions.model_copy(update={"conditions": tuple(merged)})

    def clear_custom(self, conditions: ConditionSet) -> ConditionSet:
        """Remove every non-predefined condition."""
        return conditions.model_copy(update={"conditions": tuple(conditions.predefined)})

    # ===== QUERIES =====

    def used_field_ids(self, conditions: ConditionSet) -> List[str]:
        """Field ids referenced by custom conditions. Predefined conditions do not count."""
        return [c.field_id for c in conditions.conditions if not c.is_predefined]

    def organize_by_group(self, conditions: ConditionSet) -> List[ConditionGroup]:
        """Get the condition sections in display order, predefined conditions first."""
        groups = []
        for group_type in CONDITION_GROUPS:
            title, description = GROUP_TITLES[group_type]
            members = [c for c in conditions.conditions if c.group_type == group_type]
            ordered = [c for c in members if c.is_predefined] + [c for c in members if not c.is_predefined]
            groups.append(ConditionGroup(type=group_type, title=title, description=description, conditions=ordered))
        return groups

    def available_fields(self, conditions: ConditionSet, group_type: Union[GroupType, str]) -> List[FieldMetadata]:
        """Catalog fields that can still be added to a group."""
        allowed = GROUP_ALLOWED_FIELD_TYPES.get(GroupType(group_type), frozenset())
        used = set(self.used_field_ids(conditions))
        return [
            f for f in self.catalog.list_fields(allowed)
            if not (f.field_type == FieldType.DIMENSION and f.id in used)
        ]

    def active_conditions(self, conditions: ConditionSet) -> List[QueryCondition]:
        """Conditions whose value is set and therefore filters the report."""
        return [c for c in conditions.conditions if not get_codec(c.component_type).is_empty(c.value)]

    # ===== HELPERS =====

    def _require(self, conditions: ConditionSet, condition_id: str) -> QueryCondition:
        condition = conditions.get(condition_id)
        if condition is None:
            raise ConditionNotFoundError(f"Condition '{condition_id}' not found")
        return condition

    @staticmethod
    def _target_group(condition: QueryCondition) -> GroupType:
        if condition.group_type != GroupType.BASELINE:
            return condition.group_type
        if condition.baseline_name in HISTORY_BASELINE_NAMES:
            return GroupType.HISTORY_PRICE
        return GroupType.GROUP_PRICE
