# report_builder/pivot/engine.py
"""
Pivot aggregation engine.

Turns axis fields, per-value-field metric configuration and a value source into
flat output rows plus the row/column/value display names of the grid.

Without grouped metrics every base row yields one output row carrying all
fields. As soon as one value field is grouped, every base row yields one row
per value field, tagged with a group-label column and the value field's
attribute columns; attribute names join the column axis. Grouped value fields
in aggregate display mode then merge their rows that agree on every
non-attribute column, joining the attribute values.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from report_builder.catalog.registry import FieldCatalog
from .schemas import PivotFieldRef, PivotFields, PivotRequest, PivotResult, ValueField
from .value_source import RowContext, ValueSource

logger = logging.getLogger(__name__)

# (index of the value field that produced the row, row)
TaggedRow = Tuple[int, Dict[str, Any]]


class PivotEngine:
    """Pure builder of pivot results; holds only the catalog used to resolve attributes."""

    def __init__(self, catalog: FieldCatalog):
        self.catalog = catalog

    def build(self, request: PivotRequest, source: ValueSource) -> PivotResult:
        """Build output rows and axis field names for ``request``."""
        if not request.column_fields and not request.value_fields:
            return PivotResult()

        has_grouped = any(vf.config is not None and vf.config.group_enabled for vf in request.value_fields)
        base_rows = source.base_rows()

        if not has_grouped:
            data = [self._flat_row(request, source, context) for context in base_rows]
            fields = PivotFields(
                rows=[f.name for f in request.row_fields],
                columns=[f.name for f in request.column_fields],
                values=[f.name for f in request.value_fields],
            )
            logger.debug(f"Built ungrouped pivot with {len(data)} rows")
            return PivotResult(data=data, fields=fields)

        # An attribute already shown on the row or column axis keeps its axis cell
        axis_names = {f.name for f in request.row_fields} | {f.name for f in request.column_fields}
        attributes = [
            [a for a in self._resolve_attributes(vf) if a.name not in axis_names] for vf in request.value_fields
        ]
        tagged: List[TaggedRow] = []
        for context in base_rows:
            for index, value_field in enumerate(request.value_fields):
                row = self._grouped_row(request, source, context, value_field, attributes[index])
                tagged.append((index, row))

        for index, value_field in enumerate(request.value_fields):
            if value_field.config is not None and value_field.config.is_aggregate and attributes[index]:
                attribute_names = [a.name for a in attributes[index]]
                tagged = self._merge_aggregate(tagged, index, attribute_names)

        attribute_columns = _unique(a.name for refs in attributes for a in refs)
        fields = PivotFields(
            rows=[f.name for f in request.row_fields],
            columns=[request.group_label] + [f.name for f in request.column_fields] + attribute_columns,
            values=[f.name for f in request.value_fields],
        )
        data = [row for _, row in tagged]
        logger.debug(f"Built grouped pivot with {len(data)} rows from {len(base_rows)} base rows")
        return PivotResult(data=data, fields=fields)

    # ===== ROW BUILDERS =====

    def _axis_values(self, request: PivotRequest, source: ValueSource, context: RowContext) -> Dict[str, Any]:
        row = {}
        for field in request.row_fields:
            row[field.name] = source.value(field, context)
        for field in request.column_fields:
            row[field.name] = source.value(field, context)
        return row

    def _flat_row(self, request: PivotRequest, source: ValueSource, context: RowContext) -> Dict[str, Any]:
        row = self._axis_values(request, source, context)
        for value_field in request.value_fields:
            row[value_field.name] = source.value(value_field, context)
        return row

    def _grouped_row(
        self,
        request: PivotRequest,
        source: ValueSource,
        context: RowContext,
        value_field: ValueField,
        attributes: List[PivotFieldRef],
    ) -> Dict[str, Any]:
        row = self._axis_values(request, source, context)
        row[request.group_label] = self._group_label(request, value_field)
        row[value_field.name] = source.value(value_field, context)
        for attribute in attributes:
            row[attribute.name] = source.value(attribute, context)
        return row

    @staticmethod
    def _group_label(request: PivotRequest, value_field: ValueField) -> str:
        config = value_field.config
        if config is not None and config.group_enabled and config.group_name:
            return config.group_name
        return request.default_group_name

    def _resolve_attributes(self, value_field: ValueField) -> List[PivotFieldRef]:
        """Attribute fields of a grouped value field; unknown ids are skipped."""
        config = value_field.config
        if config is None or not config.group_enabled:
            return []

        resolved = []
        for attribute_id in config.attributes:
            field = self.catalog.by_id(attribute_id)
            if field is None:
                logger.warning(f"Skipping unknown attribute '{attribute_id}' of value field '{value_field.name}'")
                continue
            resolved.append(PivotFieldRef(field_id=field.id, name=field.name, field_type=field.field_type))
        return resolved

    # ===== AGGREGATE MERGE =====

    @staticmethod
    def _merge_aggregate(tagged: List[TaggedRow], value_index: int, attribute_names: List[str]) -> List[TaggedRow]:
        """Merge one value field's rows that agree on every non-attribute column.

        A merged row takes the place of its first contributing row; rows of
        other value fields are left untouched.
        """
        merged: List[TaggedRow] = []
        by_key: Dict[Tuple, Dict[str, Any]] = {}

        for index, row in tagged:
            if index != value_index:
                merged.append((index, row))
                continue

            key = tuple((name, str(value)) for name, value in row.items() if name not in attribute_names)
            existing = by_key.get(key)
            if existing is None:
                combined = dict(row)
                for name in attribute_names:
                    combined[name] = _join_values([row.get(name)])
                by_key[key] = combined
                merged.append((index, combined))
            else:
                for name in attribute_names:
                    existing[name] = _join_values([existing[name], row.get(name)])

        return merged


def _join_values(values: Iterable[Optional[Any]]) -> str:
    """Comma-join the distinct non-empty values, in first-seen order."""
    tokens: List[str] = []
    for value in values:
        if value is None or value == "":
            continue
        for token in str(value).split(","):
            if token and token not in tokens:
                tokens.append(token)
    return ",".join(tokens)


def _unique(names: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name not in seen:
            seen.append(name)
    return seen
