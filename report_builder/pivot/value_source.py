"""Sources of concrete cell values for the pivot engine."""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping

from report_builder.catalog.schemas import FieldType
from .schemas import PivotFieldRef


@dataclass(frozen=True)
class RowContext:
    """One base dimension combination the engine expands into output rows."""

    index: int
    values: Mapping[str, Any] = field(default_factory=dict)


class ValueSource(ABC):
    """Supplies base rows and the value of any field within a base row."""

    @abstractmethod
    def base_rows(self) -> List[RowContext]:
        """Base dimension combinations, in output order."""

    @abstractmethod
    def value(self, field: PivotFieldRef, context: RowContext) -> Any:
        """Value of ``field`` for one base row."""


class RecordValueSource(ValueSource):
    """Serve values from records keyed by field display name or field id."""

    def __init__(self, records: Iterable[Mapping[str, Any]]):
        self._rows = [RowContext(index=i, values=dict(record)) for i, record in enumerate(records)]

    def base_rows(self) -> List[RowContext]:
        return list(self._rows)

    def value(self, field: PivotFieldRef, context: RowContext) -> Any:
        if field.name in context.values:
            return context.values[field.name]
        return context.values.get(field.field_id)


# Sample compared objects used for report previews
SAMPLE_SKUS: List[Dict[str, str]] = [
    {"SKU编码": "SKU001", "产品名称": "生化分析仪A1", "产品类别": "生化试剂"},
    {"SKU编码": "SKU002", "产品名称": "化学发光仪B2", "产品类别": "免疫试剂"},
    {"SKU编码": "SKU003", "产品名称": "基因测序仪C3", "产品类别": "分子诊断"},
    {"SKU编码": "SKU004", "产品名称": "细菌鉴定仪D4", "产品类别": "微生物检测"},
]


class MockValueSource(ValueSource):
    """Deterministic preview data: each sample SKU in ``variants`` variants.

    Values are derived from ``seed``, the field id and the row index only, so
    repeated builds of the same configuration produce identical previews.
    """

    def __init__(self, seed: int = 0, variants: int = 2, skus: List[Dict[str, str]] = None):
        self.seed = seed
        self.variants = variants
        self.skus = skus if skus is not None else SAMPLE_SKUS

    def base_rows(self) -> List[RowContext]:
        rows = []
        for sku in self.skus:
            for variant in range(self.variants):
                rows.append(RowContext(index=len(rows), values={**sku, "_variant": variant}))
        return rows

    def value(self, field: PivotFieldRef, context: RowContext) -> Any:
        if field.name in context.values:
            return context.values[field.name]

        rng = random.Random(f"{self.seed}:{field.field_id}:{context.index}")
        variant = context.values.get("_variant", 0)
        if field.field_type == FieldType.DIMENSION:
            return f"{field.name}_{variant % 3 + 1}"
        if field.field_type == FieldType.CALCULATED:
            return rng.randint(0, 99)
        if field.field_type == FieldType.BASELINE:
            return round(rng.uniform(50, 150), 2)
        return round(rng.uniform(0, 100), 2)
