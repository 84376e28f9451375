"""Field catalog: read-only lookup of available report fields."""

from typing import Dict, List, Iterable, Optional

from report_builder.core.exceptions import MissingFieldError
from .schemas import FieldMetadata, FieldType, ComponentType


# Display labels for each input control
COMPONENT_TYPE_LABELS: Dict[str, str] = {
    ComponentType.INPUT.value: "文本输入",
    ComponentType.SELECT.value: "下拉选择",
    ComponentType.MULTI_SELECT.value: "多选",
    ComponentType.DATE_PICKER.value: "日期选择",
    ComponentType.DATE_RANGE_PICKER.value: "日期区间",
    ComponentType.NUMBER_RANGE.value: "数值区间",
    ComponentType.MODAL_SELECTOR.value: "弹窗选择",
    ComponentType.METRIC_COMPARE.value: "指标对比",
}

# Tree order and titles of the field panel
FIELD_TYPE_TITLES: Dict[FieldType, str] = {
    FieldType.DIMENSION: "比对维度",
    FieldType.METRIC: "比对指标",
    FieldType.CALCULATED: "计算指标",
    FieldType.BASELINE: "基准指标",
}


def component_type_label(component_type: str) -> str:
    """Get the display label of an input control type."""
    return COMPONENT_TYPE_LABELS.get(component_type, "未知类型")


class FieldCatalog:
    """In-memory registry of field metadata keyed by field id."""

    def __init__(self, fields: Iterable[FieldMetadata] = ()):
        self._fields: Dict[str, FieldMetadata] = {}
        for field in fields:
            self.register(field)

    def register(self, field: FieldMetadata) -> None:
        """Register a field definition. A later registration replaces an earlier one."""
        self._fields[field.id] = field

    def by_id(self, field_id: str) -> Optional[FieldMetadata]:
        return self._fields.get(field_id)

    def require(self, field_id: str) -> FieldMetadata:
        """Get a field or raise MissingFieldError."""
        field = self._fields.get(field_id)
        if field is None:
            raise MissingFieldError(field_id)
        return field

    def display_name(self, field_id: str) -> str:
        """Get a field's display name, falling back to the raw id."""
        field = self._fields.get(field_id)
        return field.name if field else field_id

    def list_fields(self, field_types: Optional[Iterable[FieldType]] = None) -> List[FieldMetadata]:
        """List fields in registration order, optionally restricted to some types."""
        if field_types is None:
            return list(self._fields.values())
        wanted = set(field_types)
        return [f for f in self._fields.values() if f.field_type in wanted]

    def search(self, text: str, fields: Optional[Iterable[FieldMetadata]] = None) -> List[FieldMetadata]:
        """Case-insensitive search on field name or id."""
        candidates = list(fields) if fields is not None else self.list_fields()
        if not text:
            return candidates
        needle = text.lower()
        return [f for f in candidates if needle in f.name.lower() or needle in f.id.lower()]

    def grouped_by_type(self) -> Dict[FieldType, List[FieldMetadata]]:
        """Get fields grouped by type in field-panel order."""
        return {field_type: self.list_fields([field_type]) for field_type in FIELD_TYPE_TITLES}

    def __contains__(self, field_id: object) -> bool:
        return field_id in self._fields

    def __len__(self) -> int:
        return len(self._fields)


# Identifying columns of the compared object, always leading the row axis
FIXED_ROW_FIELD_IDS = ("comp-sku", "comp-name", "comp-category")


def build_default_catalog() -> FieldCatalog:
    """Build the sample price-comparison catalog."""
    catalog = FieldCatalog()

    def register_field(**kwargs) -> None:
        catalog.register(FieldMetadata(**kwargs))

    # Fixed comparison-object dimensions
    register_field(id="comp-sku", name="SKU编码", field_type=FieldType.DIMENSION,
                   description="产品SKU编码", category="比对对象")
    register_field(id="comp-name", name="产品名称", field_type=FieldType.DIMENSION,
                   description="产品具体名称", category="比对对象")
    register_field(id="comp-category", name="产品类别", field_type=FieldType.DIMENSION,
                   description="产品分类", category="比对对象")

    # Dimensions
    register_field(id="dim1", name="检测产品", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.INPUT, description="检测产品的具体名称")
    register_field(id="dim2", name="规格型号", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.SELECT, options=["A型", "B型", "C型"],
                   description="产品的规格参数")
    register_field(id="dim3", name="生产厂家", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.MULTI_SELECT, options=["厂家A", "厂家B", "厂家C"],
                   description="产品生产厂商")
    register_field(id="dim4", name="省份", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.SELECT, options=["北京", "上海", "广东", "江苏"],
                   description="销售区域省份")
    register_field(id="dim5", name="医院等级", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.SELECT, options=["三甲", "三乙", "二甲"],
                   description="医疗机构等级分类")
    register_field(id="dim6", name="采购日期", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.DATE_RANGE_PICKER, description="采购日期范围")
    register_field(id="dim7", name="组织机构", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.MODAL_SELECTOR, description="选择组织机构")
    register_field(id="dim8", name="供应商", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.SELECT, options=["供应商A", "供应商B", "供应商C"],
                   description="供货供应商")
    register_field(id="dim9", name="采购方式", field_type=FieldType.DIMENSION,
                   component_type=ComponentType.SELECT, options=["集中采购", "自行采购", "委托采购"],
                   description="采购组织方式")

    # Metrics
    register_field(id="met1", name="中标价格", field_type=FieldType.METRIC,
                   component_type=ComponentType.NUMBER_RANGE, description="产品中标价格")
    register_field(id="met2", name="挂网价格", field_type=FieldType.METRIC,
                   component_type=ComponentType.NUMBER_RANGE, description="平台挂网价格")
    register_field(id="met3", name="采购量", field_type=FieldType.METRIC,
                   component_type=ComponentType.NUMBER_RANGE, description="采购数量统计")
    register_field(id="met4", name="采购金额", field_type=FieldType.METRIC,
                   component_type=ComponentType.NUMBER_RANGE, description="采购总金额")
    # Virtual field for "metric vs metric" conditions
    register_field(id="metric_compare", name="指标对比", field_type=FieldType.METRIC,
                   component_type=ComponentType.METRIC_COMPARE,
                   description="以两个指标之间的关系进行筛选")

    # Baselines
    register_field(id="base1", name="平均价格", field_type=FieldType.BASELINE,
                   component_type=ComponentType.NUMBER_RANGE, description="所有企业平均中标价格")
    register_field(id="base2", name="最低价格", field_type=FieldType.BASELINE,
                   component_type=ComponentType.NUMBER_RANGE, description="所有企业最低中标价格")
    register_field(id="base3", name="市场基准价", field_type=FieldType.BASELINE,
                   component_type=ComponentType.NUMBER_RANGE, description="行业市场基准价格")
    register_field(id="base4", name="历史均价", field_type=FieldType.BASELINE,
                   component_type=ComponentType.NUMBER_RANGE, description="历史采购平均价格")

    # Calculated metrics
    register_field(id="calc1", name="价差率", field_type=FieldType.CALCULATED,
                   component_type=ComponentType.NUMBER_RANGE, description="与基准价格的差异比率")
    register_field(id="calc2", name="价格指数", field_type=FieldType.CALCULATED,
                   component_type=ComponentType.NUMBER_RANGE, description="相对于基期的价格指数")
    register_field(id="calc3", name="节约金额", field_type=FieldType.CALCULATED,
                   component_type=ComponentType.NUMBER_RANGE, description="相比基准价格的节约金额")

    return catalog
