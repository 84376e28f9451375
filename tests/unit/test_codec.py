"""
Unit tests for condition value codecs.
Tests default values, shape validation and emptiness per component type.
"""

import pytest
from datetime import date

from report_builder.conditions.codec import CODEC_REGISTRY, NumberRangeCodec, ValueCodec, get_codec
from report_builder.core.exceptions import ShapeError


class TestCodecDefaults:
    """Test default values of new conditions"""

    @pytest.mark.parametrize("component_type, expected", [
        ("input", None),
        ("select", None),
        ("multiSelect", []),
        ("modalSelector", []),
        ("datePicker", None),
        ("numberRange", {"min": None, "max": None}),
        ("dateRangePicker", {"start": None, "end": None}),
        ("metricCompare", {"leftMetricId": None, "rightMetricId": None, "op": "="}),
    ])
    def test_default_value(self, component_type, expected):
        assert get_codec(component_type).default_value() == expected

    def test_defaults_are_empty(self):
        for codec in CODEC_REGISTRY.values():
            assert codec.is_empty(codec.default_value())

    def test_unknown_component_type_falls_back_to_text(self):
        codec = get_codec("colorPicker")
        assert type(codec) is ValueCodec
        assert codec.default_value() is None

    def test_legacy_date_range_alias(self):
        assert get_codec("dateRange") is get_codec("dateRangePicker")


class TestCodecValidation:
    """Test shape validation"""

    def test_none_always_valid(self):
        for codec in CODEC_REGISTRY.values():
            codec.validate(None)

    def test_text_rejects_list(self):
        with pytest.raises(ShapeError):
            get_codec("input").validate(["a"])

    def test_select_rejects_list(self):
        with pytest.raises(ShapeError):
            get_codec("select").validate(["A型"])

    def test_multi_select_accepts_list_of_scalars(self):
        get_codec("multiSelect").validate(["厂家A", "厂家B"])

    def test_multi_select_rejects_scalar(self):
        with pytest.raises(ShapeError):
            get_codec("multiSelect").validate("厂家A")

    def test_date_picker_accepts_iso_string_and_date(self):
        codec = get_codec("datePicker")
        codec.validate("2024-03-01")
        codec.validate(date(2024, 3, 1))
        with pytest.raises(ShapeError):
            codec.validate("next tuesday")

    def test_number_range_rejects_string_bound(self):
        with pytest.raises(ShapeError):
            get_codec("numberRange").validate({"min": "10", "max": 20})

    def test_number_range_rejects_unknown_keys(self):
        with pytest.raises(ShapeError):
            get_codec("numberRange").validate({"min": 1, "maximum": 2})

    def test_number_range_inverted_bounds_are_allowed(self):
        codec = NumberRangeCodec()
        codec.validate({"min": 50, "max": 10})
        assert codec.is_inverted({"min": 50, "max": 10})
        assert not codec.is_inverted({"min": 10, "max": None})

    def test_date_range_accepts_open_end(self):
        get_codec("dateRangePicker").validate({"start": "2024-01-01", "end": None})

    def test_metric_compare_checks_catalog(self, catalog):
        codec = get_codec("metricCompare")
        codec.validate({"leftMetricId": "met1", "rightMetricId": "base1", "op": ">"}, catalog)
        with pytest.raises(ShapeError):
            codec.validate({"leftMetricId": "met1", "rightMetricId": "dim1", "op": ">"}, catalog)
        with pytest.raises(ShapeError):
            codec.validate({"leftMetricId": "met1", "rightMetricId": "ghost", "op": ">"}, catalog)

    def test_metric_compare_same_metric_on_both_sides_is_allowed(self, catalog):
        get_codec("metricCompare").validate({"leftMetricId": "met1", "rightMetricId": "met1"}, catalog)

    def test_metric_compare_rejects_unknown_operator(self):
        with pytest.raises(ShapeError):
            get_codec("metricCompare").validate({"leftMetricId": "met1", "rightMetricId": "met2", "op": "~"})


class TestCodecEmptiness:
    """Test whether values filter the report"""

    def test_blank_text_is_empty(self):
        assert get_codec("input").is_empty("   ")
        assert not get_codec("input").is_empty("生化")

    def test_number_range_with_one_bound_is_not_empty(self):
        assert not get_codec("numberRange").is_empty({"min": 0, "max": None})

    def test_metric_compare_needs_both_sides(self):
        codec = get_codec("metricCompare")
        assert codec.is_empty({"leftMetricId": "met1", "rightMetricId": None})
        assert not codec.is_empty({"leftMetricId": "met1", "rightMetricId": "met2"})
