import copy

from chartplan.compiler import compile_chart
from chartplan.plots import COLUMN, SCATTER
from chartplan.scales import color_scale, extract_scale, resolve_scales


def _formatter(value):
    return f"{value}%"


def test_category_and_value_baselines() -> None:
    scales = resolve_scales({"xField": "x", "yField": "y"}, COLUMN.scale_fields)

    assert scales == {"x": {"type": "cat"}, "y": {}}


def test_scatter_fields_start_unconstrained() -> None:
    scales = resolve_scales({"xField": "x", "yField": "y"}, SCATTER.scale_fields)

    assert scales == {"x": {}, "y": {}}


def test_axis_keys_are_copied_without_touching_the_axis() -> None:
    axis = {
        "tickCount": 5,
        "title": {"text": "Month"},
        "label": {"formatter": _formatter},
        "grid": {"visible": True},
    }
    before = copy.deepcopy(axis)

    scales = resolve_scales({"xField": "x", "yField": "y", "xAxis": axis}, COLUMN.scale_fields)

    assert scales["x"] == {
        "type": "cat",
        "tickCount": 5,
        "alias": "Month",
        "formatter": _formatter,
    }
    assert axis == before


def test_extract_scale_keeps_unmentioned_keys() -> None:
    descriptor = {"type": "cat", "custom": 1}

    extract_scale(descriptor, {"min": 0, "nice": True})

    assert descriptor == {"type": "cat", "custom": 1, "min": 0, "nice": True}


def test_missing_axis_config_is_not_an_error() -> None:
    descriptor = {"type": "time"}

    assert extract_scale(descriptor, None) == {"type": "time"}


def test_color_field_gets_category_scale() -> None:
    scales = {"x": {"type": "cat"}}

    color_scale({"colorField": "series"}, scales)
    color_scale({"colorField": "x"}, scales)

    assert scales == {"x": {"type": "cat"}, "series": {"type": "cat"}}


def test_compiled_plan_carries_scales() -> None:
    plan = compile_chart(
        "column",
        {"xField": "x", "yField": "y", "yAxis": {"min": 0, "max": 100}},
    )

    assert plan.scales == {"x": {"type": "cat"}, "y": {"min": 0, "max": 100}}
