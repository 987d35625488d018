import copy
import dataclasses
import math

import pytest

from chartplan.compiler import create_layer
from chartplan.errors import ConfigError, ResponsiveError
from chartplan.layer import PlotLayer
from chartplan.plots import COLUMN
from chartplan.responsive import (
    AFTER_RENDER,
    PRE_RENDER,
    ResponsiveRule,
    apply_responsive,
    build_rules,
    responsive_enabled,
)


def _categories(count: int) -> list[dict]:
    return [{"x": f"c{index}", "y": index + 1} for index in range(count)]


def _spy_plot_type(calls: list[str]):
    rules = build_rules(
        ResponsiveRule("spy.pre", PRE_RENDER, lambda layer: calls.append(PRE_RENDER)),
        ResponsiveRule("spy.after", AFTER_RENDER, lambda layer: calls.append(AFTER_RENDER)),
    )
    return dataclasses.replace(COLUMN, responsive_rules=rules)


def test_auto_padding_skips_every_rule() -> None:
    calls: list[str] = []
    layer = PlotLayer(
        _spy_plot_type(calls),
        {"xField": "x", "yField": "y", "responsive": True, "padding": "auto"},
        data=_categories(3),
    )

    layer.init().render()
    layer.relayout(200, 200)

    assert calls == []


def test_rules_run_at_both_checkpoints_in_order() -> None:
    calls: list[str] = []
    layer = PlotLayer(
        _spy_plot_type(calls),
        {"xField": "x", "yField": "y", "responsive": True},
        data=_categories(3),
    )

    layer.init()
    assert calls == [PRE_RENDER]
    layer.render()
    assert calls == [PRE_RENDER, AFTER_RENDER]
    assert layer.responsive_log == ["preRender:spy.pre", "afterRender:spy.after"]


def test_disabled_responsive_runs_nothing() -> None:
    calls: list[str] = []
    layer = PlotLayer(_spy_plot_type(calls), {"xField": "x", "yField": "y"})

    layer.init().render()

    assert calls == []


def test_gate_requires_flag_and_explicit_padding() -> None:
    assert responsive_enabled({"responsive": True, "padding": [10, 10, 10, 10]})
    assert not responsive_enabled({"responsive": True, "padding": "auto"})
    assert not responsive_enabled({"responsive": False, "padding": 10})


def test_after_render_application_is_idempotent() -> None:
    layer = create_layer(
        "column",
        {"xField": "x", "yField": "y", "responsive": True, "label": {"visible": True}},
        data=_categories(30),
    ).init().render()
    after_first = copy.deepcopy(layer.options)

    apply_responsive(AFTER_RENDER, layer, layer.plot_type.responsive_rules)

    assert layer.options == after_first


@pytest.mark.parametrize(
    ("count", "rotate", "auto_hide"),
    [(4, 0.0, False), (12, math.pi / 4, False), (20, math.pi / 2, True)],
)
def test_category_label_rotation_thresholds(count: int, rotate: float, auto_hide: bool) -> None:
    layer = create_layer(
        "column",
        {"xField": "x", "yField": "y", "responsive": True},
        data=_categories(count),
    ).init()

    label = layer.options["xAxis"]["label"]
    assert label["rotate"] == rotate
    assert label["autoHide"] is auto_hide
    assert label["autoRotate"] is (rotate != 0.0)


def test_value_axis_tick_count_follows_height() -> None:
    layer = create_layer(
        "column",
        {"xField": "x", "yField": "y", "responsive": True, "height": 400},
        data=_categories(3),
    ).init().render()

    assert layer.options["yAxis"]["tickCount"] == 6
    assert layer.scales["y"]["tickCount"] == 6


def test_column_rule_table_stages_and_names() -> None:
    assert [rule.name for rule in COLUMN.responsive_rules[PRE_RENDER]] == [
        "xAxis.labelRotation",
        "label.density",
    ]
    assert [rule.name for rule in COLUMN.responsive_rules[AFTER_RENDER]] == ["yAxis.tickCount"]


def test_dense_labels_are_hidden_at_pre_render_and_restored_on_relayout() -> None:
    layer = create_layer(
        "column",
        {"xField": "x", "yField": "y", "responsive": True, "label": {"visible": True}},
        data=_categories(30),
    ).init()

    # Hidden by init alone, before the view renders.
    assert layer.responsive_log[:2] == ["preRender:xAxis.labelRotation", "preRender:label.density"]
    assert layer.options["label"]["visible"] is False
    assert layer.geometry.label is False

    layer.render()

    layer.relayout(1000, 400)

    assert layer.options["label"]["visible"] is True
    assert "responsiveHidden" not in layer.options["label"]
    assert layer.geometry.label.position == "top"


def test_forced_labels_survive_dense_layouts() -> None:
    layer = create_layer(
        "column",
        {
            "xField": "x",
            "yField": "y",
            "responsive": True,
            "label": {"visible": True, "forceVisible": True},
        },
        data=_categories(30),
    ).init()

    assert layer.options["label"]["visible"] is True


def test_failing_rule_restores_options() -> None:
    def _broken(layer) -> None:
        layer.options["xAxis"]["broken"] = True
        raise ValueError("bad measurement")

    plot_type = dataclasses.replace(
        COLUMN,
        responsive_rules=build_rules(ResponsiveRule("broken", PRE_RENDER, _broken)),
    )
    layer = PlotLayer(plot_type, {"xField": "x", "yField": "y", "responsive": True})

    with pytest.raises(ResponsiveError) as exc:
        layer.init()

    assert "broken" not in layer.options["xAxis"]
    assert exc.value.context == {"rule": "broken", "stage": PRE_RENDER}


def test_unknown_stage_is_a_config_error() -> None:
    with pytest.raises(ConfigError):
        build_rules(ResponsiveRule("odd", "beforePaint", lambda layer: None))
