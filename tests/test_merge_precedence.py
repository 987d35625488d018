import copy

from chartplan.layer import BASE_DEFAULTS, PlotLayer
from chartplan.merge import assign, deep_mix, merge_options, select
from chartplan.plots import COLUMN


def _style(datum):
    return {"fill": "red"}


BASE = {"a": 1, "nested": {"x": 1, "y": 1}, "list": [1, 2]}
TYPE_DEFAULTS = {"nested": {"y": 2, "z": 2}, "list": [3]}
USER = {"nested": {"z": 3}, "fn": _style}


def test_user_leaf_values_win_over_defaults() -> None:
    merged = merge_options(BASE, TYPE_DEFAULTS, USER)

    assert merged["a"] == 1
    assert merged["nested"] == {"x": 1, "y": 2, "z": 3}
    assert merged["list"] == [3]
    assert merged["fn"] is _style


def test_merge_is_associative_over_sources() -> None:
    assert merge_options(BASE, TYPE_DEFAULTS, USER) == deep_mix(
        BASE, deep_mix(TYPE_DEFAULTS, USER)
    )


def test_merge_is_deterministic_and_leaves_inputs_alone() -> None:
    before = copy.deepcopy((BASE, TYPE_DEFAULTS))

    first = merge_options(BASE, TYPE_DEFAULTS, USER)
    second = merge_options(BASE, TYPE_DEFAULTS, USER)

    assert first == second
    assert (BASE, TYPE_DEFAULTS) == before
    assert first["list"] is not TYPE_DEFAULTS["list"]
    assert first["nested"] is not USER["nested"]


def test_callables_and_sequences_replace_wholesale() -> None:
    assert deep_mix({"style": {"fill": "red"}}, {"style": _style})["style"] is _style
    assert deep_mix({"style": _style}, {"style": {"fill": "blue"}})["style"] == {
        "fill": "blue"
    }
    assert deep_mix({"padding": [1, 2, 3, 4]}, {"padding": [5]})["padding"] == [5]


def test_none_never_overrides() -> None:
    assert deep_mix({"a": 1}, {"a": None}) == {"a": 1}
    assert deep_mix(None, {"a": 1}, None) == {"a": 1}
    assert deep_mix({"a": {"b": 1, "c": 2}}, {"a": {"b": None, "c": 3}}) == {"a": {"b": 1, "c": 3}}


def test_null_does_not_clear_a_nested_type_default() -> None:
    layer = PlotLayer(COLUMN, {"xField": "x", "yField": "y", "legend": {"position": None}})

    assert layer.options["legend"] == {"visible": True, "position": "top-left"}


def test_layer_resolves_three_sources_in_order() -> None:
    layer = PlotLayer(
        COLUMN,
        {"xField": "x", "yField": "y", "width": 640, "legend": {"position": "bottom"}},
    )

    assert layer.options["width"] == 640
    assert layer.options["height"] == BASE_DEFAULTS["height"]
    # Plot type default beats the engine default, caller beats both.
    assert layer.options["legend"] == {"visible": True, "position": "bottom"}
    assert layer.options["label"] == {
        "visible": False,
        "position": "top",
        "adjustColor": True,
    }


def test_select_and_assign_dotted_paths() -> None:
    options = {"xAxis": {"label": {"rotate": 0}}}

    assign(options, "xAxis.label.autoHide", True)
    assign(options, "yAxis.tickCount", 5)

    assert select(options, "xAxis.label") == {"rotate": 0, "autoHide": True}
    assert select(options, "yAxis.tickCount") == 5
    assert select(options, "missing.path", default="fallback") == "fallback"
