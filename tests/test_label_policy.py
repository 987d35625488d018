import pytest

from chartplan.errors import ComponentError
from chartplan.labels import (
    DefaultComponentFactory,
    LabelDescriptor,
    extract_label,
    label_options_for_position,
    resolve_label,
)


def test_middle_label_defaults() -> None:
    label = resolve_label("middle", {})

    assert label is not None
    assert label.offset == 0
    assert label.style["textBaseline"] == "middle"


@pytest.mark.parametrize("position", ["top", "bottom"])
def test_top_and_bottom_label_defaults(position: str) -> None:
    label = resolve_label(position, {})

    assert label is not None
    assert label.offset == 4
    assert label.style["textBaseline"] == "bottom"


def test_unknown_position_has_no_baseline() -> None:
    label = resolve_label("left", {})

    assert label is not None
    assert label.offset == 0
    assert "textBaseline" not in label.style


@pytest.mark.parametrize("position", ["top", "middle", "bottom", "left", None])
def test_hidden_label_is_not_produced(position) -> None:
    assert resolve_label(position, {"visible": False}) is None


def test_overrides_win_key_by_key() -> None:
    label = resolve_label("top", {"offset": 10, "style": {"fill": "red"}, "rotate": 1})

    assert label.offset == 10
    assert label.style == {"textBaseline": "bottom", "fill": "red"}
    assert label.extra == {"rotate": 1}


def test_position_table_returns_fresh_copies() -> None:
    first = label_options_for_position("middle")
    first["style"]["textBaseline"] = "top"

    assert label_options_for_position("middle")["style"]["textBaseline"] == "middle"


def test_extract_label_builds_component_with_fields() -> None:
    options = {"label": {"visible": True, "position": "middle"}, "yField": "y"}

    label = extract_label(
        options,
        label_type="columnLabel",
        fields=["y"],
        factory=DefaultComponentFactory(),
    )

    assert isinstance(label, LabelDescriptor)
    assert label.fields == ["y"]
    assert label.label_type == "columnLabel"
    assert label.position == "middle"


def test_extract_label_returns_false_when_hidden() -> None:
    options = {"label": {"visible": False, "position": "top"}}

    assert (
        extract_label(
            options,
            label_type="columnLabel",
            fields=["y"],
            factory=DefaultComponentFactory(),
        )
        is False
    )


def test_unknown_component_is_rejected() -> None:
    with pytest.raises(ComponentError) as exc:
        DefaultComponentFactory().get_component("legend", {})

    assert "Unknown component" in str(exc.value)
    assert "label" in str(exc.value)
