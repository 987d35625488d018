"""Conversion tag overlay: percentage change between adjacent elements."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import logging
import numbers
from typing import TYPE_CHECKING, Any, Optional

import numpy as np

from chartplan.errors import LayerStateError
from chartplan.merge import deep_mix
from chartplan.view import ElementBox, PlanView

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

logger = logging.getLogger("chartplan.components.conversion_tag")

DEFAULT_OPTIONS: Mapping[str, Any] = {
    "visible": False,
    "size": 32,
    "spacing": 8,
    "offset": 32,
    "arrow": {"visible": True, "headSize": 12, "style": {"fill": "rgba(0, 0, 0, 0.05)"}},
    "value": {"visible": True, "style": {"fontSize": 12, "fill": "rgba(0, 0, 0, 0.85)"}},
}

MISSING_TEXT = "-"


def default_formatter(prev: Optional[float], next_: Optional[float]) -> str:
    if prev is None or next_ is None or prev == 0:
        return MISSING_TEXT
    return f"{100 * next_ / prev:.2f}%"


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    result = float(value)
    if not np.isfinite(result):
        return None
    return result


@dataclass(frozen=True)
class Tag:
    source: int
    target: int
    text: str
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "text": self.text,
            "box": [self.x, self.y, self.width, self.height],
        }


class ConversionTag:
    """One overlay per layer, computed from the rendered element boxes."""

    def __init__(
        self,
        *,
        view: PlanView,
        field: str,
        transpose: bool,
        animation: bool = True,
        **options: Any,
    ) -> None:
        self.view = view
        self.field = field
        self.transpose = transpose
        self.animation = animation
        self.options = deep_mix(DEFAULT_OPTIONS, options)
        self.tags: list[Tag] = self._build_tags()

    def _formatter(self) -> Callable[[Optional[float], Optional[float]], str]:
        formatter = (self.options.get("value") or {}).get("formatter")
        return formatter if callable(formatter) else default_formatter

    def _place(self, prev: ElementBox, next_: ElementBox) -> tuple[float, float, float, float]:
        size = float(self.options["size"])
        spacing = float(self.options["spacing"])
        offset = float(self.options["offset"])
        if self.transpose:
            x = prev.max_x + spacing
            width = max(next_.x - prev.max_x - 2 * spacing, 0.0)
            y = max(prev.y, next_.y) - offset
            return x, y, width, size
        y = prev.max_y + spacing
        height = max(next_.y - prev.max_y - 2 * spacing, 0.0)
        x = min(prev.max_x, next_.max_x) + offset - size
        return x, y, size, height

    def _build_tags(self) -> list[Tag]:
        elements = sorted(self.view.elements, key=lambda box: box.index)
        formatter = self._formatter()
        tags: list[Tag] = []
        for prev, next_ in zip(elements, elements[1:]):
            text = formatter(
                _as_float(prev.datum.get(self.field)),
                _as_float(next_.datum.get(self.field)),
            )
            x, y, width, height = self._place(prev, next_)
            tags.append(Tag(prev.index, next_.index, text, x, y, width, height))
        return tags

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "conversionTag",
            "field": self.field,
            "transpose": self.transpose,
            "animation": self.animation,
            "arrow": bool((self.options.get("arrow") or {}).get("visible")),
            "value": bool((self.options.get("value") or {}).get("visible")),
            "tags": [tag.to_dict() for tag in self.tags],
        }


def attach_conversion_tag(layer: "PlotLayer") -> Optional[ConversionTag]:
    """Create the layer's conversion tag if it is configured visible."""
    options = layer.options
    tag_options = options.get("conversionTag") or {}
    if not tag_options.get("visible"):
        return None
    if not layer.view.rendered:
        raise LayerStateError(
            "Conversion tag needs rendered elements; render the layer first.",
            context={"plot_type": layer.plot_type.name},
        )
    if layer.conversion_tag is not None:
        raise LayerStateError(
            "Conversion tag is already attached to this layer.",
            context={"plot_type": layer.plot_type.name},
        )
    field_key, transpose = layer.plot_type.conversion_tag
    params: dict[str, Any] = {
        "field": options.get(field_key),
        "transpose": transpose,
        "animation": options.get("animation") is not False,
    }
    params.update(tag_options)
    tag = ConversionTag(view=layer.view, **params)
    logger.debug("Attached conversion tag with %d tags.", len(tag.tags))
    layer.conversion_tag = tag
    return tag


__all__ = ["DEFAULT_OPTIONS", "ConversionTag", "Tag", "attach_conversion_tag", "default_formatter"]
