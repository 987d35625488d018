"""Responsive rule builders shared by the built-in plot types."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from chartplan.merge import assign, select
from chartplan.responsive import (
    AFTER_RENDER,
    PRE_RENDER,
    ResponsiveRule,
    band_width,
    tick_count_for,
)

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

# (minimum band width in px, rotation in radians, autoHide)
ROTATION_THRESHOLDS = (
    (40.0, 0.0, False),
    (20.0, math.pi / 4, False),
    (0.0, math.pi / 2, True),
)
LABEL_MIN_BAND = 16.0


def category_label_rotation(field_key: str, axis_key: str) -> ResponsiveRule:
    def _method(layer: "PlotLayer") -> None:
        band = band_width(layer, field_key)
        for threshold, rotate, auto_hide in ROTATION_THRESHOLDS:
            if band >= threshold:
                break
        assign(layer.options, f"{axis_key}.label.rotate", rotate)
        assign(layer.options, f"{axis_key}.label.autoRotate", rotate != 0.0)
        assign(layer.options, f"{axis_key}.label.autoHide", auto_hide)

    return ResponsiveRule(f"{axis_key}.labelRotation", PRE_RENDER, _method)


def label_density(field_key: str, *, vertical: bool = False) -> ResponsiveRule:
    """Hide data labels when bands get too thin, and restore them later."""

    def _method(layer: "PlotLayer") -> None:
        label = layer.options.get("label")
        if not isinstance(label, dict) or label.get("forceVisible"):
            return
        band = band_width(layer, field_key, vertical=vertical)
        if band < LABEL_MIN_BAND:
            if label.get("visible") is not False:
                label["visible"] = False
                label["responsiveHidden"] = True
        elif label.pop("responsiveHidden", False):
            label["visible"] = True

    return ResponsiveRule("label.density", PRE_RENDER, _method)


def value_tick_count(axis_key: str, *, horizontal: bool = False) -> ResponsiveRule:
    def _method(layer: "PlotLayer") -> None:
        area = layer.view.plot_area()
        extent = area.width if horizontal else area.height
        if select(layer.options, f"{axis_key}.visible") is False:
            return
        assign(layer.options, f"{axis_key}.tickCount", tick_count_for(extent))

    return ResponsiveRule(f"{axis_key}.tickCount", AFTER_RENDER, _method)


__all__ = [
    "LABEL_MIN_BAND",
    "ROTATION_THRESHOLDS",
    "category_label_rotation",
    "label_density",
    "value_tick_count",
]
