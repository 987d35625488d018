"""Recording view used as the rendering-engine collaborator.

The view stores whatever configuration the pipeline hands it and, on
``render``, lays out one box per datum so that overlays which depend on
rendered positions (the conversion tag) have something to measure. It does
not draw anything.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
import numbers
from typing import Any, Optional

from chartplan.events import EventBus

DEFAULT_PADDING = 20.0
DEFAULT_BAND_RATIO = 0.6


@dataclass(frozen=True)
class ElementBox:
    index: int
    datum: Mapping[str, Any]
    x: float
    y: float
    width: float
    height: float

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class PlotArea:
    x: float
    y: float
    width: float
    height: float


def normalize_padding(padding: Any) -> tuple[float, float, float, float]:
    if padding == "auto" or padding is None:
        return (DEFAULT_PADDING,) * 4
    if isinstance(padding, numbers.Real):
        return (float(padding),) * 4
    # CSS shorthand: [all], [vertical, horizontal], [top, horizontal, bottom].
    values = [float(item) for item in padding]
    if len(values) == 1:
        return (values[0],) * 4
    if len(values) == 2:
        return (values[0], values[1], values[0], values[1])
    if len(values) == 3:
        return (values[0], values[1], values[2], values[1])
    if len(values) == 4:
        return (values[0], values[1], values[2], values[3])
    raise ValueError(f"padding must have 1 to 4 entries, got {len(values)}.")


def _numeric(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    return float(value)


class PlanView:
    """Collects the low-level plan produced by a plot layer."""

    def __init__(self, width: int, height: int, padding: Any = "auto") -> None:
        self.width = width
        self.height = height
        self.padding = padding
        self.config: dict[str, Any] = {}
        self.events = EventBus()
        self.elements: list[ElementBox] = []
        self.data: list[dict[str, Any]] = []
        self.render_count = 0

    @property
    def rendered(self) -> bool:
        return self.render_count > 0

    def set_config(self, key: str, value: Any) -> None:
        self.config[key] = value

    def get_config(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    def resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height

    def plot_area(self) -> PlotArea:
        top, right, bottom, left = normalize_padding(self.padding)
        return PlotArea(
            x=left,
            y=top,
            width=max(self.width - left - right, 0.0),
            height=max(self.height - top - bottom, 0.0),
        )

    def render(self, data: Sequence[Mapping[str, Any]] | None = None) -> list[ElementBox]:
        if data is not None:
            self.data = [dict(row) for row in data]
        self.elements = self._layout()
        self.render_count += 1
        return self.elements

    def _transposed(self) -> bool:
        coordinate = self.config.get("coordinate") or {}
        return "transpose" in coordinate.get("actions", ())

    def _layout(self) -> list[ElementBox]:
        element = self.config.get("element")
        if element is None or not self.data:
            return []
        fields = list(getattr(element, "position_fields", ()) or ())
        if len(fields) != 2:
            return []
        if getattr(element, "type", None) == "interval":
            return self._layout_bands(element, fields[0], fields[1])
        return self._layout_points(element, fields[0], fields[1])

    def _layout_bands(self, element: Any, band_field: str, value_field: str) -> list[ElementBox]:
        area = self.plot_area()
        transposed = self._transposed()
        categories: list[Any] = []
        for row in self.data:
            if row.get(band_field) not in categories:
                categories.append(row.get(band_field))
        values = [_numeric(row.get(value_field)) or 0.0 for row in self.data]
        peak = max([abs(value) for value in values] + [1e-12])
        band_extent = area.height if transposed else area.width
        value_extent = area.width if transposed else area.height
        band = band_extent / max(len(categories), 1)
        ratio = getattr(element, "size_ratio", None) or DEFAULT_BAND_RATIO
        shrink = (getattr(element, "width_ratio", None) or {}).values()
        for share in shrink:
            ratio *= share
        thickness = band * ratio
        boxes: list[ElementBox] = []
        for index, (row, value) in enumerate(zip(self.data, values)):
            slot = categories.index(row.get(band_field))
            offset = slot * band + (band - thickness) / 2
            length = value_extent * abs(value) / peak
            if transposed:
                box = ElementBox(index, row, area.x, area.y + offset, length, thickness)
            else:
                box = ElementBox(
                    index,
                    row,
                    area.x + offset,
                    area.y + area.height - length,
                    thickness,
                    length,
                )
            boxes.append(box)
        return boxes

    def _layout_points(self, element: Any, x_field: str, y_field: str) -> list[ElementBox]:
        area = self.plot_area()
        size = float(getattr(element, "size", None) or 4)
        xs = [_numeric(row.get(x_field)) for row in self.data]
        ys = [_numeric(row.get(y_field)) for row in self.data]
        known_x = [value for value in xs if value is not None] or [0.0]
        known_y = [value for value in ys if value is not None] or [0.0]
        x_lo, x_hi = min(known_x), max(known_x)
        y_lo, y_hi = min(known_y), max(known_y)
        boxes: list[ElementBox] = []
        for index, row in enumerate(self.data):
            x_value, y_value = xs[index], ys[index]
            if x_value is None or y_value is None:
                continue
            x_frac = (x_value - x_lo) / (x_hi - x_lo) if x_hi > x_lo else 0.5
            y_frac = (y_value - y_lo) / (y_hi - y_lo) if y_hi > y_lo else 0.5
            cx = area.x + x_frac * area.width
            cy = area.y + (1 - y_frac) * area.height
            boxes.append(ElementBox(index, row, cx - size, cy - size, 2 * size, 2 * size))
        return boxes


__all__ = ["DEFAULT_PADDING", "ElementBox", "PlotArea", "PlanView", "normalize_padding"]
