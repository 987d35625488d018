"""Column plot: one vertical band per category of ``xField``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chartplan.events import PLOT_EVENTS, EventTable, element_events
from chartplan.geometry import GeometryBinding, GeometryNameMap
from chartplan.layer import PlotType
from chartplan.options import ColumnOptions
from chartplan.plots.common import category_label_rotation, label_density, value_tick_count
from chartplan.responsive import build_rules

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

GEOMETRY_MAP = GeometryNameMap(
    to_engine={"column": "interval"},
    to_semantic={"interval": "column"},
)

EVENTS = EventTable(PLOT_EVENTS + element_events("interval", "column"))

RESPONSIVE_RULES = build_rules(
    category_label_rotation("xField", "xAxis"),
    label_density("xField"),
    value_tick_count("yAxis"),
)

DEFAULTS = {
    "xAxis": {
        "visible": True,
        "tickLine": {"visible": False},
        "title": {"visible": True},
    },
    "yAxis": {
        "title": {"visible": True},
        "label": {"visible": True},
        "grid": {"visible": True},
    },
    "tooltip": {
        "visible": True,
        "shared": True,
        "crosshairs": {"type": "rect"},
    },
    "label": {
        "visible": False,
        "position": "top",
        "adjustColor": True,
    },
    "legend": {
        "visible": True,
        "position": "top-left",
    },
    "conversionTag": {"visible": False},
}


def adjust_column(layer: "PlotLayer", column: GeometryBinding) -> None:
    error_bar = layer.options.get("errorBar")
    if not isinstance(error_bar, dict) or not error_bar.get("visible"):
        return
    column.extras["errorBar"] = {
        "fields": [layer.options["xField"], error_bar.get("field") or layer.options["yField"]],
        "style": dict(error_bar.get("style") or {}),
    }


COLUMN = PlotType(
    name="column",
    geometry="column",
    variant="main",
    geometry_map=GEOMETRY_MAP,
    defaults=DEFAULTS,
    option_model=ColumnOptions,
    scale_fields=(
        ("xField", "xAxis", {"type": "cat"}),
        ("yField", "yAxis", {}),
    ),
    event_table=EVENTS,
    responsive_rules=RESPONSIVE_RULES,
    adjust=adjust_column,
    size_key="columnSize",
    style_key="columnStyle",
    label_type="columnLabel",
    label_field="yField",
    conversion_tag=("yField", True),
)

__all__ = ["COLUMN", "DEFAULTS", "EVENTS", "GEOMETRY_MAP", "RESPONSIVE_RULES", "adjust_column"]
