"""Scatter plot: one point per record at (``xField``, ``yField``)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chartplan.events import PLOT_EVENTS, EventTable, element_events
from chartplan.geometry import GeometryNameMap
from chartplan.layer import PlotType
from chartplan.options import ScatterOptions
from chartplan.plots.common import value_tick_count
from chartplan.responsive import build_rules

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

GEOMETRY_MAP = GeometryNameMap(
    to_engine={"scatter": "point"},
    to_semantic={"point": "scatter"},
)

EVENTS = EventTable(PLOT_EVENTS + element_events("point", "point"))

RESPONSIVE_RULES = build_rules(
    value_tick_count("xAxis", horizontal=True),
    value_tick_count("yAxis"),
)

DEFAULTS = {
    "pointSize": 4,
    "pointStyle": {
        "strokeOpacity": 1,
        "fillOpacity": 0.4,
        "opacity": 0.65,
    },
    "tooltip": {
        "visible": True,
        "shared": False,
        "crosshairs": {"type": "rect"},
    },
    "label": {
        "visible": False,
        "position": "top",
    },
    "shape": "circle",
}


def skip_annotations(layer: "PlotLayer") -> None:
    layer.view.set_config("annotations", [])


SCATTER = PlotType(
    name="scatter",
    geometry="scatter",
    variant="circle",
    geometry_map=GEOMETRY_MAP,
    defaults=DEFAULTS,
    option_model=ScatterOptions,
    scale_fields=(
        ("xField", "xAxis", {}),
        ("yField", "yAxis", {}),
    ),
    event_table=EVENTS,
    responsive_rules=RESPONSIVE_RULES,
    stages={"annotation": skip_annotations},
    size_key="pointSize",
    style_key="pointStyle",
    label_type="scatterLabel",
    label_field="yField",
)

__all__ = ["DEFAULTS", "EVENTS", "GEOMETRY_MAP", "RESPONSIVE_RULES", "SCATTER", "skip_annotations"]
