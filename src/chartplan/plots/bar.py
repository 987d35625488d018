"""Bar plot: the column layout transposed, categories on ``yField``."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chartplan.events import PLOT_EVENTS, EventTable, element_events
from chartplan.geometry import GeometryNameMap
from chartplan.layer import PlotType
from chartplan.merge import deep_mix
from chartplan.options import BarOptions
from chartplan.plots.column import DEFAULTS as COLUMN_DEFAULTS
from chartplan.plots.common import label_density, value_tick_count
from chartplan.responsive import build_rules

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

GEOMETRY_MAP = GeometryNameMap(
    to_engine={"bar": "interval"},
    to_semantic={"interval": "bar"},
)

EVENTS = EventTable(PLOT_EVENTS + element_events("interval", "bar"))

RESPONSIVE_RULES = build_rules(
    label_density("yField", vertical=True),
    value_tick_count("xAxis", horizontal=True),
)

DEFAULTS = deep_mix(
    COLUMN_DEFAULTS,
    {
        "xAxis": {"tickLine": {"visible": True}, "grid": {"visible": True}},
        "yAxis": {"grid": {"visible": False}, "tickLine": {"visible": False}},
        "label": {"position": "left"},
    },
)


def transpose_coordinate(layer: "PlotLayer") -> None:
    layer.coordinate = {"type": "rect", "actions": ["transpose"]}
    layer.view.set_config("coordinate", layer.coordinate)


BAR = PlotType(
    name="bar",
    geometry="bar",
    variant="main",
    geometry_map=GEOMETRY_MAP,
    defaults=DEFAULTS,
    option_model=BarOptions,
    scale_fields=(
        ("yField", "yAxis", {"type": "cat"}),
        ("xField", "xAxis", {}),
    ),
    event_table=EVENTS,
    responsive_rules=RESPONSIVE_RULES,
    stages={"coordinate": transpose_coordinate},
    size_key="barSize",
    style_key="barStyle",
    label_type="barLabel",
    label_field="xField",
    conversion_tag=("xField", False),
)

__all__ = ["BAR", "DEFAULTS", "EVENTS", "GEOMETRY_MAP", "RESPONSIVE_RULES", "transpose_coordinate"]
