"""Plot layer: merges options and runs the compilation stages in order."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import Any, Optional, Type

from pydantic import BaseModel

from chartplan.components.conversion_tag import ConversionTag, attach_conversion_tag
from chartplan.core import RenderPlan
from chartplan.errors import LayerStateError
from chartplan.events import EventTable, parse_events
from chartplan.geometry import (
    DefaultGeometryFactory,
    GeometryBinding,
    GeometryFactory,
    GeometryNameMap,
    bind_geometry,
)
from chartplan.labels import ComponentFactory, DefaultComponentFactory
from chartplan.merge import merge_options
from chartplan.options import PlotOptions, validate_options
from chartplan.responsive import (
    AFTER_RENDER,
    PRE_RENDER,
    ResponsiveRules,
    apply_responsive,
    responsive_enabled,
)
from chartplan.scales import ScaleField, color_scale, resolve_scales
from chartplan.view import PlanView

logger = logging.getLogger("chartplan.layer")

BASE_DEFAULTS: Mapping[str, Any] = MappingProxyType(
    {
        "width": 400,
        "height": 400,
        "padding": [20, 20, 20, 20],
        "renderer": "canvas",
        "animation": True,
        "responsive": False,
        "title": {"visible": False},
        "description": {"visible": False},
        "tooltip": {"visible": True, "shared": True},
        "legend": {"visible": True},
        "label": {"visible": False},
        "interactions": [],
    }
)

# Stage order; each name maps to ``PlotLayer.stage_<name>`` unless the plot
# type overrides it. ``init`` runs the first seven, ``render`` the last two.
STAGES = (
    "before_init",
    "scale",
    "coordinate",
    "add_geometry",
    "annotation",
    "animation",
    "parse_events",
    "render",
    "after_render",
)
INIT_STAGES = STAGES[:7]
RENDER_STAGES = STAGES[7:]
RELAYOUT_STAGES = ("scale", "add_geometry", "animation", "render", "after_render")

StageFn = Callable[["PlotLayer"], None]
AdjustFn = Callable[["PlotLayer", GeometryBinding], None]

CARTESIAN_FIELDS: tuple[ScaleField, ...] = (
    ("xField", "xAxis", {}),
    ("yField", "yAxis", {}),
)


@dataclass(frozen=True)
class PlotType:
    """Everything that distinguishes one plot type from another.

    ``stages`` replaces individual pipeline stages; a stage that is not
    listed runs the layer's default implementation.
    """

    name: str
    geometry: str
    variant: str
    geometry_map: GeometryNameMap
    defaults: Mapping[str, Any] = field(default_factory=dict)
    option_model: Type[BaseModel] = PlotOptions
    scale_fields: Sequence[ScaleField] = CARTESIAN_FIELDS
    event_table: EventTable = field(default_factory=lambda: EventTable(()))
    responsive_rules: ResponsiveRules = field(default_factory=ResponsiveRules)
    stages: Mapping[str, StageFn] = field(default_factory=dict)
    adjust: Optional[AdjustFn] = None
    size_key: str = "columnSize"
    style_key: str = "columnStyle"
    label_type: str = "base"
    label_field: str = "yField"
    conversion_tag: tuple[str, bool] = ("yField", True)

    def position_fields(self, options: Mapping[str, Any]) -> list[str]:
        return [options[key] for key, _, _ in self.scale_fields[:2] if options.get(key)]

    def label_fields(self, options: Mapping[str, Any]) -> list[str]:
        value = options.get(self.label_field)
        return [value] if value else []

    def adjust_geometry(self, layer: "PlotLayer", binding: GeometryBinding) -> None:
        if self.adjust is not None:
            self.adjust(layer, binding)


class PlotLayer:
    """Owns the resolved options and everything compiled from them."""

    def __init__(
        self,
        plot_type: PlotType,
        config: Optional[Mapping[str, Any]] = None,
        *,
        data: Optional[Sequence[Mapping[str, Any]]] = None,
        view: Optional[PlanView] = None,
        geometry_factory: Optional[GeometryFactory] = None,
        component_factory: Optional[ComponentFactory] = None,
    ) -> None:
        self.plot_type = plot_type
        self.options = self.get_options(config or {})
        validate_options(plot_type.option_model, self.options, plot_type=plot_type.name)
        rows = data if data is not None else self.options.get("data") or []
        self.data: list[dict[str, Any]] = [dict(row) for row in rows]
        self.view = view or PlanView(
            self.options["width"],
            self.options["height"],
            self.options.get("padding"),
        )
        self.geometry_factory = geometry_factory or DefaultGeometryFactory()
        self.component_factory = component_factory or DefaultComponentFactory()
        self.scales: dict[str, dict[str, Any]] = {}
        self.coordinate: dict[str, Any] = {}
        self.geometry: Optional[GeometryBinding] = None
        self.conversion_tag: Optional[ConversionTag] = None
        self.bound_events: dict[str, str] = {}
        self.responsive_log: list[str] = []
        self.state = "constructed"

    def get_options(self, config: Mapping[str, Any]) -> dict[str, Any]:
        return merge_options(BASE_DEFAULTS, self.plot_type.defaults, config)

    # Lifecycle

    def _require(self, *states: str) -> None:
        if self.state not in states:
            raise LayerStateError(
                f"Layer is {self.state}; expected one of: {', '.join(states)}.",
                context={"plot_type": self.plot_type.name, "state": self.state},
            )

    def run_stage(self, name: str) -> None:
        if name not in STAGES:
            raise LayerStateError(f"Unknown pipeline stage {name!r}.")
        self._require("constructed", "initialized", "rendered")
        override = self.plot_type.stages.get(name)
        logger.debug("Stage %s (%s).", name, self.plot_type.name)
        if override is not None:
            override(self)
        else:
            getattr(self, f"stage_{name}")()

    def init(self) -> "PlotLayer":
        self._require("constructed")
        for name in INIT_STAGES:
            self.run_stage(name)
        self.state = "initialized"
        return self

    def render(self) -> "PlotLayer":
        self._require("initialized")
        for name in RENDER_STAGES:
            self.run_stage(name)
        self.state = "rendered"
        return self

    def relayout(self, width: int, height: int) -> "PlotLayer":
        """Re-run the size dependent stages for a new container size."""
        self._require("rendered")
        self.options["width"] = width
        self.options["height"] = height
        self.view.resize(width, height)
        self.conversion_tag = None
        self._apply_responsive(PRE_RENDER)
        for name in RELAYOUT_STAGES:
            self.run_stage(name)
        return self

    def destroy(self) -> None:
        for name in self.view.events.names():
            self.view.events.off(name)
        self.geometry = None
        self.conversion_tag = None
        self.scales = {}
        self.state = "destroyed"

    # Default stage implementations

    def _apply_responsive(self, stage: str) -> list[str]:
        if not responsive_enabled(self.options):
            return []
        applied = apply_responsive(stage, self, self.plot_type.responsive_rules)
        self.responsive_log.extend(f"{stage}:{name}" for name in applied)
        return applied

    def stage_before_init(self) -> None:
        self._apply_responsive(PRE_RENDER)

    def stage_scale(self) -> None:
        scales = resolve_scales(self.options, self.plot_type.scale_fields)
        self.scales = color_scale(self.options, scales)
        self.view.set_config("scales", self.scales)

    def stage_coordinate(self) -> None:
        self.coordinate = {"type": "rect", "actions": []}
        self.view.set_config("coordinate", self.coordinate)

    def stage_add_geometry(self) -> None:
        bind_geometry(
            self,
            self.plot_type.geometry,
            self.plot_type.variant,
            position_fields=self.plot_type.position_fields(self.options),
        )

    def stage_annotation(self) -> None:
        self.view.set_config("annotations", list(self.options.get("annotations") or []))

    def stage_animation(self) -> None:
        if self.options.get("animation") is False and self.geometry is not None:
            self.geometry.animate = False

    def stage_parse_events(self) -> None:
        self.bound_events = parse_events(
            self.view.events,
            self.plot_type.event_table,
            self.options.get("events"),
        )

    def stage_render(self) -> None:
        self.view.render(self.data)

    def stage_after_render(self) -> None:
        if self._apply_responsive(AFTER_RENDER):
            self.run_stage("scale")
        attach_conversion_tag(self)

    def to_plan(self) -> RenderPlan:
        overlays = [self.conversion_tag.to_dict()] if self.conversion_tag else []
        options = {key: value for key, value in self.options.items() if key != "data"}
        return RenderPlan(
            plot_type=self.plot_type.name,
            options=options,
            scales=self.scales,
            coordinate=self.coordinate,
            geometry=self.geometry.to_dict() if self.geometry else None,
            annotations=list(self.view.get_config("annotations", [])),
            overlays=overlays,
            events=dict(self.bound_events),
            responsive=list(self.responsive_log),
            elements=len(self.view.elements),
        )


__all__ = [
    "BASE_DEFAULTS",
    "CARTESIAN_FIELDS",
    "INIT_STAGES",
    "PlotLayer",
    "PlotType",
    "RELAYOUT_STAGES",
    "RENDER_STAGES",
    "STAGES",
]
