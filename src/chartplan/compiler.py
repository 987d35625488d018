"""Compile a chart description into a render plan."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
from typing import Any, Optional, Union

from chartplan.core import RenderPlan
from chartplan.errors import ChartPlanError, RegistryError
from chartplan.geometry import DefaultGeometryFactory, GeometryFactory
from chartplan.labels import ComponentFactory, DefaultComponentFactory
from chartplan.layer import PlotLayer, PlotType
import chartplan.registry as registry_module
from chartplan.registry import Registry, get_plot_type
from chartplan.view import PlanView

logger = logging.getLogger("chartplan.compiler")

DEFAULT_FACTORY = "default"

registry_module.register("geometry", DEFAULT_FACTORY, DefaultGeometryFactory)
registry_module.register("component", DEFAULT_FACTORY, DefaultComponentFactory)


def _resolve_collaborator(
    kind: str,
    value: Union[str, Any, None],
    registry: Optional[Registry],
) -> Any:
    if value is not None and not isinstance(value, str):
        return value
    name = value or DEFAULT_FACTORY
    for candidate in (registry, registry_module.default_registry()):
        if candidate is None:
            continue
        try:
            factory_cls = candidate.get(kind, name)
        except KeyError:
            continue
        return factory_cls()
    raise RegistryError(
        f"No {kind} factory named {name!r}.",
        context={"kind": kind, "name": name},
    )


def create_layer(
    plot_type: Union[str, PlotType],
    config: Optional[Mapping[str, Any]] = None,
    *,
    data: Optional[Sequence[Mapping[str, Any]]] = None,
    registry: Optional[Registry] = None,
    view: Optional[PlanView] = None,
    geometry_factory: Union[str, GeometryFactory, None] = None,
    component_factory: Union[str, ComponentFactory, None] = None,
) -> PlotLayer:
    if isinstance(plot_type, str):
        plot_type = get_plot_type(plot_type, registry=registry)
    return PlotLayer(
        plot_type,
        config,
        data=data,
        view=view,
        geometry_factory=_resolve_collaborator("geometry", geometry_factory, registry),
        component_factory=_resolve_collaborator("component", component_factory, registry),
    )


def compile_chart(
    plot_type: Union[str, PlotType],
    config: Optional[Mapping[str, Any]] = None,
    *,
    data: Optional[Sequence[Mapping[str, Any]]] = None,
    registry: Optional[Registry] = None,
    view: Optional[PlanView] = None,
    geometry_factory: Union[str, GeometryFactory, None] = None,
    component_factory: Union[str, ComponentFactory, None] = None,
) -> RenderPlan:
    """Run the full pipeline once and return the resulting plan."""
    layer = create_layer(
        plot_type,
        config,
        data=data,
        registry=registry,
        view=view,
        geometry_factory=geometry_factory,
        component_factory=component_factory,
    )
    try:
        layer.init()
        layer.render()
    except ChartPlanError as exc:
        logger.debug("Compilation of %s failed: %s", layer.plot_type.name, exc.log_message())
        raise
    plan = layer.to_plan()
    logger.info("Compiled %s plan %s.", layer.plot_type.name, plan.plan_id)
    return plan


__all__ = ["DEFAULT_FACTORY", "compile_chart", "create_layer"]
