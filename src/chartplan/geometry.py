"""Geometry name mapping, the geometry factory and the geometry binder."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional, Protocol, Union

from chartplan.errors import GeometryError
from chartplan.labels import LabelDescriptor, extract_label
from chartplan.scales import color_fields

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

logger = logging.getLogger("chartplan.geometry")

# Share of the band kept by the primary geometry when an overlay is attached.
OVERLAY_WIDTH_RATIO = 2 / 5


class GeometryNameMap:
    """Semantic plot geometry names <-> engine geometry kinds."""

    def __init__(
        self,
        to_engine: Mapping[str, str],
        to_semantic: Mapping[str, str],
    ) -> None:
        self._to_engine = MappingProxyType(dict(to_engine))
        self._to_semantic = MappingProxyType(dict(to_semantic))

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, str]) -> "GeometryNameMap":
        return cls(pairs, {engine: semantic for semantic, engine in pairs.items()})

    def to_engine(self, semantic_name: str) -> Optional[str]:
        return self._to_engine.get(semantic_name)

    def to_semantic(self, engine_name: str) -> Optional[str]:
        return self._to_semantic.get(engine_name)

    def semantic_names(self) -> list[str]:
        return sorted(self._to_engine)

    def engine_names(self) -> list[str]:
        return sorted(self._to_semantic)

    def validate(self) -> None:
        problems = []
        for semantic, engine in self._to_engine.items():
            if self._to_semantic.get(engine) != semantic:
                problems.append(f"{semantic} -> {engine}")
        for engine, semantic in self._to_semantic.items():
            if self._to_engine.get(semantic) != engine:
                problems.append(f"{engine} <- {semantic}")
        if problems:
            raise GeometryError(
                "Geometry name tables are not inverses: " + ", ".join(problems),
                context={"entries": problems},
            )


@dataclass
class GeometryBinding:
    type: str
    shape: str
    position_fields: list[str] = field(default_factory=list)
    color_field: Union[str, list[str], None] = None
    size: Optional[float] = None
    size_ratio: Optional[float] = None
    min_width: Optional[float] = None
    max_width: Optional[float] = None
    style: Any = None
    width_ratio: dict[str, float] = field(default_factory=dict)
    label: LabelDescriptor | bool | None = None
    animate: Optional[bool] = None
    tooltip: dict[str, Any] = field(default_factory=dict)
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        label: Any = self.label
        if isinstance(label, LabelDescriptor):
            label = label.to_dict()
        payload: dict[str, Any] = {
            "type": self.type,
            "shape": self.shape,
            "position": list(self.position_fields),
            "widthRatio": dict(self.width_ratio),
            "label": label,
        }
        optional = {
            "color": list(self.color_field) if isinstance(self.color_field, list) else self.color_field,
            "size": self.size,
            "sizeRatio": self.size_ratio,
            "minWidth": self.min_width,
            "maxWidth": self.max_width,
            "style": self.style,
            "animate": self.animate,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        if self.tooltip:
            payload["tooltip"] = dict(self.tooltip)
        if self.extras:
            payload["extras"] = dict(self.extras)
        return payload


class GeometryFactory(Protocol):
    def get_geom(self, kind: str, variant: str, spec: Mapping[str, Any]) -> GeometryBinding:
        ...


def _interval(variant: str, options: Mapping[str, Any], spec: Mapping[str, Any]) -> GeometryBinding:
    shape = options.get("type") if variant == "main" else variant
    return GeometryBinding(
        type="interval",
        shape=shape or "rect",
        color_field=options.get("colorField"),
        size_ratio=options.get(spec.get("size_key", "columnSize")),
        min_width=options.get("minWidth"),
        max_width=options.get("maxWidth"),
        style=options.get(spec.get("style_key", "columnStyle")),
    )


def _point_color(options: Mapping[str, Any]) -> Union[str, list[str], None]:
    names = color_fields(options)
    if not names:
        return None
    return names[0] if len(names) == 1 else names


def _point(variant: str, options: Mapping[str, Any], spec: Mapping[str, Any]) -> GeometryBinding:
    return GeometryBinding(
        type="point",
        shape=options.get("shape") or variant,
        color_field=_point_color(options),
        size=options.get(spec.get("size_key", "pointSize")),
        style=options.get(spec.get("style_key", "pointStyle")),
    )


def _line(variant: str, options: Mapping[str, Any], spec: Mapping[str, Any]) -> GeometryBinding:
    return GeometryBinding(
        type="line",
        shape=variant,
        color_field=options.get("seriesField") or options.get("colorField"),
        size=options.get(spec.get("size_key", "lineSize")),
        style=options.get(spec.get("style_key", "lineStyle")),
    )


class DefaultGeometryFactory:
    """Geometry factory for the engine kinds chartplan knows how to lay out."""

    builders = {"interval": _interval, "point": _point, "line": _line}

    def get_geom(self, kind: str, variant: str, spec: Mapping[str, Any]) -> GeometryBinding:
        builder = self.builders.get(kind)
        if builder is None:
            available = ", ".join(sorted(self.builders))
            raise GeometryError(
                f"Unknown geometry kind {kind!r}. Available: {available}.",
                context={"kind": kind},
            )
        options = spec.get("options") or {}
        binding = builder(variant, options, spec)
        tooltip = options.get("tooltip")
        if isinstance(tooltip, Mapping) and tooltip.get("visible") is not False:
            binding.tooltip = {"shared": bool(tooltip.get("shared", False))}
        return binding


def bind_geometry(
    layer: "PlotLayer",
    semantic_name: str,
    variant: str,
    *,
    position_fields: Sequence[str],
    factory: Optional[GeometryFactory] = None,
) -> GeometryBinding:
    """Request a geometry for ``semantic_name`` and bind it to ``layer``.

    Steps run in a fixed order: field binding, overlay width reservation,
    label attachment, then the plot type's adjustment hook.
    """
    plot_type = layer.plot_type
    engine_kind = plot_type.geometry_map.to_engine(semantic_name)
    if engine_kind is None:
        raise GeometryError(
            f"Plot type {plot_type.name!r} has no engine geometry for {semantic_name!r}.",
            context={"plot_type": plot_type.name, "geometry": semantic_name},
        )
    factory = factory or layer.geometry_factory
    options = layer.options
    binding = factory.get_geom(
        engine_kind,
        variant,
        {
            "options": options,
            "size_key": plot_type.size_key,
            "style_key": plot_type.style_key,
            "plot": layer,
        },
    )
    binding.position_fields = list(position_fields)

    conversion_tag = options.get("conversionTag") or {}
    if conversion_tag.get("visible"):
        binding.width_ratio[semantic_name] = OVERLAY_WIDTH_RATIO

    if options.get("label"):
        binding.label = extract_label(
            options,
            label_type=plot_type.label_type,
            fields=plot_type.label_fields(options),
            factory=layer.component_factory,
        )

    plot_type.adjust_geometry(layer, binding)
    logger.debug("Bound %s as %s/%s.", semantic_name, engine_kind, binding.shape)
    layer.geometry = binding
    layer.view.set_config("element", binding)
    return binding


__all__ = [
    "OVERLAY_WIDTH_RATIO",
    "GeometryNameMap",
    "GeometryBinding",
    "GeometryFactory",
    "DefaultGeometryFactory",
    "bind_geometry",
]
