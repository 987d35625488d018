"""Label placement policy and the label component factory."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
import copy
from dataclasses import dataclass, field
import logging
from typing import Any, Optional, Protocol

from chartplan.errors import ComponentError
from chartplan.merge import deep_mix

logger = logging.getLogger("chartplan.labels")

LABEL_POSITION_DEFAULTS: Mapping[str, Mapping[str, Any]] = {
    "middle": {"offset": 0, "style": {"textBaseline": "middle"}},
    "top": {"offset": 4, "style": {"textBaseline": "bottom"}},
    "bottom": {"offset": 4, "style": {"textBaseline": "bottom"}},
}
FALLBACK_LABEL_OPTIONS: Mapping[str, Any] = {"offset": 0}

_DESCRIPTOR_KEYS = {"visible", "offset", "style", "fields", "labelType", "position", "formatter"}


@dataclass
class LabelDescriptor:
    visible: bool = True
    offset: float = 0
    style: dict[str, Any] = field(default_factory=dict)
    fields: list[str] = field(default_factory=list)
    label_type: Optional[str] = None
    position: Optional[str] = None
    formatter: Optional[Callable[..., Any]] = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "visible": self.visible,
            "offset": self.offset,
            "style": dict(self.style),
            "fields": list(self.fields),
            "labelType": self.label_type,
            "position": self.position,
        }
        if self.formatter is not None:
            payload["formatter"] = self.formatter
        payload.update(self.extra)
        return payload


def label_options_for_position(position: Optional[str]) -> dict[str, Any]:
    base = LABEL_POSITION_DEFAULTS.get(position or "", FALLBACK_LABEL_OPTIONS)
    return copy.deepcopy(dict(base))


def resolve_label(
    position: Optional[str],
    overrides: Optional[Mapping[str, Any]] = None,
) -> Optional[LabelDescriptor]:
    """Merge the positional defaults with caller overrides.

    Returns ``None`` when the merged options hide the label.
    """
    merged = deep_mix(label_options_for_position(position), overrides or {})
    if merged.get("visible") is False:
        return None
    return LabelDescriptor(
        visible=True,
        offset=merged.get("offset", 0),
        style=dict(merged.get("style") or {}),
        fields=list(merged.get("fields") or []),
        label_type=merged.get("labelType"),
        position=merged.get("position", position),
        formatter=merged.get("formatter"),
        extra={key: value for key, value in merged.items() if key not in _DESCRIPTOR_KEYS},
    )


class ComponentFactory(Protocol):
    def get_component(self, name: str, spec: Mapping[str, Any]) -> Any:
        ...


def _build_label(spec: Mapping[str, Any]) -> LabelDescriptor:
    descriptor = resolve_label(spec.get("position"), spec)
    if descriptor is None:
        raise ComponentError("Hidden labels cannot be built as components.")
    return descriptor


class DefaultComponentFactory:
    """Builds component handles by name; only labels are bundled."""

    def __init__(self) -> None:
        self._builders: dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "label": _build_label,
        }

    def register(self, name: str, builder: Callable[[Mapping[str, Any]], Any]) -> None:
        self._builders[name] = builder

    def get_component(self, name: str, spec: Mapping[str, Any]) -> Any:
        builder = self._builders.get(name)
        if builder is None:
            available = ", ".join(sorted(self._builders)) or "<none>"
            raise ComponentError(
                f"Unknown component {name!r}. Available: {available}.",
                context={"component": name},
            )
        return builder(spec)


def extract_label(
    options: Mapping[str, Any],
    *,
    label_type: str,
    fields: Sequence[str],
    factory: ComponentFactory,
) -> LabelDescriptor | bool:
    """Resolve ``options['label']`` into a label handle, or ``False`` if hidden."""
    label_options = options.get("label") or {}
    position = label_options.get("position")
    merged = deep_mix(label_options_for_position(position), label_options)
    if merged.get("visible") is False:
        logger.debug("Label suppressed for %s.", label_type)
        return False
    spec = deep_mix({"labelType": label_type, "fields": list(fields)}, merged)
    return factory.get_component("label", spec)


__all__ = [
    "LABEL_POSITION_DEFAULTS",
    "FALLBACK_LABEL_OPTIONS",
    "LabelDescriptor",
    "label_options_for_position",
    "resolve_label",
    "ComponentFactory",
    "DefaultComponentFactory",
    "extract_label",
]
