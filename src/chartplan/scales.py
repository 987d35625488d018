"""Scale descriptors derived from positional fields and axis options."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import copy
from typing import Any

# Axis keys copied verbatim onto the scale descriptor.
SCALE_KEYS = (
    "type",
    "tickCount",
    "tickInterval",
    "min",
    "max",
    "minLimit",
    "maxLimit",
    "nice",
    "mask",
    "formatter",
)

ScaleField = tuple[str, str, Mapping[str, Any]]


def extract_scale(
    descriptor: dict[str, Any],
    axis_config: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """Copy scale-affecting keys from ``axis_config`` onto ``descriptor``.

    Keys the axis config does not mention are left alone, and the axis
    config itself is never modified.
    """
    if not isinstance(axis_config, Mapping):
        return descriptor
    for key in SCALE_KEYS:
        value = axis_config.get(key)
        if value is not None:
            descriptor[key] = value
    label = axis_config.get("label")
    if isinstance(label, Mapping) and label.get("formatter") is not None:
        descriptor["formatter"] = label["formatter"]
    title = axis_config.get("title")
    if isinstance(title, Mapping) and title.get("text"):
        descriptor["alias"] = title["text"]
    return descriptor


def resolve_scales(
    options: Mapping[str, Any],
    fields: Sequence[ScaleField],
) -> dict[str, dict[str, Any]]:
    """Build one descriptor per configured positional field.

    ``fields`` lists ``(field_option, axis_option, baseline)`` triples, e.g.
    ``("xField", "xAxis", {"type": "cat"})``.
    """
    scales: dict[str, dict[str, Any]] = {}
    for field_key, axis_key, baseline in fields:
        field_name = options.get(field_key)
        if not field_name:
            continue
        descriptor = copy.deepcopy(dict(baseline))
        if axis_key in options:
            extract_scale(descriptor, options[axis_key])
        scales[field_name] = descriptor
    return scales


def color_fields(options: Mapping[str, Any]) -> list[str]:
    """Fields that drive color: ``colorField`` then ``colorFields``, deduplicated."""
    names: list[str] = []
    for value in (options.get("colorField"), options.get("colorFields")):
        items = [value] if isinstance(value, str) else list(value or ())
        for item in items:
            if isinstance(item, str) and item and item not in names:
                names.append(item)
    return names


def color_scale(
    options: Mapping[str, Any],
    scales: dict[str, dict[str, Any]],
) -> dict[str, dict[str, Any]]:
    for name in color_fields(options):
        scales.setdefault(name, {"type": "cat"})
    return scales


__all__ = ["SCALE_KEYS", "extract_scale", "resolve_scales", "color_fields", "color_scale"]
