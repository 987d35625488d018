"""Recursive option merging with fixed source precedence."""

from __future__ import annotations

from collections.abc import Mapping
import copy
from typing import Any, Optional


def _copy_leaf(value: Any) -> Any:
    if callable(value):
        return value
    if isinstance(value, (list, tuple, set)):
        return copy.deepcopy(value)
    return value


def _mix_into(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        if value is None:
            continue
        if isinstance(value, Mapping):
            current = target.get(key)
            merged: dict[str, Any] = {}
            if isinstance(current, Mapping):
                _mix_into(merged, current)
            _mix_into(merged, value)
            target[key] = merged
            continue
        target[key] = _copy_leaf(value)


def deep_mix(*sources: Optional[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge mappings left to right; later sources win key by key.

    Nested mappings merge recursively. Sequences and callables are replaced
    wholesale, and ``None`` values never override an earlier value. The
    result shares no mutable containers with the inputs.
    """
    result: dict[str, Any] = {}
    for source in sources:
        if source is None:
            continue
        if not isinstance(source, Mapping):
            raise TypeError(
                f"deep_mix sources must be mappings, got {type(source).__name__}."
            )
        _mix_into(result, source)
    return result


def merge_options(
    base: Optional[Mapping[str, Any]],
    type_defaults: Optional[Mapping[str, Any]],
    user: Optional[Mapping[str, Any]],
) -> dict[str, Any]:
    """Resolve engine defaults < plot type defaults < caller configuration."""
    return deep_mix(base, type_defaults, user)


def select(options: Mapping[str, Any], path: str, default: Any = None) -> Any:
    current: Any = options
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def assign(options: dict[str, Any], path: str, value: Any) -> None:
    """Set a dotted key path, creating intermediate mappings."""
    parts = path.split(".")
    current = options
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = value


__all__ = ["deep_mix", "merge_options", "select", "assign"]
