"""Registry of plot types and other pluggable pieces, organized by kind."""

from __future__ import annotations

import builtins
from collections.abc import Iterable
import logging
from typing import Any, Optional

from chartplan.errors import RegistryError

DEFAULT_KINDS = ("plot", "geometry", "component")

logger = logging.getLogger("chartplan.registry")


def _validate_key(label: str, value: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise TypeError(f"{label} must be a non-empty string.")
    return value


def _format_options(options: Iterable[str]) -> str:
    values = builtins.list(options)
    if not values:
        return "<none>"
    return ", ".join(sorted(values))


class Registry:
    """Registry of objects organized by kind/name."""

    def __init__(self, kinds: Iterable[str] = DEFAULT_KINDS) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        for kind in kinds:
            self.add_kind(kind)

    def add_kind(self, kind: str, *, overwrite: bool = False) -> None:
        kind = _validate_key("kind", kind)
        if kind in self._entries and not overwrite:
            raise ValueError(f"Registry kind already exists: {kind!r}.")
        self._entries[kind] = {}

    def _bucket(self, kind: str) -> dict[str, Any]:
        kind = _validate_key("kind", kind)
        bucket = self._entries.get(kind)
        if bucket is None:
            available = _format_options(self._entries.keys())
            raise KeyError(
                f"Unknown registry kind: {kind!r}. Available kinds: {available}."
            )
        return bucket

    def register(self, kind: str, name: str, obj: Any, *, overwrite: bool = False) -> None:
        name = _validate_key("name", name)
        bucket = self._bucket(kind)
        if name in bucket and not overwrite:
            raise ValueError(
                f"{kind} {name!r} is already registered; use overwrite=True to replace."
            )
        bucket[name] = obj

    def get(self, kind: str, name: str) -> Any:
        name = _validate_key("name", name)
        bucket = self._bucket(kind)
        if name not in bucket:
            available = _format_options(bucket.keys())
            raise KeyError(
                f"{kind} {name!r} is not registered. Available: {available}."
            )
        return bucket[name]

    def list(self, kind: str) -> list[str]:
        return builtins.list(self._bucket(kind).keys())


_DEFAULT_REGISTRY = Registry()


def default_registry() -> Registry:
    return _DEFAULT_REGISTRY


def register(kind: str, name: str, obj: Any, *, overwrite: bool = False) -> None:
    _DEFAULT_REGISTRY.register(kind, name, obj, overwrite=overwrite)


def get(kind: str, name: str) -> Any:
    return _DEFAULT_REGISTRY.get(kind, name)


def list(kind: str) -> list[str]:
    return _DEFAULT_REGISTRY.list(kind)


def register_plot_type(
    name: str,
    plot_type: Any,
    *,
    registry: Optional[Registry] = None,
) -> None:
    """Register a plot type; a later registration under the same name wins."""
    registry = registry or _DEFAULT_REGISTRY
    if name in registry.list("plot"):
        logger.warning("Plot type %r is already registered; replacing it.", name)
    registry.register("plot", name, plot_type, overwrite=True)


def _load_builtin_plot_types() -> None:
    # Import for side effects: register built-in plot types.
    import chartplan.plots  # noqa: F401


def get_plot_type(name: str, *, registry: Optional[Registry] = None) -> Any:
    if registry is None:
        _load_builtin_plot_types()
        registry = _DEFAULT_REGISTRY
    try:
        return registry.get("plot", name)
    except KeyError as exc:
        available = _format_options(registry.list("plot"))
        raise RegistryError(
            f"Plot type {name!r} is not registered. Available: {available}.",
            context={"plot_type": name},
        ) from exc


def list_plot_types(*, registry: Optional[Registry] = None) -> list[str]:
    if registry is None:
        _load_builtin_plot_types()
        registry = _DEFAULT_REGISTRY
    return sorted(registry.list("plot"))


__all__ = [
    "DEFAULT_KINDS",
    "Registry",
    "default_registry",
    "register",
    "get",
    "list",
    "register_plot_type",
    "get_plot_type",
    "list_plot_types",
]
