"""Render plan record, canonical hashing and chart config loading."""

from __future__ import annotations

from collections.abc import Sequence as SequenceABC
from dataclasses import asdict, dataclass, field, is_dataclass
from enum import Enum
import hashlib
import json
from pathlib import Path, PurePath
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

import numpy as np

from chartplan.errors import ConfigError
from chartplan.io_utils import read_json, read_yaml_payload

PLAN_SCHEMA_VERSION = 1


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a chart configuration from YAML or JSON."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Config not found: {path}")
    try:
        if path.suffix == ".json":
            payload = read_json(path)
        else:
            payload = read_yaml_payload(path)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to load config from {path}: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(f"Config in {path} must be a mapping.")
    return dict(payload)


def load_data(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """Load data records from a JSON/YAML list or a mapping with a ``data`` key."""
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Data not found: {path}")
    try:
        if path.suffix == ".json":
            payload = read_json(path)
        else:
            payload = read_yaml_payload(path)
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Failed to load data from {path}: {exc}") from exc
    if isinstance(payload, Mapping):
        payload = payload.get("data", [])
    if not isinstance(payload, list) or not all(isinstance(row, Mapping) for row in payload):
        raise ConfigError(f"Data in {path} must be a list of records.")
    return [dict(row) for row in payload]


def canonicalize(obj: Any, exclude_keys: Optional[Iterable[str]] = None) -> Any:
    exclude = {str(key) for key in exclude_keys or ()}
    return _canonicalize(obj, exclude)


def _stable_sort_key(value: Any) -> str:
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
    )


def _callable_name(obj: Any) -> str:
    name = getattr(obj, "__qualname__", None) or type(obj).__name__
    return f"<callable {name}>"


def _canonicalize(obj: Any, exclude_keys: Set[str]) -> Any:
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, PurePath):
        return obj.as_posix()

    if isinstance(obj, Mapping):
        items = []
        for key, value in obj.items():
            key_str = str(key)
            if key_str in exclude_keys:
                continue
            items.append((key_str, _canonicalize(value, exclude_keys)))
        items.sort(key=lambda item: item[0])
        return {key: value for key, value in items}

    if isinstance(obj, (list, tuple)):
        return [_canonicalize(item, exclude_keys) for item in obj]

    if isinstance(obj, (set, frozenset)):
        items = [_canonicalize(item, exclude_keys) for item in obj]
        items.sort(key=_stable_sort_key)
        return items

    if isinstance(obj, np.ndarray):
        return _canonicalize(obj.tolist(), exclude_keys)

    if isinstance(obj, np.generic):
        return _canonicalize(obj.item(), exclude_keys)

    if isinstance(obj, Enum):
        return _canonicalize(obj.value, exclude_keys)

    if hasattr(obj, "to_dict"):
        return _canonicalize(obj.to_dict(), exclude_keys)

    if is_dataclass(obj) and not isinstance(obj, type):
        return _canonicalize(asdict(obj), exclude_keys)

    if hasattr(obj, "model_dump"):
        return _canonicalize(obj.model_dump(), exclude_keys)

    if callable(obj):
        return _callable_name(obj)

    if isinstance(obj, SequenceABC):
        return [_canonicalize(item, exclude_keys) for item in obj]

    raise TypeError(f"Unsupported type for canonicalize: {type(obj)!r}")


def stable_hash(
    obj: Any,
    *,
    exclude_keys: Optional[Iterable[str]] = None,
    length: Optional[int] = 16,
) -> str:
    canonical = canonicalize(obj, exclude_keys=exclude_keys)
    payload = json.dumps(
        canonical,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=True,
    )
    digest = hashlib.sha256(payload.encode("utf-8")).hexdigest()
    if length is None:
        return digest
    if length <= 0:
        raise ValueError("length must be a positive integer or None.")
    return digest[:length]


@dataclass
class RenderPlan:
    """Fully resolved low-level plan for one chart instance."""

    plot_type: str
    options: Dict[str, Any]
    scales: Dict[str, Dict[str, Any]]
    coordinate: Dict[str, Any]
    geometry: Optional[Dict[str, Any]]
    annotations: List[Any] = field(default_factory=list)
    overlays: List[Dict[str, Any]] = field(default_factory=list)
    events: Dict[str, str] = field(default_factory=dict)
    responsive: List[str] = field(default_factory=list)
    elements: int = 0
    schema_version: int = PLAN_SCHEMA_VERSION

    @property
    def plan_id(self) -> str:
        return stable_hash(self.body())

    def body(self) -> Dict[str, Any]:
        return canonicalize(
            {
                "schema_version": self.schema_version,
                "plot_type": self.plot_type,
                "options": self.options,
                "scales": self.scales,
                "coordinate": self.coordinate,
                "geometry": self.geometry,
                "annotations": self.annotations,
                "overlays": self.overlays,
                "events": self.events,
                "responsive": self.responsive,
                "elements": self.elements,
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = self.body()
        payload["id"] = stable_hash(payload)
        return payload


__all__ = [
    "PLAN_SCHEMA_VERSION",
    "RenderPlan",
    "canonicalize",
    "load_config",
    "load_data",
    "stable_hash",
]
