"""Structured config schema for Hydra."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from hydra.core.config_store import ConfigStore


@dataclass
class PlotConfig:
    type: str = "column"
    # Path to a YAML/JSON chart description; merged under ``options``.
    config: str = ""
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class RenderConfig:
    width: int = 400
    height: int = 400
    # Extra container sizes to relayout through after the first render.
    relayout: list[Any] = field(default_factory=list)


@dataclass
class DataConfig:
    path: str = ""


@dataclass
class OutputConfig:
    path: str = ""


@dataclass
class LoggingConfig:
    level: str = "INFO"


@dataclass
class AppConfig:
    plot: PlotConfig = field(default_factory=PlotConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    data: DataConfig = field(default_factory=DataConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def register_configs() -> None:
    """Store the structured schema as 'schema/base' for the defaults list."""
    ConfigStore.instance().store(
        group="schema", name="base", node=AppConfig, package="_global_"
    )


__all__ = [
    "AppConfig",
    "DataConfig",
    "LoggingConfig",
    "OutputConfig",
    "PlotConfig",
    "RenderConfig",
    "register_configs",
]
