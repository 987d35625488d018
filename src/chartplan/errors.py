"""Error hierarchy for chartplan."""

from __future__ import annotations

from typing import Any, Mapping, Optional


class ChartPlanError(Exception):
    """Base exception for chartplan failures."""

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.user_message = message if user_message is None else user_message
        self.context = dict(context) if context else {}

    def log_message(self) -> str:
        if not self.context:
            return str(self)
        return f"{self}: {self.context}"


class ConfigError(ChartPlanError):
    """Chart configuration loading or validation error."""


class RegistryError(ChartPlanError):
    """Plot type lookup error."""


class GeometryError(ChartPlanError):
    """Geometry name mapping or geometry factory error."""


class ComponentError(ChartPlanError):
    """Component factory error (labels, overlays)."""


class ResponsiveError(ChartPlanError):
    """A responsive rule failed; layer options were restored."""


class LayerStateError(ChartPlanError):
    """A pipeline stage was called out of lifecycle order."""


__all__ = [
    "ChartPlanError",
    "ConfigError",
    "RegistryError",
    "GeometryError",
    "ComponentError",
    "ResponsiveError",
    "LayerStateError",
]
