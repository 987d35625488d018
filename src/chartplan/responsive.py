"""Responsive rules keyed by lifecycle checkpoint.

Rules write absolute values computed from the current measured size, so
applying the same stage twice for an unchanged size leaves the options as
the first application left them. Before each rule runs the layer options
are snapshotted; a rule that raises has its partial writes rolled back.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
import copy
from dataclasses import dataclass
import logging
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from chartplan.errors import ChartPlanError, ConfigError, ResponsiveError

if TYPE_CHECKING:
    from chartplan.layer import PlotLayer

logger = logging.getLogger("chartplan.responsive")

PRE_RENDER = "preRender"
AFTER_RENDER = "afterRender"
STAGES = (PRE_RENDER, AFTER_RENDER)


@dataclass(frozen=True)
class ResponsiveRule:
    name: str
    stage: str
    method: Callable[["PlotLayer"], None]


class ResponsiveRules(Mapping[str, tuple[ResponsiveRule, ...]]):
    """Read-only stage -> ordered rules table."""

    def __init__(self, rules: Iterable[ResponsiveRule] = ()) -> None:
        grouped: dict[str, list[ResponsiveRule]] = {stage: [] for stage in STAGES}
        for rule in rules:
            if rule.stage not in grouped:
                raise ConfigError(
                    f"Unknown responsive stage {rule.stage!r} for rule {rule.name!r}.",
                    context={"rule": rule.name, "stage": rule.stage},
                )
            grouped[rule.stage].append(rule)
        self._rules = MappingProxyType(
            {stage: tuple(items) for stage, items in grouped.items()}
        )

    def __getitem__(self, stage: str) -> tuple[ResponsiveRule, ...]:
        return self._rules[stage]

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def extend(self, *rules: ResponsiveRule) -> "ResponsiveRules":
        existing = [rule for stage in STAGES for rule in self._rules[stage]]
        return ResponsiveRules([*existing, *rules])


def build_rules(*rules: ResponsiveRule) -> ResponsiveRules:
    return ResponsiveRules(rules)


def responsive_enabled(options: Mapping[str, Any]) -> bool:
    """Responsive rules run only when enabled and padding is not automatic."""
    return bool(options.get("responsive")) and options.get("padding") != "auto"


def apply_responsive(
    stage: str,
    layer: "PlotLayer",
    rules: Mapping[str, tuple[ResponsiveRule, ...]],
) -> list[str]:
    if stage not in STAGES:
        raise ConfigError(f"Unknown responsive stage {stage!r}.")
    applied: list[str] = []
    for rule in rules.get(stage, ()):
        snapshot = copy.deepcopy(layer.options)
        try:
            rule.method(layer)
        except ChartPlanError:
            layer.options = snapshot
            raise
        except Exception as exc:
            layer.options = snapshot
            raise ResponsiveError(
                f"Responsive rule {rule.name!r} failed at {stage}: {exc}",
                context={"rule": rule.name, "stage": stage},
            ) from exc
        logger.debug("Applied responsive rule %s at %s.", rule.name, stage)
        applied.append(rule.name)
    return applied


# Measurements shared by the built-in rules.

def category_count(layer: "PlotLayer", field_key: str) -> int:
    field_name = layer.options.get(field_key)
    seen = []
    for row in layer.data:
        value = row.get(field_name)
        if value not in seen:
            seen.append(value)
    return max(len(seen), 1)


def band_width(layer: "PlotLayer", field_key: str, *, vertical: bool = False) -> float:
    area = layer.view.plot_area()
    extent = area.height if vertical else area.width
    return extent / category_count(layer, field_key)


def tick_count_for(extent: float, *, spacing: float = 60, lo: int = 3, hi: int = 8) -> int:
    return int(min(max(extent // spacing, lo), hi))


__all__ = [
    "PRE_RENDER",
    "AFTER_RENDER",
    "STAGES",
    "ResponsiveRule",
    "ResponsiveRules",
    "build_rules",
    "responsive_enabled",
    "apply_responsive",
    "band_width",
    "category_count",
    "tick_count_for",
]
