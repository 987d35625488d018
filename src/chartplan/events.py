"""Engine events and their translation into plot-level semantic events."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
import logging
from typing import Any

logger = logging.getLogger("chartplan.events")

Handler = Callable[[dict[str, Any]], Any]


class EventBus:
    """Engine-side event source; listeners are called in subscription order."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Handler]] = {}

    def on(self, name: str, handler: Handler) -> None:
        self._listeners.setdefault(name, []).append(handler)

    def off(self, name: str, handler: Handler | None = None) -> None:
        if handler is None:
            self._listeners.pop(name, None)
            return
        listeners = self._listeners.get(name, [])
        if handler in listeners:
            listeners.remove(handler)

    def emit(self, name: str, event: Mapping[str, Any] | None = None) -> int:
        listeners = list(self._listeners.get(name, ()))
        payload = dict(event or {})
        payload.setdefault("type", name)
        for listener in listeners:
            listener(payload)
        return len(listeners)

    def names(self) -> list[str]:
        return sorted(name for name, items in self._listeners.items() if items)


def _shape_element_event(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "x": raw.get("x"),
        "y": raw.get("y"),
        "data": raw.get("data"),
        "target": raw.get("target"),
    }


def _shape_plot_event(raw: Mapping[str, Any]) -> dict[str, Any]:
    return {"x": raw.get("x"), "y": raw.get("y")}


@dataclass(frozen=True)
class EventMapping:
    engine_event: str
    semantic_event: str
    payload: Callable[[Mapping[str, Any]], dict[str, Any]] = field(
        default=_shape_element_event
    )


ELEMENT_ACTIONS = ("click", "dblclick", "mouseenter", "mouseleave", "mousemove", "contextmenu")


def element_events(
    engine_prefix: str,
    semantic_prefix: str,
    actions: Sequence[str] = ELEMENT_ACTIONS,
) -> tuple[EventMapping, ...]:
    return tuple(
        EventMapping(f"{engine_prefix}:{action}", f"{semantic_prefix}:{action}")
        for action in actions
    )


PLOT_EVENTS = tuple(
    EventMapping(f"plot:{action}", f"plot:{action}", _shape_plot_event)
    for action in ("click", "dblclick", "mousemove", "mouseenter", "mouseleave")
) + element_events("legend-item", "legend-item", ("click", "mouseenter", "mouseleave"))


class EventTable:
    """Immutable semantic-name lookup over a plot type's event mappings."""

    def __init__(self, mappings: Sequence[EventMapping]) -> None:
        by_name: dict[str, EventMapping] = {}
        for mapping in mappings:
            by_name[mapping.semantic_event] = mapping
        self._by_name = by_name

    def get(self, semantic_event: str) -> EventMapping | None:
        return self._by_name.get(semantic_event)

    def semantic_events(self) -> list[str]:
        return sorted(self._by_name)

    def __len__(self) -> int:
        return len(self._by_name)


def parse_events(
    bus: EventBus,
    table: EventTable,
    handlers: Mapping[str, Handler] | None,
) -> dict[str, str]:
    """Subscribe caller handlers to the engine events behind them.

    Returns the semantic -> engine event names that were bound. Handlers for
    semantic events the table does not know are skipped.
    """
    bound: dict[str, str] = {}
    for semantic_event, handler in (handlers or {}).items():
        mapping = table.get(semantic_event)
        if mapping is None:
            logger.debug("Ignoring unknown event %s.", semantic_event)
            continue
        if not callable(handler):
            logger.debug("Ignoring non-callable handler for %s.", semantic_event)
            continue

        def _listener(
            raw: dict[str, Any],
            _mapping: EventMapping = mapping,
            _handler: Handler = handler,
        ) -> Any:
            payload = _mapping.payload(raw)
            payload["type"] = _mapping.semantic_event
            return _handler(payload)

        bus.on(mapping.engine_event, _listener)
        bound[semantic_event] = mapping.engine_event
    return bound


__all__ = [
    "EventBus",
    "EventMapping",
    "EventTable",
    "PLOT_EVENTS",
    "element_events",
    "parse_events",
]
