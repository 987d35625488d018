import pytest

from chartplan.compiler import create_layer
from chartplan.errors import ConfigError
from chartplan.events import EventBus, EventTable, PLOT_EVENTS, element_events, parse_events


def test_column_click_is_translated_and_shaped() -> None:
    received = []
    layer = create_layer(
        "column",
        {
            "xField": "x",
            "yField": "y",
            "events": {"column:click": received.append, "pie:click": received.append},
        },
    ).init()

    assert layer.bound_events == {"column:click": "interval:click"}

    layer.view.events.emit(
        "interval:click",
        {"x": 10, "y": 20, "data": {"x": "a", "y": 1}, "gEvent": object()},
    )

    assert received == [
        {
            "x": 10,
            "y": 20,
            "data": {"x": "a", "y": 1},
            "target": None,
            "type": "column:click",
        }
    ]


def test_scatter_uses_point_events() -> None:
    layer = create_layer(
        "scatter",
        {"xField": "x", "yField": "y", "events": {"point:mouseenter": lambda event: None}},
    ).init()

    assert layer.bound_events == {"point:mouseenter": "point:mouseenter"}


def test_plot_events_only_carry_coordinates() -> None:
    received = []
    bus = EventBus()
    table = EventTable(PLOT_EVENTS)

    parse_events(bus, table, {"plot:click": received.append})
    bus.emit("plot:click", {"x": 1, "y": 2, "data": "ignored"})

    assert received == [{"x": 1, "y": 2, "type": "plot:click"}]


def test_event_bus_subscription_lifecycle() -> None:
    bus = EventBus()
    calls = []

    def _handler(event):
        calls.append(event["type"])

    bus.on("interval:click", _handler)
    assert bus.emit("interval:click") == 1
    bus.off("interval:click", _handler)
    assert bus.emit("interval:click") == 0
    assert calls == ["interval:click"]
    assert bus.names() == []


def test_element_event_table_lists_semantic_names() -> None:
    table = EventTable(element_events("interval", "bar", ("click",)))

    assert table.semantic_events() == ["bar:click"]
    assert table.get("bar:click").engine_event == "interval:click"
    assert table.get("column:click") is None


def test_destroy_unsubscribes_handlers() -> None:
    received = []
    layer = create_layer(
        "column",
        {"xField": "x", "yField": "y", "events": {"column:click": received.append}},
    ).init().render()

    layer.destroy()
    layer.view.events.emit("interval:click", {})

    assert received == []


def test_non_callable_handler_fails_validation() -> None:
    with pytest.raises(ConfigError) as exc:
        create_layer("column", {"xField": "x", "yField": "y", "events": {"column:click": "alert"}})

    assert "events" in str(exc.value)


def test_parse_events_skips_non_callable_handlers() -> None:
    bus = EventBus()
    table = EventTable(element_events("interval", "column", ("click",)))

    bound = parse_events(bus, table, {"column:click": "alert"})

    assert bound == {}
    assert bus.names() == []
