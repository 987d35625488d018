import logging

import pytest

from chartplan.compiler import compile_chart
from chartplan.errors import RegistryError
from chartplan.plots import COLUMN, SCATTER
from chartplan.registry import Registry, get_plot_type, list_plot_types, register_plot_type


def test_register_get_list_roundtrip() -> None:
    registry = Registry()
    sentinel = object()

    registry.register("plot", "dummy", sentinel)

    assert registry.get("plot", "dummy") is sentinel
    assert registry.list("plot") == ["dummy"]


def test_unknown_kind_error_is_clear() -> None:
    registry = Registry()

    with pytest.raises(KeyError) as exc:
        registry.get("unknown", "dummy")

    message = str(exc.value)
    assert "Unknown registry kind" in message
    assert "unknown" in message


def test_duplicate_registration_requires_overwrite() -> None:
    registry = Registry()
    registry.register("component", "c1", 1)

    with pytest.raises(ValueError) as exc:
        registry.register("component", "c1", 2)

    assert "already registered" in str(exc.value)

    registry.register("component", "c1", 2, overwrite=True)
    assert registry.get("component", "c1") == 2


def test_plot_type_registration_last_write_wins(caplog) -> None:
    registry = Registry()
    register_plot_type("chart", COLUMN, registry=registry)

    with caplog.at_level(logging.WARNING, logger="chartplan.registry"):
        register_plot_type("chart", SCATTER, registry=registry)

    assert get_plot_type("chart", registry=registry) is SCATTER
    assert any("already registered" in record.getMessage() for record in caplog.records)


def test_missing_plot_type_raises_registry_error() -> None:
    registry = Registry()
    register_plot_type("column", COLUMN, registry=registry)

    with pytest.raises(RegistryError) as exc:
        get_plot_type("pie", registry=registry)

    message = str(exc.value)
    assert "pie" in message
    assert "column" in message


def test_builtin_plot_types_are_listed() -> None:
    assert list_plot_types() == ["bar", "column", "scatter"]


def test_custom_registry_falls_back_to_default_factories() -> None:
    registry = Registry()
    register_plot_type("custom-column", COLUMN, registry=registry)

    plan = compile_chart("custom-column", {"xField": "x", "yField": "y"}, registry=registry)

    assert plan.geometry["type"] == "interval"


def test_unknown_factory_name_raises_registry_error() -> None:
    with pytest.raises(RegistryError) as exc:
        compile_chart("column", {"xField": "x", "yField": "y"}, geometry_factory="webgl")

    assert "webgl" in str(exc.value)
