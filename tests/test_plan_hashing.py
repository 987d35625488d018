import numpy as np

from chartplan.compiler import compile_chart
from chartplan.core import canonicalize, stable_hash

DATA = [{"x": "a", "y": 1}, {"x": "b", "y": 2}]


def _formatter(value):
    return f"{value}!"


def test_plan_id_is_stable_across_runs() -> None:
    first = compile_chart("column", {"xField": "x", "yField": "y"}, data=DATA)
    second = compile_chart("column", {"xField": "x", "yField": "y"}, data=DATA)

    assert first.plan_id == second.plan_id
    assert first.to_dict()["id"] == first.plan_id


def test_plan_id_changes_with_size() -> None:
    narrow = compile_chart("column", {"xField": "x", "yField": "y"}, data=DATA)
    wide = compile_chart("column", {"xField": "x", "yField": "y", "width": 800}, data=DATA)

    assert narrow.plan_id != wide.plan_id


def test_callables_are_hashed_by_name() -> None:
    plan = compile_chart(
        "column",
        {"xField": "x", "yField": "y", "label": {"visible": True, "formatter": _formatter}},
        data=DATA,
    )

    payload = plan.to_dict()
    assert payload["options"]["label"]["formatter"] == "<callable _formatter>"
    assert payload["geometry"]["label"]["formatter"] == "<callable _formatter>"
    assert "data" not in payload["options"]


def test_canonicalize_orders_keys_and_unwraps_numpy() -> None:
    value = canonicalize({"b": np.int64(2), "a": np.array([1.5, 2.5])})

    assert list(value) == ["a", "b"]
    assert value == {"a": [1.5, 2.5], "b": 2}
    assert stable_hash({"a": 1, "b": 2}) == stable_hash({"b": 2, "a": 1})
    assert len(stable_hash({"a": 1})) == 16
