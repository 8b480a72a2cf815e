"""
Extended collection 測試：parentModeId 繼承與 variableOverrides 覆寫。
"""
import pytest

from figma_tokens.extended import effective_value, mode_values
from figma_tokens.model import AliasRef
from factories import alias, make_col, make_graph, make_var


def _graph(overrides=None):
    return make_graph(
        [
            make_col("parent", "Theme", [("light", "Light"), ("night", "Night")], ["x"]),
            make_col(
                "ext",
                "Brand",
                [("e-light", "Light", "light"), ("dark", "Dark", "light"), ("e-night", "Night", "night")],
                ["x"],
                isExtension=True,
                variableOverrides=overrides or {},
            ),
        ],
        [make_var("x", "Space/sm", "parent", {"light": 10, "night": 12}, kind="FLOAT")],
    )


def _mode(col, mode_id):
    return next(m for m in col.modes if m.mode_id == mode_id)


def test_inherits_parent_mode_value():
    graph = _graph()
    ext = graph.collections["ext"]
    assert effective_value(ext, graph.variables["x"], _mode(ext, "dark")) == 10


def test_override_wins():
    graph = _graph({"x": {"dark": 20}})
    ext = graph.collections["ext"]
    assert effective_value(ext, graph.variables["x"], _mode(ext, "dark")) == 20
    assert effective_value(ext, graph.variables["x"], _mode(ext, "e-light")) == 10


def test_override_can_be_alias():
    graph = _graph({"x": {"dark": alias("y")}})
    ext = graph.collections["ext"]
    assert effective_value(ext, graph.variables["x"], _mode(ext, "dark")) == AliasRef("y")


def test_no_parent_mode_is_absent():
    graph = make_graph(
        [make_col("ext", "Brand", [("orphan", "Orphan")], ["x"], isExtension=True)],
        [make_var("x", "X", "parent", {"light": 10}, kind="FLOAT")],
    )
    ext = graph.collections["ext"]
    assert effective_value(ext, graph.variables["x"], ext.modes[0]) is None


def test_parent_value_missing_is_absent():
    graph = make_graph(
        [make_col("ext", "Brand", [("e", "E", "other")], ["x"], isExtension=True)],
        [make_var("x", "X", "parent", {"light": 10}, kind="FLOAT")],
    )
    ext = graph.collections["ext"]
    assert effective_value(ext, graph.variables["x"], ext.modes[0]) is None


def test_regular_collection_ignores_overrides():
    graph = make_graph(
        [make_col("c", "Theme", [("light", "Light")], ["x"], variableOverrides={"x": {"light": 99}})],
        [make_var("x", "X", "c", {"light": 10}, kind="FLOAT")],
    )
    col = graph.collections["c"]
    assert effective_value(col, graph.variables["x"], col.modes[0]) == 10


def test_mode_values_in_order():
    graph = _graph({"x": {"dark": 20}})
    ext = graph.collections["ext"]
    values = [(m.name, raw) for m, raw in mode_values(ext, graph.variables["x"])]
    assert values == [("Light", 10), ("Dark", 20), ("Night", 12)]
