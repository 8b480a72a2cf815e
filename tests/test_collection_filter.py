"""
CollectionFilter 測試：remote / hiddenFromPublishing / 全 null / extended collection。
"""
import copy
import pytest

from figma_tokens.collection_filter import (
    REASON_EMPTY,
    REASON_HIDDEN,
    REASON_REMOTE,
    filter_collections,
    local_only,
    publishable,
)
from factories import make_col, make_graph, make_var, rgba


def _graph():
    return make_graph(
        [
            make_col("c1", "Colors", [("m1", "Default")], ["v1"]),
            make_col("c2", "Library", [("m2", "Default")], ["v2"], remote=True),
            make_col("c3", "Internal", [("m3", "Default")], ["v3"], hiddenFromPublishing=True),
            make_col("c4", "Draft", [("m4", "Light"), ("m5", "Dark")], ["v4"]),
            make_col("c5", "Brand", [("m6", "Brand A", "m1")], ["v1"], isExtension=True),
        ],
        [
            make_var("v1", "Base/black", "c1", {"m1": rgba(0, 0, 0)}),
            make_var("v2", "Base/white", "c2", {"m2": rgba(1, 1, 1)}),
            make_var("v3", "Secret", "c3", {"m3": rgba(1, 0, 0)}),
            make_var("v4", "Empty", "c4", {"m4": None, "m5": None}),
        ],
    )


class TestLocalOnly:
    def test_excludes_exactly_remote(self):
        graph = _graph()
        result, report = local_only(graph.collections)
        assert set(result) == {"c1", "c3", "c4", "c5"}
        assert report.by_reason(REASON_REMOTE) == ["Library"]

    def test_kept_collections_unchanged(self):
        graph = _graph()
        before = copy.deepcopy(graph.collections)
        result, _ = local_only(graph.collections)
        for cid, col in result.items():
            assert col is graph.collections[cid]
            assert col == before[cid]

    def test_no_remote_empty_report(self):
        graph = make_graph([make_col("c1", "Colors", [("m1", "Default")], [])], [])
        _, report = local_only(graph.collections)
        assert not report


class TestPublishable:
    def test_hidden_excluded(self):
        graph = _graph()
        result, report = publishable(graph.collections, graph.variables)
        assert "c3" not in result
        assert report.by_reason(REASON_HIDDEN) == ["Internal"]

    def test_all_null_excluded(self):
        graph = _graph()
        result, report = publishable(graph.collections, graph.variables)
        assert "c4" not in result
        assert report.by_reason(REASON_EMPTY) == ["Draft"]

    def test_extension_always_included(self):
        """Extended collection 自身 valuesByMode 為 null 也要保留"""
        graph = make_graph(
            [make_col("x", "Ext", [("e1", "A", "p1")], ["missing"], isExtension=True)],
            [],
        )
        result, report = publishable(graph.collections, graph.variables)
        assert "x" in result
        assert not report

    def test_hidden_extension_excluded(self):
        graph = make_graph(
            [make_col("x", "Ext", [("e1", "A", "p1")], [], isExtension=True, hiddenFromPublishing=True)],
            [],
        )
        result, _ = publishable(graph.collections, graph.variables)
        assert result == {}

    def test_value_in_secondary_mode_only_counts(self):
        graph = make_graph(
            [make_col("c", "Theme", [("l", "Light"), ("d", "Dark")], ["v"])],
            [make_var("v", "Bg", "c", {"l": None, "d": rgba(0, 0, 0)})],
        )
        result, _ = publishable(graph.collections, graph.variables)
        assert "c" in result

    def test_unknown_variable_ids_ignored(self):
        graph = make_graph([make_col("c", "Ghost", [("m", "Default")], ["nope"])], [])
        result, report = publishable(graph.collections, graph.variables)
        assert result == {}
        assert report.by_reason(REASON_EMPTY) == ["Ghost"]


def test_filter_collections_merges_reports():
    graph = _graph()
    result, report = filter_collections(graph)
    assert set(result) == {"c1", "c5"}
    reasons = {(s.name, s.reason) for s in report.skipped}
    assert reasons == {
        ("Library", REASON_REMOTE),
        ("Internal", REASON_HIDDEN),
        ("Draft", REASON_EMPTY),
    }
