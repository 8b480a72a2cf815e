"""
三層 pipeline 端對端測試：primitives → semantic → product。
"""
import json
import pytest

from figma_tokens.pipeline import (
    TIERS,
    build_all,
    build_primitives,
    build_product,
    build_semantic,
    product_key_map,
)
from figma_tokens.writer import dump_tokens, write_tier
from factories import alias, make_col, make_graph, make_var, rgba

BLACK_KEY = "b" * 40
WHITE_KEY = "w" * 40
SEM_BG_KEY = "s" * 40
PROD_BLACK_KEY = "p" * 40
GHOST_KEY = "g" * 40


def primitives_graph():
    return make_graph(
        [
            make_col("pc", "Colors", [("pm", "Default")], ["black", "white", "ref"]),
            make_col("pr", "Radius", [("rm", "Default")], ["sm"]),
        ],
        [
            make_var("black", "Base/black", "pc", {"pm": rgba(0, 0, 0, 1)}, key=BLACK_KEY),
            make_var("white", "Base/white", "pc", {"pm": rgba(1, 1, 1, 1)}, key=WHITE_KEY),
            make_var("ref", "Base/ink", "pc", {"pm": alias("black")}),
            make_var("sm", "sm", "pr", {"rm": 4.0}, kind="FLOAT", scopes=["CORNER_RADIUS"]),
        ],
    )


def semantic_graph():
    return make_graph(
        [
            make_col("sc", "Surface", [("sl", "Light"), ("sd", "Dark")], ["bg"]),
            make_col("shadow", "Colors", [("x", "Default")], ["legacy"], remote=True),
        ],
        [
            make_var("bg", "Bg/default", "sc", {
                "sl": alias(f"VariableID:{BLACK_KEY}/1:1"),
                "sd": alias(f"VariableID:{WHITE_KEY}/1:2"),
            }, key=SEM_BG_KEY),
            make_var("legacy", "Legacy/white", "shadow", {"x": rgba(1, 1, 1)}, key=WHITE_KEY),
        ],
    )


def product_graph():
    return make_graph(
        [
            make_col("lib", "Colors", [("lm", "Default")], ["pblack"], remote=True),
            make_col("btn", "Button", [("bd", "Default")], ["fill", "surface", "ghost"]),
            make_col("brand", "Button Brand", [("bb", "Brand", "bd")], ["fill"], isExtension=True,
                     variableOverrides={"fill": {"bb": alias(f"VariableID:{WHITE_KEY}/4:4")}}),
            make_col("draft", "Draft", [("dm", "Default")], ["empty"]),
        ],
        [
            make_var("pblack", "Key/black", "lib", {"lm": rgba(0, 0, 0)}, key=PROD_BLACK_KEY),
            make_var("fill", "Fill", "btn", {"bd": alias(f"VariableID:{PROD_BLACK_KEY}/2:2")}),
            make_var("surface", "Surface", "btn", {"bd": alias(f"VariableID:{SEM_BG_KEY}/3:3")}),
            make_var("ghost", "Ghost", "btn", {"bd": alias(f"VariableID:{GHOST_KEY}/5:5")}),
            make_var("empty", "Nothing", "draft", {"dm": None}),
        ],
    )


class TestPrimitives:
    def test_end_to_end_literals(self):
        graph = make_graph(
            [
                make_col("pc", "Colors", [("pm", "Default")], ["black"]),
                make_col("pr", "Radius", [("rm", "Default")], ["sm"]),
            ],
            [
                make_var("black", "Base/black", "pc", {"pm": rgba(0, 0, 0, 1)}),
                make_var("sm", "sm", "pr", {"rm": 4.0}, kind="FLOAT", scopes=["CORNER_RADIUS"]),
            ],
        )
        result = build_primitives(graph)
        assert result.tokens == {
            "Colors": {"Base": {"black": {"$type": "color", "$value": "#000000"}}},
            "Radius": {"sm": {"$type": "dimension", "$value": "4px"}},
        }

    def test_alias_inlined(self):
        result = build_primitives(primitives_graph())
        assert result.tokens["Colors"]["Base"]["ink"] == {"$type": "color", "$value": "#000000"}


class TestSemantic:
    def test_remote_aliases_point_at_primitives(self):
        result = build_semantic(semantic_graph(), primitives_graph())
        assert result.tokens == {
            "Surface": {
                "Bg": {
                    "default": {
                        "$type": "color",
                        "$value": "{Colors.Base.black}",
                        "$extensions": {"modes": {"dark": "{Colors.Base.white}"}},
                    }
                }
            }
        }
        assert result.filter_report.by_reason("remote") == ["Colors"]


class TestProduct:
    def test_key_map_precedence(self):
        key_map = product_key_map(product_graph(), primitives_graph(), semantic_graph())
        assert key_map[WHITE_KEY].path == "{Colors.Base.white}"
        assert key_map[SEM_BG_KEY].path == "{Surface.Bg.default}"
        assert key_map[PROD_BLACK_KEY].path == "{Colors.Base.black}"

    def test_product_tokens(self):
        result = build_product(product_graph(), primitives_graph(), semantic_graph())
        button = result.tokens["Button"]
        assert button["Fill"] == {"$type": "color", "$value": "{Colors.Base.black}"}
        assert button["Surface"] == {"$type": "color", "$value": "{Surface.Bg.default}"}
        assert button["Ghost"]["$type"] == "unknown"
        assert button["Ghost"]["$value"] == f"UNRESOLVED:VariableID:{GHOST_KEY}/5:5"
        assert result.tokens["Button Brand"]["Fill"] == {"$type": "color", "$value": "{Colors.Base.white}"}

    def test_product_report(self):
        result = build_product(product_graph(), primitives_graph(), semantic_graph())
        assert result.filter_report.by_reason("remote") == ["Colors"]
        assert result.filter_report.by_reason("all values null") == ["Draft"]
        assert len(result.build_report.unresolved) == 1
        assert "Draft" not in result.tokens


def test_build_all_order():
    results = build_all(primitives_graph(), semantic_graph(), product_graph())
    assert tuple(r.name for r in results) == TIERS


def test_write_tier(tmp_path):
    result = build_primitives(primitives_graph())
    out_dir = tmp_path / "tokens"
    path = write_tier(str(out_dir), "primitives", result.tokens)
    text = (out_dir / "primitives.json").read_text(encoding="utf-8")
    assert path.endswith("primitives.json")
    assert text.endswith("}\n")
    assert text.startswith('{\n  "Colors": {')
    assert json.loads(text) == result.tokens


def test_dump_tokens_keeps_unicode():
    assert dump_tokens({"字型": {"$type": "fontFamily", "$value": "Noto Sans TC"}}).count("字型") == 1
