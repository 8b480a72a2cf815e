"""
Tier pipeline: primitives → semantic → product

Each tier:  graph → filter_collections → value source → TokenTreeBuilder

Later tiers resolve remote aliases through the key map of the tiers before
them, so the order is fixed: primitives must be built first, then semantic,
then product.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .alias_resolver import AliasResolver, KeyMap, build_key_map
from .collection_filter import FilterReport, filter_collections
from .model import Graph
from .product_remap import build_product_color_key_map
from .tree_builder import (
    BuildReport,
    DuplicatePolicy,
    LiteralValues,
    ReferenceValues,
    TokenTreeBuilder,
)

TIER_PRIMITIVES = "primitives"
TIER_SEMANTIC = "semantic"
TIER_PRODUCT = "product"
TIERS = (TIER_PRIMITIVES, TIER_SEMANTIC, TIER_PRODUCT)


@dataclass
class TierResult:
    name: str
    tokens: dict
    filter_report: FilterReport
    build_report: BuildReport


def _build_tier(name: str, graph: Graph, values, on_duplicate) -> TierResult:
    collections, filter_report = filter_collections(graph)
    builder = TokenTreeBuilder(values, on_duplicate=on_duplicate)
    tokens, build_report = builder.build(collections, graph.variables)
    return TierResult(name, tokens, filter_report, build_report)


def build_primitives(graph: Graph, on_duplicate=DuplicatePolicy.OVERWRITE) -> TierResult:
    return _build_tier(TIER_PRIMITIVES, graph, LiteralValues(graph), on_duplicate)


def semantic_key_map(primitives: Graph) -> KeyMap:
    return build_key_map(primitives)


def product_key_map(product: Graph, primitives: Graph, semantic: Graph) -> KeyMap:
    """primitives → semantic（僅 local）→ product Colors remap，後者覆蓋前者."""
    key_map = build_key_map(primitives)
    key_map.update(build_key_map(semantic, include_remote=False))
    key_map.update(build_product_color_key_map(product))
    return key_map


def build_semantic(graph: Graph, primitives: Graph, on_duplicate=DuplicatePolicy.OVERWRITE) -> TierResult:
    resolver = AliasResolver(graph, semantic_key_map(primitives))
    return _build_tier(TIER_SEMANTIC, graph, ReferenceValues(resolver), on_duplicate)


def build_product(
    graph: Graph,
    primitives: Graph,
    semantic: Graph,
    on_duplicate=DuplicatePolicy.OVERWRITE,
) -> TierResult:
    resolver = AliasResolver(graph, product_key_map(graph, primitives, semantic))
    return _build_tier(TIER_PRODUCT, graph, ReferenceValues(resolver), on_duplicate)


def build_all(
    primitives: Graph,
    semantic: Graph,
    product: Graph,
    on_duplicate=DuplicatePolicy.OVERWRITE,
) -> List[TierResult]:
    """依序建出三個 tier；任何致命錯誤直接往上拋."""
    return [
        build_primitives(primitives, on_duplicate),
        build_semantic(semantic, primitives, on_duplicate),
        build_product(product, primitives, semantic, on_duplicate),
    ]
