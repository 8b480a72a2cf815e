"""
figma-tokens — Figma variables → W3C Design Tokens（primitives → semantic → product）

解析三個檔案的 variable graph（alias、extended collection、remote library key），
輸出三層 DTCG token JSON。
"""

__version__ = "0.1.0"

from .model import AliasRef, Collection, Graph, Mode, Variable
from .type_inference import DIMENSION_SCOPES, infer_type
from .value_format import format_value, rgba_to_hex, round_float
from .collection_filter import FilterReport, filter_collections, local_only, publishable
from .alias_resolver import (
    AliasResolver,
    Cycle,
    Literal,
    Missing,
    Resolved,
    build_key_map,
    chase_literal,
    make_token_path,
)
from .extended import effective_value, mode_values
from .tree_builder import BuildReport, DuplicatePolicy, TokenTreeBuilder, preview_token_tree
from .product_remap import build_product_color_key_map
from .pipeline import TierResult, build_all, build_primitives, build_product, build_semantic
from .errors import (
    ConfigurationError,
    CycleDetectedError,
    DuplicateTokenPathError,
    FetchError,
    FigmaTokensError,
    UnresolvedReferenceError,
)
from .figma_reader import FigmaAPIClient, fetch_tier_snapshots, load_snapshot
from .config import load_config, validate_config
from .writer import dump_tokens, write_tier

__all__ = [
    "__version__",
    "AliasRef",
    "Collection",
    "Graph",
    "Mode",
    "Variable",
    "DIMENSION_SCOPES",
    "infer_type",
    "format_value",
    "rgba_to_hex",
    "round_float",
    "FilterReport",
    "filter_collections",
    "local_only",
    "publishable",
    "AliasResolver",
    "Cycle",
    "Literal",
    "Missing",
    "Resolved",
    "build_key_map",
    "chase_literal",
    "make_token_path",
    "effective_value",
    "mode_values",
    "BuildReport",
    "DuplicatePolicy",
    "TokenTreeBuilder",
    "preview_token_tree",
    "build_product_color_key_map",
    "TierResult",
    "build_all",
    "build_primitives",
    "build_product",
    "build_semantic",
    "ConfigurationError",
    "CycleDetectedError",
    "DuplicateTokenPathError",
    "FetchError",
    "FigmaTokensError",
    "UnresolvedReferenceError",
    "FigmaAPIClient",
    "fetch_tier_snapshots",
    "load_snapshot",
    "load_config",
    "validate_config",
    "dump_tokens",
    "write_tier",
]
