"""
Product 檔案的 Colors → primitives 路徑 remap

Product 檔案會連結一份 remote 的 Colors collection（primitives Colors 的子集）。
與其產生指向 product 檔案自己那份 remote 副本的 alias，不如直接對應到
primitives 的正式 token 路徑：

  Colors/Ramps/X/N  →  {Colors.Ramps.X.N}
  Colors/Key/black  →  {Colors.Base.black}
"""

from .alias_resolver import KeyMap, Resolved, make_token_path
from .model import Graph

KEY_PREFIX = "Key/"


def primitive_color_path(variable_name: str, collection_name: str = "Colors") -> str:
    if variable_name.startswith(KEY_PREFIX):
        return make_token_path(collection_name, "Base/" + variable_name[len(KEY_PREFIX):])
    return make_token_path(collection_name, variable_name)


def build_product_color_key_map(graph: Graph, collection_name: str = "Colors") -> KeyMap:
    key_map: KeyMap = {}
    for col in graph.collections.values():
        if not col.remote or col.name != collection_name:
            continue
        for vid in col.variable_ids:
            variable = graph.variables.get(vid)
            if variable is None:
                continue
            key_map[variable.key] = Resolved(
                path=primitive_color_path(variable.name, collection_name),
                type="color",
            )
    return key_map
