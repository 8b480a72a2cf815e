"""
Extended variable collections

Extended collection 的值並不存在變數 valuesByMode 的 extended mode id 底下：
  1. 每個 extended mode 有 parentModeId，指向 parent collection 的 mode，
     預設值為 variable.valuesByMode[parentModeId]
  2. collection.variableOverrides[vid][extModeId] 針對特定變數 / mode 覆寫

一般 collection 則直接讀 valuesByMode[modeId]，不查 overrides。
"""

from typing import Any, Iterator, Tuple

from .model import Collection, Mode, Variable


def effective_value(collection: Collection, variable: Variable, mode: Mode) -> Any:
    """回傳 variable 在 collection 的 mode 下的有效原始值；無值時為 None."""
    if not collection.is_extension:
        return variable.values_by_mode.get(mode.mode_id)

    override = collection.variable_overrides.get(variable.id, {}).get(mode.mode_id)
    if override is not None:
        return override
    if mode.parent_mode_id is None:
        return None
    return variable.values_by_mode.get(mode.parent_mode_id)


def mode_values(collection: Collection, variable: Variable) -> Iterator[Tuple[Mode, Any]]:
    """依 collection 的 mode 順序產出 (mode, raw)，第一個為 primary mode."""
    for mode in collection.modes:
        yield mode, effective_value(collection, variable, mode)
