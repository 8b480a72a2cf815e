"""
Collection 篩選

`variables/local` 會回傳檔案中「可見」的所有 collection，包含只是從外部
library 連結進來的 remote collection。這些不屬於本檔案，輸出時必須排除。
另外排除 hiddenFromPublishing 與所有值皆為 null 的草稿 collection。

篩選本身不輸出任何訊息，而是回傳 FilterReport 由 CLI 決定如何呈現。
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .model import Collection, Graph, Variable

REASON_REMOTE = "remote"
REASON_HIDDEN = "hiddenFromPublishing"
REASON_EMPTY = "all values null"


@dataclass(frozen=True)
class SkippedCollection:
    name: str
    reason: str


@dataclass
class FilterReport:
    skipped: List[SkippedCollection] = field(default_factory=list)

    def add(self, name: str, reason: str) -> None:
        self.skipped.append(SkippedCollection(name, reason))

    def extend(self, other: "FilterReport") -> "FilterReport":
        self.skipped.extend(other.skipped)
        return self

    def by_reason(self, reason: str) -> List[str]:
        return [s.name for s in self.skipped if s.reason == reason]

    def __bool__(self) -> bool:
        return bool(self.skipped)


def local_only(collections: Dict[str, Collection]) -> Tuple[Dict[str, Collection], FilterReport]:
    """排除 remote collection，其餘原樣保留."""
    report = FilterReport()
    result = {}
    for cid, col in collections.items():
        if col.remote:
            report.add(col.name, REASON_REMOTE)
            continue
        result[cid] = col
    return result, report


def _has_any_value(col: Collection, variables: Dict[str, Variable]) -> bool:
    for vid in col.variable_ids:
        variable = variables.get(vid)
        if variable is None:
            continue
        if any(variable.values_by_mode.get(m.mode_id) is not None for m in col.modes):
            return True
    return False


def publishable(
    collections: Dict[str, Collection],
    variables: Dict[str, Variable],
) -> Tuple[Dict[str, Collection], FilterReport]:
    """
    回傳可發佈的 collection。

    Extended collection（isExtension）的值存在 parent collection 的變數與
    variableOverrides 中，自身 mode 在 valuesByMode 裡永遠是 null，
    因此一律保留，不能當作空 collection 排除。
    """
    report = FilterReport()
    result = {}
    for cid, col in collections.items():
        if col.hidden_from_publishing:
            report.add(col.name, REASON_HIDDEN)
            continue
        if col.is_extension:
            result[cid] = col
            continue
        if not _has_any_value(col, variables):
            report.add(col.name, REASON_EMPTY)
            continue
        result[cid] = col
    return result, report


def filter_collections(graph: Graph) -> Tuple[Dict[str, Collection], FilterReport]:
    """local_only → publishable，合併兩份報告."""
    local, report = local_only(graph.collections)
    result, publish_report = publishable(local, graph.variables)
    return result, report.extend(publish_report)
