"""
Token tree builder.

Publishable collections + variables → nested W3C token mapping:

    {collection: {segment: ... {"$type", "$value", "$extensions"?: {"modes": {...}}}}}

How an individual raw value becomes a literal is delegated to a value
source: `LiteralValues` for primitives (aliases chased to literals) and
`ReferenceValues` for semantic / product (aliases rendered as `{path}`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from .alias_resolver import (
    UNRESOLVED_TYPE,
    AliasResolver,
    Cycle,
    Missing,
    Resolved,
    chase_literal,
    unresolved_marker,
)
from .errors import CycleDetectedError, DuplicateTokenPathError, UnresolvedReferenceError
from .extended import mode_values
from .model import AliasRef, Collection, Graph, Variable
from .type_inference import infer_type
from .value_format import format_value


class DuplicatePolicy(str, Enum):
    OVERWRITE = "overwrite"
    WARN = "warn"
    ERROR = "error"


@dataclass
class BuildReport:
    unresolved: List[UnresolvedReferenceError] = field(default_factory=list)
    cycles: List[CycleDetectedError] = field(default_factory=list)
    duplicates: List[Tuple[str, ...]] = field(default_factory=list)
    token_count: int = 0

    @property
    def problems(self) -> list:
        return [*self.unresolved, *self.cycles]


TokenValue = Tuple[str, Any]


def literal_value(variable: Variable, raw: Any) -> TokenValue:
    return (
        infer_type(variable.resolved_type, variable.scopes, variable.name),
        format_value(variable.resolved_type, variable.scopes, raw),
    )


class ReferenceValues:
    """Aliases → `{Collection.path}` with the target's type."""

    def __init__(self, resolver: AliasResolver):
        self.resolver = resolver

    def value(self, variable: Variable, raw: Any, report: BuildReport) -> Optional[TokenValue]:
        if not isinstance(raw, AliasRef):
            return literal_value(variable, raw)
        result = self.resolver.resolve(raw)
        if isinstance(result, Resolved):
            return result.type, result.path
        report.unresolved.append(result.as_error(variable.name))
        return UNRESOLVED_TYPE, unresolved_marker(raw.id)


class LiteralValues:
    """Aliases chased to their terminal literal, formatted with the outer variable's kind."""

    def __init__(self, graph: Graph):
        self.graph = graph

    def value(self, variable: Variable, raw: Any, report: BuildReport) -> Optional[TokenValue]:
        if isinstance(raw, AliasRef):
            result = chase_literal(self.graph, raw)
            if isinstance(result, Cycle):
                report.cycles.append(result.as_error(variable.name))
                return None
            if isinstance(result, Missing):
                report.unresolved.append(result.as_error(variable.name))
                return UNRESOLVED_TYPE, unresolved_marker(raw.id)
            raw = result.value
            if raw is None:
                return None
        return literal_value(variable, raw)


class TokenTreeBuilder:

    def __init__(self, values, on_duplicate: DuplicatePolicy = DuplicatePolicy.OVERWRITE):
        self.values = values
        self.on_duplicate = DuplicatePolicy(on_duplicate)

    def build(
        self,
        collections: Dict[str, Collection],
        variables: Dict[str, Variable],
    ) -> Tuple[dict, BuildReport]:
        tree: dict = {}
        owners: Dict[Tuple[str, ...], str] = {}
        report = BuildReport()

        for col in collections.values():
            for vid in col.variable_ids:
                variable = variables.get(vid)
                if variable is None:
                    continue
                token = self._build_token(col, variable, report)
                if token is None:
                    continue
                path = (col.name, *variable.segments)
                self._place(tree, path, token, variable.name, owners, report)

        report.token_count = len(owners)
        return tree, report

    def _build_token(self, col: Collection, variable: Variable, report: BuildReport) -> Optional[dict]:
        values = list(mode_values(col, variable))
        if not values:
            return None
        _, primary_raw = values[0]
        if primary_raw is None:
            return None
        primary = self.values.value(variable, primary_raw, report)
        if primary is None:
            return None

        token_type, token_value = primary
        token = {"$type": token_type, "$value": token_value}

        modes = {}
        for mode, raw in values[1:]:
            if raw is None:
                continue
            secondary = self.values.value(variable, raw, report)
            if secondary is None:
                continue
            modes[mode.name.lower()] = secondary[1]
        if modes:
            token["$extensions"] = {"modes": modes}
        return token

    def _place(self, tree, path, token, owner, owners, report) -> None:
        cur = tree
        for depth, key in enumerate(path[:-1], start=1):
            node = cur.get(key)
            # a token cannot also be a group
            if is_token(node):
                self._collide(path[:depth], owner, owners, report)
                node = None
            if node is None:
                node = cur[key] = {}
            cur = node
        leaf = path[-1]
        if leaf in cur:
            self._collide(path, owner, owners, report)
        cur[leaf] = token
        owners[path] = owner

    def _collide(self, path, owner, owners, report) -> None:
        """Apply the duplicate policy to `path`, then forget every token at or under it."""
        previous = owners.get(path)
        if self.on_duplicate is DuplicatePolicy.ERROR:
            raise DuplicateTokenPathError(path, previous, owner)
        if self.on_duplicate is DuplicatePolicy.WARN:
            report.duplicates.append(path)
        for taken in [p for p in owners if p[:len(path)] == path]:
            del owners[taken]


def is_token(node) -> bool:
    return isinstance(node, dict) and "$value" in node


def preview_token_tree(tree: dict, indent: int = 0) -> str:
    """除錯用：印出 token 樹."""
    lines = []
    prefix = "  " * indent
    for name, node in tree.items():
        if not isinstance(node, dict) or name.startswith("$"):
            continue
        if is_token(node):
            label = f"{prefix}├─ {name}  [{node.get('$type', '?')}]  {node['$value']}"
            modes = (node.get("$extensions") or {}).get("modes") or {}
            if modes:
                label += "  (" + ", ".join(f"{m}: {v}" for m, v in modes.items()) + ")"
        else:
            label = f"{prefix}├─ {name}"
        lines.append(label)
        nested = preview_token_tree(node, indent + 1)
        if nested:
            lines.append(nested)
    return "\n".join(lines)
