"""
Alias resolution across tier graphs.

A reference is either local (a variable id in the same graph) or remote
(`<keyHash>/<suffix>`), which addresses a variable in another file by its
content key. Remote references are looked up in a KeyMap built from the
earlier tiers; when that fails, the graph's own variables are searched for a
locally redeclared library copy with the same key.

Results are tagged rather than None-or-value:

  Resolved(path, type)   reference to a canonical token path
  Literal(value)         terminal raw value (primitives literal chase only)
  Cycle(ref, chain)      alias chain loops back on itself
  Missing(ref)           nothing found for the reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, Optional, Tuple, Union

from .errors import CycleDetectedError, UnresolvedReferenceError
from .model import AliasRef, Graph, Variable
from .type_inference import infer_type

UNRESOLVED_PREFIX = "UNRESOLVED:"
UNRESOLVED_TYPE = "unknown"


@dataclass(frozen=True)
class Resolved:
    path: str
    type: str


@dataclass(frozen=True)
class Literal:
    value: Any


@dataclass(frozen=True)
class Cycle:
    ref: str
    chain: Tuple[str, ...] = ()

    def as_error(self, variable: str = "") -> CycleDetectedError:
        return CycleDetectedError(self.ref, self.chain, variable=variable)


@dataclass(frozen=True)
class Missing:
    ref: str

    def as_error(self, variable: str = "") -> UnresolvedReferenceError:
        return UnresolvedReferenceError(self.ref, variable=variable)


Resolution = Union[Resolved, Literal, Cycle, Missing]
KeyMap = Dict[str, Resolved]


def make_token_path(collection_name: str, variable_name: str) -> str:
    return "{" + ".".join([collection_name, *variable_name.split("/")]) + "}"


def unresolved_marker(ref: str) -> str:
    return f"{UNRESOLVED_PREFIX}{ref}"


def describe(graph: Graph, variable: Variable) -> Resolved:
    """Canonical path and inferred type of a variable within its own graph."""
    return Resolved(
        path=make_token_path(graph.collection_name(variable.collection_id), variable.name),
        type=infer_type(variable.resolved_type, variable.scopes, variable.name),
    )


def build_key_map(graph: Graph, include_remote: bool = True) -> KeyMap:
    """variable key → Resolved for every variable of the graph."""
    key_map: KeyMap = {}
    for variable in graph.variables.values():
        if not include_remote:
            col = graph.collections.get(variable.collection_id)
            if col is not None and col.remote:
                continue
        key_map[variable.key] = describe(graph, variable)
    return key_map


class AliasResolver:
    """Resolve references of one tier graph to canonical token paths."""

    def __init__(self, graph: Graph, key_map: Optional[KeyMap] = None):
        self.graph = graph
        self.key_map: KeyMap = dict(key_map or {})
        self._by_id: Dict[str, Resolved] = {
            vid: describe(graph, v) for vid, v in graph.variables.items()
        }
        # first declaration wins, same as a linear scan
        self._by_key: Dict[str, Resolved] = {}
        for vid, v in graph.variables.items():
            self._by_key.setdefault(v.key, self._by_id[vid])

    def resolve(self, ref: Union[AliasRef, str]) -> Union[Resolved, Missing]:
        alias = ref if isinstance(ref, AliasRef) else AliasRef(ref)
        if alias.is_remote:
            key_hash = alias.key_hash
            found = self.key_map.get(key_hash) or self._by_key.get(key_hash)
            return found or Missing(alias.id)
        return self._by_id.get(alias.id) or Missing(alias.id)


def chase_literal(
    graph: Graph,
    ref: Union[AliasRef, str],
    visited: FrozenSet[str] = frozenset(),
    chain: Tuple[str, ...] = (),
) -> Union[Literal, Cycle, Missing]:
    """
    Follow a local alias chain down to its terminal raw value.

    Each hop reads the target variable's value in its own collection's
    primary mode. Used for the primitives tier, which renders literals
    instead of references.
    """
    alias = ref if isinstance(ref, AliasRef) else AliasRef(ref)
    while True:
        if alias.id in visited:
            return Cycle(alias.id, chain)
        variable = graph.variables.get(alias.id)
        if variable is None:
            return Missing(alias.id)
        col = graph.collections.get(variable.collection_id)
        if col is None or col.primary_mode is None:
            return Missing(alias.id)
        value = variable.values_by_mode.get(col.primary_mode.mode_id)
        if not isinstance(value, AliasRef):
            return Literal(value)
        visited = visited | {alias.id}
        chain = chain + (alias.id,)
        alias = value
