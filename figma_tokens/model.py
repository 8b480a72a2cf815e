"""
Variable graph model.

Figma `GET /v1/files/:key/variables/local` payload → in-memory graph.
One graph per tier (primitives / semantic / product); graphs are read-only
once loaded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

ALIAS_TYPE = "VARIABLE_ALIAS"
REMOTE_KEY_MIN_LENGTH = 20


@dataclass(frozen=True)
class AliasRef:
    """Reference to another variable, local (`VariableID:1:2`) or remote (`<key>/<suffix>`)."""

    id: str

    @property
    def _parts(self) -> list:
        return self.id.replace("VariableID:", "").split("/")

    @property
    def is_remote(self) -> bool:
        parts = self._parts
        return len(parts) == 2 and len(parts[0]) > REMOTE_KEY_MIN_LENGTH

    @property
    def key_hash(self) -> Optional[str]:
        return self._parts[0] if self.is_remote else None


@dataclass(frozen=True)
class Mode:
    mode_id: str
    name: str
    parent_mode_id: Optional[str] = None


@dataclass
class Collection:
    id: str
    name: str
    modes: List[Mode]
    variable_ids: List[str]
    remote: bool = False
    is_extension: bool = False
    hidden_from_publishing: bool = False
    variable_overrides: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def primary_mode(self) -> Optional[Mode]:
        return self.modes[0] if self.modes else None

    @property
    def secondary_modes(self) -> List[Mode]:
        return self.modes[1:]


@dataclass
class Variable:
    id: str
    key: str
    name: str
    resolved_type: str
    collection_id: str
    scopes: tuple = ()
    values_by_mode: Dict[str, Any] = field(default_factory=dict)

    @property
    def segments(self) -> List[str]:
        return self.name.split("/")


@dataclass
class Graph:
    collections: Dict[str, Collection]
    variables: Dict[str, Variable]

    @classmethod
    def from_api(cls, payload: dict) -> "Graph":
        """Accepts the full API response (`{"meta": ...}`) or the bare `meta` object."""
        meta = payload.get("meta", payload) if isinstance(payload, dict) else {}
        collections = {
            cid: _parse_collection(cid, raw)
            for cid, raw in (meta.get("variableCollections") or {}).items()
        }
        variables = {
            vid: _parse_variable(vid, raw)
            for vid, raw in (meta.get("variables") or {}).items()
        }
        return cls(collections=collections, variables=variables)

    def collection_name(self, collection_id: str) -> str:
        col = self.collections.get(collection_id)
        return col.name if col else "?"


def parse_raw_value(raw: Any) -> Any:
    if isinstance(raw, dict) and raw.get("type") == ALIAS_TYPE:
        return AliasRef(raw.get("id", ""))
    return raw


def _parse_collection(cid: str, raw: dict) -> Collection:
    modes = [
        Mode(
            mode_id=m.get("modeId", ""),
            name=m.get("name", ""),
            parent_mode_id=m.get("parentModeId"),
        )
        for m in raw.get("modes", [])
    ]
    overrides = {
        vid: {mode_id: parse_raw_value(val) for mode_id, val in (by_mode or {}).items()}
        for vid, by_mode in (raw.get("variableOverrides") or {}).items()
    }
    return Collection(
        id=raw.get("id", cid),
        name=raw.get("name", ""),
        modes=modes,
        variable_ids=list(raw.get("variableIds", [])),
        remote=bool(raw.get("remote", False)),
        is_extension=bool(raw.get("isExtension", False)),
        hidden_from_publishing=bool(raw.get("hiddenFromPublishing", False)),
        variable_overrides=overrides,
    )


def _parse_variable(vid: str, raw: dict) -> Variable:
    return Variable(
        id=raw.get("id", vid),
        key=raw.get("key", ""),
        name=raw.get("name", ""),
        resolved_type=raw.get("resolvedType", ""),
        collection_id=raw.get("variableCollectionId", ""),
        scopes=tuple(raw.get("scopes") or ()),
        values_by_mode={
            mode_id: parse_raw_value(val)
            for mode_id, val in (raw.get("valuesByMode") or {}).items()
        },
    )
