"""設定檔載入與基本驗證."""

import json
import os
from pathlib import Path
from typing import Any, Optional

from .pipeline import TIERS
from .tree_builder import DuplicatePolicy

DEFAULT_CONFIG_PATH = "figma-tokens.config.json"
TOKEN_ENV_VAR = "FIGMA_ACCESS_TOKEN"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"figma", "output", "build"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "figma": {"personalAccessToken", "files"},
    "output": {"dir", "productName"},
    "build": {"onDuplicate", "strict"},
}

_VALID_DUPLICATE_POLICIES = {p.value for p in DuplicatePolicy}


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")

    files = cfg.get("figma", {}).get("files", {})
    if isinstance(files, dict):
        for tier in files:
            if tier not in TIERS:
                _warn(f"figma.files 未知 tier '{tier}'（已知：{', '.join(TIERS)}）")
    elif files is not None:
        _warn(f"figma.files 應為物件，目前是 {type(files).__name__}")

    policy = cfg.get("build", {}).get("onDuplicate")
    if policy and policy not in _VALID_DUPLICATE_POLICIES:
        valid = ", ".join(sorted(_VALID_DUPLICATE_POLICIES))
        _warn(f"build.onDuplicate '{policy}' 不在已知值中（{valid}）")

    strict = cfg.get("build", {}).get("strict")
    if strict is not None and not isinstance(strict, bool):
        _warn(f"build.strict 應為布林值，目前是 {type(strict).__name__}")


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        print(f"   ⚠️  [config] '{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。")
        return {}
    validate_config(cfg)
    return cfg


def resolve_token(config: dict) -> Optional[str]:
    """config 的 figma.personalAccessToken 優先，其次為 FIGMA_ACCESS_TOKEN 環境變數."""
    return config.get("figma", {}).get("personalAccessToken") or os.environ.get(TOKEN_ENV_VAR)
