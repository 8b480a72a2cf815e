"""
Token 文件輸出

每個 tier 一份 JSON：UTF-8、2 空格縮排、保留非 ASCII 字元、結尾換行。
"""

import json
import os


def dump_tokens(tokens: dict) -> str:
    return json.dumps(tokens, indent=2, ensure_ascii=False) + "\n"


def write_tier(output_dir: str, name: str, tokens: dict) -> str:
    """寫入 <output_dir>/<name>.json，回傳檔案路徑."""
    path = os.path.join(output_dir, f"{name}.json")
    os.makedirs(output_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dump_tokens(tokens))
    return path


def write_snapshot(output_dir: str, tier: str, meta: dict) -> str:
    """保存原始 variables/local 回應，供 `build` 離線重建."""
    path = os.path.join(output_dir, f"{tier}.variables.json")
    os.makedirs(output_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump({"meta": meta}, f, indent=2, ensure_ascii=False)
    return path
