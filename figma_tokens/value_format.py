"""
Raw Figma values → W3C token literals.

COLOR  {r, g, b, a} in 0–1  →  "#RRGGBB" / "#RRGGBBAA"
FLOAT                        →  4-decimal number, "<n>px" under a dimension scope
other                        →  passthrough
"""

import math
from typing import Any, Union

from .type_inference import has_dimension_scope


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _channel(value: float) -> str:
    return f"{_round_half_up(value * 255):02X}"


def rgba_to_hex(color: dict) -> str:
    r, g, b = color.get("r", 0), color.get("g", 0), color.get("b", 0)
    a = color.get("a", 1)
    hex_rgb = "".join(_channel(v) for v in (r, g, b))
    if a < 1:
        return f"#{hex_rgb}{_channel(a)}"
    return f"#{hex_rgb}"


def round_float(value: float) -> Union[int, float]:
    """Round to 4 decimals; integral results come back as int (4.0 → 4)."""
    rounded = math.floor(value * 10000 + 0.5) / 10000
    if rounded == int(rounded):
        return int(rounded)
    return rounded


def format_value(resolved_type: str, scopes, raw: Any) -> Any:
    if resolved_type == "COLOR" and isinstance(raw, dict):
        return rgba_to_hex(raw)
    if resolved_type == "FLOAT" and isinstance(raw, (int, float)) and not isinstance(raw, bool):
        value = round_float(raw)
        if has_dimension_scope(scopes):
            return f"{value}px"
        return value
    return raw
