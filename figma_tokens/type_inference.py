"""Figma 變數型別 → W3C token `$type`."""

DIMENSION_SCOPES = frozenset({
    "FONT_SIZE", "LINE_HEIGHT", "LETTER_SPACING",
    "CORNER_RADIUS", "WIDTH_HEIGHT", "GAP", "FONT_VARIATIONS",
})

# 無 scope 的 STRING 預設為 fontFamily：沿用既有變數集的慣例，其他字串變數未驗證
STRING_FALLBACK_TYPE = "fontFamily"


def has_dimension_scope(scopes) -> bool:
    return any(s in DIMENSION_SCOPES for s in scopes or ())


def infer_type(resolved_type: str, scopes=(), name: str = "") -> str:
    """依 resolvedType、scopes 與變數名稱推斷 token 型別（純函式）."""
    scopes = scopes or ()
    if resolved_type == "COLOR":
        return "color"
    if resolved_type == "FLOAT":
        return "dimension" if has_dimension_scope(scopes) else "number"
    if resolved_type == "STRING":
        if "FONT_FAMILY" in scopes:
            return "fontFamily"
        if "FONT_STYLE" in scopes or "Weight" in (name or ""):
            return "fontWeight"
        return STRING_FALLBACK_TYPE
    return "string"
