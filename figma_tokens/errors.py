"""figma-tokens 例外類別."""

from typing import Optional


class FigmaTokensError(Exception):
    """所有 figma-tokens 錯誤的基底類別."""


class ConfigurationError(FigmaTokensError):
    """缺少 token 或設定錯誤（致命，任何抓取前即中止）."""


class FetchError(FigmaTokensError):
    """Figma API 回傳非成功狀態（致命，不重試）."""

    def __init__(self, status: int, body: str, url: str = ""):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"Figma API error {status}: {body}")


class UnresolvedReferenceError(FigmaTokensError):
    """Alias 指向找不到的變數。單一 token 層級，不中止整體流程."""

    def __init__(self, ref: str, variable: str = ""):
        self.ref = ref
        self.variable = variable
        where = f" (in {variable})" if variable else ""
        super().__init__(f"Unresolved reference {ref}{where}")


class CycleDetectedError(FigmaTokensError):
    """Alias 鏈形成循環。該變數視為無值，其他變數照常處理."""

    def __init__(self, ref: str, chain: tuple = (), variable: str = ""):
        self.ref = ref
        self.chain = tuple(chain)
        self.variable = variable
        path = " -> ".join(self.chain + (ref,)) if self.chain else ref
        where = f" (in {variable})" if variable else ""
        super().__init__(f"Alias cycle detected: {path}{where}")


class DuplicateTokenPathError(FigmaTokensError):
    """兩個變數正規化後落在同一 token 路徑（僅 on_duplicate=error 時拋出）."""

    def __init__(self, path: tuple, previous: Optional[str] = None, current: Optional[str] = None):
        self.path = tuple(path)
        self.previous = previous
        self.current = current
        joined = ".".join(self.path)
        detail = f" ({previous} / {current})" if previous and current else ""
        super().__init__(f"Duplicate token path {joined}{detail}")
