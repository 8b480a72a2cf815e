"""
Figma REST API 讀取

抓取各 tier 檔案的 local variables（primitives / semantic / product），
或從先前儲存的 JSON 快照載入。失敗一律直接拋出，不重試。
"""

import json
from concurrent.futures import ThreadPoolExecutor, wait, FIRST_EXCEPTION
from typing import Dict

import requests

from .errors import ConfigurationError, FetchError
from .model import Graph


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str, timeout: float = 30.0):
        if not token:
            raise ConfigurationError(
                "FIGMA_ACCESS_TOKEN environment variable (or figma.personalAccessToken) is required."
            )
        self.token = token
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def get_local_variables(self, file_key: str) -> dict:
        """GET /files/:key/variables/local，回傳 `meta` 物件."""
        url = f"{self.BASE_URL}/files/{file_key}/variables/local"
        resp = self.session.get(url, timeout=self.timeout)
        if not resp.ok:
            raise FetchError(resp.status_code, resp.text, url=url)
        return resp.json().get("meta", {})


def fetch_tier_snapshots(client: FigmaAPIClient, files: Dict[str, str]) -> Dict[str, dict]:
    """
    並行抓取各 tier 的 variables。

    三個檔案彼此獨立可同時讀取；任一失敗即取消其餘請求並拋出原錯誤，
    不產出部分結果。
    """
    with ThreadPoolExecutor(max_workers=max(1, len(files))) as pool:
        futures = {
            pool.submit(client.get_local_variables, file_key): tier
            for tier, file_key in files.items()
        }
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for future in pending:
            future.cancel()
        for future in done:
            exc = future.exception()
            if exc is not None:
                raise exc
        return {futures[f]: f.result() for f in futures}


def load_snapshot(path: str) -> Graph:
    """從 JSON 檔案載入快照（完整 API 回應或 meta 物件皆可）."""
    with open(path, "r", encoding="utf-8") as f:
        return Graph.from_api(json.load(f))
