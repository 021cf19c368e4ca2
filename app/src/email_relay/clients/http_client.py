"""httpx クライアントの共通設定。"""

from __future__ import annotations

import httpx

# 添付付き送信は SMTP 応答待ちを含むため読み取りを長めに取る
DEFAULT_TIMEOUT = httpx.Timeout(90.0, connect=5.0)


def create_sync_client(
    *,
    base_url: str = "",
    timeout: httpx.Timeout | None = None,
) -> httpx.Client:
    """共通タイムアウト付きの同期 Client を生成する。"""

    return httpx.Client(base_url=base_url, timeout=timeout or DEFAULT_TIMEOUT)
