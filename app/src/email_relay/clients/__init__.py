"""外部サービスへの接続ヘルパーをまとめたパッケージ。"""

from __future__ import annotations

__all__ = [
    "http_client",
    "smtp_client",
]
