"""JSONロギングの共通ヘルパー。"""

from __future__ import annotations

import json
import logging
import traceback
from typing import Any

_LOGGER = logging.getLogger("email_relay")


def log_request(*, path: str, status: int, request_id: str, latency_ms: int) -> None:
    payload = {
        "level": "INFO",
        "path": path,
        "status": status,
        "request_id": request_id,
        "latency_ms": latency_ms,
    }
    _LOGGER.info(json.dumps(payload, ensure_ascii=False))


def log_event(*, event: str, request_id: str | None = None, **fields: Any) -> None:
    """リクエスト処理中の任意イベントを1行 JSON で出力する。"""

    payload: dict[str, Any] = {
        "level": "INFO",
        "event": event,
        "request_id": request_id,
    }
    payload.update(fields)
    _LOGGER.info(json.dumps(payload, ensure_ascii=False, default=str))


def log_error(
    *,
    path: str,
    status: int,
    request_id: str,
    latency_ms: int,
    error: Any,
) -> None:
    payload = {
        "level": "ERROR",
        "path": path,
        "status": status,
        "request_id": request_id,
        "latency_ms": latency_ms,
        "error_json": _to_error_json(error),
        "traceback": traceback.format_exc(),
    }
    _LOGGER.error(json.dumps(payload, ensure_ascii=False))


def _to_error_json(error: Any) -> str:
    if isinstance(error, (dict, list)):
        return json.dumps(error, ensure_ascii=False)
    return json.dumps({"message": str(error)}, ensure_ascii=False)
