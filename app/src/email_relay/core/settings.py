"""アプリ全体で共有する設定読み込みロジック。"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable

import boto3
from botocore.exceptions import ClientError


_DEFAULT_REGION = "ap-northeast-1"
_DEFAULT_SSM_PREFIX = "/email-relay/prod"
_DEFAULT_SMTP_PORT = 587
_DEFAULT_SMTP_TIMEOUT = 60.0
_LOCAL_ENV = "local"

_SSM_SMTP_KEYS = (
    "smtp/host",
    "smtp/port",
    "smtp/secure",
    "smtp/user",
    "smtp/pass",
)


@dataclass(slots=True)
class SmtpSettings:
    """SMTP トランスポートの接続設定。"""

    host: str | None
    port: int
    secure: bool
    user: str | None
    password: str | None
    timeout: float = _DEFAULT_SMTP_TIMEOUT

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.user and self.password)


@dataclass(slots=True)
class Settings:
    """環境非依存で参照できる設定値の集合。"""

    app_env: str
    region: str
    smtp: SmtpSettings
    ssm_path_prefix: str | None = None

    @property
    def is_local(self) -> bool:
        return self.app_env == _LOCAL_ENV


def _parse_port(raw: str | None) -> int:
    if not raw:
        return _DEFAULT_SMTP_PORT
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"SMTP_PORT は整数である必要があります: {raw!r}") from exc


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return _DEFAULT_SMTP_TIMEOUT
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"SMTP_TIMEOUT は数値である必要があります: {raw!r}") from exc


def _parse_bool(raw: str | None) -> bool:
    return (raw or "false").strip().lower() == "true"


def _blank_to_none(raw: str | None) -> str | None:
    if raw is None:
        return None
    return raw.strip() or None


def _fetch_ssm_parameters(
    region: str, names: Iterable[str], prefix: str
) -> dict[str, str]:
    """SSM からパラメータを取得する。未登録のものは結果に含めない。"""

    name_list = [f"{prefix}/{name}" for name in names]
    client = boto3.client("ssm", region_name=region)
    try:
        resp = client.get_parameters(Names=name_list, WithDecryption=True)
    except ClientError as exc:  # pragma: no cover - boto3 例外ラップ
        raise RuntimeError("SSM パラメータ取得に失敗しました。") from exc

    return {item["Name"]: item["Value"] for item in resp.get("Parameters", [])}


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """環境に応じて環境変数または SSM から設定を構築する。

    プロセス起動時に一度だけ構築し、`app.state.settings` 経由で各ルータへ渡す。
    SMTP の資格情報が欠けていても起動は妨げず、送信リクエスト時に設定エラーとして扱う。
    """

    app_env = os.getenv("APP_ENV", _LOCAL_ENV)
    region = os.getenv("REGION", _DEFAULT_REGION)
    timeout = _parse_timeout(os.getenv("SMTP_TIMEOUT"))

    if app_env == _LOCAL_ENV:
        smtp = SmtpSettings(
            host=_blank_to_none(os.getenv("SMTP_HOST")),
            port=_parse_port(os.getenv("SMTP_PORT")),
            secure=_parse_bool(os.getenv("SMTP_SECURE")),
            user=_blank_to_none(os.getenv("SMTP_USER")),
            password=os.getenv("SMTP_PASS") or None,
            timeout=timeout,
        )
        return Settings(app_env=app_env, region=region, smtp=smtp)

    prefix = os.getenv("SSM_PATH_PREFIX", _DEFAULT_SSM_PREFIX)
    values = _fetch_ssm_parameters(region=region, names=_SSM_SMTP_KEYS, prefix=prefix)

    def from_ssm(key: str) -> str | None:
        return values.get(f"{prefix}/{key}")

    smtp = SmtpSettings(
        host=_blank_to_none(from_ssm("smtp/host")),
        port=_parse_port(from_ssm("smtp/port")),
        secure=_parse_bool(from_ssm("smtp/secure")),
        user=_blank_to_none(from_ssm("smtp/user")),
        password=from_ssm("smtp/pass") or None,
        timeout=timeout,
    )
    return Settings(app_env=app_env, region=region, smtp=smtp, ssm_path_prefix=prefix)
