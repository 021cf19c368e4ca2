"""メールアドレスの構文チェックと宛先正規化。

Composer（クライアント側フォーム）と Dispatcher（サーバ側ハンドラ）の双方が
同じ判定を使う。サーバ側の判定が正であり、クライアントの結果は信用しない。
"""

from __future__ import annotations

import re
from typing import Iterable

from email_relay.core.models import ValidationResult

SENDER_REQUIRED_MESSAGE = "Valid 'from' email is required"
RECIPIENTS_REQUIRED_MESSAGE = "Provide at least one valid 'to' email"
SUBJECT_REQUIRED_MESSAGE = "Subject is required"

_LOCAL_CHARS = r"[a-zA-Z0-9_'^&+\-]"
_EMAIL_PATTERN = re.compile(
    rf"{_LOCAL_CHARS}+(?:\.{_LOCAL_CHARS}+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{{2,}}"
)


def is_valid_email(value: str | None) -> bool:
    """前後の空白を除いた文字列が `local@domain.tld` 形式なら True。"""

    if not isinstance(value, str):
        return False
    return _EMAIL_PATTERN.fullmatch(value.strip()) is not None


def normalize_recipients(value: str | Iterable[object] | None) -> list[str]:
    """宛先をカンマ区切り文字列・文字列リストのどちらでも受け付けて正規化する。

    各要素をカンマで分割し、前後空白を除去、空要素と文字列以外の要素を捨てる。
    出現順を保ったまま 2 回目以降の重複を取り除いたリストを返す。
    構文チェックは行わない（`validate_recipients` の責務）。
    """

    if value is None:
        return []
    items: Iterable[object] = [value] if isinstance(value, str) else value

    recipients: list[str] = []
    for item in items:
        if not isinstance(item, str):
            continue
        for piece in item.split(","):
            address = piece.strip()
            if address and address not in recipients:
                recipients.append(address)
    return recipients


def validate_sender(value: str | None) -> ValidationResult:
    if not value or not is_valid_email(value):
        return ValidationResult(ok=False, reason=SENDER_REQUIRED_MESSAGE)
    return ValidationResult(ok=True)


def validate_recipients(values: list[str]) -> ValidationResult:
    if not values or not all(is_valid_email(v) for v in values):
        return ValidationResult(ok=False, reason=RECIPIENTS_REQUIRED_MESSAGE)
    return ValidationResult(ok=True)


def validate_subject(value: str | None) -> ValidationResult:
    """件名の必須チェック。クライアント側のみで適用する。"""

    if not value or not value.strip():
        return ValidationResult(ok=False, reason=SUBJECT_REQUIRED_MESSAGE)
    return ValidationResult(ok=True)
