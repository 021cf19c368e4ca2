"""メール作成フォーム（Composer）の編集状態。"""

from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from email_relay.shared.email_address import (
    is_valid_email,
    validate_recipients,
    validate_sender,
    validate_subject,
)

SENDER_HINT = "Enter a valid sender email."
RECIPIENTS_HINT = "One or more emails are invalid."
SUBMIT_LABEL = "Send Referral Email"
SENDING_LABEL = "Sending…"


@dataclass(slots=True)
class SubmitStatus:
    """直近の送信結果（ステータスバナー表示用）。"""

    type: Literal["success", "error"]
    message: str


@dataclass(slots=True)
class ComposeAttachment:
    filename: str
    content: bytes
    content_type: str | None = None


@dataclass(slots=True)
class RecipientTagInput:
    """宛先のタグ入力。カンマ・Enter・フォーカスアウトで確定する。"""

    values: list[str] = field(default_factory=list)

    def commit(self, raw: str) -> list[str]:
        """入力バッファを確定し、新たに追加されたアドレスを返す。

        不正なアドレスと既存の重複は黙って捨てる。
        """

        added: list[str] = []
        for piece in raw.split(","):
            address = piece.strip()
            if not address:
                continue
            if is_valid_email(address) and address not in self.values:
                self.values.append(address)
                added.append(address)
        return added

    def remove(self, address: str) -> None:
        self.values = [value for value in self.values if value != address]

    @property
    def has_invalid(self) -> bool:
        return not all(is_valid_email(value) for value in self.values)


@dataclass(slots=True)
class ComposeForm:
    """From / To / Subject / 本文 / 添付の編集状態。

    本文はリッチテキストエディタが出力した HTML をそのまま保持する。
    """

    from_addr: str = ""
    recipients: RecipientTagInput = field(default_factory=RecipientTagInput)
    subject: str = ""
    body_html: str = ""
    attachments: list[ComposeAttachment] = field(default_factory=list)
    is_sending: bool = False
    status: SubmitStatus | None = None

    def attach_file(self, path: str | Path) -> ComposeAttachment:
        """ファイルを読み込んで添付リストへ追加する。"""

        file_path = Path(path)
        content_type, _ = mimetypes.guess_type(file_path.name)
        attachment = ComposeAttachment(
            filename=file_path.name,
            content=file_path.read_bytes(),
            content_type=content_type,
        )
        self.attachments.append(attachment)
        return attachment

    @property
    def sender_error(self) -> str | None:
        if self.from_addr and not is_valid_email(self.from_addr):
            return SENDER_HINT
        return None

    @property
    def recipients_error(self) -> str | None:
        return RECIPIENTS_HINT if self.recipients.has_invalid else None

    @property
    def can_submit(self) -> bool:
        return (
            validate_sender(self.from_addr).ok
            and validate_recipients(self.recipients.values).ok
            and validate_subject(self.subject).ok
        )

    @property
    def submit_disabled(self) -> bool:
        return not self.can_submit or self.is_sending

    @property
    def submit_label(self) -> str:
        return SENDING_LABEL if self.is_sending else SUBMIT_LABEL
