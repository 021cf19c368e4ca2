"""ユースケース間で共有するデータモデル。"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class ValidationResult:
    """入力チェックの結果。保存はせず都度導出する。"""

    ok: bool
    reason: str = ""


@dataclass(slots=True)
class MailAttachment:
    """送信メールへ添付するファイル。内容はメモリ上に全量保持する。"""

    filename: str
    content: bytes
    content_type: str | None = None

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"MailAttachment(filename={self.filename!r}, "
            f"content_type={self.content_type!r}, size={len(self.content)})"
        )


@dataclass(slots=True)
class OutgoingMail:
    """SMTP トランスポートへ渡す送信メール。"""

    from_addr: str
    to: list[str]
    subject: str
    body_html: str
    attachments: list[MailAttachment] = field(default_factory=list)
