"""`/api/send-email` のリクエスト/レスポンススキーマ。"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class AttachmentPayload(BaseModel):
    """JSON 送信時の添付。`content` は base64 文字列。"""

    filename: str
    content: str
    contentType: str | None = None

    model_config = ConfigDict(extra="ignore")


class SendEmailJsonRequest(BaseModel):
    """JSON 形式の送信リクエスト。`to` は配列・カンマ区切り文字列の両方を許容する。"""

    from_addr: str | None = Field(default=None, alias="from")
    to: str | list[Any] | None = None
    subject: str | None = None
    bodyHtml: str | None = None
    attachments: list[AttachmentPayload] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SendEmailResponse(BaseModel):
    success: Literal[True] = True
    messageId: str

    model_config = ConfigDict(extra="forbid")


class ErrorResponse(BaseModel):
    """送信失敗時の共通エラーレスポンス。"""

    error: str

    model_config = ConfigDict(extra="forbid")
