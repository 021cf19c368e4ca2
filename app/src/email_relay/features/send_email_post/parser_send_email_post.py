"""送信リクエスト（multipart / JSON）の解析。"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request
from pydantic import ValidationError
from starlette.datastructures import FormData, UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from email_relay.core.models import MailAttachment
from email_relay.features.send_email_post.schemas_send_email_post import (
    AttachmentPayload,
    SendEmailJsonRequest,
)
from email_relay.shared.email_address import normalize_recipients

INVALID_ATTACHMENT_MESSAGE = "Invalid attachment payload"
# bodyHtml などテキスト項目の上限。添付のサイズは制限しない
MAX_FIELD_SIZE = 64 * 1024 * 1024


class SendEmailRequestError(ValueError):
    """リクエスト内容の不備（400 で返す）を表す例外。"""


@dataclass(slots=True)
class ParsedSendEmail:
    """エンコーディングに依存しない送信リクエストの中身。"""

    from_addr: str
    to: list[str]
    subject: str
    body_html: str
    attachments: list[MailAttachment] = field(default_factory=list)


async def parse_send_email_request(request: Request) -> ParsedSendEmail:
    """Content-Type を見て multipart / JSON のどちらかで解析する。"""

    content_type = request.headers.get("content-type", "")
    if "multipart/form-data" in content_type.lower():
        return await _parse_multipart(request)
    return await _parse_json(request)


async def _parse_multipart(request: Request) -> ParsedSendEmail:
    try:
        form = await request.form(max_part_size=MAX_FIELD_SIZE)
    except StarletteHTTPException as exc:
        raise SendEmailRequestError(str(exc.detail)) from exc

    try:
        attachments = await _read_uploads(form)
        return ParsedSendEmail(
            from_addr=_text_field(form, "from"),
            to=normalize_recipients(form.getlist("to")),
            subject=_text_field(form, "subject"),
            body_html=_text_field(form, "bodyHtml"),
            attachments=attachments,
        )
    finally:
        await form.close()


def _text_field(form: FormData, name: str) -> str:
    value = form.get(name)
    return value if isinstance(value, str) else ""


async def _read_uploads(form: FormData) -> list[MailAttachment]:
    attachments: list[MailAttachment] = []
    for entry in form.getlist("attachments"):
        # 文字列で送られてきた attachments は無視する
        if not isinstance(entry, UploadFile):
            continue
        content = await entry.read()
        # ファイル未選択のまま送られた空パート
        if not entry.filename and not content:
            continue
        attachments.append(
            MailAttachment(
                filename=entry.filename or "attachment",
                content=content,
                content_type=entry.content_type or None,
            )
        )
    return attachments


async def _parse_json(request: Request) -> ParsedSendEmail:
    try:
        raw: Any = await request.json()
    except ValueError:
        # 壊れた JSON は空オブジェクト扱い（後段の from チェックで 400 になる）
        raw = {}
    if not isinstance(raw, dict):
        raw = {}

    try:
        payload = SendEmailJsonRequest.model_validate(raw)
    except ValidationError as exc:
        raise SendEmailRequestError(_describe_validation_error(exc)) from exc

    return ParsedSendEmail(
        from_addr=payload.from_addr or "",
        to=normalize_recipients(payload.to),
        subject=payload.subject or "",
        body_html=payload.bodyHtml or "",
        attachments=[_decode_attachment(item) for item in payload.attachments],
    )


def _decode_attachment(item: AttachmentPayload) -> MailAttachment:
    try:
        content = base64.b64decode(item.content)
    except (binascii.Error, ValueError) as exc:
        raise SendEmailRequestError(INVALID_ATTACHMENT_MESSAGE) from exc
    return MailAttachment(
        filename=item.filename,
        content=content,
        content_type=item.contentType or None,
    )


def _describe_validation_error(exc: ValidationError) -> str:
    errors = exc.errors()
    location = errors[0]["loc"] if errors else ()
    field_name = str(location[0]) if location else "body"
    if field_name == "attachments":
        return INVALID_ATTACHMENT_MESSAGE
    return f"Invalid '{field_name}' field"
