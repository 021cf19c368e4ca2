"""メール作成フォームの送信ユースケース。"""

from __future__ import annotations

from typing import Any

import httpx

from email_relay.clients import http_client
from email_relay.features.compose_form.state_compose_form import ComposeForm, SubmitStatus

SEND_EMAIL_ENDPOINT = "/api/send-email"
SUCCESS_MESSAGE = "Email sent successfully."
FAILURE_MESSAGE = "Failed to send email"

MultipartPart = tuple[str, tuple[str | None, str | bytes] | tuple[str, bytes, str]]


def submit_compose_form(
    form: ComposeForm,
    *,
    client: httpx.Client,
    endpoint: str = SEND_EMAIL_ENDPOINT,
) -> SubmitStatus | None:
    """フォーム内容を multipart で 1 回だけ POST し、結果をフォームへ反映する。

    送信不可（検証 NG・送信中）の場合は通信せず None を返す。自動リトライはしない。
    """

    if form.submit_disabled:
        return None

    form.is_sending = True
    form.status = None
    try:
        response = client.post(
            endpoint,
            files=build_multipart_parts(form),
        )
        form.status = _status_from_response(response)
    except httpx.HTTPError as exc:
        form.status = SubmitStatus(type="error", message=str(exc) or FAILURE_MESSAGE)
    finally:
        form.is_sending = False
    return form.status


def send_compose_form(
    form: ComposeForm,
    *,
    base_url: str,
    timeout: httpx.Timeout | None = None,
) -> SubmitStatus | None:
    """共通設定の httpx クライアントでサーバへ送信する。"""

    with http_client.create_sync_client(base_url=base_url, timeout=timeout) as client:
        return submit_compose_form(form, client=client)


def build_form_fields(form: ComposeForm) -> dict[str, str]:
    return {
        "from": form.from_addr,
        "to": ",".join(form.recipients.values),
        "subject": form.subject,
        "bodyHtml": form.body_html,
    }


def build_multipart_parts(form: ComposeForm) -> list[MultipartPart]:
    """テキスト項目と添付を multipart/form-data の各パートへ変換する。

    添付が無い場合も multipart で送るため、テキスト項目もファイル名無しのパートにする。
    """

    parts: list[MultipartPart] = [
        (name, (None, value)) for name, value in build_form_fields(form).items()
    ]
    parts.extend(build_file_parts(form))
    return parts


def build_file_parts(form: ComposeForm) -> list[MultipartPart]:
    return [
        (
            "attachments",
            (
                attachment.filename,
                attachment.content,
                attachment.content_type or "application/octet-stream",
            ),
        )
        for attachment in form.attachments
    ]


def _status_from_response(response: httpx.Response) -> SubmitStatus:
    try:
        body: Any = response.json()
    except ValueError:
        # 不正な JSON・不正な UTF-8 のどちらも本文なしとして扱う
        body = None

    if response.is_success:
        return SubmitStatus(type="success", message=SUCCESS_MESSAGE)

    message = body.get("error") if isinstance(body, dict) else None
    return SubmitStatus(type="error", message=str(message or FAILURE_MESSAGE))
