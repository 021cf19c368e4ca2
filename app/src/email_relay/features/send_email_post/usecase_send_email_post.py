"""メール送信（Dispatcher）ユースケース。"""

from __future__ import annotations

from email_relay.clients import smtp_client
from email_relay.core.logging import log_event
from email_relay.core.models import OutgoingMail
from email_relay.core.settings import Settings
from email_relay.features.send_email_post.parser_send_email_post import (
    ParsedSendEmail,
    SendEmailRequestError,
)
from email_relay.shared.email_address import validate_recipients, validate_sender


async def send_email(
    parsed: ParsedSendEmail,
    *,
    settings: Settings,
    request_id: str | None = None,
) -> str:
    """入力を再検証して SMTP へ 1 通送信し、Message-ID を返す。

    Raises:
        SendEmailRequestError: from / to の検証に失敗した場合（送信しない）
        SmtpConfigurationError: SMTP の接続先・資格情報が未設定の場合（送信しない）
        SmtpDeliveryError: SMTP 送信が失敗した場合
    """

    mail = build_outgoing_mail(parsed)

    config = settings.smtp
    log_event(
        event="smtp_config",
        request_id=request_id,
        host=config.host,
        port=config.port,
        user="***" if config.user else None,
        secure=config.secure,
    )

    message_id = await smtp_client.send_mail(config, mail)
    log_event(
        event="smtp_sent",
        request_id=request_id,
        message_id=message_id,
        recipients=len(mail.to),
        attachments=len(mail.attachments),
    )
    return message_id


def build_outgoing_mail(parsed: ParsedSendEmail) -> OutgoingMail:
    """サーバ側で from / to を検証し、送信用メッセージを組み立てる。"""

    sender = validate_sender(parsed.from_addr)
    if not sender.ok:
        raise SendEmailRequestError(sender.reason)
    recipients = validate_recipients(parsed.to)
    if not recipients.ok:
        raise SendEmailRequestError(recipients.reason)

    return OutgoingMail(
        from_addr=parsed.from_addr.strip(),
        to=list(parsed.to),
        subject=parsed.subject,
        body_html=parsed.body_html or "",
        attachments=list(parsed.attachments),
    )
