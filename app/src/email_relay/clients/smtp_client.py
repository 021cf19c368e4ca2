"""aiosmtplib を使った SMTP 送信クライアント。"""

from __future__ import annotations

import mimetypes
import re
from email.message import EmailMessage
from email.utils import formatdate, make_msgid

import aiosmtplib

from email_relay.core.models import MailAttachment, OutgoingMail
from email_relay.core.settings import SmtpSettings

_FALLBACK_CONTENT_TYPE = "application/octet-stream"
_LINE_BREAKS = re.compile(r"[\r\n]+")
_MIME_TYPE = re.compile(r"[\w!#$&^.+-]+/[\w!#$&^.+-]+", re.ASCII)


class SmtpConfigurationError(RuntimeError):
    """SMTP の接続先・資格情報が設定されていないことを表す例外。"""


class SmtpDeliveryError(RuntimeError):
    """SMTP 送信失敗（接続・認証・拒否など）を表す例外。"""


async def send_mail(config: SmtpSettings, mail: OutgoingMail) -> str:
    """メールを 1 通送信し、付与した Message-ID を返す。

    接続は呼び出しごとに張り直す。失敗時のリトライは行わない。
    """

    if not config.is_configured:
        raise SmtpConfigurationError("SMTP credentials are not configured on the server")

    message = build_message(mail)
    try:
        await aiosmtplib.send(
            message,
            hostname=config.host,
            port=config.port,
            username=config.user,
            password=config.password,
            use_tls=config.secure,
            timeout=config.timeout,
        )
    except (aiosmtplib.SMTPException, OSError) as exc:
        raise SmtpDeliveryError(_error_text(exc)) from exc

    return str(message["Message-ID"])


def build_message(mail: OutgoingMail) -> EmailMessage:
    """OutgoingMail から HTML 本文 + 添付の MIME メッセージを組み立てる。"""

    message = EmailMessage()
    message["From"] = mail.from_addr
    message["To"] = ", ".join(mail.to)
    message["Subject"] = _single_line(mail.subject)
    message["Date"] = formatdate(localtime=True)
    message["Message-ID"] = make_msgid(domain=_sender_domain(mail.from_addr))
    message.set_content(mail.body_html or "", subtype="html")

    for attachment in mail.attachments:
        maintype, subtype = _resolve_content_type(attachment)
        message.add_attachment(
            attachment.content,
            maintype=maintype,
            subtype=subtype,
            filename=_single_line(attachment.filename),
        )
    return message


def _single_line(value: str) -> str:
    """ヘッダ値に入れられない改行を空白へ置き換える。"""

    return _LINE_BREAKS.sub(" ", value)


def _resolve_content_type(attachment: MailAttachment) -> tuple[str, str]:
    content_type = attachment.content_type or mimetypes.guess_type(attachment.filename)[0]
    # パラメータ（; charset=...）は add_attachment に渡せないため落とす
    essence = (content_type or "").split(";", 1)[0].strip()
    if not _MIME_TYPE.fullmatch(essence):
        essence = _FALLBACK_CONTENT_TYPE
    maintype, subtype = essence.split("/", 1)
    return maintype, subtype


def _sender_domain(from_addr: str) -> str | None:
    _, _, domain = from_addr.rpartition("@")
    return domain or None


def _error_text(exc: BaseException) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__
