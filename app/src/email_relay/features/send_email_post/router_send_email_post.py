"""メール送信エンドポイント。"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from starlette.responses import JSONResponse

from email_relay.core.logging import log_error
from email_relay.core.middleware import elapsed_ms
from email_relay.core.settings import Settings
from email_relay.features.send_email_post.parser_send_email_post import (
    SendEmailRequestError,
    parse_send_email_request,
)
from email_relay.features.send_email_post.schemas_send_email_post import (
    ErrorResponse,
    SendEmailResponse,
)
from email_relay.features.send_email_post.usecase_send_email_post import send_email

router = APIRouter(prefix="/api", tags=["mail"])

_UNEXPECTED_ERROR_MESSAGE = "Unexpected error while sending email"


async def get_settings(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[attr-defined]


@router.post(
    "/send-email",
    response_model=SendEmailResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def send_email_post(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> SendEmailResponse | JSONResponse:
    request_id = getattr(request.state, "request_id", "")
    try:
        parsed = await parse_send_email_request(request)
        message_id = await send_email(parsed, settings=settings, request_id=request_id)
    except SendEmailRequestError as exc:
        return _error_response(request, 400, exc)
    except Exception as exc:  # noqa: BLE001 - SMTP 設定・送信エラーを含め 500 の JSON で返す
        return _error_response(request, 500, exc)
    return SendEmailResponse(messageId=message_id)


def _error_response(
    request: Request,
    status_code: int,
    exc: Exception,
) -> JSONResponse:
    log_error(
        path=request.url.path,
        status=status_code,
        request_id=getattr(request.state, "request_id", ""),
        latency_ms=elapsed_ms(request),
        error=exc,
    )
    error = ErrorResponse(error=str(exc) or _UNEXPECTED_ERROR_MESSAGE)
    return JSONResponse(error.model_dump(), status_code=status_code)
