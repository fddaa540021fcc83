import json
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from contact_api.features.contact.schemas import (
    INVALID_INPUT_MESSAGE,
    ContactSuccessResponse,
    ErrorResponse,
    validate_submission,
)
from contact_api.features.contact.services import is_abusive, send_contact_email
from contact_api.platform.config import Settings, settings as default_settings
from contact_api.platform.mailer import EmailServiceError, SmtpMailer, build_mailer
from contact_api.platform.rate_limit import limiter
from contact_api.platform.security import PAYLOAD_TOO_LARGE_MESSAGE

logger = logging.getLogger(__name__)

SEND_FAILED_MESSAGE = "Failed to send message"

router = APIRouter(prefix="/contact")


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", default_settings)


def get_mailer(request: Request) -> SmtpMailer:
    mailer = getattr(request.app.state, "mailer", None)
    if mailer is None:
        mailer = build_mailer(get_app_settings(request))
        request.app.state.mailer = mailer
    return mailer


async def _read_capped_body(request: Request, max_bytes: int) -> bytes | None:
    """Read the request body, giving up as soon as it exceeds max_bytes.

    Returns None when the cap is passed; the rest of the stream is left unread.
    """
    received = bytearray()
    async for chunk in request.stream():
        received.extend(chunk)
        if len(received) > max_bytes:
            return None
    return bytes(received)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


def _success() -> JSONResponse:
    return JSONResponse(status_code=200, content=ContactSuccessResponse().model_dump())


@router.post(
    "",
    response_model=ContactSuccessResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(default_settings.contact_rate_limit)
async def submit_contact(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    mailer: SmtpMailer = Depends(get_mailer),
) -> JSONResponse:
    body = await _read_capped_body(request, settings.max_body_bytes)
    if body is None:
        return _error(413, PAYLOAD_TOO_LARGE_MESSAGE)

    try:
        payload = json.loads(body)
    except (ValueError, RecursionError):
        payload = None

    result = validate_submission(payload)
    if not result.ok:
        logger.debug("Rejected contact submission")
        return _error(400, result.reason or INVALID_INPUT_MESSAGE)

    submission = result.submission
    if is_abusive(submission):
        logger.info("Honeypot triggered, dropping contact submission")
        return _success()

    try:
        await send_contact_email(submission=submission, mailer=mailer, settings=settings)
    except EmailServiceError:
        logger.exception("Failed to relay contact submission")
        return _error(500, SEND_FAILED_MESSAGE)

    return _success()
