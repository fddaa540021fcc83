from __future__ import annotations

import logging
from email.errors import MessageError
from email.message import EmailMessage
from email.utils import formataddr

from contact_api.features.contact.schemas import ContactSubmission
from contact_api.platform.config import Settings
from contact_api.platform.mailer import EmailServiceError, SmtpMailer

logger = logging.getLogger(__name__)

SUBJECT_PREFIX = "New portfolio contact"

_HTML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}


def escape_html(text: str) -> str:
    # Single pass over the input, so existing entities get escaped again.
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in str(text))


def html_multiline(text: str) -> str:
    return escape_html(text).replace("\n", "<br/>")


def is_abusive(submission: ContactSubmission) -> bool:
    return bool(submission.honeypot and submission.honeypot.strip())


def _header_safe(value: str) -> str:
    return " ".join(value.splitlines())


def render_text_body(submission: ContactSubmission) -> str:
    return f"Name: {submission.name}\nEmail: {submission.email}\nMessage:\n{submission.message}"


def render_html_body(submission: ContactSubmission) -> str:
    return (
        f"<h2>{SUBJECT_PREFIX}</h2>\n"
        f"<p><strong>Name:</strong> {escape_html(submission.name)}</p>\n"
        f"<p><strong>Email:</strong> {escape_html(submission.email)}</p>\n"
        f"<p><strong>Message:</strong><br/>{html_multiline(submission.message)}</p>\n"
    )


def build_contact_message(*, submission: ContactSubmission, sender: str, settings: Settings) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = f"{SUBJECT_PREFIX}: {_header_safe(submission.name)}"
    msg["From"] = formataddr((settings.smtp_from_name, sender))
    msg["To"] = settings.contact_recipient_email or ""
    msg["Reply-To"] = submission.email

    msg.set_content(render_text_body(submission))
    msg.add_alternative(render_html_body(submission), subtype="html")
    return msg


async def send_contact_email(*, submission: ContactSubmission, mailer: SmtpMailer, settings: Settings) -> None:
    try:
        msg = build_contact_message(submission=submission, sender=mailer.sender_address, settings=settings)
    except (MessageError, ValueError, TypeError) as exc:
        raise EmailServiceError(f"Could not compose contact email: {exc}") from exc

    await mailer.send(msg)
    logger.info("Contact email relayed to %s", settings.contact_recipient_email)
