from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage

from contact_api.platform.config import Settings

logger = logging.getLogger(__name__)


class EmailServiceError(RuntimeError):
    pass


class MailConfigurationError(EmailServiceError):
    pass


_REQUIRED_SETTINGS = ("smtp_host", "smtp_username", "smtp_password", "contact_recipient_email")


@dataclass(frozen=True)
class SmtpConfig:
    host: str
    port: int
    username: str
    password: str
    use_ssl: bool = True
    timeout_seconds: float = 10.0

    @classmethod
    def from_settings(cls, settings: Settings) -> SmtpConfig:
        missing = [
            name for name in _REQUIRED_SETTINGS
            if getattr(settings, name) is None or str(getattr(settings, name)).strip() == ""
        ]
        if missing:
            raise MailConfigurationError(
                "SMTP settings are not fully configured: missing " + ", ".join(name.upper() for name in missing)
            )

        return cls(
            host=str(settings.smtp_host),
            port=int(settings.smtp_port),
            username=str(settings.smtp_username),
            password=str(settings.smtp_password),
            use_ssl=settings.smtp_use_ssl,
            timeout_seconds=float(settings.smtp_timeout_seconds),
        )


class SmtpMailer:
    """Hands composed messages to an SMTP server.

    The config is fixed at construction; one connection is opened per message.
    """

    def __init__(self, config: SmtpConfig) -> None:
        self._config = config

    @property
    def config(self) -> SmtpConfig:
        return self._config

    @property
    def sender_address(self) -> str:
        return self._config.username

    def _send_blocking(self, msg: EmailMessage) -> None:
        cfg = self._config
        context = ssl.create_default_context()

        if cfg.use_ssl:
            with smtplib.SMTP_SSL(cfg.host, cfg.port, context=context, timeout=cfg.timeout_seconds) as client:
                client.login(cfg.username, cfg.password)
                client.send_message(msg)
            return

        with smtplib.SMTP(cfg.host, cfg.port, timeout=cfg.timeout_seconds) as client:
            client.ehlo()
            client.starttls(context=context)
            client.login(cfg.username, cfg.password)
            client.send_message(msg)

    async def send(self, msg: EmailMessage) -> None:
        try:
            await asyncio.to_thread(self._send_blocking, msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise EmailServiceError(f"SMTP delivery via {self._config.host}:{self._config.port} failed: {exc}") from exc

        logger.debug("Handed message to %s:%d", self._config.host, self._config.port)


def build_mailer(settings: Settings) -> SmtpMailer:
    return SmtpMailer(SmtpConfig.from_settings(settings))
