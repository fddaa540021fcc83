import smtplib
from email.message import EmailMessage
from unittest.mock import patch

import pytest

from contact_api.platform.mailer import (
    EmailServiceError,
    MailConfigurationError,
    SmtpConfig,
    SmtpMailer,
    build_mailer,
)
from tests.fakes import make_settings


def _message() -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = "hello"
    msg.set_content("body")
    return msg


def test_config_from_settings():
    config = SmtpConfig.from_settings(make_settings(smtp_port=587, smtp_use_ssl=False))

    assert config.host == "smtp.example.com"
    assert config.port == 587
    assert config.username == "mailbox@example.com"
    assert config.use_ssl is False


@pytest.mark.parametrize("missing", ["smtp_host", "smtp_username", "smtp_password", "contact_recipient_email"])
def test_missing_settings_fail_fast(missing):
    settings = make_settings(**{missing: None})

    with pytest.raises(MailConfigurationError) as excinfo:
        build_mailer(settings)

    assert missing.upper() in str(excinfo.value)


def test_blank_setting_counts_as_missing():
    with pytest.raises(MailConfigurationError):
        SmtpConfig.from_settings(make_settings(smtp_password="   "))


def test_sender_address_is_the_authenticated_mailbox():
    mailer = build_mailer(make_settings())

    assert mailer.sender_address == "mailbox@example.com"


@pytest.mark.asyncio
async def test_send_over_implicit_tls():
    mailer = SmtpMailer(SmtpConfig(host="smtp.example.com", port=465, username="u", password="p"))
    msg = _message()

    with patch("contact_api.platform.mailer.smtplib.SMTP_SSL") as smtp_ssl:
        client = smtp_ssl.return_value.__enter__.return_value
        await mailer.send(msg)

    assert smtp_ssl.call_args.args == ("smtp.example.com", 465)
    client.login.assert_called_once_with("u", "p")
    client.send_message.assert_called_once_with(msg)


@pytest.mark.asyncio
async def test_send_with_starttls():
    mailer = SmtpMailer(SmtpConfig(host="smtp.example.com", port=587, username="u", password="p", use_ssl=False))
    msg = _message()

    with patch("contact_api.platform.mailer.smtplib.SMTP") as smtp:
        client = smtp.return_value.__enter__.return_value
        await mailer.send(msg)

    client.starttls.assert_called_once()
    client.login.assert_called_once_with("u", "p")
    client.send_message.assert_called_once_with(msg)


@pytest.mark.asyncio
async def test_smtp_errors_are_wrapped_once():
    mailer = SmtpMailer(SmtpConfig(host="smtp.example.com", port=465, username="u", password="p"))

    with patch("contact_api.platform.mailer.smtplib.SMTP_SSL") as smtp_ssl:
        client = smtp_ssl.return_value.__enter__.return_value
        client.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")

        with pytest.raises(EmailServiceError) as excinfo:
            await mailer.send(_message())

    assert isinstance(excinfo.value.__cause__, smtplib.SMTPAuthenticationError)
    assert smtp_ssl.call_count == 1
    client.send_message.assert_not_called()


@pytest.mark.asyncio
async def test_network_errors_are_wrapped():
    mailer = SmtpMailer(SmtpConfig(host="smtp.example.com", port=465, username="u", password="p"))

    with patch("contact_api.platform.mailer.smtplib.SMTP_SSL", side_effect=ConnectionRefusedError("refused")):
        with pytest.raises(EmailServiceError) as excinfo:
            await mailer.send(_message())

    assert isinstance(excinfo.value.__cause__, ConnectionRefusedError)
