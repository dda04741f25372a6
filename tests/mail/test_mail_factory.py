"""
Tests for mail transport selection and the email template.
"""

import pytest

from qanda.config import Settings
from qanda.mail import get_mail_transport, make_nice_email
from qanda.mail.console import ConsoleMailTransport
from qanda.mail.resend import ResendMailTransport
from qanda.mail.smtp import SmtpMailTransport


def test_console_is_default():
    assert isinstance(get_mail_transport(Settings()), ConsoleMailTransport)


def test_smtp_transport_from_settings():
    config = Settings(
        mail_provider="smtp",
        smtp_host="smtp.example.com",
        smtp_port=465,
        smtp_username="mailer",
        smtp_password="pw",
        smtp_starttls=False,
    )

    transport = get_mail_transport(config)

    assert isinstance(transport, SmtpMailTransport)
    assert transport.host == "smtp.example.com"
    assert transport.port == 465
    assert transport.username == "mailer"
    assert transport.starttls is False


def test_smtp_requires_host():
    with pytest.raises(ValueError, match="QANDA_SMTP_HOST"):
        get_mail_transport(Settings(mail_provider="smtp", smtp_host=""))


def test_resend_transport_from_settings():
    transport = get_mail_transport(Settings(mail_provider="RESEND", resend_api_key="re_123"))

    assert isinstance(transport, ResendMailTransport)
    assert transport.api_key == "re_123"


def test_resend_requires_api_key():
    with pytest.raises(ValueError, match="QANDA_RESEND_API_KEY"):
        get_mail_transport(Settings(mail_provider="resend"))


def test_unknown_provider():
    with pytest.raises(ValueError, match="Unsupported mail provider: pigeon"):
        get_mail_transport(Settings(mail_provider="pigeon"))


def test_make_nice_email_wraps_body():
    html = make_nice_email('<a href="http://x/reset?resetToken=abc">Click Here to Reset</a>')

    assert html.startswith('<div class="email"')
    assert "Hello There!" in html
    assert '<a href="http://x/reset?resetToken=abc">Click Here to Reset</a>' in html
    assert html.endswith("</div>")
