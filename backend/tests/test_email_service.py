"""
Notes API — Email Service Unit Tests
=====================================

What:  Tests for template rendering, message headers and SMTP delivery.
How:   aiosmtplib.send is patched with an AsyncMock; no network traffic.

What we test:
    ✅ First name and URL rendered into the HTML body
    ✅ From / Reply-To / To / Subject headers
    ✅ STARTTLS always, login only with credentials
    ✅ Relay, auth and template failures become EmailError
"""

from unittest.mock import AsyncMock, patch

import aiosmtplib
import pytest

from notes_api.config import Settings
from notes_api.exceptions import EmailError
from notes_api.services.email_service import (
    PASSWORD_RESET_SUBJECT,
    VERIFICATION_SUBJECT,
    EmailService,
    User,
)

URL = "https://example.com/verify/abc123"


@pytest.fixture
def user():
    return User(name="Jane Doe", email="jane@example.com")


@pytest.fixture
def mock_send():
    with patch(
        "notes_api.services.email_service.aiosmtplib.send", new_callable=AsyncMock
    ) as send:
        yield send


def sent_message(send):
    send.assert_awaited_once()
    return send.call_args.args[0]


class TestUser:
    def test_first_name(self, user):
        assert user.first_name == "Jane"

    def test_first_name_of_blank_name(self):
        assert User(name="   ", email="x@example.com").first_name == ""


class TestRenderTemplate:
    """Jinja2 rendering of the packaged templates."""

    def test_verification_template(self, user, smtp_settings):
        html = EmailService(user, URL, smtp_settings).render_template(
            "verification_code", VERIFICATION_SUBJECT
        )
        assert "Hi Jane," in html
        assert URL in html
        assert f"<title>{VERIFICATION_SUBJECT}</title>" in html

    def test_reset_template(self, user, smtp_settings):
        html = EmailService(user, URL, smtp_settings).render_template(
            "reset_password", PASSWORD_RESET_SUBJECT
        )
        assert "Hi Jane," in html
        assert URL in html

    def test_name_is_escaped(self, smtp_settings):
        service = EmailService(User(name="<b>Eve</b> X", email="eve@example.com"), URL, smtp_settings)
        html = service.render_template("verification_code", VERIFICATION_SUBJECT)
        assert "<b>Eve</b>" not in html
        assert "&lt;b&gt;Eve&lt;/b&gt;" in html

    def test_unknown_template(self, user, smtp_settings):
        with pytest.raises(EmailError) as exc_info:
            EmailService(user, URL, smtp_settings).render_template("missing", "x")
        assert exc_info.value.context["template"] == "missing"


class TestSendEmail:
    """Delivery through the patched SMTP client."""

    @pytest.mark.asyncio
    async def test_verification_code(self, user, smtp_settings, mock_send):
        await EmailService(user, URL, smtp_settings).send_verification_code()

        message = sent_message(mock_send)
        assert mock_send.call_args.kwargs == {
            "hostname": "smtp.example.com",
            "port": 587,
            "start_tls": True,
            "username": "mailer",
            "password": "s3cret",
            "timeout": 10,
        }
        assert message["Subject"] == VERIFICATION_SUBJECT
        assert message["From"] == "Notes API <noreply@example.com>"
        assert message["Reply-To"] == "Notes API <noreply@example.com>"
        assert message["To"] == "Jane Doe <jane@example.com>"
        assert message.get_content_type() == "text/html"
        assert URL in message.get_content()

    @pytest.mark.asyncio
    async def test_password_reset(self, user, smtp_settings, mock_send):
        await EmailService(user, URL, smtp_settings).send_password_reset_token()

        message = sent_message(mock_send)
        assert message["Subject"] == "Your password reset token (valid for only 10 minutes)"
        assert "Hi Jane," in message.get_content()

    @pytest.mark.asyncio
    async def test_no_login_without_credentials(self, user, mock_send):
        settings = Settings(smtp_host="relay.local", smtp_from="noreply@example.com", smtp_user="")
        await EmailService(user, URL, settings).send_verification_code()

        sent_message(mock_send)
        assert mock_send.call_args.kwargs["start_tls"] is True
        assert mock_send.call_args.kwargs["username"] is None
        assert mock_send.call_args.kwargs["password"] is None

    @pytest.mark.asyncio
    async def test_connection_refused(self, user, smtp_settings, mock_send):
        mock_send.side_effect = ConnectionRefusedError("refused")

        with pytest.raises(EmailError) as exc_info:
            await EmailService(user, URL, smtp_settings).send_verification_code()
        assert exc_info.value.context["error_type"] == "ConnectionRefusedError"

    @pytest.mark.asyncio
    async def test_bad_credentials(self, user, smtp_settings, mock_send):
        mock_send.side_effect = aiosmtplib.SMTPAuthenticationError(535, "bad credentials")

        with pytest.raises(EmailError) as exc_info:
            await EmailService(user, URL, smtp_settings).send_verification_code()
        assert exc_info.value.context["error_type"] == "SMTPAuthenticationError"

    @pytest.mark.asyncio
    async def test_relay_timeout(self, user, smtp_settings, mock_send):
        mock_send.side_effect = aiosmtplib.SMTPTimeoutError("timed out")

        with pytest.raises(EmailError):
            await EmailService(user, URL, smtp_settings).send_verification_code()

    @pytest.mark.asyncio
    async def test_unconfigured_relay(self, user, mock_send):
        with pytest.raises(EmailError):
            await EmailService(user, URL, Settings(smtp_host="")).send_verification_code()
        mock_send.assert_not_awaited()
