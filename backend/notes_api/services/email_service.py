"""
Notes API — Email Service
==========================

What:  Renders HTML emails from Jinja2 templates and hands them to an SMTP
       relay over STARTTLS.
Why:   Account flows (verification codes, password resets) need a mail
       sender that shares the API's configuration and error types.
How:   render → build EmailMessage → aiosmtplib (STARTTLS, optional login).

Pipeline:
    ┌─────────────┐   ┌──────────────┐   ┌────────────────┐   ┌──────┐
    │  Settings   │ → │ Jinja2 render│ → │ EmailMessage   │ → │ SMTP │
    │ (SMTP_*)    │   │ (templates/) │   │ (From/To/HTML) │   │ TLS  │
    └─────────────┘   └──────────────┘   └────────────────┘   └──────┘

Every failure (missing template, refused connection, bad credentials) is
raised as EmailError. Nothing is retried; the caller decides.
"""

import logging
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import aiosmtplib
from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from notes_api.config import Settings, settings as default_settings
from notes_api.exceptions import EmailError

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Your account verification code"
PASSWORD_RESET_SUBJECT = "Your password reset token (valid for only 10 minutes)"

# Loaded once; templates ship inside the package
_templates = Environment(
    loader=PackageLoader("notes_api", "templates/email"),
    autoescape=select_autoescape(["html"]),
)


@dataclass
class User:
    """Recipient of an email."""

    name: str
    email: str

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""


class EmailService:
    """
    Sends templated emails to one user.

    Usage:
        service = EmailService(User("Jane Doe", "jane@example.com"), url)
        await service.send_verification_code()
    """

    def __init__(self, user: User, url: str, settings: Optional[Settings] = None):
        self.user = user
        self.url = url
        self.settings = settings or default_settings
        self.sender = formataddr((self.settings.smtp_from_name, self.settings.smtp_from))

    def render_template(self, template_name: str, subject: str) -> str:
        """
        Render `<template_name>.html` with the user's first name and the URL.

        Raises:
            EmailError: template missing or broken.
        """
        try:
            template = _templates.get_template(f"{template_name}.html")
            return template.render(
                first_name=self.user.first_name,
                subject=subject,
                url=self.url,
            )
        except TemplateError as e:
            logger.error("Email template '%s' failed to render: %s", template_name, str(e))
            raise EmailError(
                message=f"Email template '{template_name}' could not be rendered",
                context={"template": template_name, "error": str(e)},
            ) from e

    def build_message(self, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["Reply-To"] = self.sender
        message["To"] = formataddr((self.user.name, self.user.email))
        message["Subject"] = subject
        message.set_content(html, subtype="html")
        return message

    async def _deliver(self, message: EmailMessage) -> None:
        """One SMTP session: connect, STARTTLS, optional login, send."""
        cfg = self.settings
        await aiosmtplib.send(
            message,
            hostname=cfg.smtp_host,
            port=cfg.smtp_port,
            start_tls=True,
            username=cfg.smtp_user or None,
            password=cfg.smtp_pass if cfg.smtp_user else None,
            timeout=cfg.smtp_timeout,
        )

    async def send_email(self, template_name: str, subject: str) -> None:
        """
        Render `template_name` and send it to the user.

        Raises:
            EmailError: relay not configured, template failure, or any
            SMTP / network error.
        """
        if not self.settings.smtp_host:
            raise EmailError(message="SMTP_HOST is not configured")

        html = self.render_template(template_name, subject)
        message = self.build_message(subject, html)

        try:
            await self._deliver(message)
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(
                "Failed to send '%s' email to %s via %s:%d: %s",
                template_name,
                self.user.email,
                self.settings.smtp_host,
                self.settings.smtp_port,
                str(e),
            )
            raise EmailError(
                message="Email could not be delivered",
                context={
                    "template": template_name,
                    "recipient": self.user.email,
                    "error_type": type(e).__name__,
                },
            ) from e

        logger.info("Sent '%s' email to %s", template_name, self.user.email)

    async def send_verification_code(self) -> None:
        await self.send_email("verification_code", VERIFICATION_SUBJECT)

    async def send_password_reset_token(self) -> None:
        await self.send_email("reset_password", PASSWORD_RESET_SUBJECT)
