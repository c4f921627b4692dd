"""
Notes API — Mailer CLI
=======================

Command-line entry point for the email service, installed as `notes-mailer`.

Usage:
    notes-mailer verification-code "Jane Doe" jane@example.com https://example.com/verify/abc
    notes-mailer password-reset "Jane Doe" jane@example.com https://example.com/reset/abc

SMTP settings come from the same environment / .env as the API
(SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM). Exit code is 0 when
the relay accepted the message, 1 otherwise.
"""

import asyncio
import logging
import sys

import typer

from notes_api.config import settings
from notes_api.exceptions import EmailError
from notes_api.services.email_service import EmailService, User


app = typer.Typer(
    name="notes-mailer",
    help="Send account emails through the configured SMTP relay.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log SMTP progress"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )


def _send(kind: str, service: EmailService) -> None:
    try:
        settings.validate_required_for_production()
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    try:
        if kind == "verification":
            asyncio.run(service.send_verification_code())
        else:
            asyncio.run(service.send_password_reset_token())
    except EmailError as e:
        typer.secho(f"Error: {e.message}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"Email sent to {service.user.email}", fg=typer.colors.GREEN)


@app.command("verification-code")
def verification_code(
    name: str = typer.Argument(..., help="Recipient's full name"),
    email: str = typer.Argument(..., help="Recipient's email address"),
    url: str = typer.Argument(..., help="Verification link"),
) -> None:
    """Send an account verification email."""
    _send("verification", EmailService(User(name=name, email=email), url, settings))


@app.command("password-reset")
def password_reset(
    name: str = typer.Argument(..., help="Recipient's full name"),
    email: str = typer.Argument(..., help="Recipient's email address"),
    url: str = typer.Argument(..., help="Password reset link"),
) -> None:
    """Send a password reset email (token valid for 10 minutes)."""
    _send("reset", EmailService(User(name=name, email=email), url, settings))


if __name__ == "__main__":
    app()
