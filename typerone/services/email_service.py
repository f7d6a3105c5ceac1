"""
Email service.

Delivery goes through a ``Mailer``:
- ``SmtpMailer`` sends via SMTP using aiosmtplib for async support.
- ``LogMailer`` only logs the message; used when SMTP is not configured
  (local development).

The mailer instance is owned by ``AppResources`` and injected into the
request handlers — nothing here reaches for a global client.
"""

import logging
from email.message import EmailMessage
from typing import Protocol

import aiosmtplib

from typerone.core.config import Settings

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    async def send(self, to: str, subject: str, html_body: str) -> None: ...


class SmtpMailer:
    def __init__(self, settings: Settings):
        self.settings = settings

    async def send(self, to: str, subject: str, html_body: str) -> None:
        """Send an HTML email via the configured SMTP server."""
        message = EmailMessage()
        message["From"] = self.settings.SENDER_EMAIL
        message["To"] = to
        message["Subject"] = subject
        message.set_content(html_body, subtype="html")

        try:
            await aiosmtplib.send(
                message,
                hostname=self.settings.EMAIL_HOST,
                port=self.settings.EMAIL_PORT,
                username=self.settings.SENDER_EMAIL,
                password=self.settings.EMAIL_PASSWORD,
                start_tls=True,
            )
            logger.info("Email sent to %s", to)
        except Exception:
            logger.exception("Failed to send email to %s", to)
            raise


class LogMailer:
    async def send(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Email (not sent, SMTP disabled) to=%s subject=%r\n%s", to, subject, html_body)


def build_mailer(settings: Settings) -> Mailer:
    if settings.smtp_enabled:
        return SmtpMailer(settings)
    return LogMailer()


def _wrap(app_name: str, inner_html: str) -> str:
    return f"""\
    <html>
    <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
        <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
            {inner_html}
            <p style="color: #7f8c8d; font-size: 13px;">Best regards,<br>The {app_name} Team</p>
        </div>
    </body>
    </html>
    """


async def send_password_reset_email(
    mailer: Mailer,
    *,
    app_name: str,
    to_email: str,
    username: str,
    reset_link: str,
    ttl_minutes: int,
) -> None:
    """
    Send the reset link.  The link carries the raw token — the only
    place it ever leaves the server.
    """
    subject = "Password Reset Request"
    html_body = _wrap(app_name, f"""
            <h2 style="color: #2c3e50;">Hello {username},</h2>
            <p>You requested to reset your password. Use the button below to choose a new one:</p>
            <div style="text-align: center; margin: 30px 0;">
                <a href="{reset_link}"
                   style="background-color: #3498db; color: #fff; padding: 12px 30px;
                          text-decoration: none; border-radius: 5px; font-size: 16px;">
                    Reset Password
                </a>
            </div>
            <p style="color: #7f8c8d; font-size: 13px;">
                If the button doesn't work, copy and paste this link into your browser:<br>
                <a href="{reset_link}">{reset_link}</a>
            </p>
            <p>This link will expire in {ttl_minutes} minutes.</p>
            <p>If you did not request this, please ignore this email.</p>
    """)
    await mailer.send(to_email, subject, html_body)


async def send_password_changed_email(
    mailer: Mailer,
    *,
    app_name: str,
    to_email: str,
    username: str,
) -> None:
    subject = "Password Changed Successfully"
    html_body = _wrap(app_name, f"""
            <h2 style="color: #2c3e50;">Hello {username},</h2>
            <p>Your password has been successfully changed.</p>
            <p>If you did not make this change, please contact support immediately.</p>
    """)
    await mailer.send(to_email, subject, html_body)


async def send_welcome_email(
    mailer: Mailer,
    *,
    app_name: str,
    to_email: str,
    username: str,
) -> None:
    subject = f"Welcome to {app_name}!"
    html_body = _wrap(app_name, f"""
            <h2 style="color: #2c3e50;">Hello {username},</h2>
            <p>Welcome to <strong>{app_name}</strong>! Your account has been successfully created.</p>
            <p>Start improving your typing speed today!</p>
    """)
    await mailer.send(to_email, subject, html_body)
