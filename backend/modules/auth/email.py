"""
Transactional email delivery.

Sends verification and password-reset links over SMTP. When SMTP is not
configured (local development) the message is logged instead of sent.
"""

import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional
from urllib.parse import urlencode

from .exceptions import DeliveryFailureError

logger = logging.getLogger(__name__)


def redact_email(email: str) -> str:
    """Redact an email address for logging to avoid PII leakage."""
    if "@" not in email:
        return "redacted"
    local, domain = email.split("@", 1)
    return f"{local[:2]}***@{domain}"


class SmtpEmailSender:
    """
    Email delivery collaborator.

    Supports:
    - SMTP with STARTTLS or implicit TLS
    - Email verification and password reset messages
    - Fallback to logging when not configured (dev mode)

    Any failure to send raises DeliveryFailureError; there is no retry.
    """

    def __init__(
        self,
        *,
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
        smtp_use_tls: bool = True,
        from_email: Optional[str] = None,
        from_name: str = "Teamdesk",
        public_base_url: str = "http://localhost:8000",
        frontend_url: str = "http://localhost:5173",
    ) -> None:
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_password = smtp_password
        self.smtp_use_tls = smtp_use_tls
        self.from_email = from_email or smtp_user
        self.from_name = from_name
        self.public_base_url = public_base_url.rstrip("/")
        self.frontend_url = frontend_url.rstrip("/")

    @property
    def is_configured(self) -> bool:
        """Check if email sending is properly configured."""
        return bool(self.smtp_host and self.from_email)

    def verification_link(self, token: str) -> str:
        return f"{self.public_base_url}/api/auth/verify-email?{urlencode({'token': token})}"

    def reset_link(self, token: str) -> str:
        return f"{self.frontend_url}/reset-password?{urlencode({'token': token})}"

    def send_verification_email(self, to_email: str, token: str) -> None:
        """Send the email-verification link."""
        link = self.verification_link(token)
        self._send(
            to_email,
            subject="Verify your Teamdesk email address",
            text_body=(
                "Welcome to Teamdesk!\n\n"
                f"Confirm your email address by opening this link:\n{link}\n\n"
                "The link expires in 24 hours. If you did not create an account, "
                "you can ignore this message."
            ),
            html_body=(
                "<p>Welcome to Teamdesk!</p>"
                f'<p><a href="{link}">Confirm your email address</a></p>'
                "<p>The link expires in 24 hours. If you did not create an account, "
                "you can ignore this message.</p>"
            ),
        )

    def send_password_reset_email(self, to_email: str, token: str) -> None:
        """Send the password-reset link."""
        link = self.reset_link(token)
        self._send(
            to_email,
            subject="Reset your Teamdesk password",
            text_body=(
                "We received a request to reset your Teamdesk password.\n\n"
                f"Choose a new password here:\n{link}\n\n"
                "The link expires in 24 hours and can be used once. If you did not "
                "ask for a reset, you can ignore this message."
            ),
            html_body=(
                "<p>We received a request to reset your Teamdesk password.</p>"
                f'<p><a href="{link}">Choose a new password</a></p>'
                "<p>The link expires in 24 hours and can be used once. If you did not "
                "ask for a reset, you can ignore this message.</p>"
            ),
        )

    def _send(self, to_email: str, subject: str, text_body: str, html_body: str) -> None:
        if not self.is_configured:
            logger.info(
                f"Email dev mode, not sending '{subject}' to {redact_email(to_email)}"
            )
            logger.debug(text_body)
            return

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        context = ssl.create_default_context()
        try:
            if self.smtp_use_tls:
                with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=30) as server:
                    server.starttls(context=context)
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.from_email, to_email, msg.as_string())
            else:
                with smtplib.SMTP_SSL(
                    self.smtp_host, self.smtp_port, context=context, timeout=30
                ) as server:
                    if self.smtp_user and self.smtp_password:
                        server.login(self.smtp_user, self.smtp_password)
                    server.sendmail(self.from_email, to_email, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                f"Failed to send '{subject}' to {redact_email(to_email)}: "
                f"{type(e).__name__}: {e}"
            )
            raise DeliveryFailureError() from e

        logger.info(f"Email '{subject}' sent to {redact_email(to_email)}")
