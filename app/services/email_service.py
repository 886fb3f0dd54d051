"""
Email delivery for ledger notifications.

Mail is sent with aiosmtplib from FastAPI background tasks, after the HTTP
response.  Delivery is best-effort: an unconfigured SMTP server skips the
send with a warning and any SMTP failure is logged and reported as
``False``, never raised.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape

import aiosmtplib

from app.config import get_settings

logger = logging.getLogger(__name__)


def format_amount(amount: Decimal | float | None) -> str:
    """Render an amount with the configured currency symbol, e.g. ``₹30,000.00``."""
    symbol = get_settings().CURRENCY_SYMBOL
    return f"{symbol}{Decimal(str(amount or 0)):,.2f}"


class EmailService:
    """Async SMTP sender configured from settings."""

    def __init__(self):
        settings = get_settings()
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_address = settings.SMTP_FROM
        self.frontend_url = settings.FRONTEND_URL.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_user)

    async def send_email(self, to_email: str, subject: str, html_content: str) -> bool:
        """Send one HTML email.  Returns True on success, False otherwise."""
        if not self.is_configured:
            logger.warning("Email service not configured, skipping email to %s", to_email)
            return False

        message = MIMEMultipart("alternative")
        message["From"] = self.from_address
        message["To"] = to_email
        message["Subject"] = subject
        message.attach(MIMEText(html_content, "html", "utf-8"))

        try:
            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email to %s (%s): %s", to_email, subject, exc)
            return False

        logger.info("Sent email to %s: %s", to_email, subject)
        return True

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def render_notification(
        self, title: str, message: str, first_name: str, link: str | None = None
    ) -> str:
        button = ""
        if link:
            button = (
                f'<p><a href="{escape(self.frontend_url + link)}" '
                'style="padding: 10px 18px; background: #1a56db; color: #fff; '
                'text-decoration: none; border-radius: 4px;">Open in portal</a></p>'
            )
        return (
            f"<h2>{escape(title)}</h2>"
            f"<p>Dear {escape(first_name)},</p>"
            f"<p>{escape(message)}</p>"
            f"{button}"
        )

    def render_request_decision(
        self,
        *,
        first_name: str,
        project_code: str,
        category: str,
        requested: Decimal,
        status: str,
        approved_amount: Decimal | None,
        comments: str | None,
    ) -> str:
        """HTML summary of a budget request decision sent to the requester."""
        cell = 'style="padding: 8px; border: 1px solid #ddd;"'
        rows = [
            ("Project", escape(project_code)),
            ("Category", escape(category)),
            ("Requested", format_amount(requested)),
            ("Status", escape(status)),
        ]
        if approved_amount is not None:
            rows.append(("Approved Amount", format_amount(approved_amount)))
        table = "".join(
            f"<tr><td {cell}><strong>{label}:</strong></td><td {cell}>{value}</td></tr>"
            for label, value in rows
        )
        remark = f"<p><strong>Comments:</strong> {escape(comments)}</p>" if comments else ""
        return (
            f"<h2>Budget Request {escape(status)}</h2>"
            f"<p>Dear {escape(first_name)},</p>"
            "<p>Your budget request has been processed:</p>"
            f'<table style="border-collapse: collapse; margin: 16px 0;">{table}</table>'
            f"{remark}"
        )


email_service = EmailService()
