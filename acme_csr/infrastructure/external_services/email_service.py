"""Email service for notification mails"""

import asyncio
import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from ...core.config import settings

logger = logging.getLogger(__name__)


class EmailService:

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.from_email = settings.FROM_EMAIL
        self.from_name = settings.FROM_NAME
        self.frontend_url = settings.FRONTEND_URL

    async def send_email(self, to_email: str, subject: str, html_content: str, text_content: Optional[str] = None) -> bool:
        """Send an email; returns False instead of raising on SMTP errors"""
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.from_name} <{self.from_email}>"
        msg["To"] = to_email
        if text_content:
            msg.attach(MIMEText(text_content, "plain"))
        msg.attach(MIMEText(html_content, "html"))

        try:
            await self._send_smtp_email(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Error sending email to {to_email}: {e}")
            return False
        logger.info(f"Email sent to {to_email}: {subject}")
        return True

    async def _send_smtp_email(self, msg: MIMEMultipart) -> None:
        def send_sync():
            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                if self.smtp_use_tls:
                    server.starttls()
                if self.smtp_username:
                    server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

        # smtplib blocks, keep it off the event loop
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, send_sync)

    async def send_notification_email(self, to_email: str, title: str, message: str, action_path: Optional[str] = None) -> bool:
        action_url = f"{self.frontend_url}{action_path}" if action_path else self.frontend_url
        html_content = f"""
        <html>
        <body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
            <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2>{html.escape(title)}</h2>
                <p>{html.escape(message)}</p>
                <p><a href="{html.escape(action_url)}">Open {html.escape(self.from_name)}</a></p>
            </div>
        </body>
        </html>
        """
        text_content = f"{title}\n\n{message}\n\n{action_url}"
        return await self.send_email(to_email, title, html_content, text_content)
