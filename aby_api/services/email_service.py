"""
Email Service

Renders notification templates with Jinja2 and delivers them over SMTP.
When no SMTP host is configured messages are only logged.
"""
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import smtplib

from jinja2 import Environment, FileSystemLoader

from aby_api.core.config import settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"


class EmailService:
    """Template based email notifications"""

    def __init__(self, template_dir: Optional[Path] = None):
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
            autoescape=True
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        template = self.env.get_template(template_name)
        return template.render(**context)

    def send(self, to: str, subject: str, template_name: str, context: Dict[str, Any]) -> bool:
        """
        Render and send one message

        Returns:
            True when the message was handed to the SMTP server
        """
        body = self.render(template_name, context)

        if not settings.SMTP_HOST:
            logger.info(f"SMTP not configured; email '{subject}' to {to} not sent")
            return False

        msg = MIMEMultipart("alternative")
        msg["From"] = settings.MAIL_FROM
        msg["To"] = to
        msg["Subject"] = subject
        msg.attach(MIMEText(body, "html"))

        try:
            with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=30) as smtp_server:
                if settings.SMTP_USE_TLS:
                    smtp_server.starttls()
                if settings.SMTP_USER:
                    smtp_server.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
                smtp_server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email send error for {to}: {e}")
            return False

        logger.info(f"Email '{subject}' sent to {to}")
        return True

    def send_welcome_email(self, employee, password: str) -> bool:
        """Account details for a newly registered employee"""
        return self.send(
            to=employee.email,
            subject=f"Welcome to {settings.APP_NAME}",
            template_name="welcome.html",
            context={
                "company_name": settings.APP_NAME,
                "first_name": employee.first_name,
                "last_name": employee.last_name,
                "position": employee.position,
                "email": employee.email,
                "password": password,
                "dashboard_url": settings.DASHBOARD_URL,
            },
        )
