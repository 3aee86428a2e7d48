import email.message
import email.policy

import aiosmtplib

from devcamper.config import settings
from devcamper.infrastructure.logging import get_logger

logger = get_logger(__name__)


def build_message(recipient: str, subject: str, body: str) -> email.message.EmailMessage:
    message = email.message.EmailMessage(policy=email.policy.default)
    message["To"] = recipient
    message["From"] = f"{settings.smtp_from_name} <{settings.smtp_from_email}>"
    message["Subject"] = subject
    message.set_content(body, charset="utf-8")
    return message


async def send_email(recipient: str, subject: str, body: str) -> None:
    message = build_message(recipient, subject, body)
    async with aiosmtplib.SMTP(hostname=settings.smtp_host, port=settings.smtp_port, timeout=10.0) as smtp:
        if settings.smtp_use_tls:
            await smtp.starttls()
        if settings.smtp_username and settings.smtp_password:
            await smtp.login(settings.smtp_username, settings.smtp_password)
        await smtp.send_message(message)
    logger.info("email_sent", recipient=recipient, subject=subject)
