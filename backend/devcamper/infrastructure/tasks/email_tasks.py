import asyncio

import aiosmtplib

from devcamper.infrastructure.logging import get_logger
from devcamper.infrastructure.mail.smtp_sender import send_email
from devcamper.infrastructure.tasks.celery_app import celery_app

logger = get_logger(__name__)

RESET_EMAIL_SUBJECT = "Password reset token"


def build_reset_email_body(reset_url: str) -> str:
    return (
        "You are receiving this email because you (or someone else) has requested the reset of a password. "
        f"Please make a PUT request to: \n\n {reset_url}"
    )


@celery_app.task(
    name="auth.send_password_reset_email",
    autoretry_for=(aiosmtplib.SMTPException, OSError),
    retry_backoff=True,
    max_retries=3,
)
def send_password_reset_email_task(recipient: str, reset_url: str) -> dict:
    asyncio.run(send_email(recipient, RESET_EMAIL_SUBJECT, build_reset_email_body(reset_url)))
    logger.info("password_reset_email_sent", recipient=recipient)
    return {"recipient": recipient, "status": "sent"}


def enqueue_password_reset_email_task(*, recipient: str, reset_url: str) -> str:
    task = send_password_reset_email_task.delay(recipient=recipient, reset_url=reset_url)
    return str(task.id)
