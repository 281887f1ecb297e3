"""
SMTP delivery for OTP e-mails.

Sending happens in a FastAPI background task after the response is written,
so failures are logged rather than raised to the client.
"""

import smtplib
import ssl
from email.message import EmailMessage

from starlette.concurrency import run_in_threadpool

from adventure_api.core.config import Settings, get_settings
from adventure_api.core.logging import get_logger
from adventure_api.core.metrics import record_external_call

logger = get_logger(__name__)


def _send_sync(settings: Settings, message: EmailMessage) -> None:
    context = ssl.create_default_context()
    if settings.SMTP_PORT == 465:
        with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, context=context, timeout=settings.HTTP_TIMEOUT_SECONDS) as server:
            server.login(settings.SMTP_EMAIL, settings.SMTP_PASSWORD)
            server.send_message(message)
    else:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.HTTP_TIMEOUT_SECONDS) as server:
            server.starttls(context=context)
            server.login(settings.SMTP_EMAIL, settings.SMTP_PASSWORD)
            server.send_message(message)


async def send_otp_email(to: str, code: int, subject: str = "Verify OTP") -> bool:
    settings = get_settings()
    if not settings.SMTP_EMAIL or not settings.SMTP_PASSWORD:
        logger.warning("otp_email_skipped", reason="smtp_not_configured", to=to)
        return False

    message = EmailMessage()
    message["From"] = settings.SMTP_EMAIL
    message["To"] = to
    message["Subject"] = subject
    message.set_content(f"Hello {to}, Your OTP for verification is {code}")

    try:
        await run_in_threadpool(_send_sync, settings, message)
    except (smtplib.SMTPException, OSError) as e:
        record_external_call("smtp", "error")
        logger.error("otp_email_failed", to=to, error=str(e))
        return False

    record_external_call("smtp", "success")
    logger.info("otp_email_sent", to=to)
    return True
