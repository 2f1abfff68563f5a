# core/notifications.py
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional

from core.config import settings
from core.logging_config import logger


def smtp_configured() -> bool:
    return all([settings.SMTP_HOST, settings.SMTP_PORT, settings.SMTP_USER, settings.SMTP_PASS])


# -----------------------------------------------------
# 📧 Send email (SMTP)
# -----------------------------------------------------
def send_email(
    subject: str,
    body: str,
    recipients: Optional[List[str]] = None,
    html_body: Optional[str] = None,
) -> bool:
    """
    Send email via SMTP.

    Returns False when there is nothing to send or SMTP is not
    configured; raises if the SMTP exchange itself fails.
    """
    recipient_list = [r for r in (recipients or []) if r]

    if not recipient_list:
        logger.warning("No recipients specified — skipping email.")
        return False

    if not smtp_configured():
        logger.debug("Email credentials missing — skipping email.")
        return False

    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_USER
    msg["To"] = ", ".join(recipient_list)
    msg["Subject"] = subject

    msg.attach(MIMEText(body, "plain"))
    if html_body:
        msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            server.login(settings.SMTP_USER, settings.SMTP_PASS)
            server.send_message(msg)
    except Exception as e:
        logger.error(f"Email failed: {e}")
        raise

    logger.info(f"Email sent to {', '.join(recipient_list)}")
    return True
