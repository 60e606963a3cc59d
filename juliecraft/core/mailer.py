# juliecraft/core/mailer.py

import logging
import smtplib
from email.message import EmailMessage

from juliecraft.core import config

logger = logging.getLogger(__name__)


def send_email(to: str, subject: str, body: str) -> bool:
    """Sends a plain-text email. Returns False when mail is not configured or fails."""
    if not config.SMTP_HOST:
        logger.warning("SMTP_HOST not set; email to %s not sent", to)
        return False

    msg = EmailMessage()
    msg["From"] = config.MAIL_FROM
    msg["To"] = to
    msg["Subject"] = subject
    msg.set_content(body)

    try:
        with smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=10) as smtp:
            smtp.starttls()
            if config.SMTP_USER:
                smtp.login(config.SMTP_USER, config.SMTP_PASSWORD or "")
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError):
        logger.exception("Failed to send email to %s", to)
        return False

    return True


def send_password_reset_email(email: str, name: str, code: str) -> bool:
    body = (
        f"Hi {name},\n\n"
        f"Your JulieCraft password reset code is {code}.\n"
        f"It expires in {config.RESET_CODE_EXPIRE_MINUTES} minutes.\n\n"
        "If you did not ask for a reset you can ignore this email.\n"
    )
    return send_email(email, "Your JulieCraft password reset code", body)
