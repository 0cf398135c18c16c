"""
Outgoing mail through an SMTP relay.

Only one kind of message is sent: the verification code mail.  Message
construction is kept separate from delivery so the text can be checked
without a relay.
"""

import logging
from email.mime.text import MIMEText

import aiosmtplib

from .config import settings


VERIFICATION_SUBJECT = "서운중학교 방송부 웹사이트 본인인증 코드"


class MailDeliveryError(Exception):
    """Raised when the SMTP relay refuses or cannot be reached."""


def build_verification_message(code: str, to_email: str) -> MIMEText:
    body = (
        "안녕하세요, 서운중학교 방송부입니다.\n"
        f"신청자님의 인증 코드는 다음과 같습니다:\n{code}"
    )
    message = MIMEText(body, "plain", "utf-8")
    message["From"] = settings.email_from
    message["To"] = to_email
    message["Subject"] = VERIFICATION_SUBJECT
    return message


async def send_verification_email(code: str, to_email: str) -> None:
    """Send the verification code to ``to_email``.

    Raises
    ------
    MailDeliveryError
        If the relay is not configured or delivery fails.
    """
    logger = logging.getLogger(__name__)
    if not settings.smtp_user or not settings.smtp_password:
        logger.error("SMTP credentials are not configured; cannot mail %s", to_email)
        raise MailDeliveryError("Mail relay is not configured")
    message = build_verification_message(code, to_email)
    try:
        await aiosmtplib.send(
            message,
            hostname=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            start_tls=True,
        )
    except aiosmtplib.SMTPException as e:
        logger.exception("Failed to send verification email to %s", to_email)
        raise MailDeliveryError(str(e)) from e
    logger.info("Verification email sent to %s", to_email)
