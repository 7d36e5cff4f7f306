"""
SMTP mail sender for Todo Digest.

Sends one plaintext message per call to a single configured recipient.
Failures are reported through SendResult and never raised.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formatdate, make_msgid
from typing import Optional

from src.config import (
    SMTP_SERVER,
    SMTP_PORT,
    SMTP_ENABLE_SSL,
    SMTP_USERNAME,
    SMTP_PASSWORD,
    SMTP_TIMEOUT,
    EMAIL_FROM_ADDRESS,
    EMAIL_TO_ADDRESS,
)

logger = logging.getLogger(__name__)


DIGEST_SUBJECT = "Your Daily Todo & Weather Update"


@dataclass
class SendResult:
    """
    Result of a send attempt.

    Attributes:
        success: Whether the relay accepted the message.
        message: Status text on success.
        error: Failure description (prefixed "Failed to send email: ").
    """
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None

    def __str__(self) -> str:
        return self.message if self.success else (self.error or "Failed to send email")


class MailSender:
    """
    Sends digest emails through an SMTP relay.

    Usage:
        sender = MailSender()
        result = sender.send(DIGEST_SUBJECT, body)
        if not result.success:
            print(result.error)

    Configuration is pulled from src.config unless overridden:
    - SMTP_SERVER / SMTP_PORT: relay address
    - SMTP_ENABLE_SSL: issue STARTTLS after connecting
    - SMTP_USERNAME / SMTP_PASSWORD: login credentials (login skipped if no username)
    - EMAIL_FROM_ADDRESS / EMAIL_TO_ADDRESS: envelope addresses
    """

    def __init__(
        self,
        host: str = None,
        port: int = None,
        use_tls: bool = None,
        username: str = None,
        password: str = None,
        from_address: str = None,
        to_address: str = None,
        timeout: float = None,
    ):
        self.host = host if host is not None else SMTP_SERVER
        self.port = port if port is not None else SMTP_PORT
        self.use_tls = use_tls if use_tls is not None else SMTP_ENABLE_SSL
        self.username = username if username is not None else SMTP_USERNAME
        self.password = password if password is not None else SMTP_PASSWORD
        self.from_address = from_address if from_address is not None else EMAIL_FROM_ADDRESS
        self.to_address = to_address if to_address is not None else EMAIL_TO_ADDRESS
        self.timeout = timeout if timeout is not None else SMTP_TIMEOUT

    def _validate_config(self) -> None:
        """Validate that required configuration is present."""
        if not self.host:
            raise ValueError("SMTP_SERVER is not configured")
        if not self.from_address:
            raise ValueError("EMAIL_FROM_ADDRESS is not configured")
        if not self.to_address:
            raise ValueError("EMAIL_TO_ADDRESS is not configured")

    def build_message(self, subject: str, body: str) -> EmailMessage:
        """Build the plaintext message."""
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.from_address
        message["To"] = self.to_address
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid()
        message.set_content(body)
        return message

    def send(self, subject: str, body: str) -> SendResult:
        """
        Send one message. Makes a single attempt; no retry.

        Args:
            subject: Message subject.
            body: Plaintext body.

        Returns:
            SendResult describing success or failure.
        """
        try:
            self._validate_config()
            message = self.build_message(subject, body)

            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)

        except (smtplib.SMTPException, OSError, ValueError) as e:
            error = f"Failed to send email: {e}"
            logger.error(error)
            return SendResult(success=False, error=error)

        logger.info(f"Email sent to {self.to_address} via {self.host}:{self.port}")
        return SendResult(success=True, message="Email sent")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} host={self.host!r} port={self.port} to={self.to_address!r}>"


def send_email(subject: str, body: str) -> SendResult:
    """
    Send a message using configured settings.

    Convenience function for simple usage.
    """
    return MailSender().send(subject, body)
