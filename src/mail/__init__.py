"""
Mail module.

Delivers the daily digest over SMTP.
"""

from src.mail.sender import DIGEST_SUBJECT, MailSender, SendResult, send_email

__all__ = [
    "DIGEST_SUBJECT",
    "MailSender",
    "SendResult",
    "send_email",
]
