import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from contact_relay.core.settings import settings
from contact_relay.lib.compose import build_message
from contact_relay.lib.submission import Submission

log = logging.getLogger("uvicorn.error")


class DeliveryError(Exception):
    """The outbound transport failed to accept a message."""


class SmtpTransport:
    def __init__(self, host: str, port: int, user: Optional[str], password: Optional[str], use_ssl: bool = True):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_ssl = use_ssl

    @property
    def configured(self) -> bool:
        return bool(self.user and self.password)

    def send(self, msg: EmailMessage) -> None:
        if not self.configured:
            raise DeliveryError("mail transport credentials are not configured")
        context = ssl.create_default_context()
        if self.use_ssl:
            with smtplib.SMTP_SSL(self.host, self.port, context=context) as smtp:
                smtp.login(self.user, self.password)
                smtp.send_message(msg)
        else:
            with smtplib.SMTP(self.host, self.port) as smtp:
                smtp.starttls(context=context)
                smtp.login(self.user, self.password)
                smtp.send_message(msg)


_transport: Optional[SmtpTransport] = None


def init_transport() -> SmtpTransport:
    """Build the process-wide transport from settings."""
    global _transport
    _transport = SmtpTransport(
        settings.smtp_host,
        settings.smtp_port,
        settings.email_user,
        settings.email_pass,
        use_ssl=settings.smtp_use_ssl,
    )
    if not _transport.configured:
        log.warning("[mailer] EMAIL_USER/EMAIL_PASS not set; every send will fail")
    return _transport


def get_transport() -> SmtpTransport:
    if _transport is None:
        return init_transport()
    return _transport


async def deliver(msg: EmailMessage) -> None:
    """Hand one message to the transport. Single attempt, no retry."""
    transport = get_transport()
    try:
        await run_in_threadpool(transport.send, msg)
    except DeliveryError:
        raise
    except Exception as exc:
        raise DeliveryError(str(exc)) from exc


async def relay_submission(submission: Submission) -> None:
    sender = settings.email_user
    recipient = settings.recipient
    if not sender or not recipient:
        raise DeliveryError("mail sender/recipient are not configured")
    try:
        msg = build_message(submission, sender, recipient, settings.email_from_name)
    except (ValueError, UnicodeError) as exc:
        raise DeliveryError(f"could not build message: {exc}") from exc
    await deliver(msg)
