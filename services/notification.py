"""
Notification senders for order emails.

A sender is anything with a ``send(to_address, subject, html_body,
attachment)`` method that raises DeliveryError when the message cannot be
handed over. Two backends ship with the application:

    smtp - SmtpNotificationSender, real mail through an SMTP relay
    log  - LogNotificationSender, logs the message and keeps it in memory

The backend is chosen with NOTIFICATION_BACKEND (see config.py) through
build_notification_sender().

Usage:
    sender = build_notification_sender(app.config)
    sender.send("orders@example.com", "New order: essay.docx", html, attachment)
"""

from __future__ import annotations

import mimetypes
import smtplib
import threading
from email.message import EmailMessage
from typing import List, Mapping, Protocol, runtime_checkable

from core.exceptions import DeliveryError
from logging_config import get_logger
from models.order import Attachment, NotificationPayload


# Module logger
logger = get_logger(__name__)


@runtime_checkable
class NotificationSender(Protocol):
    """Capability interface for delivering one order email."""

    backend_name: str

    def send(self, to_address: str, subject: str, html_body: str,
             attachment: Attachment) -> None:
        ...


class SmtpNotificationSender:
    """
    Sends order emails through an SMTP relay.

    One connection per message; nothing is pooled or retried. A failed
    send raises DeliveryError and the caller decides what to tell the
    customer.
    """

    backend_name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        sender_address: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        if not sender_address:
            raise ValueError("EMAIL_USER (sender address) is required for SMTP notifications")
        self.host = host
        self.port = port
        self.sender_address = sender_address
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, to_address: str, subject: str, html_body: str,
                      attachment: Attachment) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self.sender_address
        message["To"] = to_address
        message.set_content("This order notification requires an HTML capable mail client.")
        message.add_alternative(html_body, subtype="html")

        content_type, _ = mimetypes.guess_type(attachment.filename)
        maintype, subtype = (content_type or "application/octet-stream").split("/", 1)
        message.add_attachment(
            attachment.content,
            maintype=maintype,
            subtype=subtype,
            filename=attachment.filename,
        )
        return message

    def send(self, to_address: str, subject: str, html_body: str,
             attachment: Attachment) -> None:
        message = self.build_message(to_address, subject, html_body, attachment)
        logger.info(f"Sending order email for {attachment.filename} to {to_address} via {self.host}")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError("SMTP delivery failed", backend=self.backend_name, cause=exc) from exc

        logger.info(f"Order email for {attachment.filename} accepted by {self.host}")


class LogNotificationSender:
    """
    Development/testing backend: logs the email and keeps it in memory.

    ``sent`` holds every payload in arrival order; access is locked
    because Flask may serve requests from several threads.
    """

    backend_name = "log"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sent: List[NotificationPayload] = []

    @property
    def sent(self) -> List[NotificationPayload]:
        with self._lock:
            return list(self._sent)

    def send(self, to_address: str, subject: str, html_body: str,
             attachment: Attachment) -> None:
        payload = NotificationPayload(
            to_address=to_address,
            subject=subject,
            html_body=html_body,
            attachment=attachment,
        )
        with self._lock:
            self._sent.append(payload)
        logger.info(
            f"[log backend] Email to {to_address}: {subject} "
            f"(attachment {attachment.filename}, {len(attachment.content)} bytes)"
        )

    def clear(self) -> None:
        with self._lock:
            self._sent.clear()


def build_notification_sender(config: Mapping[str, object]) -> NotificationSender:
    """
    Create the sender named by ``NOTIFICATION_BACKEND``.

    Raises:
        ValueError: unknown backend, or SMTP selected without a sender address
    """
    backend = str(config.get("NOTIFICATION_BACKEND", "smtp")).lower()

    if backend == "log":
        return LogNotificationSender()

    if backend == "smtp":
        return SmtpNotificationSender(
            host=str(config.get("SMTP_HOST", "smtp.gmail.com")),
            port=int(config.get("SMTP_PORT", 587)),
            sender_address=str(config.get("EMAIL_USER", "")),
            username=str(config.get("EMAIL_USER", "")),
            password=str(config.get("EMAIL_PASS", "")),
            use_tls=bool(config.get("SMTP_USE_TLS", True)),
            timeout=float(config.get("SMTP_TIMEOUT", 30.0)),
        )

    raise ValueError(f"Unknown NOTIFICATION_BACKEND: {backend!r} (expected 'smtp' or 'log')")


def describe_credentials(config: Mapping[str, object]) -> str:
    """One-line startup summary of which email settings are present (never values)."""
    flags = {key: bool(config.get(key)) for key in ("EMAIL_USER", "EMAIL_PASS", "SITE_EMAIL")}
    return ", ".join(f"{key} loaded: {present}" for key, present in flags.items())
