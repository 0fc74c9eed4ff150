"""
Order submission service.

Validates a submitted order, renders the operator email and hands it to
the configured notification sender.

Flow:
    1. Route extracts the multipart fields and calls submit_order()
    2. Inputs are validated and sanitized (bleach), a frozen Order is built
    3. The email body is rendered from services/templates/email/new_order.html
    4. The sender is called synchronously; any error it raises becomes
       NotificationDispatchError with a generic message
    5. SubmissionResult(success=True) is returned once the sender accepted
       the message; actual delivery is not awaited

Nothing is persisted, queued or retried: a failed order must be resubmitted.

Usage:
    handler = OrderSubmissionHandler(sender, site_email="orders@example.com")
    result = handler.submit_order(data, "essay.docx", "a@b.co",
                                  ["Rephrasing"], "Normal delivery ($5 per page)", "$10.00")
"""

from __future__ import annotations

import html
from pathlib import Path
from typing import Iterable, Optional

import bleach
from jinja2 import Environment, FileSystemLoader, select_autoescape

from core.exceptions import MissingOrderDetailsError, NoFileSelectedError, NotificationDispatchError
from logging_config import get_logger
from models.order import Attachment, Order, SubmissionResult
from modules.i18n import SUPPORTED_LANGUAGES, create_translator
from services.notification import NotificationSender


# Module logger
logger = get_logger(__name__)

# Constants
MAX_FILENAME_LENGTH = 255
MAX_FIELD_LENGTH = 200
SUCCESS_MESSAGE = "Order submitted successfully!"

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def _sanitize_text(text: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Sanitize user input text before it is placed in the operator email.

    Args:
        text: Raw input text
        max_length: Optional maximum length to enforce

    Returns:
        Text with HTML stripped and surrounding whitespace removed
    """
    if not text:
        return ""

    # Plain text out; the email template escapes on render
    text = html.unescape(bleach.clean(str(text).strip(), tags=[], strip=True)).strip()

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


class OrderSubmissionHandler:
    """
    Turns a submitted order into one operator email.

    Stateless apart from its collaborators, so one instance serves every
    request.
    """

    def __init__(
        self,
        sender: NotificationSender,
        site_email: str,
        language: str = "en",
        templates_dir: Path = TEMPLATES_DIR,
    ) -> None:
        self.sender = sender
        self.site_email = site_email
        self.language = language if language in SUPPORTED_LANGUAGES else "en"
        self._translate = create_translator(self.language)
        self._env = Environment(
            loader=FileSystemLoader(str(templates_dir)),
            autoescape=select_autoescape(["html"]),
        )

    def build_order(
        self,
        file_bytes: Optional[bytes],
        file_name: Optional[str],
        customer_email: Optional[str],
        services: Optional[Iterable[str]],
        delivery_label: Optional[str],
        total_price_display: Optional[str] = "",
    ) -> Order:
        """
        Validate inputs and build the frozen Order.

        Raises:
            NoFileSelectedError: no file content or no file name
            MissingOrderDetailsError: email, services or delivery missing
        """
        if not file_bytes or not file_name:
            raise NoFileSelectedError()

        email = _sanitize_text(customer_email, MAX_FIELD_LENGTH)
        labels = tuple(
            label for label in (_sanitize_text(s, MAX_FIELD_LENGTH) for s in (services or []))
            if label
        )
        delivery = _sanitize_text(delivery_label, MAX_FIELD_LENGTH)

        missing = [
            name for name, value in (
                ("userEmail", email),
                ("services", labels),
                ("deliveryTime", delivery),
            )
            if not value
        ]
        if missing:
            raise MissingOrderDetailsError(missing=missing)

        return Order(
            file_bytes=file_bytes,
            file_name=_sanitize_text(file_name, MAX_FILENAME_LENGTH) or "document",
            customer_email=email,
            services=labels,
            delivery_label=delivery,
            total_price_display=_sanitize_text(total_price_display, MAX_FIELD_LENGTH),
        )

    def render_body(self, order: Order) -> str:
        template = self._env.get_template("email/new_order.html")
        return template.render(
            order=order,
            _=self._translate,
            direction=SUPPORTED_LANGUAGES[self.language]["direction"],
        )

    def dispatch(self, order: Order) -> None:
        """
        Hand the order email to the sender.

        Raises:
            NotificationDispatchError: the sender raised anything at all
        """
        subject = self._translate("email.subject", file_name=order.file_name)
        html_body = self.render_body(order)
        attachment = Attachment(filename=order.file_name, content=order.file_bytes)

        logger.info(f"Dispatching order email for {order.file_name} from {order.customer_email}")
        try:
            self.sender.send(self.site_email, subject, html_body, attachment)
        except Exception as exc:
            # Sender internals never reach the customer
            logger.error(f"Order email dispatch failed for {order.file_name}: {exc}", exc_info=True)
            raise NotificationDispatchError(file_name=order.file_name, cause=exc) from exc

    def submit_order(
        self,
        file_bytes: Optional[bytes],
        file_name: Optional[str],
        customer_email: Optional[str],
        services: Optional[Iterable[str]],
        delivery_label: Optional[str],
        total_price_display: Optional[str] = "",
    ) -> SubmissionResult:
        """Validate, build and dispatch one order."""
        order = self.build_order(
            file_bytes, file_name, customer_email, services, delivery_label, total_price_display
        )
        logger.debug(f"Order built: {order.summary()}")

        self.dispatch(order)

        logger.info(f"Order accepted: {order.file_name} ({order.total_price_display})")
        return SubmissionResult(success=True, message=SUCCESS_MESSAGE)
