"""
Order data models.

These models represent a customer's quote request as it flows through the
application: analyze -> select services/delivery -> submit.

Only the enums and AnalysisResult outlive a single request on the client
side; Order and NotificationPayload are built at submission time and
dropped when the request ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from math import ceil
from typing import Dict, Any, List, Tuple


class Service(Enum):
    """
    Document-processing operation a customer can order.

    Declaration order is the canonical display order (Rephrasing first).
    """

    REPHRASING = "rephrasing"
    TRANSLATION = "translation"

    @classmethod
    def ordered(cls, services) -> List["Service"]:
        """Return ``services`` in canonical order, without duplicates."""
        chosen = set(services)
        return [service for service in cls if service in chosen]


class DeliverySpeed(Enum):
    """Urgency tier affecting the per-page price."""

    NORMAL = "normal"
    FAST = "fast"


@dataclass(frozen=True)
class AnalysisResult:
    """
    Word and page count of one uploaded document.

    Produced once per file; the client discards it whenever a new file is
    chosen.
    """

    word_count: int
    """Number of words after punctuation is stripped."""

    page_count: int
    """ceil(word_count / words_per_page)."""

    @classmethod
    def from_word_count(cls, word_count: int, words_per_page: int = 450) -> "AnalysisResult":
        if word_count < 0:
            raise ValueError(f"word_count must be >= 0, got {word_count}")
        if words_per_page <= 0:
            raise ValueError(f"words_per_page must be > 0, got {words_per_page}")
        return cls(word_count=word_count, page_count=ceil(word_count / words_per_page))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON body returned by /analyze-document."""
        return {"wordCount": self.word_count, "pageCount": self.page_count}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisResult":
        """Create from a /analyze-document response body (both keys required)."""
        return cls(
            word_count=int(data["wordCount"]),
            page_count=int(data["pageCount"]),
        )


@dataclass(frozen=True)
class Order:
    """
    A finalized order, ready to be forwarded to the site operator.

    Frozen: built once from the submitted form, then only read.
    """

    file_bytes: bytes
    file_name: str
    customer_email: str
    services: Tuple[str, ...]
    """Display labels of the selected services, in canonical order."""

    delivery_label: str
    total_price_display: str
    """Formatted total, e.g. "$12.50"."""

    @property
    def size_kb(self) -> float:
        return round(len(self.file_bytes) / 1024, 2)

    def summary(self) -> Dict[str, Any]:
        """Loggable view of the order (no file content)."""
        return {
            "file_name": self.file_name,
            "size_kb": self.size_kb,
            "customer_email": self.customer_email,
            "services": list(self.services),
            "delivery": self.delivery_label,
            "total": self.total_price_display,
        }


@dataclass(frozen=True)
class Attachment:
    """A file attached to an outgoing notification."""

    filename: str
    content: bytes = field(repr=False)


@dataclass(frozen=True)
class NotificationPayload:
    """Everything a notification sender needs to deliver one order email."""

    to_address: str
    subject: str
    html_body: str = field(repr=False)
    attachment: Attachment


@dataclass(frozen=True)
class SubmissionResult:
    """Acknowledgement returned to the caller of an order submission."""

    success: bool
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}
