"""
Data models for DocQuoteWeb.

This module contains:
- Service / DeliverySpeed: the closed set of orderable options
- AnalysisResult: word and page count of an uploaded document
- Order: frozen snapshot of a submitted order
- Attachment / NotificationPayload: what is handed to the email sender
- SubmissionResult: acknowledgement returned to the caller
"""

from .order import (
    Service,
    DeliverySpeed,
    AnalysisResult,
    Order,
    Attachment,
    NotificationPayload,
    SubmissionResult,
)

__all__ = [
    "Service",
    "DeliverySpeed",
    "AnalysisResult",
    "Order",
    "Attachment",
    "NotificationPayload",
    "SubmissionResult",
]
