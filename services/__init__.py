"""
Services layer for DocQuoteWeb.

This module contains the server-side services:
- OrderSubmissionHandler: Validates orders and emails the site operator
- Notification senders: SMTP and log backends behind one interface
- RateLimiter: Per-client request budget for the public endpoints

Request Model:
    Each Flask request is handled on its own; the handler and senders keep
    no per-request state. Only the rate limiter's counters are shared.
"""

from .notification import (
    NotificationSender,
    SmtpNotificationSender,
    LogNotificationSender,
    build_notification_sender,
)
from .order_service import OrderSubmissionHandler
from .rate_limiter import RateLimiter, RateLimitDecision

__all__ = [
    "NotificationSender",
    "SmtpNotificationSender",
    "LogNotificationSender",
    "build_notification_sender",
    "OrderSubmissionHandler",
    "RateLimiter",
    "RateLimitDecision",
]
