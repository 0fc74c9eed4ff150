"""
Core module for DocQuoteWeb.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    QuoteOrderError,
    NoFileSelectedError,
    UnsupportedFileTypeError,
    ExtractionError,
    MissingOrderDetailsError,
    InvalidEmailFormatError,
    DeliveryError,
    NotificationDispatchError,
    InvalidTransitionError,
    OrderClientError,
)

__all__ = [
    "QuoteOrderError",
    "NoFileSelectedError",
    "UnsupportedFileTypeError",
    "ExtractionError",
    "MissingOrderDetailsError",
    "InvalidEmailFormatError",
    "DeliveryError",
    "NotificationDispatchError",
    "InvalidTransitionError",
    "OrderClientError",
]
