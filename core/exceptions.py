"""
Custom exceptions for DocQuoteWeb.

Exception Hierarchy:
    QuoteOrderError (base)
    ├── NoFileSelectedError        - analysis/submission without a file
    ├── UnsupportedFileTypeError   - extension not accepted by the analyzer
    ├── ExtractionError            - document could not be parsed
    ├── MissingOrderDetailsError   - required order fields absent
    ├── InvalidEmailFormatError    - email rejected before any request is made
    ├── DeliveryError              - raised by a notification sender
    ├── NotificationDispatchError  - order email could not be dispatched
    ├── InvalidTransitionError     - quote workflow used out of order
    └── OrderClientError           - analysis/submission request failed (client side)

Usage:
    Every error is terminal for the current attempt. Routes turn these into
    JSON bodies using ``status_code`` and ``message``; ``details`` is for
    logs only and never reaches the customer.
"""

from typing import Optional, Dict, Any


class QuoteOrderError(Exception):
    """
    Base exception for all DocQuoteWeb errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message (safe to show the customer)
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class NoFileSelectedError(QuoteOrderError):
    """No document was attached to an analysis or submission request."""

    status_code = 400

    def __init__(self, message: str = "Error: No File Selected!"):
        super().__init__(message)


class UnsupportedFileTypeError(QuoteOrderError):
    """The uploaded file has an extension the analyzer cannot read."""

    status_code = 415

    def __init__(self, filename: str, allowed: Optional[set] = None):
        allowed_list = sorted(allowed or [])
        message = "Unsupported file type."
        if allowed_list:
            message = f"Unsupported file type. Allowed: {', '.join(allowed_list)}."
        super().__init__(message, {"filename": filename, "allowed": allowed_list})
        self.filename = filename


class ExtractionError(QuoteOrderError):
    """
    The document analyzer failed to read text from the file.

    Typical causes:
    - Corrupt or password-protected document
    - File content does not match its extension
    """

    status_code = 422

    def __init__(self, message: str = "Failed to analyze document.", filename: str = "",
                 cause: Optional[BaseException] = None):
        details: Dict[str, Any] = {"filename": filename}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message, details)
        self.filename = filename


class MissingOrderDetailsError(QuoteOrderError):
    """Required order fields (email, services, delivery) are absent or empty."""

    status_code = 400

    def __init__(self, message: str = "Missing order details.", missing: Optional[list] = None):
        super().__init__(message, {"missing": missing or []})
        self.missing = missing or []


class InvalidEmailFormatError(QuoteOrderError):
    """Customer email does not look like local-part@domain.tld."""

    status_code = 400

    def __init__(self, email: str, message: str = "Please enter a valid email address."):
        super().__init__(message, {"email": email})
        self.email = email


class DeliveryError(QuoteOrderError):
    """A notification sender could not hand the message over for delivery."""

    def __init__(self, message: str, backend: str = "", cause: Optional[BaseException] = None):
        details: Dict[str, Any] = {"backend": backend}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message, details)
        self.backend = backend


class NotificationDispatchError(QuoteOrderError):
    """
    The order email could not be dispatched.

    The message is deliberately generic; transport detail stays in
    ``details`` and in the server log. The order is not queued: the
    customer must resubmit.
    """

    status_code = 502

    def __init__(self, message: str = "Failed to submit order.", file_name: str = "",
                 cause: Optional[BaseException] = None):
        details: Dict[str, Any] = {"file_name": file_name}
        if cause is not None:
            details["cause"] = f"{type(cause).__name__}: {cause}"
        super().__init__(message, details)
        self.file_name = file_name


class InvalidTransitionError(QuoteOrderError):
    """The quote workflow was asked to move between states it cannot connect."""

    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move from {current} to {target}",
            {"current": current, "target": target},
        )
        self.current = current
        self.target = target


class OrderClientError(QuoteOrderError):
    """
    An analysis or submission request failed as seen by the client.

    ``status_code`` is the HTTP status of the response, or None on a
    transport error (no response at all).
    """

    def __init__(self, message: str, status_code: Optional[int] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.status_code = status_code
