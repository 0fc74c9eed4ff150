"""Helper modules for the DocQuoteWeb application."""

__all__ = [
    "document_analyzer",
    "i18n",
    "order_client",
    "pricing",
    "quote_workflow",
]
