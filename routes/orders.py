"""
Order submission route.

Receives the document plus the order form fields and forwards them to the
OrderSubmissionHandler, which emails the site operator. The response only
says whether the email was handed over; delivery is not tracked.
"""

import json
from typing import List

from flask import Blueprint, current_app, request

from core.exceptions import MissingOrderDetailsError, NoFileSelectedError, QuoteOrderError
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

orders_bp = Blueprint("orders", __name__)

GENERIC_FAILURE = "Failed to submit order."


def _parse_services(raw: str) -> List[str]:
    """
    Decode the ``services`` field: a JSON array of display labels.

    Raises:
        MissingOrderDetailsError: not JSON, not an array, or not all strings
    """
    try:
        services = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MissingOrderDetailsError("Invalid services list.", missing=["services"]) from e

    if not isinstance(services, list) or not all(isinstance(s, str) for s in services):
        raise MissingOrderDetailsError("Invalid services list.", missing=["services"])

    return services


@orders_bp.errorhandler(QuoteOrderError)
def handle_order_error(error: QuoteOrderError):
    logger.warning(f"Order rejected: {error}")
    return {"success": False, "message": error.message}, error.status_code


@orders_bp.route("/submit-order", methods=["POST"])
def submit_order():
    """
    Submit an order.

    Form fields: document (file), userEmail, services (JSON array),
    deliveryTime, totalPrice.

    Returns:
        200 {"success": true, "message": str}
        4xx/5xx {"success": false, "message": str}
    """
    document = request.files.get("document")

    if not document or document.filename == "":
        raise NoFileSelectedError()

    user_email = request.form.get("userEmail", "")
    services_raw = request.form.get("services", "")
    delivery_time = request.form.get("deliveryTime", "")
    total_price = request.form.get("totalPrice", "")

    if not user_email or not services_raw or not delivery_time:
        raise MissingOrderDetailsError()

    services = _parse_services(services_raw)
    handler = current_app.config["ORDER_HANDLER"]

    try:
        result = handler.submit_order(
            document.read(),
            document.filename,
            user_email,
            services,
            delivery_time,
            total_price,
        )

    except QuoteOrderError:
        raise
    except Exception as e:
        logger.error(f"Order submission failed: {e}", exc_info=True)
        return {"success": False, "message": GENERIC_FAILURE}, 500

    return result.to_dict(), 200
