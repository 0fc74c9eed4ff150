"""
Flask route blueprints for DocQuoteWeb.

This module contains all route handlers organized by functionality:
- main: Health check
- analyze: Word/page count of an uploaded document
- orders: Order submission (emails the site operator)

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .analyze import analyze_bp
from .orders import orders_bp

__all__ = [
    "main_bp",
    "analyze_bp",
    "orders_bp",
]

# Endpoints sharing the per-client rate limit
RATE_LIMITED_ENDPOINTS = frozenset({
    "analyze.analyze_document",
    "orders.submit_order",
})


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(analyze_bp)
    app.register_blueprint(orders_bp)
