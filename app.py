"""
DocQuoteWeb - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + config classes)
2. Builds the collaborators (document analyzer, notification sender,
   order submission handler, rate limiter)
3. Registers route blueprints
4. Installs the HTTP boundary: CORS, security headers, rate limiting
5. Sets up JSON error handlers

ARCHITECTURE:
    Every request is independent. The pricing table and analyzer are
    read-only; the rate limiter's counters are the only shared mutable
    state (lock-guarded). Workflow state lives with the client.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import List, Union

from dotenv import load_dotenv
from flask import Flask, g, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

from logging_config import setup_logging, get_logger
from modules.document_analyzer import DocumentAnalyzer
from modules.pricing import PricingTable
from routes import RATE_LIMITED_ENDPOINTS, register_blueprints
from services.notification import build_notification_sender, describe_credentials
from services.order_service import OrderSubmissionHandler
from services.rate_limiter import RateLimiter


# Module logger (configured after setup_logging)
logger = get_logger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Content-Security-Policy": "default-src 'self'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
}


def _get_base_path() -> Path:
    """
    Get the base path for the application.

    In PyInstaller bundle: Returns the directory containing the executable
    In development: Returns the directory containing app.py
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    else:
        return Path(__file__).parent


def _cors_origins(configured: str) -> Union[str, List[str]]:
    """CORS_ORIGINS as flask-cors expects it: "*" or a list of origins."""
    if configured.strip() == "*":
        return "*"
    return [o.strip() for o in configured.split(",") if o.strip()]


def create_app(config_object: Union[str, type] = "config.Config") -> Flask:
    """
    Application factory - creates and configures Flask app.

    FAIL-FAST: an unknown notification backend, or the SMTP backend
    without a sender address, stops the app from starting.

    Args:
        config_object: Import path or class passed to app.config.from_object

    Returns:
        Configured Flask application
    """
    # Use override=True so .env file always takes precedence over shell environment
    env_file = _get_base_path() / '.env'
    if env_file.exists():
        load_dotenv(env_file, override=True)
    else:
        load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(log_level=log_level, enable_file_logging=enable_file_logging)
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting DocQuoteWeb in {app.config.get('ENVIRONMENT')} mode")
    logger.info(describe_credentials(app.config))

    proxy_hops = int(app.config.get("TRUST_PROXY_HOPS", 0))
    if proxy_hops > 0:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_hops, x_proto=proxy_hops)

    # =========================================================================
    # COLLABORATORS
    # =========================================================================

    pricing = PricingTable.from_config(app.config["PRICING"])
    app.config["PRICING_TABLE"] = pricing
    logger.info(f"Pricing loaded: {pricing.as_dict()}")

    app.config["DOCUMENT_ANALYZER"] = DocumentAnalyzer(
        words_per_page=app.config["WORDS_PER_PAGE"],
        allowed_extensions=app.config["ALLOWED_EXTENSIONS"],
    )

    try:
        sender = build_notification_sender(app.config)
    except ValueError as e:
        logger.error(f"FATAL: Cannot start application - {e}")
        raise
    app.config["NOTIFICATION_SENDER"] = sender
    logger.info(f"Notification backend: {sender.backend_name}")

    if not app.config.get("SITE_EMAIL"):
        logger.warning("SITE_EMAIL is not set; order emails have no recipient")

    app.config["ORDER_HANDLER"] = OrderSubmissionHandler(
        sender=sender,
        site_email=app.config.get("SITE_EMAIL", ""),
        language=app.config.get("LANGUAGE", "en"),
    )

    limiter = RateLimiter(
        max_requests=app.config["RATE_LIMIT_MAX_REQUESTS"],
        window_seconds=app.config["RATE_LIMIT_WINDOW_SECONDS"],
    )
    app.config["RATE_LIMITER"] = limiter

    # =========================================================================
    # REGISTER BLUEPRINTS
    # =========================================================================

    register_blueprints(app)

    # =========================================================================
    # HTTP BOUNDARY
    # =========================================================================

    CORS(
        app,
        resources={
            r"/analyze-document": {},
            r"/submit-order": {},
            r"/health": {},
        },
        origins=_cors_origins(app.config.get("CORS_ORIGINS", "*")),
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
        expose_headers=["RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset", "Retry-After"],
        send_wildcard=True,
    )

    @app.before_request
    def apply_rate_limit():
        if request.method == "OPTIONS" or request.endpoint not in RATE_LIMITED_ENDPOINTS:
            return None

        decision = limiter.hit(request.remote_addr or "unknown")
        g.rate_limit = decision
        if not decision.allowed:
            return {"success": False, "message": "Too many requests, please try again later."}, 429
        return None

    @app.after_request
    def apply_boundary_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if app.config.get("ENVIRONMENT") == "production":
            response.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")

        decision = g.get("rate_limit")
        if decision is not None:
            for header, value in decision.headers().items():
                response.headers[header] = value
        return response

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(RequestEntityTooLarge)
    def handle_file_too_large(e):
        max_mb = app.config.get("MAX_CONTENT_LENGTH", 16 * 1024 * 1024) / (1024 * 1024)
        logger.warning(f"Upload rejected: larger than {max_mb:.0f} MB")
        return {
            "success": False,
            "message": f"File too large. Maximum upload size is {max_mb:.0f} MB.",
        }, 413

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return {"success": False, "message": e.description or e.name}, e.code

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        return {"success": False, "message": "An unexpected error occurred. Please try again."}, 500

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode, port=int(os.environ.get("PORT", "3000")))
