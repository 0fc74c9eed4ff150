"""
Configuration for DocQuoteWeb.

Values come from the environment (optionally a .env file next to this
module). Email credentials are only needed by the SMTP notification
backend; the "log" backend runs without them.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file early so environment variables are available for Config class
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16 MB uploads, held in memory
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"
    TESTING = False

    # ==========================================================================
    # Quote Configuration
    # ==========================================================================
    # PRICING maps service -> delivery speed -> price per page (USD).
    # A page is WORDS_PER_PAGE words; page count is rounded up.
    # ==========================================================================
    WORDS_PER_PAGE = int(os.environ.get("WORDS_PER_PAGE", "450"))
    PRICING = {
        "rephrasing": {"normal": 5, "fast": 10},
        "translation": {"normal": 7, "fast": 10},
    }
    ALLOWED_EXTENSIONS = {"docx", "pdf", "txt"}

    # Language for labels, messages and the operator email ("en" or "ar")
    LANGUAGE = os.environ.get("QUOTE_LANGUAGE", "en")

    # ==========================================================================
    # Notification (order email to the site operator)
    # ==========================================================================
    # NOTIFICATION_BACKEND: "smtp" sends real mail, "log" only logs and keeps
    # the message in memory (development/testing).
    # ==========================================================================
    NOTIFICATION_BACKEND = os.environ.get("NOTIFICATION_BACKEND", "smtp")
    SITE_EMAIL = os.environ.get("SITE_EMAIL", "")
    EMAIL_USER = os.environ.get("EMAIL_USER", "")
    EMAIL_PASS = os.environ.get("EMAIL_PASS", "")
    SMTP_HOST = os.environ.get("SMTP_HOST", "smtp.gmail.com")
    SMTP_PORT = int(os.environ.get("SMTP_PORT", "587"))
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", "1")
    SMTP_TIMEOUT = float(os.environ.get("SMTP_TIMEOUT", "30"))

    # ==========================================================================
    # HTTP boundary
    # ==========================================================================
    RATE_LIMIT_MAX_REQUESTS = int(os.environ.get("RATE_LIMIT_MAX_REQUESTS", "100"))
    RATE_LIMIT_WINDOW_SECONDS = int(os.environ.get("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60)))
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
    # Reverse proxies in front of the app (X-Forwarded-For hops to trust)
    TRUST_PROXY_HOPS = int(os.environ.get("TRUST_PROXY_HOPS", "0"))

    # Page the client navigates to after a successful submission
    CONFIRMATION_URL = os.environ.get("CONFIRMATION_URL", "success.html")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False
    NOTIFICATION_BACKEND = os.environ.get("NOTIFICATION_BACKEND", "log")


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    ENVIRONMENT = "testing"
    NOTIFICATION_BACKEND = "log"
    SITE_EMAIL = "orders@example.com"
    EMAIL_USER = "sender@example.com"
    LANGUAGE = "en"
    CORS_ORIGINS = "*"
    RATE_LIMIT_MAX_REQUESTS = 100
    RATE_LIMIT_WINDOW_SECONDS = 15 * 60
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024
    TRUST_PROXY_HOPS = 0
