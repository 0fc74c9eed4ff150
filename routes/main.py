"""
Service routes (health check).
"""

from flask import Blueprint, current_app

main_bp = Blueprint("main", __name__)


@main_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint with collaborator status."""
    health_status = {
        "status": "ok",
        "environment": current_app.config.get("ENVIRONMENT", "unknown"),
        "checks": {}
    }

    sender = current_app.config.get("NOTIFICATION_SENDER")
    if sender is not None:
        health_status["checks"]["notification_backend"] = sender.backend_name
    else:
        health_status["checks"]["notification_backend"] = "not_configured"
        health_status["status"] = "degraded"

    if not current_app.config.get("SITE_EMAIL"):
        health_status["checks"]["site_email"] = "missing"
        health_status["status"] = "degraded"
    else:
        health_status["checks"]["site_email"] = "ok"

    analyzer = current_app.config.get("DOCUMENT_ANALYZER")
    if analyzer is not None:
        health_status["checks"]["document_types"] = sorted(analyzer.allowed_extensions)
    else:
        health_status["checks"]["document_types"] = []
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "ok" else 503
    return health_status, status_code
