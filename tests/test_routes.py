"""
Route tests through the Flask test client.
"""

import io
import json
from unittest.mock import MagicMock

import pytest

from app import create_app
from config import TestingConfig
from core.exceptions import DeliveryError
from conftest import make_docx, words


def upload(content, filename="essay.docx"):
    return (io.BytesIO(content), filename)


def order_form(content, filename="essay.docx", **overrides):
    form = {
        "document": upload(content, filename),
        "userEmail": "customer@example.com",
        "services": json.dumps(["Rephrasing", "Translation"]),
        "deliveryTime": "Normal delivery ($12 per page)",
        "totalPrice": "$24.00",
    }
    form.update(overrides)
    return {key: value for key, value in form.items() if value is not None}


class TestAnalyzeDocument:

    def test_docx_quote(self, client, docx_900_words):
        response = client.post(
            "/analyze-document",
            data={"document": upload(docx_900_words)},
            content_type="multipart/form-data",
        )

        assert response.status_code == 200
        assert response.get_json() == {"wordCount": 900, "pageCount": 2}

    def test_single_word_txt(self, client):
        response = client.post(
            "/analyze-document",
            data={"document": upload(b"hello", "note.txt")},
            content_type="multipart/form-data",
        )

        assert response.get_json() == {"wordCount": 1, "pageCount": 1}

    def test_no_file(self, client):
        response = client.post("/analyze-document", data={}, content_type="multipart/form-data")

        assert response.status_code == 400
        assert response.get_json() == {"message": "Error: No File Selected!"}

    def test_unsupported_type(self, client):
        response = client.post(
            "/analyze-document",
            data={"document": upload(b"\x89PNG", "photo.png")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 415
        assert "Unsupported file type" in response.get_json()["message"]

    def test_unreadable_document(self, client):
        response = client.post(
            "/analyze-document",
            data={"document": upload(b"not a zip archive")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 422
        assert response.get_json() == {"message": "Failed to analyze document."}

    def test_unexpected_error_is_generic(self, app, client):
        analyzer = MagicMock()
        analyzer.analyze.side_effect = RuntimeError("disk on fire")
        app.config["DOCUMENT_ANALYZER"] = analyzer

        response = client.post(
            "/analyze-document",
            data={"document": upload(b"hello", "note.txt")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 500
        assert response.get_json() == {"message": "Failed to analyze document."}


class TestSubmitOrder:

    def test_success_emails_operator(self, client, sender):
        response = client.post(
            "/submit-order",
            data=order_form(make_docx(words(10))),
            content_type="multipart/form-data",
        )

        assert response.status_code == 200
        assert response.get_json() == {"success": True, "message": "Order submitted successfully!"}

        assert len(sender.sent) == 1
        payload = sender.sent[0]
        assert payload.to_address == "orders@example.com"
        assert payload.subject == "New order: essay.docx"
        assert payload.attachment.filename == "essay.docx"

    def test_services_labels_survive_the_round_trip(self, client, sender):
        labels = ["Rephrasing", "ترجمة"]
        client.post(
            "/submit-order",
            data=order_form(b"hello", "note.txt", services=json.dumps(labels)),
            content_type="multipart/form-data",
        )

        body = sender.sent[0].html_body
        for label in labels:
            assert f"<li>{label}</li>" in body

    def test_no_file(self, client, sender):
        form = order_form(b"", document=None)
        response = client.post("/submit-order", data=form, content_type="multipart/form-data")

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "message": "Error: No File Selected!"}
        assert sender.sent == []

    @pytest.mark.parametrize("field", ["userEmail", "services", "deliveryTime"])
    def test_missing_details(self, client, sender, field):
        form = order_form(b"hello", "note.txt", **{field: None})
        response = client.post("/submit-order", data=form, content_type="multipart/form-data")

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "message": "Missing order details."}
        assert sender.sent == []

    @pytest.mark.parametrize("services", ["Rephrasing", '{"a": 1}', "[1, 2]"])
    def test_malformed_services(self, client, sender, services):
        form = order_form(b"hello", "note.txt", services=services)
        response = client.post("/submit-order", data=form, content_type="multipart/form-data")

        assert response.status_code == 400
        assert response.get_json() == {"success": False, "message": "Invalid services list."}

    def test_dispatch_failure(self, app, client):
        failing = MagicMock()
        failing.send.side_effect = DeliveryError("SMTP delivery failed", backend="smtp")
        app.config["ORDER_HANDLER"].sender = failing

        response = client.post(
            "/submit-order",
            data=order_form(b"hello", "note.txt"),
            content_type="multipart/form-data",
        )

        assert response.status_code == 502
        assert response.get_json() == {"success": False, "message": "Failed to submit order."}


class TestHttpBoundary:

    def test_security_headers(self, client):
        response = client.get("/health")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Content-Security-Policy"] == "default-src 'self'"
        assert "Strict-Transport-Security" not in response.headers

    def test_cors_wildcard(self, client):
        response = client.get("/health", headers={"Origin": "https://shop.example.com"})
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_preflight(self, client):
        response = client.options(
            "/submit-order",
            headers={"Origin": "https://shop.example.com", "Access-Control-Request-Method": "POST"},
        )

        assert response.status_code == 200
        assert "POST" in response.headers["Access-Control-Allow-Methods"]
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_cors_exposes_rate_limit_headers(self, client):
        response = client.post(
            "/analyze-document",
            data={"document": upload(b"hello", "note.txt")},
            content_type="multipart/form-data",
            headers={"Origin": "https://shop.example.com"},
        )

        exposed = response.headers["Access-Control-Expose-Headers"]
        assert "RateLimit-Remaining" in exposed
        assert "Retry-After" in exposed

    def test_cors_allow_list(self):
        class RestrictedConfig(TestingConfig):
            CORS_ORIGINS = "https://shop.example.com"

        client = create_app(RestrictedConfig).test_client()

        allowed = client.get("/health", headers={"Origin": "https://shop.example.com"})
        other = client.get("/health", headers={"Origin": "https://evil.example.com"})

        assert allowed.headers["Access-Control-Allow-Origin"] == "https://shop.example.com"
        assert "Access-Control-Allow-Origin" not in other.headers

    def test_rate_limit(self):
        class LimitedConfig(TestingConfig):
            RATE_LIMIT_MAX_REQUESTS = 2

        client = create_app(LimitedConfig).test_client()

        def analyze():
            return client.post(
                "/analyze-document",
                data={"document": upload(b"hello", "note.txt")},
                content_type="multipart/form-data",
            )

        first = analyze()
        assert first.headers["RateLimit-Remaining"] == "1"
        analyze()
        refused = analyze()

        assert refused.status_code == 429
        assert "Retry-After" in refused.headers
        assert "message" in refused.get_json()

    def test_rate_limit_shared_by_both_endpoints(self):
        class LimitedConfig(TestingConfig):
            RATE_LIMIT_MAX_REQUESTS = 1

        client = create_app(LimitedConfig).test_client()
        client.post(
            "/analyze-document",
            data={"document": upload(b"hello", "note.txt")},
            content_type="multipart/form-data",
        )
        response = client.post(
            "/submit-order",
            data=order_form(b"hello", "note.txt"),
            content_type="multipart/form-data",
        )

        assert response.status_code == 429

    def test_health_not_rate_limited(self):
        class LimitedConfig(TestingConfig):
            RATE_LIMIT_MAX_REQUESTS = 1

        client = create_app(LimitedConfig).test_client()
        statuses = [client.get("/health").status_code for _ in range(3)]

        assert statuses == [200, 200, 200]

    def test_upload_too_large(self, app, client):
        app.config["MAX_CONTENT_LENGTH"] = 1024

        response = client.post(
            "/analyze-document",
            data={"document": upload(b"x" * 4096, "big.txt")},
            content_type="multipart/form-data",
        )

        assert response.status_code == 413
        assert response.get_json()["success"] is False

    def test_unknown_route_is_json(self, client):
        response = client.get("/no-such-page")

        assert response.status_code == 404
        assert response.get_json()["success"] is False


class TestHealth:

    def test_ok(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.get_json()
        assert data["status"] == "ok"
        assert data["environment"] == "testing"
        assert data["checks"]["notification_backend"] == "log"
        assert data["checks"]["document_types"] == ["docx", "pdf", "txt"]

    def test_degraded_without_site_email(self):
        class NoRecipientConfig(TestingConfig):
            SITE_EMAIL = ""

        response = create_app(NoRecipientConfig).test_client().get("/health")

        assert response.status_code == 503
        assert response.get_json()["checks"]["site_email"] == "missing"


def test_smtp_backend_without_sender_refuses_to_start():
    class BrokenConfig(TestingConfig):
        NOTIFICATION_BACKEND = "smtp"
        EMAIL_USER = ""

    with pytest.raises(ValueError):
        create_app(BrokenConfig)
