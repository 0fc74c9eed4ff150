"""Shared fixtures for DocQuoteWeb tests."""

import io

import pytest
from docx import Document

from app import create_app
from config import TestingConfig


def make_docx(*paragraphs: str) -> bytes:
    """Build a .docx file in memory with one paragraph per argument."""
    document = Document()
    for text in paragraphs:
        document.add_paragraph(text)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def words(count: int) -> str:
    """A text of exactly ``count`` words."""
    return " ".join(f"word{i}" for i in range(count))


@pytest.fixture
def app():
    """Flask app with the in-memory (log) notification backend."""
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sender(app):
    """The LogNotificationSender the app was built with."""
    return app.config["NOTIFICATION_SENDER"]


@pytest.fixture
def docx_900_words():
    return make_docx(words(500), words(400))
