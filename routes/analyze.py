"""
Document analysis route.

Receives one uploaded document (multipart field ``document``), extracts
its text and returns the word and page count. Nothing is stored: the
bytes live only for the duration of the request.
"""

from flask import Blueprint, current_app, request

from core.exceptions import NoFileSelectedError, QuoteOrderError
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

analyze_bp = Blueprint("analyze", __name__)

GENERIC_FAILURE = "Failed to analyze document."


@analyze_bp.errorhandler(QuoteOrderError)
def handle_analysis_error(error: QuoteOrderError):
    logger.warning(f"Analysis rejected: {error}")
    return {"message": error.message}, error.status_code


@analyze_bp.route("/analyze-document", methods=["POST"])
def analyze_document():
    """
    Analyze an uploaded document.

    Returns:
        200 {"wordCount": int, "pageCount": int}
        4xx/5xx {"message": str}
    """
    document = request.files.get("document")

    if not document or document.filename == "":
        raise NoFileSelectedError()

    analyzer = current_app.config["DOCUMENT_ANALYZER"]

    try:
        content = document.read()
        logger.info(f"Analyzing upload: {document.filename} ({len(content)} bytes)")
        result = analyzer.analyze(content, document.filename)

    except QuoteOrderError:
        raise
    except Exception as e:
        logger.error(f"Document analysis failed: {e}", exc_info=True)
        return {"message": GENERIC_FAILURE}, 500

    return result.to_dict(), 200
