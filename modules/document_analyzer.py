"""Text extraction and word/page counting for uploaded documents."""

from __future__ import annotations

import io
import re
from pathlib import PurePath
from typing import Iterable

from docx import Document
from pypdf import PdfReader

from core.exceptions import ExtractionError, NoFileSelectedError, UnsupportedFileTypeError
from logging_config import get_logger
from models.order import AnalysisResult

logger = get_logger(__name__)

DEFAULT_EXTENSIONS = frozenset({"docx", "pdf", "txt"})

# Hyphen, non-breaking hyphen, figure dash, en/em dash, horizontal bar
_DASHES = re.compile(r"[\u2010-\u2015]")
# Anything that is not a letter, a digit or whitespace ("_" counts as \w)
_NON_WORD = re.compile(r"[^\w\s]|_")


def count_words(text: str) -> int:
    """Count words the way the storefront quotes them.

    Unicode dashes separate words; all other punctuation, the ASCII hyphen
    included, is dropped, so "don't" and "well-known" are one word each.
    """
    cleaned = _NON_WORD.sub("", _DASHES.sub(" ", text))
    return len(cleaned.split())


def _extension(filename: str) -> str:
    return PurePath(filename).suffix.lower().lstrip(".")


class DocumentAnalyzer:
    """Extract plain text from uploaded bytes and derive a page count."""

    def __init__(self, words_per_page: int = 450,
                 allowed_extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        if words_per_page <= 0:
            raise ValueError(f"words_per_page must be > 0, got {words_per_page}")
        self.words_per_page = words_per_page
        self.allowed_extensions = frozenset(ext.lower() for ext in allowed_extensions)

    def is_supported(self, filename: str) -> bool:
        return _extension(filename) in self.allowed_extensions

    def extract_text(self, content: bytes, filename: str) -> str:
        """Return the document's plain text.

        Raises:
            NoFileSelectedError: no filename was given
            UnsupportedFileTypeError: extension not in ``allowed_extensions``
            ExtractionError: the file could not be parsed
        """
        if not filename:
            raise NoFileSelectedError()
        extension = _extension(filename)
        if extension not in self.allowed_extensions:
            raise UnsupportedFileTypeError(filename, set(self.allowed_extensions))

        try:
            if extension == "docx":
                return self._extract_docx(content)
            if extension == "pdf":
                return self._extract_pdf(content)
            return content.decode("utf-8", errors="replace")
        except Exception as exc:
            # python-docx and pypdf raise a wide range of parser errors
            logger.warning(f"Text extraction failed for {filename}: {exc}")
            raise ExtractionError(filename=filename, cause=exc) from exc

    @staticmethod
    def _extract_docx(content: bytes) -> str:
        document = Document(io.BytesIO(content))
        parts = [paragraph.text for paragraph in document.paragraphs]
        for table in document.tables:
            for row in table.rows:
                parts.extend(cell.text for cell in row.cells)
        return "\n".join(parts)

    @staticmethod
    def _extract_pdf(content: bytes) -> str:
        reader = PdfReader(io.BytesIO(content))
        return "\n".join(page.extract_text() or "" for page in reader.pages)

    def analyze(self, content: bytes, filename: str) -> AnalysisResult:
        """Extract text and count words and pages."""
        text = self.extract_text(content, filename)
        result = AnalysisResult.from_word_count(count_words(text), self.words_per_page)
        logger.info(
            f"Analyzed {filename}: {result.word_count} words, {result.page_count} pages"
        )
        return result
