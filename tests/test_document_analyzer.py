"""
Unit tests for text extraction and word/page counting.
"""

import io

import pytest
from pypdf import PdfWriter

from core.exceptions import ExtractionError, NoFileSelectedError, UnsupportedFileTypeError
from models.order import AnalysisResult
from modules.document_analyzer import DocumentAnalyzer, count_words
from conftest import make_docx, words


@pytest.fixture
def analyzer():
    return DocumentAnalyzer()


class TestCountWords:

    def test_plain_words(self):
        assert count_words("one two  three\nfour\tfive") == 5

    def test_empty_and_whitespace(self):
        assert count_words("") == 0
        assert count_words("   \n\t ") == 0

    def test_punctuation_removed(self):
        assert count_words("Hello, world! (really?)") == 3

    def test_apostrophe_joins(self):
        assert count_words("don't stop") == 2

    def test_dashes_split_words(self):
        # en dash and em dash separate; ASCII hyphen is just dropped
        assert count_words("state–of—the art") == 4
        assert count_words("well-known") == 1

    def test_lone_punctuation_is_not_a_word(self):
        assert count_words("a - b ... c") == 3

    def test_arabic_text(self):
        assert count_words("هذا نص عربي، للتجربة.") == 4

    def test_digits_count(self):
        assert count_words("chapter 12 has 3 parts") == 5


class TestAnalysisResult:

    @pytest.mark.parametrize("word_count, pages", [
        (0, 0),
        (1, 1),
        (450, 1),
        (451, 2),
        (900, 2),
        (901, 3),
    ])
    def test_page_count_rounds_up(self, word_count, pages):
        assert AnalysisResult.from_word_count(word_count).page_count == pages

    def test_custom_words_per_page(self):
        assert AnalysisResult.from_word_count(500, words_per_page=250).page_count == 2

    def test_negative_word_count_rejected(self):
        with pytest.raises(ValueError):
            AnalysisResult.from_word_count(-1)

    def test_json_shape(self):
        assert AnalysisResult(900, 2).to_dict() == {"wordCount": 900, "pageCount": 2}
        assert AnalysisResult.from_dict({"wordCount": 1, "pageCount": 1}) == AnalysisResult(1, 1)

    def test_from_dict_requires_both_keys(self):
        with pytest.raises(KeyError):
            AnalysisResult.from_dict({"wordCount": 3})


class TestDocumentAnalyzer:

    def test_docx(self, analyzer):
        result = analyzer.analyze(make_docx(words(500), words(400)), "essay.docx")
        assert result == AnalysisResult(word_count=900, page_count=2)

    def test_docx_tables_are_counted(self, analyzer):
        from docx import Document

        document = Document()
        document.add_paragraph("intro words")
        table = document.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "left cell"
        table.cell(0, 1).text = "right"
        buffer = io.BytesIO()
        document.save(buffer)

        assert analyzer.analyze(buffer.getvalue(), "table.docx").word_count == 5

    def test_txt(self, analyzer):
        result = analyzer.analyze(words(1).encode("utf-8"), "note.TXT")
        assert result == AnalysisResult(word_count=1, page_count=1)

    def test_blank_pdf_has_no_words(self, analyzer):
        writer = PdfWriter()
        writer.add_blank_page(width=612, height=792)
        buffer = io.BytesIO()
        writer.write(buffer)

        result = analyzer.analyze(buffer.getvalue(), "scan.pdf")
        assert result == AnalysisResult(word_count=0, page_count=0)

    def test_corrupt_docx_raises_extraction_error(self, analyzer):
        with pytest.raises(ExtractionError) as exc_info:
            analyzer.analyze(b"not a zip archive", "broken.docx")
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "Failed to analyze document."
        assert "cause" in exc_info.value.details

    def test_unsupported_extension(self, analyzer):
        with pytest.raises(UnsupportedFileTypeError) as exc_info:
            analyzer.analyze(b"data", "picture.png")
        assert exc_info.value.status_code == 415

    def test_missing_filename(self, analyzer):
        with pytest.raises(NoFileSelectedError):
            analyzer.extract_text(b"data", "")

    def test_restricted_extensions(self):
        analyzer = DocumentAnalyzer(allowed_extensions={"txt"})
        assert analyzer.is_supported("a.txt")
        assert not analyzer.is_supported("a.docx")

    def test_invalid_words_per_page(self):
        with pytest.raises(ValueError):
            DocumentAnalyzer(words_per_page=0)
