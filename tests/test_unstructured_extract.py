import pytest

from fedcat.core.errors import ConfigurationError, ExtractionError
from fedcat.core.unstructured import extract
from fedcat.core.unstructured.extract import (
    get_extractor,
    pdf_text,
    plain_text,
    truncate_preview,
)


def test_plain_text_decodes_utf8():
    assert plain_text("héllo".encode()) == "héllo"


def test_plain_text_rejects_invalid_utf8():
    with pytest.raises(ExtractionError, match="UTF-8"):
        plain_text(b"\xff\xfe\xfa")


@pytest.mark.parametrize("content", [b"", b"not a pdf at all"])
def test_pdf_text_rejects_malformed_documents(content):
    with pytest.raises(ExtractionError):
        pdf_text(content)


def test_get_extractor_is_case_insensitive_and_strict():
    assert get_extractor("PDF") is pdf_text
    with pytest.raises(ConfigurationError, match="Unsupported document format"):
        get_extractor("docx")


def test_truncate_preview():
    assert truncate_preview("abcdef", 3) == "abc"
    assert truncate_preview("abc", 10) == "abc"
    assert truncate_preview("abcdef", 0) == "abcdef"


def test_pdf_text_reads_page_text(make_pdf):
    assert "Hello PDF world" in pdf_text(make_pdf("Hello PDF world"))


def test_pdf_text_wraps_unexpected_parser_errors(monkeypatch, make_pdf):
    def damaged(stream):
        raise TypeError("argument of type 'NumberObject' is not iterable")

    monkeypatch.setattr(extract, "PdfReader", damaged)

    with pytest.raises(ExtractionError, match="TypeError") as info:
        pdf_text(make_pdf("x"))
    assert isinstance(info.value.__cause__, TypeError)
