"""Tests for the high-level parse_document API."""

import pytest

from quizgen_extractor import parse_document
from quizgen_extractor.exceptions import UnsupportedFormatError
from quizgen_extractor.models import DocumentFormat


def test_parse_from_path(tmp_path, docx_bytes):
    path = tmp_path / "cells.docx"
    path.write_bytes(docx_bytes)

    result = parse_document(file_path=str(path))

    assert result.format is DocumentFormat.DOCX
    assert result.file_name == "cells.docx"
    assert "Ribosome\tProtein synthesis" in result.text


def test_parse_from_path_with_original_name(tmp_path, pdf_bytes):
    path = tmp_path / "upload-abc123.bin"
    path.write_bytes(pdf_bytes)

    result = parse_document(
        file_path=str(path),
        file_name="lecture.pdf",
        mime_type="application/octet-stream",
    )

    assert result.format is DocumentFormat.PDF
    assert result.file_name == "lecture.pdf"


def test_parse_from_bytes(pptx_bytes):
    result = parse_document(file_bytes=pptx_bytes, file_name="water.pptx")
    assert result.format is DocumentFormat.PPTX


def test_empty_mime_type_is_not_replaced_by_a_guess(tmp_path):
    path = tmp_path / "data.csv"
    path.write_bytes(b"question,answer,difficulty\n" * 5)

    with pytest.raises(UnsupportedFormatError):
        parse_document(file_path=str(path), mime_type="")


def test_missing_mime_type_is_guessed_from_path(tmp_path):
    path = tmp_path / "page.html"
    path.write_bytes(b"<p>The mitochondrion is the site of cellular respiration.</p>")

    result = parse_document(file_path=str(path))

    assert result.format is DocumentFormat.PLAIN_TEXT
    assert result.mime_type == "text/html"


def test_unknown_path_extension_is_unsupported(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x00" * 100)
    with pytest.raises(UnsupportedFormatError):
        parse_document(file_path=str(path))


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({}, "Must provide"),
        ({"file_path": "a.txt", "file_bytes": b"x"}, "not both"),
        ({"file_bytes": b"x"}, "file_name is required"),
        ({"file_path": "/nonexistent/file.pdf"}, "File not found"),
    ],
)
def test_invalid_arguments(kwargs, message):
    with pytest.raises(ValueError, match=message):
        parse_document(**kwargs)
