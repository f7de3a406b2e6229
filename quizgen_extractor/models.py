"""Data models for text extraction."""

from dataclasses import dataclass
from enum import Enum


class DocumentFormat(str, Enum):
    """Document format derived from media type and file name."""

    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    PLAIN_TEXT = "txt"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class SourceDocument:
    """An uploaded document. Never mutated during extraction."""

    file_bytes: bytes
    mime_type: str
    file_name: str


@dataclass
class DocumentExtractionResult:
    """Result of document extraction."""

    text: str  # Trimmed plain text
    format: DocumentFormat
    mime_type: str
    file_name: str
    character_count: int
