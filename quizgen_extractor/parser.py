"""High-level API for document text extraction."""

import mimetypes
from pathlib import Path
from typing import Optional

from quizgen_extractor.config import ExtractorConfig
from quizgen_extractor.handler import DocumentHandler
from quizgen_extractor.models import DocumentExtractionResult, SourceDocument


def parse_document(
    file_path: Optional[str] = None,
    file_bytes: Optional[bytes] = None,
    file_name: Optional[str] = None,
    mime_type: Optional[str] = None,
    config: Optional[ExtractorConfig] = None,
) -> DocumentExtractionResult:
    """Extract text from a document given either a path or raw bytes.

    Args:
        file_path: Path to document file (alternative to file_bytes)
        file_bytes: Raw document bytes (alternative to file_path)
        file_name: Original filename. Required with file_bytes; with
            file_path it overrides the on-disk name (e.g. for staged uploads).
        mime_type: Declared media type. When None and file_path is given,
            it is guessed from the file name.
        config: Extraction limits (optional, uses defaults if not provided)

    Returns:
        DocumentExtractionResult with extracted text and metadata

    Raises:
        ValueError: If neither or both of file_path and file_bytes are given,
            or if file_bytes is given without file_name
        UnsupportedFormatError: If document type is not supported
        CorruptInputError: If the document fails to parse
        OversizeInputError: If a PDF exceeds the size ceiling
        InsufficientTextError: If too little text was extracted

    Examples:
        >>> result = parse_document(file_path="lecture.pptx")
        >>> print(result.text)

        >>> with open("notes.pdf", "rb") as f:
        ...     result = parse_document(
        ...         file_bytes=f.read(),
        ...         file_name="notes.pdf",
        ...         mime_type="application/octet-stream",
        ...     )
    """
    if file_path and file_bytes is not None:
        raise ValueError("Provide either file_path or file_bytes, not both")

    if not file_path and file_bytes is None:
        raise ValueError("Must provide either file_path or file_bytes")

    if file_path:
        path = Path(file_path)
        if not path.exists():
            raise ValueError(f"File not found: {file_path}")

        file_bytes = path.read_bytes()
        file_name = file_name or path.name

        # Only guess when no media type was passed at all; an empty string is
        # a declared "unknown" and must reach the classifier unchanged
        if mime_type is None:
            guessed_type, _ = mimetypes.guess_type(file_name)
            if guessed_type:
                mime_type = guessed_type

    if not file_name:
        raise ValueError("file_name is required when using file_bytes")

    document = SourceDocument(
        file_bytes=file_bytes, mime_type=mime_type or "", file_name=file_name
    )
    return DocumentHandler(config=config).extract(document)
