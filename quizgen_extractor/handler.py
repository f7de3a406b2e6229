"""Document handler orchestration."""

import os
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path, PurePath
from typing import BinaryIO, Iterator, Optional

from quizgen_extractor.classifier import ALLOWED_FORMATS_LABEL, FormatClassifier
from quizgen_extractor.config import ExtractorConfig
from quizgen_extractor.exceptions import (
    InsufficientTextError,
    OversizeInputError,
    UnsupportedFormatError,
)
from quizgen_extractor.extractor import DocumentTextExtractor
from quizgen_extractor.logger import Timer, get_logger
from quizgen_extractor.models import (
    DocumentExtractionResult,
    DocumentFormat,
    SourceDocument,
)

logger = get_logger(__name__)

COPY_CHUNK_SIZE = 1024 * 1024


class DocumentHandler:
    def __init__(
        self,
        classifier: Optional[FormatClassifier] = None,
        extractor: Optional[DocumentTextExtractor] = None,
        config: Optional[ExtractorConfig] = None,
    ) -> None:
        """Initialize document handler.

        Args:
            classifier: Format classifier. If None, creates default.
            extractor: Text extractor. If None, creates default with config.
            config: Extraction limits. The text floor always comes from here.
        """
        self.config = config or ExtractorConfig()
        self.classifier = classifier or FormatClassifier()
        self.extractor = extractor or DocumentTextExtractor(config=self.config)

    def extract(self, document: SourceDocument) -> DocumentExtractionResult:
        """Classify a document, extract its text and check it is usable.

        Args:
            document: Uploaded document

        Returns:
            DocumentExtractionResult with trimmed text and metadata

        Raises:
            UnsupportedFormatError: If the format cannot be classified
            CorruptInputError: If the bytes fail to parse
            OversizeInputError: If a PDF exceeds the size ceiling
            InsufficientTextError: If the text is shorter than the floor
        """
        fmt = self.classifier.classify(document.mime_type, document.file_name)
        if fmt is DocumentFormat.UNSUPPORTED:
            logger.warning(
                "Unsupported document format",
                extra_data={
                    "file_name": document.file_name,
                    "mime_type": document.mime_type,
                },
            )
            raise UnsupportedFormatError(
                f"Unsupported file type. Please upload {ALLOWED_FORMATS_LABEL}."
            )

        with Timer("extraction") as extract_timer:
            text = self.extractor.extract(document, fmt)

        if len(text) < self.config.min_text_chars:
            logger.warning(
                "Too little text extracted from document",
                extra_data={
                    "file_name": document.file_name,
                    "format": fmt.value,
                    "character_count": len(text),
                    "min_text_chars": self.config.min_text_chars,
                },
            )
            raise InsufficientTextError(
                "Text extraction failed (too little text or image-only without OCR)."
            )

        logger.info(
            "Successfully extracted text from document",
            extra_data={
                "file_name": document.file_name,
                "format": fmt.value,
                "character_count": len(text),
                "extraction_time_ms": extract_timer.get_elapsed_ms(),
            },
        )

        return DocumentExtractionResult(
            text=text,
            format=fmt,
            mime_type=document.mime_type,
            file_name=document.file_name,
            character_count=len(text),
        )


def extract_text(
    document: SourceDocument, config: Optional[ExtractorConfig] = None
) -> str:
    """Return usable, trimmed text for a document or raise an ExtractionError."""
    return DocumentHandler(config=config).extract(document).text


@contextmanager
def staged_upload(
    stream: BinaryIO,
    file_name: str,
    directory: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> Iterator[Path]:
    """Copy an upload stream to a temporary file that is always removed.

    The file keeps the upload's extension and is deleted when the block
    exits, whether extraction succeeded, failed, or the copy itself was
    rejected.

    Args:
        stream: Readable binary upload stream
        file_name: Original file name (only its suffix is used)
        directory: Where to stage. None uses the system temp directory.
        max_bytes: Reject uploads larger than this many bytes

    Yields:
        Path of the staged file

    Raises:
        OversizeInputError: If the upload exceeds max_bytes
    """
    suffix = PurePath(file_name or "").suffix
    fd, tmp_name = tempfile.mkstemp(prefix="upload-", suffix=suffix, dir=directory)
    tmp_path = Path(tmp_name)

    try:
        with os.fdopen(fd, "wb") as tmp_file:
            if max_bytes is None:
                shutil.copyfileobj(stream, tmp_file, COPY_CHUNK_SIZE)
            else:
                written = 0
                while chunk := stream.read(COPY_CHUNK_SIZE):
                    written += len(chunk)
                    if written > max_bytes:
                        logger.warning(
                            "Upload exceeds size limit",
                            extra_data={
                                "file_name": file_name,
                                "max_upload_bytes": max_bytes,
                            },
                        )
                        raise OversizeInputError(
                            f"Upload exceeds the limit of {max_bytes} bytes"
                        )
                    tmp_file.write(chunk)

        logger.debug(
            "Upload staged",
            extra_data={
                "file_name": file_name,
                "staged_path": tmp_path,
                "file_size_bytes": tmp_path.stat().st_size,
            },
        )
        yield tmp_path

    finally:
        tmp_path.unlink(missing_ok=True)
