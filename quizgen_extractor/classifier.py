"""Document format classification from media type and file name."""

from pathlib import PurePath
from typing import Optional

from quizgen_extractor.logger import get_logger
from quizgen_extractor.models import DocumentFormat

logger = get_logger(__name__)


PDF_MIME_TYPE = "application/pdf"
DOCX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
)
PPTX_MIME_TYPE = (
    "application/vnd.openxmlformats-officedocument.presentationml.presentation"
)
OCTET_STREAM_MIME_TYPE = "application/octet-stream"
TEXT_MIME_PREFIX = "text/"

MIME_TYPE_FORMATS = {
    PDF_MIME_TYPE: DocumentFormat.PDF,
    DOCX_MIME_TYPE: DocumentFormat.DOCX,
    PPTX_MIME_TYPE: DocumentFormat.PPTX,
}

EXTENSION_FORMATS = {
    ".pdf": DocumentFormat.PDF,
    ".docx": DocumentFormat.DOCX,
    ".pptx": DocumentFormat.PPTX,
    ".txt": DocumentFormat.PLAIN_TEXT,
}

ALLOWED_FORMATS_LABEL = "PDF, DOCX, PPTX, or TXT"


def normalize_mime_type(mime_type: Optional[str]) -> str:
    """Lower-case a media type and drop parameters such as charset."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def file_extension(file_name: Optional[str]) -> str:
    return PurePath(file_name or "").suffix.lower()


class FormatClassifier:
    """Classifies an upload into exactly one DocumentFormat.

    Rules, first match wins:

    1. media type is a known PDF/DOCX/PPTX type
    2. generic octet-stream media type with a ``.pdf`` file name
       (clients that mislabel binary uploads)
    3. ``.pdf``, ``.docx``, ``.pptx`` or ``.txt`` extension
    4. ``text/*`` media type
    5. UNSUPPORTED
    """

    def classify(
        self, mime_type: Optional[str], file_name: Optional[str]
    ) -> DocumentFormat:
        normalized = normalize_mime_type(mime_type)
        suffix = file_extension(file_name)

        if normalized in MIME_TYPE_FORMATS:
            fmt, rule = MIME_TYPE_FORMATS[normalized], "mime_type"
        elif normalized == OCTET_STREAM_MIME_TYPE and suffix == ".pdf":
            fmt, rule = DocumentFormat.PDF, "octet_stream_pdf"
        elif suffix in EXTENSION_FORMATS:
            fmt, rule = EXTENSION_FORMATS[suffix], "extension"
        elif normalized.startswith(TEXT_MIME_PREFIX):
            fmt, rule = DocumentFormat.PLAIN_TEXT, "text_prefix"
        else:
            fmt, rule = DocumentFormat.UNSUPPORTED, "fallback"

        logger.debug(
            "Document format classified",
            extra_data={
                "file_name": file_name,
                "provided_mime_type": mime_type,
                "file_extension": suffix,
                "format": fmt.value,
                "rule": rule,
            },
        )
        return fmt
