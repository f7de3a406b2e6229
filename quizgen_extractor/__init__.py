"""Document text extraction for quiz generation."""

from quizgen_extractor.classifier import FormatClassifier
from quizgen_extractor.config import ExtractorConfig, ServiceConfig
from quizgen_extractor.exceptions import (
    CorruptInputError,
    DecodingError,
    ExtractionError,
    InsufficientTextError,
    OversizeInputError,
    UnsupportedFormatError,
)
from quizgen_extractor.extractor import DocumentTextExtractor
from quizgen_extractor.handler import DocumentHandler, extract_text, staged_upload
from quizgen_extractor.models import (
    DocumentExtractionResult,
    DocumentFormat,
    SourceDocument,
)
from quizgen_extractor.parser import parse_document

__version__ = "0.1.0"

__all__ = [
    # High-level API
    "extract_text",
    "parse_document",
    "staged_upload",
    # Core classes
    "DocumentHandler",
    "FormatClassifier",
    "DocumentTextExtractor",
    # Data models
    "SourceDocument",
    "DocumentFormat",
    "DocumentExtractionResult",
    # Configuration
    "ExtractorConfig",
    "ServiceConfig",
    # Exceptions
    "ExtractionError",
    "UnsupportedFormatError",
    "CorruptInputError",
    "DecodingError",
    "OversizeInputError",
    "InsufficientTextError",
]
