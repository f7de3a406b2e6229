"""Configuration classes for text extraction and the upload service."""

import os
from dataclasses import dataclass, field
from typing import Optional

MIB = 1024 * 1024


@dataclass
class ExtractorConfig:
    """Limits applied while extracting text.

    Examples:
        >>> # Defaults: 25 MiB PDF ceiling, 50 character floor
        >>> config = ExtractorConfig()

        >>> # Accept shorter documents, e.g. flash-card decks
        >>> config = ExtractorConfig(min_text_chars=20)
    """

    max_pdf_bytes: int = 25 * MIB
    """Largest PDF (in bytes) that will be parsed. A PDF of exactly this size
    is accepted; one byte more raises OversizeInputError."""

    min_text_chars: int = 50
    """Minimum length of the extracted text.

    Anything shorter usually means an image-only scan or an empty document,
    and is reported as InsufficientTextError instead of being forwarded.
    """


@dataclass
class ServiceConfig:
    """Configuration for the HTTP upload service, loaded from the environment."""

    upload_dir: Optional[str] = None
    """Directory for staged uploads. None uses the system temp directory."""

    max_upload_bytes: int = 50 * MIB
    """Uploads larger than this are rejected while being staged."""

    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 5000
    extractor: ExtractorConfig = field(default_factory=ExtractorConfig)

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Load configuration from environment variables."""
        defaults = ExtractorConfig()
        return cls(
            upload_dir=os.getenv("QUIZGEN_UPLOAD_DIR") or None,
            max_upload_bytes=int(os.getenv("QUIZGEN_MAX_UPLOAD_BYTES", str(50 * MIB))),
            log_level=os.getenv("QUIZGEN_LOG_LEVEL", "INFO"),
            host=os.getenv("QUIZGEN_HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "5000")),
            extractor=ExtractorConfig(
                max_pdf_bytes=int(
                    os.getenv("QUIZGEN_MAX_PDF_BYTES", str(defaults.max_pdf_bytes))
                ),
                min_text_chars=int(
                    os.getenv("QUIZGEN_MIN_TEXT_CHARS", str(defaults.min_text_chars))
                ),
            ),
        )

    def ensure_directories(self) -> None:
        """Create the upload directory if one is configured."""
        if self.upload_dir:
            os.makedirs(self.upload_dir, exist_ok=True)
