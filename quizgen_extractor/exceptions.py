"""Custom exceptions for text extraction."""


class ExtractionError(Exception):
    """Base exception for text extraction errors."""

    pass


class UnsupportedFormatError(ExtractionError):
    """Raised when the document format cannot be classified."""

    pass


class CorruptInputError(ExtractionError):
    """Raised when bytes claim a supported format but fail to parse."""

    pass


class DecodingError(CorruptInputError):
    """Raised when a plain text document is not valid UTF-8."""

    pass


class OversizeInputError(ExtractionError):
    """Raised when a document exceeds the configured size ceiling."""

    pass


class InsufficientTextError(ExtractionError):
    """Raised when extraction yields too little text to be useful."""

    pass
