"""FastAPI upload endpoint for document text extraction."""

from typing import Optional

from fastapi import FastAPI, File, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quizgen_extractor.config import ServiceConfig
from quizgen_extractor.exceptions import (
    CorruptInputError,
    ExtractionError,
    InsufficientTextError,
    OversizeInputError,
    UnsupportedFormatError,
)
from quizgen_extractor.handler import staged_upload
from quizgen_extractor.logger import get_logger, request_context, setup_logging
from quizgen_extractor.parser import parse_document

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

ERROR_STATUS_CODES = {
    UnsupportedFormatError: 415,
    OversizeInputError: 413,
    CorruptInputError: 422,
    InsufficientTextError: 422,
}


def status_code_for(exc: ExtractionError) -> int:
    """Map an extraction error to an HTTP client-error status."""
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_CODES:
            return ERROR_STATUS_CODES[cls]
    return 400


def create_app(config: Optional[ServiceConfig] = None) -> FastAPI:
    """Build the upload service.

    Args:
        config: Service configuration. If None, loads it from the environment.
    """
    config = config or ServiceConfig.from_env()
    setup_logging(config.log_level)
    config.ensure_directories()

    app = FastAPI(title="Quiz Generator Text Extraction API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.config = config

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/extract")
    def extract_upload(request: Request, file: Optional[UploadFile] = File(None)):
        """Extract text from an uploaded PDF, DOCX, PPTX or TXT file."""
        with request_context(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            headers = {REQUEST_ID_HEADER: request_id}

            if file is None or not file.filename:
                return JSONResponse(
                    status_code=400,
                    content={"error": "No file uploaded."},
                    headers=headers,
                )

            logger.info(
                "Upload received",
                extra_data={
                    "file_name": file.filename,
                    "mime_type": file.content_type,
                },
            )

            try:
                with staged_upload(
                    file.file,
                    file.filename,
                    directory=config.upload_dir,
                    max_bytes=config.max_upload_bytes,
                ) as staged_path:
                    # A part without Content-Type declares no media type;
                    # "" keeps parse_document from guessing one
                    result = parse_document(
                        file_path=str(staged_path),
                        file_name=file.filename,
                        mime_type=file.content_type or "",
                        config=config.extractor,
                    )
            except ExtractionError as exc:
                status_code = status_code_for(exc)
                logger.warning(
                    "Upload rejected",
                    extra_data={
                        "file_name": file.filename,
                        "error_type": type(exc).__name__,
                        "status_code": status_code,
                    },
                )
                return JSONResponse(
                    status_code=status_code,
                    content={"error": str(exc)},
                    headers=headers,
                )

            return JSONResponse(
                content={
                    "text": result.text,
                    "format": result.format.value,
                    "file_name": result.file_name,
                    "mime_type": result.mime_type,
                    "character_count": result.character_count,
                },
                headers=headers,
            )

    return app
