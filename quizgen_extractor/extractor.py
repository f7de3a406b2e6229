"""Per-format text extractors for PDF, DOCX, PPTX and plain text."""

import io
import re
import zipfile
from typing import Iterable, Iterator, Optional

import fitz  # PyMuPDF
from docx import Document
from docx.table import Table
from lxml import etree

from quizgen_extractor.config import ExtractorConfig
from quizgen_extractor.exceptions import (
    CorruptInputError,
    DecodingError,
    ExtractionError,
    OversizeInputError,
    UnsupportedFormatError,
)
from quizgen_extractor.logger import Timer, get_logger
from quizgen_extractor.models import DocumentFormat, SourceDocument

logger = get_logger(__name__)

SLIDE_ENTRY_PATTERN = re.compile(r"^ppt/slides/slide(\d+)\.xml$")
NEWLINE_WITH_PADDING = re.compile(r"\s*\n\s*")
TEXT_RUN_LOCAL_NAME = "t"


def reconstruct_lines(fragments: Iterable[tuple[str, float]]) -> str:
    """Rebuild one page of text from positioned fragments.

    Fragments sharing the previous fragment's baseline belong to the same
    visual line and are concatenated directly; a change of baseline starts a
    new line. The page always ends with a newline.

    Args:
        fragments: ``(text, baseline_y)`` pairs in content order

    Returns:
        Page text terminated by ``"\\n"``
    """
    parts: list[str] = []
    last_baseline: Optional[float] = None
    for text, baseline in fragments:
        if last_baseline is not None and baseline != last_baseline:
            parts.append("\n")
        parts.append(text)
        last_baseline = baseline
    parts.append("\n")
    return "".join(parts)


def ordered_slide_entries(names: Iterable[str]) -> list[str]:
    """Return slide XML entry names sorted by their numeric slide index.

    Lexical order would put ``slide10.xml`` before ``slide2.xml``.
    """
    indexed = []
    for name in names:
        match = SLIDE_ENTRY_PATTERN.match(name)
        if match:
            indexed.append((int(match.group(1)), name))
    return [name for _, name in sorted(indexed)]


def collect_text_runs(element: etree._Element, parts: list[str]) -> list[str]:
    """Append the text of every text-run element below ``element``.

    Text runs (``a:t``) are leaves; every other element is descended into.
    Comments and processing instructions are ignored.
    """
    for child in element:
        if not isinstance(child.tag, str):
            continue
        if etree.QName(child).localname == TEXT_RUN_LOCAL_NAME:
            parts.append(child.text or "")
        else:
            collect_text_runs(child, parts)
    return parts


class DocumentTextExtractor:
    """Extracts plain text from PDF, DOCX, PPTX and UTF-8 text documents.

    Uses PyMuPDF for PDFs, python-docx for DOCX and lxml over the raw slide
    parts for PPTX. All parsing happens in memory on the caller's buffer.
    """

    def __init__(self, config: Optional[ExtractorConfig] = None):
        self.config = config or ExtractorConfig()

    def extract(self, document: SourceDocument, fmt: DocumentFormat) -> str:
        """Extract trimmed text from a document of a known format.

        Args:
            document: Source document
            fmt: Format returned by the classifier

        Returns:
            Trimmed plain text (may be empty)

        Raises:
            UnsupportedFormatError: If fmt is UNSUPPORTED
            OversizeInputError: If a PDF exceeds the configured ceiling
            CorruptInputError: If the bytes fail to parse as fmt
        """
        file_name = document.file_name
        file_bytes = document.file_bytes

        logger.debug(
            "Starting text extraction",
            extra_data={
                "file_name": file_name,
                "format": fmt.value,
                "file_size_bytes": len(file_bytes),
            },
        )

        try:
            if fmt is DocumentFormat.PDF:
                return self._extract_pdf(file_bytes, file_name)
            elif fmt is DocumentFormat.DOCX:
                return self._extract_docx(file_bytes, file_name)
            elif fmt is DocumentFormat.PPTX:
                return self._extract_pptx(file_bytes, file_name)
            elif fmt is DocumentFormat.PLAIN_TEXT:
                return self._extract_plain_text(file_bytes, file_name)
            raise UnsupportedFormatError(f"No extractor for format: {fmt.value}")

        except ExtractionError:
            raise
        except Exception as exc:
            logger.error(
                "Document extraction failed",
                extra_data={
                    "file_name": file_name,
                    "format": fmt.value,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
                exc_info=True,
            )
            raise CorruptInputError(
                f"Failed to read {fmt.value.upper()} document: {exc}"
            ) from exc

    def _extract_pdf(self, file_bytes: bytes, file_name: str = "unknown.pdf") -> str:
        """Extract from PDF, rebuilding line breaks from span baselines."""
        size = len(file_bytes)
        if size > self.config.max_pdf_bytes:
            logger.warning(
                "PDF exceeds size limit",
                extra_data={
                    "file_name": file_name,
                    "file_size_bytes": size,
                    "max_pdf_bytes": self.config.max_pdf_bytes,
                },
            )
            raise OversizeInputError(
                f"PDF is {size} bytes; the limit is {self.config.max_pdf_bytes} bytes"
            )

        try:
            pdf_document = fitz.open(stream=file_bytes, filetype="pdf")
        except Exception as exc:
            logger.warning(
                "PDF could not be opened",
                extra_data={
                    "file_name": file_name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise CorruptInputError(f"Not a readable PDF: {exc}") from exc

        with pdf_document, Timer("pdf_extraction") as timer:
            if pdf_document.needs_pass:
                raise CorruptInputError("PDF is password protected")

            page_count = len(pdf_document)
            text = "".join(
                reconstruct_lines(self._pdf_page_fragments(page))
                for page in pdf_document
            ).strip()

        logger.debug(
            "PDF extraction completed",
            extra_data={
                "file_name": file_name,
                "page_count": page_count,
                "characters_extracted": len(text),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return text

    @staticmethod
    def _pdf_page_fragments(page: fitz.Page) -> Iterator[tuple[str, float]]:
        """Yield ``(text, baseline_y)`` for every text span in content order."""
        page_dict = page.get_text("dict", sort=False)
        for block in page_dict.get("blocks", []):
            # 0 = text block, 1 = image block
            if block.get("type") != 0:
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    yield span["text"], span["origin"][1]

    def _extract_docx(self, file_bytes: bytes, file_name: str = "unknown.docx") -> str:
        """Extract raw text from DOCX using python-docx.

        Paragraphs and tables are read in body order; images, styles and any
        other non-text content are skipped.
        """
        with Timer("docx_extraction") as timer:
            doc = Document(io.BytesIO(file_bytes))

            blocks: list[str] = []
            paragraph_count = 0
            table_count = 0
            for item in doc.iter_inner_content():
                if isinstance(item, Table):
                    table_count += 1
                    blocks.extend(self._docx_table_rows(item))
                    continue
                paragraph_count += 1
                text = item.text.strip()
                if text:
                    blocks.append(text)

            result = "\n\n".join(blocks).strip()

        logger.debug(
            "DOCX extraction completed",
            extra_data={
                "file_name": file_name,
                "paragraph_count": paragraph_count,
                "table_count": table_count,
                "characters_extracted": len(result),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    @staticmethod
    def _docx_table_rows(table: Table) -> list[str]:
        """Render each table row as tab-separated cell text."""
        rows = []
        for row in table.rows:
            cells = []
            previous = None
            for cell in row.cells:
                # Horizontally merged cells repeat the same underlying <w:tc>
                if cell._tc is previous:
                    continue
                previous = cell._tc
                cells.append(cell.text.strip())
            line = "\t".join(cells).strip()
            if line:
                rows.append(line)
        return rows

    def _extract_pptx(self, file_bytes: bytes, file_name: str = "unknown.pptx") -> str:
        """Extract slide text from the raw PPTX slide parts, in slide order."""
        parser = etree.XMLParser(
            resolve_entities=False, load_dtd=False, no_network=True
        )

        with Timer("pptx_extraction") as timer:
            try:
                archive = zipfile.ZipFile(io.BytesIO(file_bytes))
            except zipfile.BadZipFile as exc:
                raise CorruptInputError(f"PPTX is not a valid zip archive: {exc}") from exc

            with archive:
                slide_names = ordered_slide_entries(archive.namelist())
                parts: list[str] = []
                for name in slide_names:
                    try:
                        root = etree.fromstring(archive.read(name), parser)
                    except etree.XMLSyntaxError as exc:
                        logger.warning(
                            "Slide XML could not be parsed",
                            extra_data={
                                "file_name": file_name,
                                "slide_entry": name,
                                "error": str(exc),
                            },
                        )
                        raise CorruptInputError(
                            f"Malformed slide XML in {name}: {exc}"
                        ) from exc
                    # Slide parts never declare a DTD; unresolved entities
                    # would silently truncate run text
                    if root.getroottree().docinfo.internalDTD is not None:
                        raise CorruptInputError(
                            f"Unexpected DOCTYPE declaration in {name}"
                        )
                    collect_text_runs(root, parts)
                    parts.append("\n")

            result = NEWLINE_WITH_PADDING.sub("\n", " ".join(parts)).strip()

        logger.debug(
            "PPTX extraction completed",
            extra_data={
                "file_name": file_name,
                "slide_count": len(slide_names),
                "characters_extracted": len(result),
                "extraction_time_ms": timer.get_elapsed_ms(),
            },
        )
        return result

    @staticmethod
    def _extract_plain_text(file_bytes: bytes, file_name: str = "unknown.txt") -> str:
        try:
            # utf-8-sig drops a leading byte-order mark
            text = file_bytes.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            logger.error(
                "Failed to decode plain text file as UTF-8",
                extra_data={
                    "file_name": file_name,
                    "file_size_bytes": len(file_bytes),
                },
            )
            raise DecodingError("Unable to decode text file (not valid UTF-8)") from exc
        return text.strip()
