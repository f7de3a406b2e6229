"""Shared fixtures: minimal documents built at test time."""

import base64
import io
import zipfile

import fitz  # PyMuPDF
import pytest
from docx import Document

SLIDE_TEMPLATE = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
    'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">'
    "<p:cSld><p:spTree>{shapes}</p:spTree></p:cSld></p:sld>"
)
SHAPE_TEMPLATE = (
    "<p:sp><p:nvSpPr><p:cNvPr id=\"1\" name=\"Text\"/></p:nvSpPr>"
    "<p:txBody><a:bodyPr/><a:p>{runs}</a:p></p:txBody></p:sp>"
)
RUN_TEMPLATE = '<a:r><a:rPr lang="en-US"/><a:t>{text}</a:t></a:r>'

# 1x1 transparent PNG
PNG_PIXEL = base64.b64decode(
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


def build_pdf(pages: list[list[str]]) -> bytes:
    """Build a PDF with one text line per entry, each on its own baseline."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page()
        for i, line in enumerate(lines):
            page.insert_text((72, 72 + 24 * i), line)
    data = doc.tobytes()
    doc.close()
    return data


def slide_xml(*shapes: list[str]) -> str:
    """Slide XML with one shape per argument, each holding the given runs."""
    body = "".join(
        SHAPE_TEMPLATE.format(runs="".join(RUN_TEMPLATE.format(text=t) for t in runs))
        for runs in shapes
    )
    return SLIDE_TEMPLATE.format(shapes=body)


def build_pptx(slides: dict[int, str], extra_entries: dict[str, str] = None) -> bytes:
    """Zip slide XML parts keyed by slide number, written in lexical order."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        for name, content in (extra_entries or {}).items():
            archive.writestr(name, content)
        for index in sorted(slides, key=str):
            archive.writestr(f"ppt/slides/slide{index}.xml", slides[index])
    return buffer.getvalue()


@pytest.fixture
def pdf_bytes() -> bytes:
    return build_pdf(
        [
            ["Photosynthesis converts light energy", "into chemical energy in plants."],
            ["Chlorophyll absorbs mostly blue and red light."],
        ]
    )


@pytest.fixture
def docx_bytes() -> bytes:
    doc = Document()
    doc.add_heading("Cell Biology", level=1)
    doc.add_paragraph("Mitochondria are the powerhouse of the cell.")
    doc.add_paragraph("")
    doc.add_picture(io.BytesIO(PNG_PIXEL))
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Organelle"
    table.cell(0, 1).text = "Function"
    table.cell(1, 0).text = "Ribosome"
    table.cell(1, 1).text = "Protein synthesis"
    doc.add_paragraph("The nucleus stores genetic material.")
    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def pptx_bytes() -> bytes:
    return build_pptx(
        {
            1: slide_xml(["The water cycle"], ["Evaporation ", "and condensation"]),
            2: slide_xml(["Precipitation returns water to the surface."]),
        },
        extra_entries={
            "ppt/slides/_rels/slide1.xml.rels": "<Relationships/>",
            "ppt/slideLayouts/slideLayout1.xml": slide_xml(["Layout placeholder"]),
        },
    )


@pytest.fixture
def make_pdf():
    return build_pdf


@pytest.fixture
def make_pptx():
    return build_pptx


@pytest.fixture
def make_slide():
    return slide_xml


def build_padded_pdf(size: int) -> bytes:
    """Build a valid PDF of exactly ``size`` bytes.

    The padding lives in an uncompressed stream object, so xref offsets stay
    correct and no repair is needed when opening.
    """
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Osmosis moves water across a semipermeable membrane.")
    xref = doc.get_new_xref()
    doc.update_object(xref, "<<>>")

    padding = size
    for _ in range(5):
        doc.update_stream(xref, b"\0" * padding, compress=False)
        data = doc.tobytes()
        if len(data) == size:
            doc.close()
            return data
        padding += size - len(data)
    raise AssertionError(f"could not pad PDF to {size} bytes")


@pytest.fixture
def make_padded_pdf():
    return build_padded_pdf
