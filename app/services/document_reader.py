"""Document reading service: data-URI decoding plus page-level text extraction."""

import base64
import binascii
import io
import logging
import re
from typing import Any

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

from app.errors import DocumentReadError

logger = logging.getLogger(__name__)

IMAGE_CONTENT_TYPES: set[str] = {"image/jpeg", "image/png", "image/webp"}
PDF_CONTENT_TYPE = "application/pdf"

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)

# Render scanned pages at 2x for better OCR.
_OCR_MATRIX = fitz.Matrix(2, 2)


def to_data_uri(content: bytes, content_type: str) -> str:
    """Encode raw bytes as a ``data:<mime>;base64,...`` URI."""
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


def decode_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into its MIME type and raw bytes.

    Raises:
        DocumentReadError: If the URI is malformed or the payload is not base64.
    """
    match = _DATA_URI_RE.match(data_uri)
    if match is None:
        raise DocumentReadError("Document is not a base64 data URI.")
    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DocumentReadError(f"Document payload is not valid base64: {exc}") from exc
    return match.group("mime"), content


def _ocr_image(image: Image.Image) -> str:
    try:
        return pytesseract.image_to_string(image).strip()
    except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
        raise DocumentReadError(f"OCR failed: {exc}") from exc


def _pdf_pages(content: bytes) -> list[dict[str, Any]]:
    try:
        doc = fitz.open(stream=content, filetype="pdf")
    except Exception as exc:
        logger.error("Failed to open PDF — %s", exc)
        raise DocumentReadError("Corrupt or unreadable PDF.") from exc

    with doc:
        if doc.page_count == 0:
            raise DocumentReadError("PDF has zero pages.")

        pages: list[dict[str, Any]] = []
        for page_num in range(doc.page_count):
            page = doc.load_page(page_num)
            text = page.get_text("text").strip()
            if not text:
                logger.debug("Page %d has no text layer — running OCR", page_num + 1)
                pix = page.get_pixmap(matrix=_OCR_MATRIX)
                text = _ocr_image(Image.open(io.BytesIO(pix.tobytes("png"))))
            pages.append({"page_number": page_num + 1, "text": text})
    return pages


def _image_pages(content: bytes) -> list[dict[str, Any]]:
    try:
        image = Image.open(io.BytesIO(content))
        image.load()
    except Exception as exc:
        logger.error("Failed to open image — %s", exc)
        raise DocumentReadError("Corrupt or unreadable image.") from exc
    return [{"page_number": 1, "text": _ocr_image(image)}]


def extract_pages(content: bytes, content_type: str) -> list[dict[str, Any]]:
    """Extract text content from each page of a PDF or from a single image.

    Args:
        content: Raw document bytes.
        content_type: MIME type of the document.

    Returns:
        A list of dicts, each containing ``page_number`` (1-indexed)
        and the extracted ``text`` for that page.

    Raises:
        DocumentReadError: If the type is unsupported, the document is
            corrupt, or no page yields any text.
    """
    if content_type == PDF_CONTENT_TYPE:
        pages = _pdf_pages(content)
    elif content_type in IMAGE_CONTENT_TYPES:
        pages = _image_pages(content)
    else:
        raise DocumentReadError(f"Unsupported document type '{content_type}'.")

    if not any(p["text"] for p in pages):
        logger.warning("No readable text found in %s document", content_type)
        raise DocumentReadError(
            "No readable text found in document. The file may be blank or too blurry."
        )

    logger.info("Read %d page(s) from %s document", len(pages), content_type)
    return pages


def collect_page_texts(pages: list[dict[str, Any]]) -> str:
    """Combine page texts into a single string separated by page markers."""
    sections: list[str] = []
    for page in sorted(pages, key=lambda p: p["page_number"]):
        if page["text"].strip():
            sections.append(f"--- Page {page['page_number']} ---\n{page['text']}")
    return "\n\n".join(sections)


def read_document(data_uri: str) -> str:
    """Decode a data URI and return the document's text with page markers."""
    content_type, content = decode_data_uri(data_uri)
    return collect_page_texts(extract_pages(content, content_type))
