import io
import logging

import pdfplumber

logger = logging.getLogger(__name__)

PDF_HEADER = b"%PDF-"
HEADER_SEARCH_BYTES = 1024


def looks_like_pdf(head: bytes) -> bool:
    """True when the ``%PDF-`` marker appears in the leading bytes."""
    return PDF_HEADER in head[:HEADER_SEARCH_BYTES]


def extract_text(pdf_bytes: bytes) -> str:
    """
    Extracts the plain text of every page, joined with newlines.

    Args:
        pdf_bytes: Raw content of the uploaded PDF

    Returns:
        The document text; empty for image-only PDFs
    """
    pages = []

    with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
        for page in pdf.pages:
            text = page.extract_text()
            if text:
                pages.append(text)

    logger.debug("Extracted text pages=%s chars=%s", len(pages), sum(map(len, pages)))
    return "\n".join(pages)
