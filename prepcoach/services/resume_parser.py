import logging

import fitz  # pymupdf

from prepcoach.core.config import MAX_CV_SIZE_BYTES
from prepcoach.core.exceptions import ValidationFailedError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = ("application/pdf", "application/x-pdf")


def validate_cv_upload(filename: str, content_type: str, data: bytes) -> None:
    """Reject empty, oversized or non-PDF uploads before parsing."""
    if not data:
        raise ValidationFailedError("Uploaded CV file is empty")
    if len(data) > MAX_CV_SIZE_BYTES:
        raise ValidationFailedError(f"File size must be less than {MAX_CV_SIZE_BYTES // (1024 * 1024)}MB")
    is_pdf_name = (filename or "").lower().endswith(".pdf")
    if content_type not in PDF_CONTENT_TYPES and not is_pdf_name:
        raise ValidationFailedError("Only PDF files are accepted")
    if not data.startswith(b"%PDF"):
        raise ValidationFailedError("Uploaded file is not a valid PDF")


def parse_resume(data: bytes) -> str:
    """Extract the text of every page of an in-memory PDF."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        logger.warning(f"Could not open uploaded PDF: {e}")
        raise ValidationFailedError("Could not read the uploaded PDF") from e

    text = ""
    with doc:
        page_count = doc.page_count
        for page in doc:
            text += page.get_text()

    text = text.strip()
    if not text:
        raise ValidationFailedError("No text could be extracted from the CV. Please upload a text-based PDF")

    logger.debug(f"Extracted {len(text)} characters from CV ({page_count} pages)")
    return text
