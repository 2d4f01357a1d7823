# resume_parser.py
import io
import logging

from pdfminer.high_level import extract_text as pdf_extract_text


logger = logging.getLogger(__name__)

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


class ResumeParseError(ValueError):
    pass


def is_pdf_upload(filename: str | None, content_type: str | None) -> bool:
    if content_type and content_type.lower() in PDF_CONTENT_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(".pdf")


def extract_text_from_pdf(data: bytes) -> str:
    if not data:
        raise ResumeParseError("Empty file")
    try:
        return pdf_extract_text(io.BytesIO(data)) or ""
    except Exception as exc:
        # pdfminer raises a wide range of parser errors for damaged files.
        logger.warning("resume pdf parse failed: %s", exc)
        raise ResumeParseError("Could not read PDF") from exc
