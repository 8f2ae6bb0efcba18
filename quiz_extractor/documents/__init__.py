"""Source document text extraction."""

from .pdf import extract_pdf_text, subject_from_filename

__all__ = ["extract_pdf_text", "subject_from_filename"]
