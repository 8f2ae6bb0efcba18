"""PDF text extraction with PyMuPDF, page by page in concurrent batches."""

import asyncio
import logging
import re
from pathlib import Path

import fitz  # PyMuPDF

from quiz_extractor.errors import DocumentExtractionError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5

_WHITESPACE_RE = re.compile(r"\s+")


def _open_document(path: Path) -> fitz.Document:
    try:
        doc = fitz.open(path)
    except (RuntimeError, ValueError, OSError) as e:
        raise DocumentExtractionError(
            "The selected file appears to be corrupted or not a valid PDF. "
            "Please try a different file.",
            path=str(path),
        ) from e

    if not doc.is_pdf:
        doc.close()
        raise DocumentExtractionError(
            "The selected file is not a PDF. Please choose a PDF file.", path=str(path)
        )
    if doc.needs_pass:
        doc.close()
        raise DocumentExtractionError(
            "This PDF is password-protected. Please use an unprotected PDF file.", path=str(path)
        )
    return doc


def _page_count(path: Path) -> int:
    with _open_document(path) as doc:
        count = doc.page_count
    if count == 0:
        raise DocumentExtractionError(
            "The selected file appears to be corrupted or not a valid PDF. "
            "Please try a different file.",
            path=str(path),
        )
    return count


def _read_page(path: Path, page_index: int) -> str:
    """Read a single page with its own document handle; whitespace is collapsed."""
    with _open_document(path) as doc:
        text = doc.load_page(page_index).get_text("text")
    return _WHITESPACE_RE.sub(" ", text).strip()


def format_pages(pages: list[tuple[int, str]]) -> str:
    """Join (page number, text) pairs as marked segments, dropping empty pages."""
    return "\n".join(f"--- Page {number} ---\n{text}" for number, text in pages if text)


async def extract_pdf_text(path: str | Path, batch_size: int = DEFAULT_BATCH_SIZE) -> str:
    """
    Extract the text of a PDF file.

    Pages are read concurrently in batches of ``batch_size``; each batch is
    awaited in full before the next starts and pages keep their document order.

    Args:
        path: Path to the PDF file
        batch_size: Number of pages read concurrently

    Returns:
        Page texts joined as "--- Page N ---" segments

    Raises:
        DocumentExtractionError: If the file is missing, invalid, encrypted
            or unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentExtractionError(f"File not found: {path}", path=str(path))
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    total = await asyncio.to_thread(_page_count, path)
    logger.info("Extracting %d page(s) from %s", total, path.name)

    pages: list[tuple[int, str]] = []
    for start in range(0, total, batch_size):
        indexes = range(start, min(start + batch_size, total))
        try:
            texts = await asyncio.gather(
                *(asyncio.to_thread(_read_page, path, index) for index in indexes)
            )
        except DocumentExtractionError:
            raise
        except (RuntimeError, ValueError) as e:
            raise DocumentExtractionError(
                "Error processing PDF. Please try again with a different file.", path=str(path)
            ) from e
        pages.extend((index + 1, text) for index, text in zip(indexes, texts))
        logger.debug("Read pages %d-%d of %d", start + 1, start + len(indexes), total)

    return format_pages(pages)


def subject_from_filename(path: str | Path) -> str:
    """Suggest a quiz subject from a document's file name."""
    return re.sub(r"[_-]+", " ", Path(path).stem).strip()
