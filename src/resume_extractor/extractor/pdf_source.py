"""PDF parsing into per-page text fragments using PyMuPDF.

Each page's content stream is traced with ``Page.get_texttrace()``, which
reports every text-showing operation as a span in drawing order. One span
becomes one :class:`TextFragment`, so the extractors see the document the
way the content stream emits it -- including one-glyph-per-operation kerning
and any operator residue a broken producer leaves behind.

Pages that cannot be loaded are returned as ``None`` and skipped by the
extractors.
"""

from __future__ import annotations

import logging
from typing import Optional

import pymupdf

from resume_extractor.extractor.types import (
    ExtractionError,
    ExtractionErrorKind,
    PageContent,
    SourceDocument,
    TextFragment,
)

logger = logging.getLogger(__name__)


def _span_text(span: dict) -> str:
    """Rebuild the string drawn by one traced text span."""
    chars = []
    for char in span.get("chars", ()):
        codepoint = char[0]
        if codepoint is None or codepoint < 0:
            continue
        try:
            chars.append(chr(codepoint))
        except (ValueError, OverflowError):
            chars.append("\ufffd")
    return "".join(chars)


def _page_fragments(page: pymupdf.Page, page_number: int) -> tuple[TextFragment, ...]:
    spans = sorted(page.get_texttrace(), key=lambda span: span.get("seqno", 0))
    return tuple(
        TextFragment(text=_span_text(span), page_number=page_number)
        for span in spans
    )


def load_pages(document: SourceDocument) -> list[Optional[PageContent]]:
    """Open a PDF from bytes and return its pages as fragment sequences.

    Args:
        document: The uploaded PDF.

    Returns:
        One entry per page, in page order. ``None`` marks a page that could
        not be loaded or traced.

    Raises:
        ExtractionError: ``OPEN_FAILED`` if the bytes are not a readable PDF
            or the PDF is encrypted.
    """
    try:
        doc = pymupdf.open(stream=document.content, filetype="pdf")
    except Exception as e:
        logger.error("Cannot open PDF %s: %s", document.name, e)
        raise ExtractionError(ExtractionErrorKind.OPEN_FAILED, str(e)) from e

    try:
        if doc.needs_pass:
            logger.warning("Encrypted PDF rejected: %s", document.name)
            raise ExtractionError(ExtractionErrorKind.OPEN_FAILED, "encrypted")

        pages: list[Optional[PageContent]] = []
        for index in range(doc.page_count):
            page_number = index + 1
            try:
                page = doc.load_page(index)
                fragments = _page_fragments(page, page_number)
            except Exception as e:
                logger.warning(
                    "Page %d of %s could not be parsed, skipping: %s",
                    page_number,
                    document.name,
                    e,
                )
                pages.append(None)
                continue
            pages.append(PageContent(page_number=page_number, fragments=fragments))

        logger.debug(
            "Parsed %d pages (%d fragments) from %s",
            len(pages),
            sum(len(p.fragments) for p in pages if p is not None),
            document.name,
        )
        return pages
    finally:
        doc.close()
