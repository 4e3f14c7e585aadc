"""Structured PDF text extraction with per-segment validation.

First tier of the extraction fallback chain. Trusts the content stream's
text-showing operations but filters every fragment through the segment
classifier, so PDF operator residue and encoded data never reach the output.
Accepted fragments are joined with spaces, pages with newlines, and the
result goes through the full text repair engine.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Optional

from resume_extractor.config.settings import ExtractionSettings
from resume_extractor.extractor.classifier import clean_text_segment, is_valid_text_segment
from resume_extractor.extractor.repair import repair
from resume_extractor.extractor.types import (
    ExtractionErrorKind,
    ExtractionOutcome,
    ExtractionPath,
    ExtractionStats,
    PageContent,
    PageStats,
)

logger = logging.getLogger(__name__)


def _extract_page(page: PageContent) -> tuple[str, PageStats]:
    """Return the validated text of one page and its segment counts."""
    stats = PageStats(page_number=page.page_number)
    parts: list[str] = []

    for fragment in page.fragments:
        if not fragment.text.strip():
            continue

        stats.total_segments += 1
        if not is_valid_text_segment(fragment.text):
            stats.filtered_segments += 1
            continue

        cleaned = clean_text_segment(fragment.text)
        if not cleaned:
            stats.filtered_segments += 1
            continue

        stats.valid_segments += 1
        stats.chars_extracted += len(cleaned)
        parts.append(cleaned + " ")

    return "".join(parts), stats


def extract_structured(
    pages: Sequence[Optional[PageContent]],
    settings: ExtractionSettings,
) -> ExtractionOutcome:
    """Extract classifier-approved text from parsed PDF pages.

    Args:
        pages: Parsed pages in order; ``None`` entries are skipped.
        settings: Extraction configuration (``structured_min_chars``).

    Returns:
        ExtractionOutcome with repaired text on success, or
        ``INSUFFICIENT_TEXT`` when no fragment passed validation or the
        repaired text is shorter than ``structured_min_chars``.
    """
    stats = ExtractionStats(path=ExtractionPath.STRUCTURED)
    buffer: list[str] = []

    for page in pages:
        if page is None:
            continue

        page_text, page_stats = _extract_page(page)
        stats.pages.append(page_stats)

        if page_stats.chars_extracted > 0:
            buffer.append(page_text)
            buffer.append("\n")
            logger.debug(
                "Page %d: %d chars from %d/%d segments",
                page.page_number,
                page_stats.chars_extracted,
                page_stats.valid_segments,
                page_stats.total_segments,
            )
        else:
            logger.debug(
                "Page %d: no valid text (%d segments, all filtered)",
                page.page_number,
                page_stats.total_segments,
            )

    valid_segments = sum(p.valid_segments for p in stats.pages)
    text = repair("".join(buffer))

    if valid_segments == 0 or len(text) < settings.structured_min_chars:
        logger.info(
            "Structured extraction insufficient: %d valid segments, %d chars",
            valid_segments,
            len(text),
        )
        return ExtractionOutcome.failed(
            ExtractionErrorKind.INSUFFICIENT_TEXT,
            detail=f"{len(text)} characters from {valid_segments} valid segments",
            path=ExtractionPath.STRUCTURED,
            stats=stats,
        )

    logger.info(
        "Structured extraction produced %d chars from %d pages",
        len(text),
        len(stats.pages),
    )
    return ExtractionOutcome.succeeded(text, ExtractionPath.STRUCTURED, stats)
