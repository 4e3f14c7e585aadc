"""Aggressive PDF text extraction without segment filtering.

Second tier of the extraction fallback chain, used when structured
extraction finds too little text -- typically because the producer emits one
glyph per text operation and every fragment is too short to pass the
classifier. Every non-empty fragment is kept; a light junk pass replaces the
most obvious structural tokens with spaces (never deleting them, so the
words on either side stay apart) and the text repair engine does the rest.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Optional

from resume_extractor.config.settings import ExtractionSettings
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

_JUNK_SYMBOLS = ("<<", ">>", "/Type", "/Page", "/Font")
_JUNK_WORDS = ("endstream", "endobj", "stream", "obj", "BT", "ET", "Tf", "Td")
_JUNK_PATTERN = re.compile(
    "|".join(re.escape(token) for token in _JUNK_SYMBOLS)
    + r"|(?<![A-Za-z0-9])(?:" + "|".join(_JUNK_WORDS) + r")(?![A-Za-z0-9])"
)
_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_INLINE_SPACE_PATTERN = re.compile(r"[^\S\n]+")


def clean_aggressive(text: str) -> str:
    """Minimal cleanup for unfiltered fragment text.

    Junk tokens and control characters become spaces, intra-line whitespace
    collapses to one space, and page line breaks are kept.
    """
    text = _JUNK_PATTERN.sub(" ", text)
    text = _CONTROL_PATTERN.sub(" ", text)
    text = _INLINE_SPACE_PATTERN.sub(" ", text)
    lines = (line.strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line).strip()


def extract_aggressive(
    pages: Sequence[Optional[PageContent]],
    settings: ExtractionSettings,
) -> ExtractionOutcome:
    """Extract every fragment of every page and rely on repair.

    Args:
        pages: Parsed pages in order; ``None`` entries are skipped.
        settings: Extraction configuration (``aggressive_min_chars``).

    Returns:
        ExtractionOutcome with repaired text on success, or
        ``INSUFFICIENT_TEXT`` when the cleaned text is shorter than
        ``aggressive_min_chars``.
    """
    stats = ExtractionStats(path=ExtractionPath.AGGRESSIVE)
    buffer: list[str] = []

    for page in pages:
        if page is None:
            continue

        page_stats = PageStats(page_number=page.page_number)
        for fragment in page.fragments:
            if not fragment.text.strip():
                continue
            page_stats.total_segments += 1
            page_stats.valid_segments += 1
            page_stats.chars_extracted += len(fragment.text)
            buffer.append(fragment.text + " ")

        stats.pages.append(page_stats)
        logger.debug(
            "Page %d: kept %d segments unfiltered",
            page.page_number,
            page_stats.total_segments,
        )
        if page_stats.total_segments > 0:
            buffer.append("\n")

    cleaned = clean_aggressive("".join(buffer))
    if len(cleaned) < settings.aggressive_min_chars:
        logger.info(
            "Aggressive extraction insufficient: %d chars after cleanup",
            len(cleaned),
        )
        return ExtractionOutcome.failed(
            ExtractionErrorKind.INSUFFICIENT_TEXT,
            detail=f"{len(cleaned)} characters after aggressive cleanup",
            path=ExtractionPath.AGGRESSIVE,
            stats=stats,
        )

    text = repair(cleaned)
    if not text:
        return ExtractionOutcome.failed(
            ExtractionErrorKind.INSUFFICIENT_TEXT,
            detail="repair removed all aggressive text",
            path=ExtractionPath.AGGRESSIVE,
            stats=stats,
        )

    logger.info(
        "Aggressive extraction produced %d chars (%d before repair)",
        len(text),
        len(cleaned),
    )
    return ExtractionOutcome.succeeded(text, ExtractionPath.AGGRESSIVE, stats)
