"""Content validation for extraction results.

Decides whether the text a stage produced is usable as resume input. Two
validation levels:

- ``validate_content``: length and word-count limits applied to every
  candidate, whatever produced it.
- ``looks_like_pdf_artifacts``: residue check applied to PDF candidates
  after the fallback chain has finished.

Residue heuristics:
1. PDF structure patterns: two or more of object headers, dictionary
   openings, indirect references, and ``/Name number`` pairs.
2. Word-character ratio: for texts over 100 characters, less than 30% of
   the characters sit in words that contain a letter.
"""

from __future__ import annotations

import logging
import re

from resume_extractor.config.settings import ExtractionSettings
from resume_extractor.extractor.types import ExtractionErrorKind

logger = logging.getLogger(__name__)

_PDF_STRUCTURE_PATTERNS = (
    re.compile(r"\d+\s+\d+\s+obj"),
    re.compile(r"<</[A-Za-z]+"),
    re.compile(r"\[\d+\s+\d+\s+R\]"),
    re.compile(r"/[A-Z][A-Za-z]+\s+\d+"),
)

_LETTER_PATTERN = re.compile(r"[a-zA-Z]")


def count_structure_patterns(text: str) -> int:
    """Number of distinct PDF structure patterns present in *text*."""
    return sum(1 for pattern in _PDF_STRUCTURE_PATTERNS if pattern.search(text))


def word_char_ratio(text: str) -> float:
    """Fraction of characters belonging to whitespace-separated words with a letter."""
    if not text:
        return 0.0
    word_chars = sum(
        len(word) for word in text.split() if _LETTER_PATTERN.search(word)
    )
    return word_chars / len(text)


def looks_like_pdf_artifacts(text: str, settings: ExtractionSettings) -> bool:
    """Check whether final text still looks like PDF structure.

    Args:
        text: Candidate extraction text.
        settings: Extraction settings with residue thresholds.

    Returns:
        True if the text should be rejected as artifacts.
    """
    matches = count_structure_patterns(text)
    if matches >= settings.artifact_pattern_threshold:
        logger.warning(
            "Artifact check failed: %d PDF structure patterns matched", matches
        )
        return True

    if len(text) > settings.word_ratio_min_length:
        ratio = word_char_ratio(text)
        if ratio < settings.word_char_ratio_threshold:
            logger.warning(
                "Artifact check failed: word-character ratio %.2f < %.2f",
                ratio,
                settings.word_char_ratio_threshold,
            )
            return True

    return False


def validate_content(
    text: str, settings: ExtractionSettings
) -> ExtractionErrorKind | None:
    """Check whether extracted text is reasonable for AI processing.

    Checks applied in order, the first failure wins:

    1. **Empty**: ``NO_CONTENT``.
    2. **Too short**: fewer than ``min_text_length`` characters, ``TOO_SHORT``.
    3. **Too large**: more than ``max_text_length`` characters, ``TOO_LARGE``.
    4. **Too few words**: fewer than ``min_word_count`` words, ``IMAGE_BASED``.

    Args:
        text: Candidate extraction text.
        settings: Extraction settings with limits.

    Returns:
        None if the text passes, otherwise the failing error kind.
    """
    length = len(text)
    if length == 0 or not text.strip():
        logger.warning("Validation failed: no text content")
        return ExtractionErrorKind.NO_CONTENT

    if length < settings.min_text_length:
        logger.warning(
            "Validation failed: %d chars < %d minimum", length, settings.min_text_length
        )
        return ExtractionErrorKind.TOO_SHORT

    if length > settings.max_text_length:
        logger.warning(
            "Validation failed: %d chars > %d maximum", length, settings.max_text_length
        )
        return ExtractionErrorKind.TOO_LARGE

    words = len(text.split())
    if words < settings.min_word_count:
        logger.warning(
            "Validation failed: only %d words (< %d)", words, settings.min_word_count
        )
        return ExtractionErrorKind.IMAGE_BASED

    return None
