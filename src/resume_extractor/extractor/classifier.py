"""Segment classification for raw PDF content-stream fragments.

Decides whether one fragment is human-readable prose or a PDF structural
artifact (object syntax, dictionary keys, content-stream operators, encoded
data). Accepted fragments are tidied with ``clean_text_segment`` before they
are assembled into page text.

Rejection heuristics, any of which rejects a fragment:
1. Fewer than 2 characters after trimming.
2. Contains a PDF structural token.
3. Less than 70% printable-or-whitespace characters.
4. Looks like hex-encoded data (more than 10 hex digits, spaces ignored).
5. Longer than 5 characters without any 2-letter alphabetic run.
"""

from __future__ import annotations

import re

# Tokens that can only appear in PDF syntax, matched as plain substrings
_SUBSTRING_ARTIFACTS = (
    "%%PDF",
    "/Type",
    "/Font",
    "/Page",
    "/Catalog",
    "/Length",
    "/Filter",
    "/FlateDecode",
    "/ASCIIHexDecode",
    "/ASCII85Decode",
    "<<",
    ">>",
)

# Bare-word tokens: keywords and content-stream operators. These only count
# when they stand alone, so "Objective" or "R&D" are not mistaken for "obj"/"R".
_WORD_ARTIFACTS = (
    "obj",
    "endobj",
    "stream",
    "endstream",
    "xref",
    "trailer",
    "BT",
    "ET",
    "Tf",
    "Td",
    "TJ",
    "Tj",
    "cm",
    "q",
    "Q",
    "null",
    "true",
    "false",
    "R",
)

_WORD_ARTIFACT_PATTERN = re.compile(
    r"(?<![A-Za-z0-9&])(?:" + "|".join(map(re.escape, _WORD_ARTIFACTS)) + r")(?![A-Za-z0-9&])"
)

# Operators that can survive into an accepted fragment
_OPERATOR_PATTERN = re.compile(r"(?<![A-Za-z0-9&])(?:BT|ET|Tf|Td|TJ|Tj|Tm)(?![A-Za-z0-9&])")

_HEX_PATTERN = re.compile(r"^[0-9a-fA-F\s]+$")
_WORD_PATTERN = re.compile(r"[a-zA-Z]{2,}")
_WHITESPACE_PATTERN = re.compile(r"\s+")

_MIN_PRINTABLE_RATIO = 0.7


def contains_pdf_artifact(text: str) -> bool:
    """Return True if *text* contains any PDF structural token."""
    if any(token in text for token in _SUBSTRING_ARTIFACTS):
        return True
    return _WORD_ARTIFACT_PATTERN.search(text) is not None


def printable_ratio(text: str) -> float:
    """Fraction of characters that are printable or whitespace."""
    if not text:
        return 0.0
    printable = sum(1 for ch in text if ch.isprintable() or ch.isspace())
    return printable / len(text)


def is_valid_text_segment(text: str) -> bool:
    """Return True if a raw fragment looks like readable text.

    Pure predicate; see the module docstring for the rejection rules.
    """
    if len(text.strip()) < 2:
        return False

    if contains_pdf_artifact(text):
        return False

    if printable_ratio(text) < _MIN_PRINTABLE_RATIO:
        return False

    compact = text.replace(" ", "")
    if len(compact) > 10 and _HEX_PATTERN.match(compact):
        return False

    # Mostly digits and punctuation: coordinates, matrices, encodings
    if len(text) > 5 and not _WORD_PATTERN.search(text):
        return False

    return True


def clean_text_segment(text: str) -> str:
    """Strip stray operator tokens and collapse whitespace in a valid fragment."""
    cleaned = _OPERATOR_PATTERN.sub("", text.strip())
    cleaned = _WHITESPACE_PATTERN.sub(" ", cleaned)
    return cleaned.strip()
