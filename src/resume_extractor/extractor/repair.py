"""Text repair for degraded extraction output.

Reconstructs human-readable, resume-shaped plaintext from text assembled out
of PDF fragments or OCR output. ``repair`` runs four independent passes in
order:

1. **Artifact removal** -- map stray typographic/encoding symbols to spaces
   or closer equivalents (bullets to ``•``, ``&`` to ``and`` except ``R&D``).
2. **Spacing repair** -- undo letter-by-letter kerning such as
   ``J i w o o L e e``. Sub-passes run from most specific (emails, domains,
   URLs) to most generic (letter and digit runs), because the generic
   collapses would otherwise glue address parts onto neighbouring words.
3. **Structural normalization** -- one trimmed line per line of content, with
   a blank line around recognised section headers.
4. **Final cleanup** -- control characters, intra-line whitespace, and runs
   of blank lines.

All functions are pure and total: they never raise and always return a
string (possibly empty). ``repair`` is idempotent on its own output.
"""

from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# Pass 1: artifact removal
# ---------------------------------------------------------------------------

_BULLET = "•"

_ARTIFACT_TABLE: dict[str, str] = {
    # Mojibake of common punctuation (UTF-8 read as cp1252)
    "â€¢": _BULLET,
    "â€“": "-",
    "â€”": "-",
    "â€™": "'",
    "\u00c2\u00a0": " ",
    # Bullet-like glyphs
    "●": _BULLET,  # black circle
    "○": _BULLET,  # white circle
    "◦": _BULLET,  # white bullet
    "▪": _BULLET,  # small black square
    "■": _BULLET,  # black square
    "□": _BULLET,  # white square
    "►": _BULLET,  # black right-pointing pointer
    "▶": _BULLET,  # black right-pointing triangle
    "◆": _BULLET,  # black diamond
    "❖": _BULLET,  # black diamond minus white x
    "✓": _BULLET,  # check mark
    "‣": _BULLET,  # triangular bullet
    "⁃": _BULLET,  # hyphen bullet
    "∙": _BULLET,  # bullet operator
    # Symbol/Wingdings bullets mapped into the private use area
    "\uf0b7": _BULLET,
    "\uf0a7": _BULLET,
    "\uf0d8": _BULLET,
    "\uf076": _BULLET,
    # Quotes, dashes, ellipsis
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "−": "-",
    "…": "...",
    # Ligatures
    "ﬁ": "fi",
    "ﬂ": "fl",
    "ﬀ": "ff",
    # Replacement character and exotic spaces
    "\ufffd": " ",
    "\u00a0": " ",
    "\u2002": " ",
    "\u2003": " ",
    "\u2009": " ",
    "\u202f": " ",
    # Zero-width characters are deleted so they cannot split words
    "\u200b": "",
    "\u200c": "",
    "\u200d": "",
    "\ufeff": "",
}

# Longest keys first so multi-character mojibake wins over its pieces
_ARTIFACT_PATTERN = re.compile(
    "|".join(
        re.escape(key)
        for key in sorted(_ARTIFACT_TABLE, key=len, reverse=True)
    )
)

_AMPERSAND_PATTERN = re.compile(r"R&D|&")


def _replace_ampersand(match: re.Match[str]) -> str:
    token = match.group(0)
    return token if token == "R&D" else " and "


def remove_artifacts(text: str) -> str:
    """Replace symbol artifacts with spaces or semantically closer text."""
    text = _ARTIFACT_PATTERN.sub(lambda m: _ARTIFACT_TABLE[m.group(0)], text)
    return _AMPERSAND_PATTERN.sub(_replace_ampersand, text)


# ---------------------------------------------------------------------------
# Pass 2: spacing repair
# ---------------------------------------------------------------------------

_EMAIL_CHAR = r"[A-Za-z0-9._%+\-]"
_DOMAIN_CHAR = r"[A-Za-z0-9\-]"

# Local part: either a run of single characters separated by single spaces,
# or one contiguous token. Domain: spaced single characters (dots included)
# or contiguous dotted labels. The lookarounds keep neighbouring words out.
_EMAIL_PATTERN = re.compile(
    rf"(?<![A-Za-z0-9._%+\-])"
    rf"(?P<local>(?:{_EMAIL_CHAR} )+{_EMAIL_CHAR}|{_EMAIL_CHAR}+)"
    rf" ?@ ?"
    rf"(?P<domain>(?:[A-Za-z0-9.\-] )+{_DOMAIN_CHAR}(?![A-Za-z0-9])"
    rf"|{_DOMAIN_CHAR}+(?:\.{_DOMAIN_CHAR}+)+)"
)

# Excludes TLDs that double as common English words ("in", "me", "us")
_TLDS = (
    "com", "org", "net", "edu", "gov", "io", "dev", "app", "info", "biz",
    "ai", "uk", "ca", "kr", "jp",
)
_TLD_GROUP = "(?:" + "|".join(_TLDS) + ")"

# Run of 4+ single characters that may form a domain or URL: "g i t h u b . c o m"
_SPACED_URL_PATTERN = re.compile(
    r"(?<!\S)(?:[A-Za-z0-9./:_~\-] ){3,}[A-Za-z0-9/_~\-](?!\S)"
)
_DOMAIN_LIKE = re.compile(rf"[A-Za-z0-9\-]\.{_TLD_GROUP}(?![A-Za-z])")

# "github . com", "github. com", "github .com" -> "github.com"
_DOTTED_GAP_PATTERN = re.compile(
    rf"\b(?P<label>[A-Za-z0-9\-]+)(?: \. ?|\. )(?P<tld>{_TLD_GROUP})(?![A-Za-z0-9])"
)

# URL path segments after a domain: "linkedin.com / in / jiwoo"
_URL_PATH_PATTERN = re.compile(
    rf"(?P<url>(?:https?:// ?)?(?:[A-Za-z0-9\-]+\.)+{_TLD_GROUP}"
    rf"(?: ?/ ?[A-Za-z0-9._~%\-]+)+/?)"
)

# Runs of 2+ single letters (or digits) separated by single spaces
_LETTER_RUN_PATTERN = re.compile(r"(?<![A-Za-z0-9])(?:[A-Za-z] )+[A-Za-z](?![A-Za-z0-9])")
_DIGIT_RUN_PATTERN = re.compile(r"(?<![A-Za-z0-9])(?:[0-9] )+[0-9](?![A-Za-z0-9])")


def _join_email(match: re.Match[str]) -> str:
    local = match.group("local").replace(" ", "")
    domain = match.group("domain").replace(" ", "")
    if "." not in domain.strip("."):
        return match.group(0)
    return f"{local}@{domain}"


def _join_spaced_url(match: re.Match[str]) -> str:
    joined = match.group(0).replace(" ", "")
    if _DOMAIN_LIKE.search(joined):
        return joined
    return match.group(0)


def _strip_spaces(match: re.Match[str]) -> str:
    return match.group(0).replace(" ", "")


def reconstruct_emails(text: str) -> str:
    """Remove spacing inside email addresses: ``j i w o o @ g m a i l . c o m``."""
    return _EMAIL_PATTERN.sub(_join_email, text)


def reconstruct_urls(text: str) -> str:
    """Remove spacing inside dotted domains and URL paths."""
    text = _SPACED_URL_PATTERN.sub(_join_spaced_url, text)
    text = _DOTTED_GAP_PATTERN.sub(r"\g<label>.\g<tld>", text)
    return _URL_PATH_PATTERN.sub(_strip_spaces, text)


def collapse_letter_runs(text: str) -> str:
    """Join single letters separated by single spaces into one token."""
    return _LETTER_RUN_PATTERN.sub(_strip_spaces, text)


def collapse_digit_runs(text: str) -> str:
    """Join single digits separated by single spaces (phone numbers, years)."""
    return _DIGIT_RUN_PATTERN.sub(_strip_spaces, text)


def repair_spacing(text: str) -> str:
    """Undo character-by-character spacing, most specific patterns first.

    Blank runs and control characters are normalised up front, so the run
    patterns see the same single-space gaps that final cleanup leaves behind.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_PATTERN.sub("", text)
    text = _INLINE_SPACE_PATTERN.sub(" ", text)
    text = reconstruct_emails(text)
    text = reconstruct_urls(text)
    text = collapse_letter_runs(text)
    text = collapse_digit_runs(text)
    return text


# ---------------------------------------------------------------------------
# Pass 3: structural normalization
# ---------------------------------------------------------------------------

SECTION_HEADERS = (
    "Summary",
    "Technical Skills",
    "Experience",
    "Education",
    "Certifications",
    "Projects",
    "Skills",
    "Work Experience",
    "Professional Experience",
    "Leadership",
    "Activity",
)

_HEADER_WORDS = tuple(header.lower() for header in SECTION_HEADERS)


def is_section_header(line: str) -> bool:
    """Return True if *line* contains a known section header (case-insensitive)."""
    lowered = line.lower()
    return any(header in lowered for header in _HEADER_WORDS)


def normalize_structure(text: str) -> str:
    """Trim lines, drop blank ones, and set section headers apart."""
    output: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if is_section_header(line):
            if output and output[-1]:
                output.append("")
            output.append(line)
            output.append("")
        else:
            output.append(line)

    while output and not output[-1]:
        output.pop()
    return "\n".join(output)


# ---------------------------------------------------------------------------
# Pass 4: final cleanup
# ---------------------------------------------------------------------------

_CONTROL_PATTERN = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
_INLINE_SPACE_PATTERN = re.compile(r"[^\S\n]+")
_BLANK_RUN_PATTERN = re.compile(r"\n{3,}")


def final_cleanup(text: str) -> str:
    """Strip control characters and collapse whitespace and blank-line runs."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _CONTROL_PATTERN.sub("", text)
    text = _INLINE_SPACE_PATTERN.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _BLANK_RUN_PATTERN.sub("\n\n", text)
    return text.strip()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def repair(raw: str) -> str:
    """Run all four repair passes over extracted text."""
    text = remove_artifacts(raw)
    text = repair_spacing(text)
    text = normalize_structure(text)
    return final_cleanup(text)


def clean_plain_text(raw: str) -> str:
    """Cleanup-only subset for plain-text uploads (no spacing repair)."""
    return final_cleanup(normalize_structure(raw))
