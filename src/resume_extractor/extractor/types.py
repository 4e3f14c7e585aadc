"""Shared types for the extraction pipeline.

Defines the input document, the per-page fragment model produced by PDF
parsing, the typed error taxonomy, and the ExtractionOutcome every stage
returns. Used across the extractors, quality checks, and the orchestration
service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ExtractionPath(Enum):
    """Pipeline stage that produced (or failed to produce) the text."""

    STRUCTURED = "structured"
    AGGRESSIVE = "aggressive"
    OCR = "ocr"
    PLAINTEXT = "plaintext"
    FAILED = "failed"


class ExtractionErrorKind(Enum):
    """Terminal failure reasons, grouped by who is at fault."""

    # Format errors: nothing to parse, no fallback applies
    UNSUPPORTED_FORMAT = "unsupported_format"
    OPEN_FAILED = "open_failed"

    # Stage insufficiency: triggers the next fallback stage
    INSUFFICIENT_TEXT = "insufficient_text"

    # OCR tooling
    RASTERIZATION_FAILED = "rasterization_failed"
    OCR_INSUFFICIENT_TEXT = "ocr_insufficient_text"

    # Content validation: the input document is unsuitable
    NO_CONTENT = "no_content"
    TOO_SHORT = "too_short"
    TOO_LARGE = "too_large"
    IMAGE_BASED = "image_based"
    STILL_ARTIFACTS = "still_artifacts"


_USER_FACING_KINDS = frozenset(
    {
        ExtractionErrorKind.NO_CONTENT,
        ExtractionErrorKind.TOO_SHORT,
        ExtractionErrorKind.TOO_LARGE,
        ExtractionErrorKind.IMAGE_BASED,
        ExtractionErrorKind.STILL_ARTIFACTS,
    }
)

_MESSAGES = {
    ExtractionErrorKind.UNSUPPORTED_FORMAT: "unsupported file format",
    ExtractionErrorKind.OPEN_FAILED: "failed to open document",
    ExtractionErrorKind.INSUFFICIENT_TEXT: "no readable text found in document",
    ExtractionErrorKind.RASTERIZATION_FAILED: (
        "no readable text found via PDF parsing, aggressive extraction, or OCR; "
        "the PDF might be image-based, corrupted, or have very complex formatting"
    ),
    ExtractionErrorKind.OCR_INSUFFICIENT_TEXT: (
        "OCR found too little text; the PDF might be corrupted or contain "
        "no readable text"
    ),
    ExtractionErrorKind.NO_CONTENT: "no text content found in the file",
    ExtractionErrorKind.TOO_SHORT: "file content is too short to be a valid resume",
    ExtractionErrorKind.TOO_LARGE: "file content is too large",
    ExtractionErrorKind.IMAGE_BASED: (
        "insufficient text content; the document might be image-based"
    ),
    ExtractionErrorKind.STILL_ARTIFACTS: (
        "extracted content appears to be PDF structure rather than readable text"
    ),
}


class ExtractionError(Exception):
    """Typed extraction failure raised across the pipeline boundary.

    Attributes:
        kind: Which terminal failure occurred.
        detail: Optional context (counts, tool output) appended to the message.
    """

    def __init__(self, kind: ExtractionErrorKind, detail: str | None = None):
        self.kind = kind
        self.detail = detail
        message = _MESSAGES[kind]
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def code(self) -> str:
        """Stable upper-case error code, e.g. ``"TOO_SHORT"``."""
        return self.kind.name

    @property
    def user_facing(self) -> bool:
        """True when the document is unsuitable rather than the pipeline broken."""
        return self.kind in _USER_FACING_KINDS


@dataclass(frozen=True)
class SourceDocument:
    """Uploaded file content plus its declared extension.

    Attributes:
        content: Raw file bytes.
        extension: Lower-cased extension including the dot (``".pdf"``),
            or an empty string when the upload had none.
        name: Display name used in log messages.
    """

    content: bytes
    extension: str
    name: str = "document"

    @classmethod
    def from_path(cls, path: Path) -> SourceDocument:
        """Read a staged file once and wrap it as a SourceDocument."""
        path = Path(path)
        return cls(
            content=path.read_bytes(),
            extension=path.suffix.lower(),
            name=path.name,
        )


@dataclass(frozen=True)
class TextFragment:
    """One text-showing unit from a PDF content stream, before validation."""

    text: str
    page_number: int


@dataclass(frozen=True)
class PageContent:
    """Fragments of one page in content-stream order (pages are 1-indexed)."""

    page_number: int
    fragments: tuple[TextFragment, ...] = ()


@dataclass
class PageStats:
    """Per-page segment counts recorded by the PDF extractors."""

    page_number: int
    total_segments: int = 0
    valid_segments: int = 0
    filtered_segments: int = 0
    chars_extracted: int = 0


@dataclass
class ExtractionStats:
    """Diagnostic counters for one extraction attempt."""

    path: ExtractionPath = ExtractionPath.FAILED
    pages: list[PageStats] = field(default_factory=list)
    char_count: int = 0
    word_count: int = 0

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass
class ExtractionOutcome:
    """Result of one extraction stage or of the whole pipeline.

    Exactly one of ``text`` (on success) or ``error`` (on failure) is
    meaningful. Build instances with :meth:`succeeded` / :meth:`failed`.
    """

    success: bool
    text: str = ""
    path: ExtractionPath = ExtractionPath.FAILED
    error: ExtractionErrorKind | None = None
    detail: str | None = None
    stats: ExtractionStats = field(default_factory=ExtractionStats)

    @classmethod
    def succeeded(
        cls,
        text: str,
        path: ExtractionPath,
        stats: ExtractionStats | None = None,
    ) -> ExtractionOutcome:
        stats = stats or ExtractionStats()
        stats.path = path
        stats.char_count = len(text)
        stats.word_count = len(text.split())
        return cls(success=True, text=text, path=path, stats=stats)

    @classmethod
    def failed(
        cls,
        kind: ExtractionErrorKind,
        detail: str | None = None,
        path: ExtractionPath = ExtractionPath.FAILED,
        stats: ExtractionStats | None = None,
    ) -> ExtractionOutcome:
        return cls(
            success=False,
            path=path,
            error=kind,
            detail=detail,
            stats=stats or ExtractionStats(),
        )

    def to_error(self) -> ExtractionError:
        """Convert a failed outcome into the exception raised to callers."""
        if self.success or self.error is None:
            raise ValueError("to_error() called on a successful outcome")
        return ExtractionError(self.error, self.detail)
