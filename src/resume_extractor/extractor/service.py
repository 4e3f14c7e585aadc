"""Per-document text extraction service with tiered fallback.

Orchestrates the extraction pipeline for a single uploaded document:

1. **Structured** -- classifier-filtered content-stream text.
2. **Aggressive** -- every fragment, unfiltered, cleaned by text repair.
3. **OCR** -- rasterize pages and run Tesseract, last resort for image PDFs.

Stages run in strict order and stop at the first success. Whatever text is
produced then goes through content validation, and PDF text through the
artifact residue check, before it is returned.

Plain text (``.txt`` and unknown extensions) skips the chain: it is decoded,
validated as received, and normalized with the cleanup-only subset of text
repair.

Edge cases handled:
- Encrypted or unreadable PDFs: ``OPEN_FAILED`` without any fallback.
- Binary content under an unknown extension: ``UNSUPPORTED_FORMAT``.
- OCR disabled by configuration: the aggressive stage's failure surfaces.
"""

from __future__ import annotations

import logging
from pathlib import Path

from resume_extractor.config.settings import ExtractionSettings
from resume_extractor.extractor.aggressive import extract_aggressive
from resume_extractor.extractor.ocr import OcrTools, extract_ocr
from resume_extractor.extractor.pdf_source import load_pages
from resume_extractor.extractor.quality import looks_like_pdf_artifacts, validate_content
from resume_extractor.extractor.repair import clean_plain_text
from resume_extractor.extractor.structured import extract_structured
from resume_extractor.extractor.types import (
    ExtractionError,
    ExtractionErrorKind,
    ExtractionOutcome,
    ExtractionPath,
    ExtractionStats,
    SourceDocument,
)

logger = logging.getLogger(__name__)

__all__ = [
    "extract_document",
    "extract_file",
    "extract_text",
]

_PDF_EXTENSION = ".pdf"
_TEXT_EXTENSION = ".txt"


def _decode_text(content: bytes) -> str:
    """Decode a declared text file, UTF-8 first then single-byte encodings."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    try:
        text = content.decode("cp1252")
        logger.debug("Decoded text file as cp1252")
        return text
    except UnicodeDecodeError:
        # latin-1 maps every byte
        logger.debug("Decoded text file as latin-1")
        return content.decode("latin-1")


def _decode_unknown(document: SourceDocument) -> str:
    """Decode a file with an unrecognised extension, rejecting binary data.

    Raises:
        ExtractionError: ``UNSUPPORTED_FORMAT`` for NUL bytes or invalid UTF-8.
    """
    if b"\x00" in document.content:
        raise ExtractionError(
            ExtractionErrorKind.UNSUPPORTED_FORMAT,
            f"binary content in {document.extension or 'extensionless'} file",
        )
    try:
        return document.content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ExtractionError(
            ExtractionErrorKind.UNSUPPORTED_FORMAT,
            f"{document.extension or 'extensionless'} file is not UTF-8 text",
        ) from e


def _validated(
    outcome: ExtractionOutcome,
    settings: ExtractionSettings,
    check_artifacts: bool,
) -> ExtractionOutcome:
    """Apply content validation (and optionally the residue check) to a success."""
    kind = validate_content(outcome.text, settings)
    if kind is None and check_artifacts and looks_like_pdf_artifacts(outcome.text, settings):
        kind = ExtractionErrorKind.STILL_ARTIFACTS

    if kind is None:
        return outcome

    return ExtractionOutcome.failed(
        kind,
        detail=f"{len(outcome.text)} characters via {outcome.path.value}",
        path=outcome.path,
        stats=outcome.stats,
    )


def _extract_plain_text(
    document: SourceDocument,
    settings: ExtractionSettings,
) -> ExtractionOutcome:
    if document.extension == _TEXT_EXTENSION:
        raw = _decode_text(document.content)
    else:
        try:
            raw = _decode_unknown(document)
        except ExtractionError as e:
            logger.warning("Unsupported file %s: %s", document.name, e)
            return ExtractionOutcome.failed(e.kind, detail=e.detail)

    text = clean_plain_text(raw)
    logger.info(
        "Plain text extraction: %s (%d chars raw, %d after cleanup)",
        document.name,
        len(raw),
        len(text),
    )

    # Limits apply to the upload as received
    kind = validate_content(raw, settings)
    if kind is not None:
        return ExtractionOutcome.failed(
            kind,
            detail=f"{len(raw)} characters via plaintext",
            path=ExtractionPath.PLAINTEXT,
            stats=ExtractionStats(path=ExtractionPath.PLAINTEXT),
        )

    return ExtractionOutcome.succeeded(text, ExtractionPath.PLAINTEXT)


def _extract_pdf(
    document: SourceDocument,
    settings: ExtractionSettings,
    ocr_tools: OcrTools | None,
) -> ExtractionOutcome:
    try:
        pages = load_pages(document)
    except ExtractionError as e:
        return ExtractionOutcome.failed(e.kind, detail=e.detail)

    logger.info("Parsed %s: %d pages", document.name, len(pages))

    # --- Tier 1: structured ---

    outcome = extract_structured(pages, settings)
    if outcome.success:
        logger.info(
            "Extraction succeeded via structured: %s (%d chars)",
            document.name,
            len(outcome.text),
        )
        return _validated(outcome, settings, check_artifacts=True)

    logger.warning(
        "Structured extraction failed for %s (%s), falling back to aggressive",
        document.name,
        outcome.detail,
    )

    # --- Tier 2: aggressive ---

    outcome = extract_aggressive(pages, settings)
    if outcome.success:
        logger.info(
            "Extraction succeeded via aggressive: %s (%d chars)",
            document.name,
            len(outcome.text),
        )
        return _validated(outcome, settings, check_artifacts=True)

    if not settings.ocr_enabled:
        logger.warning(
            "Aggressive extraction failed for %s (%s) and OCR is disabled",
            document.name,
            outcome.detail,
        )
        return outcome

    logger.warning(
        "Aggressive extraction failed for %s (%s), falling back to OCR",
        document.name,
        outcome.detail,
    )

    # --- Tier 3: OCR ---

    outcome = extract_ocr(document, settings, ocr_tools)
    if outcome.success:
        logger.info(
            "Extraction succeeded via OCR: %s (%d chars)",
            document.name,
            len(outcome.text),
        )
        return _validated(outcome, settings, check_artifacts=True)

    logger.error(
        "All extraction tiers failed for %s: %s", document.name, outcome.error.name
    )
    return outcome


def extract_document(
    document: SourceDocument,
    settings: ExtractionSettings,
    ocr_tools: OcrTools | None = None,
) -> ExtractionOutcome:
    """Extract resume-ready text from one document.

    Dispatches on the declared extension: ``.pdf`` runs the structured,
    aggressive, OCR chain; everything else is treated as text.

    Args:
        document: Uploaded bytes plus declared extension.
        settings: Extraction configuration (thresholds, OCR tooling).
        ocr_tools: Rasterizer/OCR implementation for the OCR tier; defaults
            to the external Tesseract toolchain.

    Returns:
        ExtractionOutcome with validated text on success, or with
        success=False and the terminal error kind.
    """
    logger.info(
        "Extracting %s (%s, %d bytes)",
        document.name,
        document.extension or "no extension",
        len(document.content),
    )

    if document.extension == _PDF_EXTENSION:
        outcome = _extract_pdf(document, settings, ocr_tools)
    else:
        outcome = _extract_plain_text(document, settings)

    if outcome.success:
        logger.info(
            "Extraction complete: %s via %s (%d chars, %d words)",
            document.name,
            outcome.path.value,
            outcome.stats.char_count,
            outcome.stats.word_count,
        )
    else:
        logger.warning(
            "Extraction failed: %s (%s: %s)",
            document.name,
            outcome.error.name,
            outcome.detail,
        )
    return outcome


def extract_text(
    document: SourceDocument,
    settings: ExtractionSettings,
    ocr_tools: OcrTools | None = None,
) -> str:
    """Extract text or raise the typed failure.

    Raises:
        ExtractionError: The terminal failure of the pipeline.
    """
    outcome = extract_document(document, settings, ocr_tools)
    if not outcome.success:
        raise outcome.to_error()
    return outcome.text


def extract_file(
    path: Path,
    settings: ExtractionSettings,
    ocr_tools: OcrTools | None = None,
) -> ExtractionOutcome:
    """Read a staged file once and extract it.

    Args:
        path: Path to the staged upload on disk.
        settings: Extraction configuration.
        ocr_tools: Optional rasterizer/OCR implementation.

    Returns:
        ExtractionOutcome; an unreadable file yields ``OPEN_FAILED``.
    """
    path = Path(path)
    try:
        document = SourceDocument.from_path(path)
    except OSError as e:
        logger.error("Cannot read %s: %s", path, e)
        return ExtractionOutcome.failed(ExtractionErrorKind.OPEN_FAILED, detail=str(e))
    return extract_document(document, settings, ocr_tools)
