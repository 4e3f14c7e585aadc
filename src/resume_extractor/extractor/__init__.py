"""Resume text extraction pipeline.

Converts an uploaded resume (PDF or plain text) into clean, resume-ready
plaintext. PDFs go through structured, aggressive, and OCR extraction in
that order; every candidate is validated before it is returned.

Public API:
    extract_document(document, settings, ocr_tools=None) -> ExtractionOutcome
    extract_text(document, settings, ocr_tools=None)     -> str
    extract_file(path, settings, ocr_tools=None)         -> ExtractionOutcome
"""

from resume_extractor.extractor.ocr import ExternalOcrTools, OcrToolError, OcrTools
from resume_extractor.extractor.repair import clean_plain_text, repair
from resume_extractor.extractor.service import extract_document, extract_file, extract_text
from resume_extractor.extractor.types import (
    ExtractionError,
    ExtractionErrorKind,
    ExtractionOutcome,
    ExtractionPath,
    ExtractionStats,
    PageContent,
    SourceDocument,
    TextFragment,
)

__all__ = [
    "ExternalOcrTools",
    "ExtractionError",
    "ExtractionErrorKind",
    "ExtractionOutcome",
    "ExtractionPath",
    "ExtractionStats",
    "OcrToolError",
    "OcrTools",
    "PageContent",
    "SourceDocument",
    "TextFragment",
    "clean_plain_text",
    "extract_document",
    "extract_file",
    "extract_text",
    "repair",
]
