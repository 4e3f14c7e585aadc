"""Smoke test: full extraction chain against real PDFs and real tools.

Builds PDFs in memory with PyMuPDF and runs them through the whole pipeline,
including the upload boundary. The OCR case needs Tesseract plus either
``pdfimages`` (poppler-utils) or ImageMagick ``convert`` on PATH and is
skipped otherwise.

Usage:
    pytest tests/smoke -v
"""

from __future__ import annotations

import shutil

import pymupdf
import pytest

from resume_extractor.config import ExtractionSettings, PipelineSettings
from resume_extractor.extractor import ExtractionPath, SourceDocument, extract_document
from resume_extractor.uploads import ingest_upload

LINES = [
    "Jiwoo Lee",
    "Senior Software Engineer",
    "Experience",
    "Built payment services in Python at Acme Corp",
    "Education",
    "BSc Computer Science, KAIST",
]

_HAS_OCR_TOOLS = shutil.which("tesseract") is not None and (
    shutil.which("pdfimages") is not None or shutil.which("convert") is not None
)


def _text_pdf(fontsize: int = 11) -> bytes:
    doc = pymupdf.open()
    page = doc.new_page()
    for index, line in enumerate(LINES):
        page.insert_text((72, 72 + fontsize * 2 * index), line, fontsize=fontsize)
    content = doc.tobytes()
    doc.close()
    return content


def _image_pdf() -> bytes:
    """Render the text PDF to a bitmap and wrap it in a PDF with no text layer."""
    source = pymupdf.open(stream=_text_pdf(fontsize=20), filetype="pdf")
    pixmap = source[0].get_pixmap(dpi=200)
    png = pixmap.tobytes("png")
    rect = source[0].rect
    source.close()

    doc = pymupdf.open()
    page = doc.new_page(width=rect.width, height=rect.height)
    page.insert_image(page.rect, stream=png)
    content = doc.tobytes()
    doc.close()
    return content


def test_text_pdf_through_upload(tmp_path):
    pipeline = PipelineSettings(
        storage_dir=str(tmp_path / "uploads"),
        dump_dir=str(tmp_path / "dumps"),
    )

    result = ingest_upload(_text_pdf(), "resume.pdf", pipeline, ExtractionSettings())

    assert result.success, result.error
    assert result.extraction_path == "structured"
    assert "Senior Software Engineer" in result.extracted_text
    assert result.staged_path.read_bytes().startswith(b"%PDF")
    assert (tmp_path / "dumps" / f"resume_{result.resume_id}_extracted.md").exists()


@pytest.mark.skipif(not _HAS_OCR_TOOLS, reason="tesseract/pdfimages not installed")
def test_image_pdf_uses_ocr():
    outcome = extract_document(
        SourceDocument(content=_image_pdf(), extension=".pdf", name="scan.pdf"),
        ExtractionSettings(),
    )

    assert outcome.path is ExtractionPath.OCR
    assert outcome.success, outcome.detail
    assert "engineer" in outcome.text.lower()
