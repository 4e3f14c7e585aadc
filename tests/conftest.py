"""Shared pytest fixtures for the extraction pipeline tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from resume_extractor.config import ExtractionSettings, PipelineSettings
from resume_extractor.extractor.types import PageContent, TextFragment


def make_pages(*pages):
    """Build parsed pages from lists of fragment strings; ``None`` stays None."""
    built = []
    for number, fragments in enumerate(pages, start=1):
        if fragments is None:
            built.append(None)
            continue
        built.append(
            PageContent(
                page_number=number,
                fragments=tuple(TextFragment(text, number) for text in fragments),
            )
        )
    return built


class FakeOcrTools:
    """Stand-in for the external rasterizer and Tesseract.

    Writes one placeholder PNG per entry of *texts* and returns that text when
    the image is recognised. Entries that are exceptions are raised instead.
    """

    def __init__(self, texts=(), rasterize_error=None):
        self.texts = list(texts)
        self.rasterize_error = rasterize_error
        self.work_dir = None
        self.rasterize_calls = 0
        self.ocr_calls = []

    def rasterize(self, pdf_path: Path, work_dir: Path) -> list[Path]:
        self.rasterize_calls += 1
        self.work_dir = work_dir
        assert pdf_path.exists()
        if self.rasterize_error is not None:
            raise self.rasterize_error
        images = []
        for index in range(len(self.texts)):
            image = work_dir / f"page-{index:03d}.png"
            image.write_bytes(b"\x89PNG placeholder")
            images.append(image)
        return images

    def ocr(self, image_path: Path) -> str:
        self.ocr_calls.append(image_path.name)
        index = int(image_path.stem.split("-")[1])
        result = self.texts[index]
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def settings():
    return ExtractionSettings()


@pytest.fixture
def pipeline_settings(tmp_path):
    return PipelineSettings(
        storage_dir=str(tmp_path / "uploads"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def restore_root_logging():
    """Remove the handlers setup_logging installs during a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


RESUME_TEXT = (
    "Jiwoo Lee\n"
    "Senior Software Engineer\n"
    "Built payment services in Python at Acme Corp\n"
)
