"""Last-resort OCR extraction for image-based PDFs.

Third tier of the extraction fallback chain. The PDF is rasterized to page
images by an external tool and every image is run through Tesseract. All
external tooling sits behind the :class:`OcrTools` protocol so the pipeline
can be exercised with fakes.

Resource handling: each call owns one temporary working directory, created
on entry and removed on every exit path. A failure to remove it is logged
and never replaces the outcome that was computed.

Failure handling: a rasterizer or OCR invocation that exits non-zero, times
out, or is missing raises :class:`OcrToolError`. Rasterizer errors fall
through to the secondary rasterizer; OCR errors skip that one image.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Protocol

import pytesseract
from PIL import Image

from resume_extractor.config.settings import ExtractionSettings
from resume_extractor.extractor.repair import repair
from resume_extractor.extractor.types import (
    ExtractionErrorKind,
    ExtractionOutcome,
    ExtractionPath,
    ExtractionStats,
    SourceDocument,
)

logger = logging.getLogger(__name__)

__all__ = [
    "ExternalOcrTools",
    "OcrToolError",
    "OcrTools",
    "extract_ocr",
]

_IMAGE_PATTERNS = (("*.png",), ("*.jpg", "*.jpeg"))


class OcrToolError(Exception):
    """An external rasterizer or OCR invocation failed."""


class OcrTools(Protocol):
    """Capability interface for rasterization and OCR."""

    def rasterize(self, pdf_path: Path, work_dir: Path) -> list[Path]:
        """Render *pdf_path* into images inside *work_dir* and return them."""
        ...

    def ocr(self, image_path: Path) -> str:
        """Return the text recognised in one image."""
        ...


def _run_tool(cmd: list[str], timeout: int) -> None:
    """Run an external tool with a bounded timeout.

    Raises:
        OcrToolError: On a missing binary, timeout, or non-zero exit code.
    """
    logger.debug("Running %s (timeout %ds)", cmd[0], timeout)
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise OcrToolError(f"{cmd[0]} not found") from e
    except subprocess.TimeoutExpired as e:
        raise OcrToolError(f"{cmd[0]} timed out after {timeout}s") from e
    except OSError as e:
        raise OcrToolError(f"{cmd[0]} could not be started: {e}") from e

    if result.returncode != 0:
        stderr = result.stderr.decode("utf-8", errors="replace").strip()
        raise OcrToolError(f"{cmd[0]} exited with code {result.returncode}: {stderr}")


def _find_images(work_dir: Path) -> list[Path]:
    """Return rendered images, PNG preferred over JPEG, in name order."""
    for patterns in _IMAGE_PATTERNS:
        images = sorted(
            path for pattern in patterns for path in work_dir.glob(pattern)
        )
        if images:
            return images
    return []


class ExternalOcrTools:
    """Rasterize with ``pdfimages``/ImageMagick and recognise with Tesseract.

    Args:
        settings: Extraction configuration (tool commands, DPI, language,
            timeouts).
    """

    def __init__(self, settings: ExtractionSettings):
        self.settings = settings
        # Configure tesseract executable path if non-default
        if settings.tesseract_cmd != "tesseract":
            pytesseract.pytesseract.tesseract_cmd = settings.tesseract_cmd

    def rasterize(self, pdf_path: Path, work_dir: Path) -> list[Path]:
        settings = self.settings
        try:
            _run_tool(
                [settings.pdfimages_cmd, "-png", str(pdf_path), str(work_dir / "page")],
                settings.rasterize_timeout_seconds,
            )
            images = _find_images(work_dir)
            if images:
                logger.info("pdfimages produced %d images", len(images))
                return images
            logger.warning("pdfimages produced no images, trying %s", settings.convert_cmd)
        except OcrToolError as e:
            logger.warning("pdfimages failed (%s), trying %s", e, settings.convert_cmd)

        _run_tool(
            [
                settings.convert_cmd,
                "-density",
                str(settings.ocr_dpi),
                str(pdf_path),
                str(work_dir / "page.png"),
            ],
            settings.rasterize_timeout_seconds,
        )
        images = _find_images(work_dir)
        logger.info("%s produced %d images", settings.convert_cmd, len(images))
        return images

    def ocr(self, image_path: Path) -> str:
        try:
            with Image.open(image_path) as image:
                return pytesseract.image_to_string(
                    image,
                    lang=self.settings.ocr_language,
                    config="-c preserve_interword_spaces=1",
                    timeout=self.settings.ocr_timeout_seconds,
                )
        except pytesseract.TesseractNotFoundError as e:
            raise OcrToolError("tesseract not found") from e
        except pytesseract.TesseractError as e:
            raise OcrToolError(f"tesseract failed: {e}") from e
        except RuntimeError as e:
            # pytesseract signals its timeout with a bare RuntimeError
            raise OcrToolError(f"tesseract timed out: {e}") from e
        except OSError as e:
            raise OcrToolError(f"tesseract could not read {image_path.name}: {e}") from e


@contextmanager
def _scoped_work_dir() -> Iterator[Path]:
    """Yield a fresh temporary directory and always try to remove it."""
    work_dir = Path(tempfile.mkdtemp(prefix="resume_ocr_"))
    try:
        yield work_dir
    finally:
        try:
            shutil.rmtree(work_dir)
            logger.debug("Removed OCR working directory %s", work_dir)
        except OSError:
            logger.warning(
                "Failed to remove OCR working directory %s", work_dir, exc_info=True
            )


def _ocr_images(images: list[Path], tools: OcrTools) -> str:
    """OCR every image, skipping the ones whose OCR fails."""
    parts: list[str] = []
    for idx, image in enumerate(images, start=1):
        try:
            text = tools.ocr(image).strip()
        except OcrToolError as e:
            logger.warning(
                "OCR failed for image %d/%d (%s), skipping: %s",
                idx,
                len(images),
                image.name,
                e,
            )
            continue

        if text:
            parts.append(text + "\n\n")
            logger.debug("Image %d/%d: %d chars", idx, len(images), len(text))
        else:
            logger.debug("Image %d/%d: no text found", idx, len(images))
    return "".join(parts)


def extract_ocr(
    document: SourceDocument,
    settings: ExtractionSettings,
    tools: OcrTools | None = None,
) -> ExtractionOutcome:
    """Rasterize a PDF and OCR its pages.

    Args:
        document: The uploaded PDF.
        settings: Extraction configuration (``ocr_min_chars``, tooling).
        tools: Rasterizer/OCR implementation; defaults to
            :class:`ExternalOcrTools`.

    Returns:
        ExtractionOutcome with repaired OCR text on success,
        ``RASTERIZATION_FAILED`` when no images could be produced, or
        ``OCR_INSUFFICIENT_TEXT`` when OCR recognised fewer than
        ``ocr_min_chars`` characters.
    """
    tools = tools or ExternalOcrTools(settings)
    stats = ExtractionStats(path=ExtractionPath.OCR)

    try:
        with _scoped_work_dir() as work_dir:
            pdf_path = work_dir / "source.pdf"
            pdf_path.write_bytes(document.content)

            try:
                images = tools.rasterize(pdf_path, work_dir)
            except OcrToolError as e:
                logger.warning("Rasterization failed for %s: %s", document.name, e)
                return ExtractionOutcome.failed(
                    ExtractionErrorKind.RASTERIZATION_FAILED,
                    detail=str(e),
                    path=ExtractionPath.OCR,
                    stats=stats,
                )

            if not images:
                logger.warning("No images generated from %s", document.name)
                return ExtractionOutcome.failed(
                    ExtractionErrorKind.RASTERIZATION_FAILED,
                    detail="no image files generated from PDF",
                    path=ExtractionPath.OCR,
                    stats=stats,
                )

            logger.info("Running OCR on %d images for %s", len(images), document.name)
            raw_text = _ocr_images(images, tools)
    except OSError as e:
        logger.error("OCR working directory unavailable for %s: %s", document.name, e)
        return ExtractionOutcome.failed(
            ExtractionErrorKind.RASTERIZATION_FAILED,
            detail=f"working directory unavailable: {e}",
            path=ExtractionPath.OCR,
            stats=stats,
        )

    if len(raw_text) < settings.ocr_min_chars:
        logger.warning(
            "OCR found only %d characters in %s", len(raw_text), document.name
        )
        return ExtractionOutcome.failed(
            ExtractionErrorKind.OCR_INSUFFICIENT_TEXT,
            detail=f"OCR found only {len(raw_text)} characters",
            path=ExtractionPath.OCR,
            stats=stats,
        )

    text = repair(raw_text)
    logger.info("OCR extraction produced %d chars from %s", len(text), document.name)
    return ExtractionOutcome.succeeded(text, ExtractionPath.OCR, stats)
