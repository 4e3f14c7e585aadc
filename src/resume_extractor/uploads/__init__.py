"""Upload ingestion: stage a file, extract its text, never keep a failure.

Takes an uploaded file's bytes, stages them in the configured storage
directory, runs the extraction pipeline against the staged copy, and reports
the outcome as an :class:`UploadResult`. If extraction fails for any reason
the staged file is deleted before the result is returned -- a failed upload
never survives on disk.

Public API:
    ingest_upload(content, filename, pipeline_settings, extraction_settings)
        -> UploadResult
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from resume_extractor.config.settings import (
    PROJECT_ROOT,
    ExtractionSettings,
    PipelineSettings,
)
from resume_extractor.extractor.dump import dump_path_for, write_extraction_dump
from resume_extractor.extractor.ocr import OcrTools
from resume_extractor.extractor.service import extract_file
from resume_extractor.uploads.staging import StagedUpload, discard_staged, stage_upload

logger = logging.getLogger(__name__)

__all__ = [
    "StagedUpload",
    "UploadResult",
    "discard_staged",
    "ingest_upload",
    "stage_upload",
]


@dataclass
class UploadResult:
    """Outcome of ingesting one uploaded file."""

    success: bool
    resume_id: str | None = None
    title: str = ""
    file_type: str = ""
    file_size: int = 0
    staged_path: Path | None = None
    extracted_text: str = ""
    extraction_path: str | None = None
    error_code: str | None = None
    error: str | None = None
    user_facing: bool = False


def _resolve(directory: str) -> Path:
    return (PROJECT_ROOT / directory).resolve()


def ingest_upload(
    content: bytes,
    filename: str,
    pipeline_settings: PipelineSettings,
    extraction_settings: ExtractionSettings,
    ocr_tools: OcrTools | None = None,
) -> UploadResult:
    """Stage an upload and extract its text.

    Args:
        content: Raw upload bytes.
        filename: Client-supplied filename (becomes the title).
        pipeline_settings: Storage and dump directories.
        extraction_settings: Extraction configuration.
        ocr_tools: Optional rasterizer/OCR implementation.

    Returns:
        UploadResult with the extracted text on success, or with
        success=False and the error code, message, and user-facing flag.
        On failure ``staged_path`` is None because the file was discarded.
    """
    result = UploadResult(
        success=False,
        title=filename,
        file_type=Path(filename).suffix.lower(),
        file_size=len(content),
    )

    try:
        staged = stage_upload(content, filename, _resolve(pipeline_settings.storage_dir))
    except OSError as e:
        logger.error("Failed to stage upload %s: %s", filename, e)
        result.error_code = "STORAGE_FAILED"
        result.error = f"failed to save file: {e}"
        return result

    result.resume_id = staged.resume_id

    try:
        outcome = extract_file(staged.path, extraction_settings, ocr_tools)
    except Exception:
        logger.exception("Unexpected error extracting upload %s", filename)
        discard_staged(staged.path)
        result.error_code = "INTERNAL_ERROR"
        result.error = "unexpected error during text extraction"
        return result

    if pipeline_settings.dump_dir:
        dump_path = dump_path_for(
            _resolve(pipeline_settings.dump_dir), filename, staged.resume_id
        )
        try:
            write_extraction_dump(dump_path, outcome, filename)
        except OSError as e:
            logger.warning("Failed to write extraction dump %s: %s", dump_path, e)

    if not outcome.success:
        error = outcome.to_error()
        discard_staged(staged.path)
        result.error_code = error.code
        result.error = f"failed to extract text from file: {error}"
        result.user_facing = error.user_facing
        result.extraction_path = outcome.path.value
        logger.warning(
            "Upload %s rejected (%s), staged file discarded", filename, error.code
        )
        return result

    result.success = True
    result.staged_path = staged.path
    result.extracted_text = outcome.text
    result.extraction_path = outcome.path.value
    logger.info(
        "Upload %s accepted as %s (%d chars via %s)",
        filename,
        staged.resume_id,
        len(outcome.text),
        outcome.path.value,
    )
    return result
