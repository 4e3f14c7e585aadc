"""Extraction dump writer with YAML frontmatter.

Writes the text a pipeline run produced to disk, with structured YAML
frontmatter describing how it was obtained, so an operator can inspect
exactly what would be handed to the optimization service.

Public API:
    dump_path_for(dump_dir, source_name, resume_id) -> Path
    write_extraction_dump(...)            -> None
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path

import frontmatter

from resume_extractor.extractor.types import ExtractionOutcome

logger = logging.getLogger(__name__)


def dump_path_for(
    dump_dir: Path, source_name: str, resume_id: str | None = None
) -> Path:
    """Return ``<dump_dir>/<source stem>_extracted.md``.

    With a *resume_id* the name becomes ``<source stem>_<resume_id>_extracted.md``
    so uploads that share a filename keep separate dumps.
    """
    stem = Path(source_name).stem
    if resume_id:
        stem = f"{stem}_{resume_id}"
    return Path(dump_dir) / f"{stem}_extracted.md"


def write_extraction_dump(
    dump_path: Path,
    outcome: ExtractionOutcome,
    source_name: str,
) -> None:
    """Write extracted text to disk with YAML frontmatter metadata.

    Frontmatter fields:

    - ``source_file``: Original upload filename
    - ``extraction_path``: Which stage produced the text
    - ``extraction_date``: UTC ISO-8601 timestamp
    - ``char_count``: Characters in the extracted text
    - ``word_count``: Whitespace-separated words in the extracted text
    - ``pages_processed``: Pages the PDF extractors walked (0 for text files)

    Failed outcomes are written too, with an ``error`` field and no body.

    Args:
        dump_path: Destination path for the dump file.
        outcome: Final pipeline outcome.
        source_name: Source filename (not full path).
    """
    post = frontmatter.Post(outcome.text if outcome.success else "")
    post.metadata["source_file"] = source_name
    post.metadata["extraction_path"] = outcome.path.value
    post.metadata["extraction_date"] = (
        datetime.datetime.now(datetime.timezone.utc).isoformat()
    )
    post.metadata["char_count"] = outcome.stats.char_count
    post.metadata["word_count"] = outcome.stats.word_count
    post.metadata["pages_processed"] = outcome.stats.page_count
    if not outcome.success:
        post.metadata["error"] = outcome.error.name

    dump_path.parent.mkdir(parents=True, exist_ok=True)

    with open(dump_path, "w", encoding="utf-8") as f:
        f.write(frontmatter.dumps(post))

    logger.info(
        "Wrote extraction dump to %s (%d chars, %d pages)",
        dump_path.name,
        outcome.stats.char_count,
        outcome.stats.page_count,
    )
