"""On-disk staging of uploaded files with cleanup on failure.

Writes uploaded bytes to ``<storage_dir>/<uuid><ext>`` through a .tmp
intermediate file. On success the .tmp file is renamed to the final path; on
any failure the .tmp file is deleted so partial uploads never accumulate on
disk. The original extension is preserved because extraction dispatches on
it.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedUpload:
    """A file written to the storage directory, ready for extraction."""

    resume_id: str
    original_name: str
    extension: str
    path: Path
    size: int


def stage_upload(content: bytes, filename: str, storage_dir: Path) -> StagedUpload:
    """Persist uploaded bytes under a fresh UUID, keeping the extension.

    Args:
        content: Raw upload bytes.
        filename: Client-supplied filename; only its extension is reused.
        storage_dir: Directory for staged uploads (created if missing).

    Returns:
        StagedUpload describing the final file.

    Raises:
        OSError: If the file cannot be written or renamed.
    """
    resume_id = str(uuid.uuid4())
    extension = Path(filename).suffix.lower()
    storage_dir = Path(storage_dir)
    dest_path = storage_dir / f"{resume_id}{extension}"
    tmp_path = storage_dir / f"{resume_id}{extension}.tmp"

    logger.info("Staging upload %s -> %s", filename, dest_path)

    try:
        storage_dir.mkdir(parents=True, exist_ok=True)
        tmp_path.write_bytes(content)
        tmp_path.rename(dest_path)
    finally:
        # Successful path already renamed it
        if tmp_path.exists():
            try:
                tmp_path.unlink()
                logger.debug("Cleaned up temp file %s", tmp_path)
            except OSError:
                logger.warning("Failed to clean up temp file %s", tmp_path)

    logger.debug("Staged %d bytes at %s", len(content), dest_path)
    return StagedUpload(
        resume_id=resume_id,
        original_name=filename,
        extension=extension,
        path=dest_path,
        size=len(content),
    )


def discard_staged(path: Path) -> bool:
    """Delete a staged upload. Returns True if nothing remains on disk."""
    path = Path(path)
    try:
        path.unlink()
    except FileNotFoundError:
        return True
    except OSError:
        logger.warning("Failed to remove staged upload %s", path, exc_info=True)
        return False
    logger.info("Removed staged upload %s", path.name)
    return True
