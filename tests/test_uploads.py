"""Tests for upload staging and ingestion."""

import uuid

import frontmatter
from conftest import RESUME_TEXT, FakeOcrTools

from resume_extractor.config import PipelineSettings
from resume_extractor.uploads import discard_staged, ingest_upload, stage_upload


class TestStageUpload:
    def test_writes_uuid_named_file(self, tmp_path):
        staged = stage_upload(b"hello", "My Resume.PDF", tmp_path / "store")

        assert staged.path.parent == tmp_path / "store"
        assert staged.path.suffix == ".pdf"
        assert uuid.UUID(staged.path.stem) == uuid.UUID(staged.resume_id)
        assert staged.path.read_bytes() == b"hello"
        assert staged.size == 5
        assert list((tmp_path / "store").glob("*.tmp")) == []

    def test_ids_are_unique(self, tmp_path):
        first = stage_upload(b"a", "a.txt", tmp_path)
        second = stage_upload(b"b", "a.txt", tmp_path)

        assert first.path != second.path

    def test_discard(self, tmp_path):
        staged = stage_upload(b"x", "r.txt", tmp_path)

        assert discard_staged(staged.path)
        assert not staged.path.exists()
        assert discard_staged(staged.path)


class TestIngestUpload:
    def test_success_keeps_staged_file(self, pipeline_settings, settings):
        result = ingest_upload(
            RESUME_TEXT.encode("utf-8"), "resume.txt", pipeline_settings, settings
        )

        assert result.success
        assert result.title == "resume.txt"
        assert result.file_type == ".txt"
        assert result.file_size == len(RESUME_TEXT.encode("utf-8"))
        assert result.extracted_text == RESUME_TEXT.strip()
        assert result.extraction_path == "plaintext"
        assert result.staged_path.exists()
        assert result.staged_path.name == f"{result.resume_id}.txt"

    def test_failure_discards_staged_file(self, pipeline_settings, settings, tmp_path):
        result = ingest_upload(b"too short", "resume.txt", pipeline_settings, settings)

        assert not result.success
        assert result.error_code == "TOO_SHORT"
        assert result.user_facing
        assert result.staged_path is None
        assert list((tmp_path / "uploads").iterdir()) == []

    def test_tooling_failure_is_not_user_facing(self, pipeline_settings, settings, tmp_path):
        result = ingest_upload(
            b"this is not a pdf file", "scan.pdf", pipeline_settings, settings, FakeOcrTools([])
        )

        assert result.error_code == "OPEN_FAILED"
        assert not result.user_facing
        assert list((tmp_path / "uploads").iterdir()) == []

    def test_storage_failure(self, settings, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        pipeline = PipelineSettings(storage_dir=str(blocker / "uploads"))

        result = ingest_upload(RESUME_TEXT.encode("utf-8"), "resume.txt", pipeline, settings)

        assert not result.success
        assert result.error_code == "STORAGE_FAILED"

    def test_dump_written_when_configured(self, settings, tmp_path):
        pipeline = PipelineSettings(
            storage_dir=str(tmp_path / "uploads"),
            dump_dir=str(tmp_path / "dumps"),
        )

        result = ingest_upload(RESUME_TEXT.encode("utf-8"), "resume.txt", pipeline, settings)

        dump_path = tmp_path / "dumps" / f"resume_{result.resume_id}_extracted.md"
        post = frontmatter.load(dump_path)
        assert post.metadata["source_file"] == "resume.txt"
        assert post.metadata["extraction_path"] == "plaintext"
        assert post.content == RESUME_TEXT.strip()

    def test_same_filename_keeps_separate_dumps(self, settings, tmp_path):
        pipeline = PipelineSettings(
            storage_dir=str(tmp_path / "uploads"),
            dump_dir=str(tmp_path / "dumps"),
        )

        first = ingest_upload(RESUME_TEXT.encode("utf-8"), "resume.txt", pipeline, settings)
        second = ingest_upload(RESUME_TEXT.encode("utf-8"), "resume.txt", pipeline, settings)

        assert first.resume_id != second.resume_id
        assert len(list((tmp_path / "dumps").glob("resume_*_extracted.md"))) == 2
