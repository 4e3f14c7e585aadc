"""Tests for settings loading and logging setup."""

import json
import logging

from resume_extractor.config import (
    PROJECT_ROOT,
    ExtractionSettings,
    PipelineSettings,
    load_all_settings,
)
from resume_extractor.logging import setup_logging


class TestSettings:
    def test_yaml_defaults(self):
        settings = ExtractionSettings()

        assert (PROJECT_ROOT / "config" / "extraction.yaml").exists()
        assert settings.min_text_length == 50
        assert settings.max_text_length == 300_000
        assert settings.ocr_dpi == 300
        assert settings.ocr_enabled is True

    def test_env_overrides_yaml(self, monkeypatch):
        monkeypatch.setenv("EXTRACTION_OCR_DPI", "150")
        monkeypatch.setenv("PIPELINE_STORAGE_DIR", "/srv/uploads")

        assert ExtractionSettings().ocr_dpi == 150
        assert PipelineSettings().storage_dir == "/srv/uploads"

    def test_init_overrides_env(self, monkeypatch):
        monkeypatch.setenv("EXTRACTION_OCR_ENABLED", "true")

        assert ExtractionSettings(ocr_enabled=False).ocr_enabled is False

    def test_load_all_settings(self):
        extraction, pipeline = load_all_settings()

        assert isinstance(extraction, ExtractionSettings)
        assert isinstance(pipeline, PipelineSettings)
        assert pipeline.dump_dir is None


class TestSetupLogging:
    def test_json_file_and_console(self, tmp_path, restore_root_logging):
        log_path = setup_logging(log_dir=str(tmp_path))

        logging.getLogger("resume_extractor.test").info("Extracted %d chars", 42)
        for handler in logging.getLogger().handlers:
            handler.flush()

        root = logging.getLogger()
        assert len(root.handlers) == 2
        record = json.loads(log_path.read_text().splitlines()[-1])
        assert record["message"] == "Extracted 42 chars"
        assert record["level"] == "INFO"
        assert record["component"] == "resume_extractor.test"
        assert "timestamp" in record
        assert record["service"] == "resume-extractor"
        assert log_path == tmp_path / "extraction.log"
