"""Pydantic settings models for resume text extraction.

Two settings classes load from separate YAML config files with environment
variable override support. Source priority (highest to lowest):

    1. Init keyword arguments (tests, CLI overrides)
    2. Environment variables (with prefix, e.g., EXTRACTION_OCR_DPI)
    3. .env file
    4. YAML config file (e.g., config/extraction.yaml)
    5. Default values defined here

Config paths are resolved relative to PROJECT_ROOT so the application works
regardless of the current working directory.
"""

from pathlib import Path
from typing import Optional

from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

# Resolve project root: settings.py -> config/ -> resume_extractor/ -> src/ -> repo root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

_CONFIG_DIR = PROJECT_ROOT / "config"
_ENV_FILE = PROJECT_ROOT / ".env"


class ExtractionSettings(BaseSettings):
    """Extraction pipeline: stage thresholds, content validation, OCR tooling."""

    # Minimum characters for a stage result to count as non-trivial
    structured_min_chars: int = 10
    aggressive_min_chars: int = 10
    ocr_min_chars: int = 10

    # Final content validation
    min_text_length: int = 50
    max_text_length: int = 300_000
    min_word_count: int = 5

    # Artifact residue heuristic
    artifact_pattern_threshold: int = 2
    word_char_ratio_threshold: float = 0.3
    word_ratio_min_length: int = 100

    # OCR fallback
    ocr_enabled: bool = True
    ocr_dpi: int = 300
    ocr_language: str = "eng"
    tesseract_cmd: str = "tesseract"
    pdfimages_cmd: str = "pdfimages"
    convert_cmd: str = "convert"
    rasterize_timeout_seconds: int = 120
    ocr_timeout_seconds: int = 60

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "extraction.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="EXTRACTION_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


class PipelineSettings(BaseSettings):
    """Upload handling and operations: staging paths, debug dumps, logging."""

    storage_dir: str = "uploaded_files"
    dump_dir: Optional[str] = None  # None = no extraction dumps
    log_dir: str = "logs"
    log_max_bytes: int = 10_485_760  # 10MB
    log_backup_count: int = 5

    model_config = SettingsConfigDict(
        yaml_file=str(_CONFIG_DIR / "pipeline.yaml"),
        env_file=str(_ENV_FILE),
        env_prefix="PIPELINE_",
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )
