"""Configuration package -- typed, validated settings from YAML + .env."""

from .settings import PROJECT_ROOT, ExtractionSettings, PipelineSettings

__all__ = [
    "ExtractionSettings",
    "PipelineSettings",
    "PROJECT_ROOT",
    "load_all_settings",
]


def load_all_settings() -> tuple[ExtractionSettings, PipelineSettings]:
    """Load and return all configuration objects.

    Returns a tuple of (ExtractionSettings, PipelineSettings), each populated
    from its own YAML file with environment variable overrides.
    """
    return ExtractionSettings(), PipelineSettings()
