"""Resume text extraction: PDF/plaintext to clean, resume-ready plaintext."""

__version__ = "0.1.0"
