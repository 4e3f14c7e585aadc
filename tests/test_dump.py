"""Tests for the extraction dump writer."""

import datetime
from pathlib import Path

import frontmatter

from resume_extractor.extractor.dump import dump_path_for, write_extraction_dump
from resume_extractor.extractor.types import (
    ExtractionErrorKind,
    ExtractionOutcome,
    ExtractionPath,
    ExtractionStats,
    PageStats,
)


def test_dump_path_for():
    assert dump_path_for(Path("out"), "My Resume.pdf") == Path("out") / "My Resume_extracted.md"


def test_dump_path_for_with_resume_id():
    assert dump_path_for(Path("out"), "resume.pdf", "ab12") == (
        Path("out") / "resume_ab12_extracted.md"
    )


def test_success_dump(tmp_path):
    stats = ExtractionStats(pages=[PageStats(page_number=1), PageStats(page_number=2)])
    outcome = ExtractionOutcome.succeeded(
        "Jiwoo Lee\nSenior Software Engineer", ExtractionPath.STRUCTURED, stats
    )
    dump_path = tmp_path / "nested" / "resume_extracted.md"

    write_extraction_dump(dump_path, outcome, "resume.pdf")

    post = frontmatter.load(dump_path)
    assert post.content == "Jiwoo Lee\nSenior Software Engineer"
    assert post.metadata["source_file"] == "resume.pdf"
    assert post.metadata["extraction_path"] == "structured"
    assert post.metadata["char_count"] == 34
    assert post.metadata["word_count"] == 5
    assert post.metadata["pages_processed"] == 2
    assert "error" not in post.metadata
    extracted_at = post.metadata["extraction_date"]
    if isinstance(extracted_at, str):
        extracted_at = datetime.datetime.fromisoformat(extracted_at)
    assert extracted_at.utcoffset() == datetime.timedelta(0)


def test_failure_dump(tmp_path):
    outcome = ExtractionOutcome.failed(
        ExtractionErrorKind.STILL_ARTIFACTS, path=ExtractionPath.AGGRESSIVE
    )
    dump_path = tmp_path / "scan_extracted.md"

    write_extraction_dump(dump_path, outcome, "scan.pdf")

    post = frontmatter.load(dump_path)
    assert post.content == ""
    assert post.metadata["error"] == "STILL_ARTIFACTS"
    assert post.metadata["extraction_path"] == "aggressive"
