"""Resume Text Extractor -- command-line entry point.

Startup sequence:
    1. Parse arguments
    2. Load pipeline configuration (needed for log_dir and dump_dir)
    3. Setup logging (must happen before any code that logs)
    4. Load extraction configuration (CLI flags override YAML/env)
    5. Extract each file, print its text to stdout, optionally dump it

Exit status is 0 when every file was extracted, 1 otherwise.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from resume_extractor.config import ExtractionSettings, PipelineSettings
from resume_extractor.extractor import extract_file
from resume_extractor.extractor.dump import dump_path_for, write_extraction_dump
from resume_extractor.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract clean, resume-ready text from PDF and text files.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Files to extract")
    parser.add_argument(
        "--dump",
        type=Path,
        default=None,
        help="Directory for extraction dumps with YAML frontmatter",
    )
    parser.add_argument(
        "--no-ocr",
        action="store_true",
        help="Skip the OCR fallback for image-based PDFs",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run extraction over the files named on the command line."""
    args = parse_args(argv)

    # Load pipeline config first -- needed for logging and dump paths
    pipeline = PipelineSettings()

    # Setup logging BEFORE anything else logs
    setup_logging(
        log_dir=pipeline.log_dir,
        max_bytes=pipeline.log_max_bytes,
        backup_count=pipeline.log_backup_count,
    )

    logger.info("Resume Text Extractor starting (%d files)", len(args.files))

    overrides = {"ocr_enabled": False} if args.no_ocr else {}
    extraction = ExtractionSettings(**overrides)
    logger.info(
        "Config loaded -- extraction: min_length=%s, max_length=%s, ocr_enabled=%s",
        extraction.min_text_length,
        extraction.max_text_length,
        extraction.ocr_enabled,
    )

    dump_dir = args.dump or (Path(pipeline.dump_dir) if pipeline.dump_dir else None)

    failures = 0
    for path in args.files:
        outcome = extract_file(path, extraction)

        if dump_dir is not None:
            dump_path = dump_path_for(dump_dir, path.name)
            try:
                write_extraction_dump(dump_path, outcome, path.name)
            except OSError as e:
                logger.warning("Failed to write extraction dump %s: %s", dump_path, e)

        if outcome.success:
            sys.stdout.write(outcome.text + "\n")
        else:
            failures += 1
            error = outcome.to_error()
            print(f"{path}: {error.code}: {error}", file=sys.stderr)

    logger.info(
        "Run complete -- %d extracted, %d failed",
        len(args.files) - failures,
        failures,
    )
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
