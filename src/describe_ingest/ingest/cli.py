"""CLI for the chunking pipeline.

Commands:
    describe-ingest chunk        Chunk documents into embedding-ready JSONL records
    describe-ingest transcript   Group caption transcripts into analyzed JSONL records

Pipeline:
    documents / captions → chunk records → (embedding + storage, elsewhere)

Examples:
    # Chunk every .txt/.md file under data/
    describe-ingest chunk -i data/ -o chunks/

    # Smaller chunks without token counts
    describe-ingest chunk --target-size 600 --max-size 900 --no-token-counts

    # Group downloaded JSON3 caption files
    describe-ingest transcript captions/*.json -o chunks/youtube/
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
import traceback
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from describe_ingest.config import load_config

if TYPE_CHECKING:
    from describe_ingest.ingest.token_counting import TokenCounter

# =============================================================================
# LOGGING SETUP
# =============================================================================

# Module-level logger
logger = logging.getLogger("describe_ingest")


def _setup_logging(log_dir: Path | None = None, verbose: bool = False) -> Path:
    """Configure logging with file and console handlers.

    Args:
        log_dir: Directory for log files (default: ./logs/)
        verbose: If True, set console to DEBUG level

    Returns:
        Path to the log file
    """
    if log_dir is None:
        log_dir = Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)

    # Create timestamped log file
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"describe_ingest_{timestamp}.log"

    logger.setLevel(logging.DEBUG)

    # File handler - captures everything with full detail
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose unless --verbose flag
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    # Clear existing handlers and add new ones
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    logger.info(f"Logging initialized - log file: {log_file}")
    return log_file


def _log_exception(msg: str, exc: Exception) -> None:
    """Log an exception with full traceback to file.

    Args:
        msg: Context message describing what failed
        exc: The exception that was raised
    """
    logger.error(f"{msg}: {type(exc).__name__}: {exc}")
    logger.debug(f"Traceback:\n{traceback.format_exc()}")


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands.

    Size and timing defaults come from the [tool.describe-ingest] table.
    """
    config = load_config()

    parser = argparse.ArgumentParser(
        prog="describe-ingest",
        description="Chunk documents and caption transcripts into embedding-ready records",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=Path("logs"),
        help="Directory for log files (default: logs/)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug output on the console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # =========================================================================
    # CHUNK SUBCOMMAND
    # =========================================================================
    chunk_parser = subparsers.add_parser(
        "chunk",
        help="Chunk documents into embedding-ready segments",
        description=(
            "Split .txt and .md documents at paragraph and sentence boundaries into "
            "overlapping chunks and write one JSONL file per document."
        ),
    )
    chunk_parser.add_argument(
        "-i",
        "--input",
        type=Path,
        default=Path("data"),
        help="Input directory containing .txt/.md documents (default: data/)",
    )
    chunk_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("chunks"),
        help="Output directory for .jsonl files (default: chunks/)",
    )
    chunk_parser.add_argument(
        "--target-size",
        type=int,
        default=config.chunk_target_size,
        help=f"Target chunk size in characters (default: {config.chunk_target_size})",
    )
    chunk_parser.add_argument(
        "--min-size",
        type=int,
        default=config.chunk_min_size,
        help=f"Minimum chunk size in characters (default: {config.chunk_min_size})",
    )
    chunk_parser.add_argument(
        "--max-size",
        type=int,
        default=config.chunk_max_size,
        help=f"Maximum chunk size in characters (default: {config.chunk_max_size})",
    )
    chunk_parser.add_argument(
        "--overlap",
        type=int,
        default=config.chunk_overlap,
        help=f"Overlap between chunks in characters (default: {config.chunk_overlap})",
    )
    _add_output_flags(chunk_parser)

    # =========================================================================
    # TRANSCRIPT SUBCOMMAND
    # =========================================================================
    transcript_parser = subparsers.add_parser(
        "transcript",
        help="Group caption transcripts into analyzed chunks",
        description=(
            "Read JSON3 timed-text payloads or [{text, offset, duration}] lists, compute "
            "prosody from caption timing, group segments at natural pauses and tag "
            "each chunk with sentiment."
        ),
    )
    transcript_parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="Caption JSON files; the video ID is taken from the file stem",
    )
    transcript_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("chunks/youtube"),
        help="Output directory for .jsonl files (default: chunks/youtube/)",
    )
    transcript_parser.add_argument(
        "--max-chunk-duration",
        type=int,
        default=config.transcript_max_chunk_duration_ms,
        help=(
            "Maximum chunk duration in ms "
            f"(default: {config.transcript_max_chunk_duration_ms})"
        ),
    )
    transcript_parser.add_argument(
        "--pause-threshold",
        type=int,
        default=config.transcript_pause_threshold_ms,
        help=(
            "Pause in ms treated as a natural break "
            f"(default: {config.transcript_pause_threshold_ms})"
        ),
    )
    transcript_parser.add_argument(
        "--target-word-count",
        type=int,
        default=config.transcript_target_word_count,
        help=f"Target words per chunk (default: {config.transcript_target_word_count})",
    )
    _add_output_flags(transcript_parser)

    return parser


def _add_output_flags(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--no-token-counts",
        action="store_true",
        help="Do not add tiktoken token counts to records",
    )
    subparser.add_argument(
        "--no-progress",
        action="store_true",
        help="Disable progress output",
    )


def _make_token_counter(args: argparse.Namespace) -> TokenCounter | None:
    """Create the run's token counter, or None when disabled."""
    if args.no_token_counts:
        return None

    from describe_ingest.ingest.token_counting import TokenCounter

    return TokenCounter(load_config().token_encoding)


def _discover_documents(input_dir: Path) -> list[Path]:
    from describe_ingest.ingest.chunker import SUPPORTED_EXTENSIONS

    return sorted(
        path
        for path in input_dir.rglob("*")
        if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS
    )


def _run_chunk_process(args: argparse.Namespace) -> int:
    """Run chunking on a directory of documents.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for error, 130 for interrupt)
    """
    # Import here to speed up --help
    from describe_ingest.ingest.chunker import (
        ChunkOptions,
        ChunkOptionsError,
        chunk_document,
        write_chunks_jsonl,
    )

    input_dir: Path = args.input
    output_dir: Path = args.output
    show_progress: bool = not args.no_progress

    if not input_dir.exists():
        print(f"Error: Input directory does not exist: {input_dir}")
        return 1

    try:
        options = ChunkOptions(
            target_size=args.target_size,
            min_size=args.min_size,
            max_size=args.max_size,
            overlap=args.overlap,
        )
    except ChunkOptionsError as e:
        print(f"Error: Invalid chunk options: {e}")
        return 1

    token_counter = _make_token_counter(args)

    print("Chunk Processing")
    print("=" * 40)
    print(f"Input:     {input_dir}")
    print(f"Output:    {output_dir}")
    print(f"Target:    {options.target_size} chars")
    print(f"Min/Max:   {options.min_size}/{options.max_size} chars")
    print(f"Overlap:   {options.overlap} chars")

    files = _discover_documents(input_dir)
    total_files = len(files)
    print(f"Files:     {total_files}")
    print()

    if total_files == 0:
        print("No .txt or .md files found in input directory")
        return 1

    output_dir.mkdir(parents=True, exist_ok=True)

    processed_count = 0
    skipped_count = 0
    total_chunks = 0
    total_tokens = 0
    start_time = time.perf_counter()

    try:
        for i, input_file in enumerate(files):
            relative_path = input_file.relative_to(input_dir)
            output_file = output_dir / relative_path.with_suffix(".jsonl")

            if show_progress:
                print(f"[{i + 1}/{total_files}] {relative_path}")

            try:
                document = chunk_document(input_file, input_dir, options)
            except (OSError, UnicodeDecodeError) as e:
                _log_exception(f"Failed to read {relative_path}", e)
                skipped_count += 1
                continue

            stats = write_chunks_jsonl(document, output_file, token_counter)
            logger.debug(
                f"{document.source}: {document.char_count} chars -> {stats.chunks_written} chunks"
            )

            processed_count += 1
            total_chunks += stats.chunks_written
            total_tokens += stats.total_tokens

        elapsed = time.perf_counter() - start_time
        print()
        print(f"Complete:  {processed_count} files processed in {elapsed:.1f}s")
        print(f"Chunks:    {total_chunks:,} total")
        if token_counter is not None:
            print(f"Tokens:    {total_tokens:,} total")
        if skipped_count > 0:
            print(f"Skipped:   {skipped_count} files (see log)")

        return 0

    except KeyboardInterrupt:
        print(f"\n\nInterrupted after processing {processed_count} files")
        return 130  # Standard exit code for SIGINT


def _run_transcript_process(args: argparse.Namespace) -> int:
    """Run prosody grouping on caption JSON files.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, 1 for error, 130 for interrupt)
    """
    from describe_ingest.ingest.sentiment import AfinnSentimentClassifier
    from describe_ingest.ingest.transcript import (
        GroupingOptions,
        extract_video_id,
        format_timestamp,
        group_segments_by_prosody,
        parse_transcript_payload,
        summarize_transcript,
        write_transcript_chunks_jsonl,
    )

    input_files: list[Path] = args.inputs
    output_dir: Path = args.output
    show_progress: bool = not args.no_progress

    missing = [path for path in input_files if not path.is_file()]
    if missing:
        for path in missing:
            print(f"Error: Input file does not exist: {path}")
        return 1

    options = GroupingOptions(
        max_chunk_duration=args.max_chunk_duration,
        pause_threshold=args.pause_threshold,
        target_word_count=args.target_word_count,
    )
    token_counter = _make_token_counter(args)
    classifier = AfinnSentimentClassifier()

    print("Transcript Processing")
    print("=" * 40)
    print(f"Output:    {output_dir}")
    print(f"Max span:  {options.max_chunk_duration} ms")
    print(f"Pause:     {options.pause_threshold} ms")
    print(f"Target:    {options.target_word_count} words")
    print(f"Files:     {len(input_files)}")
    print()

    output_dir.mkdir(parents=True, exist_ok=True)

    processed_count = 0
    skipped_count = 0
    total_chunks = 0
    start_time = time.perf_counter()

    try:
        for i, input_file in enumerate(input_files):
            source_id = extract_video_id(input_file.stem) or input_file.stem

            try:
                payload = json.loads(input_file.read_text(encoding="utf-8"))
                segments = parse_transcript_payload(payload)
            except (OSError, ValueError) as e:
                _log_exception(f"Failed to parse {input_file}", e)
                skipped_count += 1
                continue

            summary = summarize_transcript(source_id, segments)
            chunks = group_segments_by_prosody(summary.segments, classifier, options)
            stats = write_transcript_chunks_jsonl(
                summary, chunks, output_dir / f"{source_id}.jsonl", token_counter
            )

            if show_progress:
                print(f"[{i + 1}/{len(input_files)}] {source_id}")
                print(f"    Duration: {format_timestamp(summary.total_duration)}")
                print(f"    Average WPM: {summary.average_wpm}")
                print(f"    Segments: {len(summary.segments)}")
                print(f"    Chunks created: {stats.chunks_written}")

            processed_count += 1
            total_chunks += stats.chunks_written

        elapsed = time.perf_counter() - start_time
        print()
        print(f"Complete:  {processed_count} transcripts processed in {elapsed:.1f}s")
        print(f"Chunks:    {total_chunks:,} total")
        if skipped_count > 0:
            print(f"Skipped:   {skipped_count} files (see log)")

        return 0 if processed_count > 0 else 1

    except KeyboardInterrupt:
        print(f"\n\nInterrupted after processing {processed_count} transcripts")
        return 130


def main() -> None:
    """Run the chunking pipeline."""
    parser = _create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _setup_logging(args.log_dir, args.verbose)

    if args.command == "chunk":
        exit_code = _run_chunk_process(args)
    elif args.command == "transcript":
        exit_code = _run_transcript_process(args)
    else:
        # Unknown subcommand (shouldn't happen with argparse)
        parser.print_help()
        exit_code = 1
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
