"""Read, split, parse and normalize post files in parallel."""

from __future__ import annotations

import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable

from common.datetime import UnparsableDateError
from ingest_posts.models import (
    UNDECODABLE_TEXT,
    UNPARSABLE_DATE,
    UNREADABLE_FILE,
    Document,
    FileResult,
    QuarantineRecord,
    RawFile,
    RawSegment,
)
from ingest_posts.normalize_posts.normalize import build_document
from ingest_posts.parse_front_matter.parse import FrontMatterError, parse_segment
from ingest_posts.split_segments.split import (
    DEFAULT_SEPARATOR_PATTERN,
    compile_separator,
    split_file,
)

logger = logging.getLogger(__name__)

DEFAULT_EXCERPT_CHARS = 500


class IngestInterrupted(Exception):
    """Raised when a shutdown was requested while files were still being processed."""


def discover_files(
    input_dir: Path,
    extensions: Iterable[str] = (),
    exclude_paths: Iterable[Path] = (),
) -> list[str]:
    """
    List candidate post files under input_dir.

    Hidden files and anything under a hidden directory are skipped, as is
    anything at or under exclude_paths (e.g. the files a previous run wrote
    into an output directory nested in the input tree). An exclude path that
    contains input_dir itself is ignored. When extensions is non-empty only
    files with one of those suffixes are kept.

    Returns:
        Sorted POSIX paths relative to input_dir
    """
    suffixes = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}
    root = input_dir.resolve()
    excluded = [e for e in (Path(p).resolve() for p in exclude_paths) if not root.is_relative_to(e)]
    found = []
    for path in input_dir.rglob("*"):
        relative = path.relative_to(input_dir)
        if any(part.startswith(".") for part in relative.parts):
            continue
        if excluded and any(path.resolve().is_relative_to(e) for e in excluded):
            continue
        if not path.is_file():
            continue
        if suffixes and path.suffix.lower() not in suffixes:
            continue
        found.append(relative.as_posix())
    return sorted(found)


def _quarantine(segment: RawSegment, reason: str, detail: str, excerpt_chars: int) -> QuarantineRecord:
    logger.warning(
        "Quarantined %s#%d (%s): %s", segment.source_file, segment.ordinal, reason, detail
    )
    return QuarantineRecord(
        source_file=segment.source_file,
        ordinal=segment.ordinal,
        reason=reason,
        detail=detail,
        excerpt=segment.text[:excerpt_chars],
    )


def process_segment(
    segment: RawSegment,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> Document | QuarantineRecord:
    """Turn one segment into a Document, or a QuarantineRecord if it is malformed."""
    try:
        front_matter, body = parse_segment(segment)
    except FrontMatterError as exc:
        return _quarantine(segment, exc.reason, exc.detail, excerpt_chars)

    try:
        return build_document(front_matter, body, segment.source_file, segment.ordinal)
    except UnparsableDateError as exc:
        return _quarantine(segment, UNPARSABLE_DATE, str(exc), excerpt_chars)


def process_file(
    raw_file: RawFile,
    separator: str | re.Pattern = DEFAULT_SEPARATOR_PATTERN,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> FileResult:
    """Split a file and process every segment; a bad segment never affects its siblings."""
    documents = []
    quarantined = []
    segments = split_file(raw_file, separator)
    for segment in segments:
        outcome = process_segment(segment, excerpt_chars)
        if isinstance(outcome, QuarantineRecord):
            quarantined.append(outcome)
        else:
            documents.append(outcome)

    return FileResult(
        source_file=raw_file.path,
        documents=tuple(documents),
        quarantined=tuple(quarantined),
        segment_count=len(segments),
    )


def _process_path(
    input_dir: Path,
    relative: str,
    separator: re.Pattern,
    excerpt_chars: int,
) -> FileResult:
    try:
        data = (input_dir / relative).read_bytes()
    except OSError as exc:
        segment = RawSegment(source_file=relative, ordinal=0, text="")
        record = _quarantine(segment, UNREADABLE_FILE, f"cannot read file: {exc}", excerpt_chars)
        return FileResult(source_file=relative, documents=(), quarantined=(record,), segment_count=0)

    try:
        raw_file = RawFile(path=relative, text=data.decode("utf-8"))
    except UnicodeDecodeError:
        segment = RawSegment(
            source_file=relative,
            ordinal=0,
            text=data.decode("utf-8", errors="replace"),
        )
        record = _quarantine(segment, UNDECODABLE_TEXT, "file is not valid UTF-8", excerpt_chars)
        return FileResult(source_file=relative, documents=(), quarantined=(record,), segment_count=1)
    return process_file(raw_file, separator, excerpt_chars)


def ingest_posts(
    input_dir: Path,
    separator: str | re.Pattern = DEFAULT_SEPARATOR_PATTERN,
    max_workers: int = 4,
    extensions: Iterable[str] = (),
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
    shutdown: threading.Event | None = None,
    exclude_paths: Iterable[Path] = (),
) -> list[FileResult]:
    """
    Process every file under input_dir on a thread pool.

    Workers share nothing; each returns a FileResult and only this function
    collects them. The call returns once every file is done, with results in
    sorted path order regardless of completion order.

    Args:
        input_dir: Root directory of the post corpus
        separator: Separator pattern used to split concatenated posts
        max_workers: Worker thread count
        extensions: Optional suffix filter for discovered files
        excerpt_chars: Length of the raw excerpt kept in quarantine records
        shutdown: Event that, once set, abandons the run
        exclude_paths: Files or directories under input_dir to leave out

    Returns:
        One FileResult per discovered file

    Raises:
        IngestInterrupted: If shutdown was set before all files finished
        OSError: If input_dir cannot be listed
    """
    paths = discover_files(input_dir, extensions, exclude_paths)
    if not paths:
        logger.warning("No files found under %s", input_dir)
        return []

    logger.info("Ingesting %d files from %s with %d workers", len(paths), input_dir, max_workers)
    pattern = compile_separator(separator)
    results: dict[str, FileResult] = {}

    executor = ThreadPoolExecutor(max_workers=max_workers)
    try:
        future_map = {
            executor.submit(_process_path, input_dir, relative, pattern, excerpt_chars): relative
            for relative in paths
        }
        for future in as_completed(future_map):
            if shutdown is not None and shutdown.is_set():
                raise IngestInterrupted("shutdown requested during ingestion")
            results[future_map[future]] = future.result()
    except BaseException:
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    executor.shutdown()

    documents = sum(len(r.documents) for r in results.values())
    quarantined = sum(len(r.quarantined) for r in results.values())
    logger.info("Ingested %d documents (%d quarantined) from %d files", documents, quarantined, len(paths))
    return [results[relative] for relative in paths]
