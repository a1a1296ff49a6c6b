"""Run one catalog build: ingest, dedupe, index, write."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from pathlib import Path

from build_catalog.config import BuildConfig, get_config
from common.local_io import commit_files, ensure_writable_dir
from dedupe_posts.dedupe_posts import dedupe_posts
from index_posts.index_posts import index_posts
from index_posts.write_output import BODIES_DIR, OUTPUT_ENTRIES, render_outputs
from ingest_posts.ingest_posts import IngestInterrupted, ingest_posts
from ingest_posts.normalize_posts.normalize import assign_ids

logger = logging.getLogger(__name__)


class CatalogBuildError(Exception):
    """Unrecoverable failure: the run is aborted and nothing is written."""


@dataclass(frozen=True)
class RunSummary:
    files: int
    published: int
    quarantined: int
    superseded: int
    drafts: int


def _check_input_dir(input_dir: Path) -> None:
    if not input_dir.exists():
        raise CatalogBuildError(f"Input directory does not exist: {input_dir}")
    if not input_dir.is_dir():
        raise CatalogBuildError(f"Input path is not a directory: {input_dir}")
    if not os.access(input_dir, os.R_OK | os.X_OK):
        raise CatalogBuildError(f"Input directory is not readable: {input_dir}")


def build_catalog(
    config: BuildConfig | None = None,
    shutdown: threading.Event | None = None,
) -> RunSummary:
    """
    Build catalog.json, tags.json, quarantine.json, superseded.json and body files.

    Every derived structure is rebuilt from the input on each call. Outputs
    are committed only after everything has been rendered, so a failed or
    interrupted run leaves the output directory as it was.

    Args:
        config: Build settings (defaults to the process-wide config)
        shutdown: Event that, once set, abandons the run before anything is written

    Returns:
        RunSummary with published/quarantined/superseded counts

    Raises:
        CatalogBuildError: If the input cannot be read or the output cannot be written
        IngestInterrupted: If shutdown was set during the run
    """
    config = config or get_config()
    if not config.input_dir or not config.output_dir:
        raise CatalogBuildError("Both input_dir and output_dir must be set")
    input_dir = Path(config.input_dir)
    output_dir = Path(config.output_dir)

    _check_input_dir(input_dir)
    try:
        ensure_writable_dir(output_dir)
    except OSError as exc:
        raise CatalogBuildError(f"Output directory is not writable: {output_dir} ({exc})") from exc

    try:
        file_results = ingest_posts(
            input_dir,
            separator=config.separator_pattern,
            max_workers=config.max_workers,
            extensions=config.extensions,
            excerpt_chars=config.excerpt_chars,
            shutdown=shutdown,
            exclude_paths=[output_dir / name for name in OUTPUT_ENTRIES],
        )
    except OSError as exc:
        raise CatalogBuildError(f"Failed to list input directory {input_dir}: {exc}") from exc

    documents = assign_ids(d for result in file_results for d in result.documents)
    quarantined = [record for result in file_results for record in result.quarantined]

    deduped = dedupe_posts(documents)
    result = index_posts(
        deduped,
        quarantined,
        page_size=config.page_size,
        include_drafts=config.include_drafts,
    )
    files = render_outputs(result)

    if shutdown is not None and shutdown.is_set():
        raise IngestInterrupted("shutdown requested before writing outputs")

    try:
        commit_files(files, output_dir, directories=(BODIES_DIR,))
    except OSError as exc:
        raise CatalogBuildError(f"Failed to write outputs to {output_dir}: {exc}") from exc

    summary = RunSummary(
        files=len(file_results),
        published=result.catalog.total_documents,
        quarantined=len(result.quarantine),
        superseded=len(result.superseded),
        drafts=sum(1 for d in result.date_index if d.draft),
    )
    logger.info(
        "Catalog build complete: %d published, %d quarantined, %d superseded (%d drafts, %d files)",
        summary.published,
        summary.quarantined,
        summary.superseded,
        summary.drafts,
        summary.files,
    )
    return summary
