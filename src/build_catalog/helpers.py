"""Helper functions for build_catalog CLI."""

from __future__ import annotations

import argparse
from dataclasses import replace

from build_catalog.config import BuildConfig
from common.cli_helpers import parse_positive_int


def parse_build_catalog_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments for build_catalog."""

    parser = argparse.ArgumentParser(
        description="Split, parse and index markdown posts into a publishable catalog",
    )

    # Input/output
    parser.add_argument("--input", required=True, help="Directory tree of post files")
    parser.add_argument("--output", required=True, help="Directory to write catalog files to")

    # Catalog options
    parser.add_argument(
        "--page-size",
        type=lambda v: parse_positive_int(v, "page-size"),
        default=None,
        help="Documents per catalog page (default: 10)",
    )
    parser.add_argument(
        "--include-drafts",
        action="store_true",
        default=None,
        help="Keep draft posts in the catalog",
    )

    # Ingestion options
    parser.add_argument("--config", default=None, help="Config name or path to YAML file")
    parser.add_argument("--separator", default=None, help="Regex for the post separator line")
    parser.add_argument(
        "--workers",
        type=lambda v: parse_positive_int(v, "workers"),
        default=None,
        help="Worker threads (default: 4)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    return parser.parse_args(argv)


def apply_overrides(config: BuildConfig, args: argparse.Namespace) -> BuildConfig:
    """Overlay CLI arguments on a loaded config. Unset flags keep config values."""
    overrides = {"input_dir": args.input, "output_dir": args.output}
    if args.page_size is not None:
        overrides["page_size"] = args.page_size
    if args.include_drafts is not None:
        overrides["include_drafts"] = args.include_drafts
    if args.separator is not None:
        overrides["separator_pattern"] = args.separator
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    return replace(config, **overrides)
