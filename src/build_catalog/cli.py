"""CLI for building the post catalog."""

from __future__ import annotations

import logging
import signal
import sys
import threading

import yaml

from build_catalog.build_catalog import CatalogBuildError, build_catalog
from build_catalog.config import load_config, set_config
from build_catalog.helpers import apply_overrides, parse_build_catalog_args
from common.cli_helpers import setup_logging
from ingest_posts.ingest_posts import IngestInterrupted

logger = logging.getLogger(__name__)

EXIT_FATAL = 1
EXIT_INTERRUPTED = 130


def main(argv: list[str] | None = None) -> None:
    args = parse_build_catalog_args(argv)
    setup_logging(args.log_level)

    try:
        config = apply_overrides(load_config(args.config), args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(EXIT_FATAL)
    set_config(config)

    shutdown = threading.Event()

    def handle_signal(signum, frame) -> None:
        logger.warning("Received %s, abandoning run", signal.Signals(signum).name)
        shutdown.set()

    previous_handler = signal.signal(signal.SIGTERM, handle_signal)
    try:
        build_catalog(config, shutdown=shutdown)
    except (IngestInterrupted, KeyboardInterrupt):
        logger.error("Run interrupted, no output written")
        sys.exit(EXIT_INTERRUPTED)
    except CatalogBuildError as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_FATAL)
    finally:
        signal.signal(signal.SIGTERM, previous_handler)


if __name__ == "__main__":
    main()
