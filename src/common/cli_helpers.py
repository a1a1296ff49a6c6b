"""Common CLI helper utilities."""

from __future__ import annotations

import argparse
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure standard logging format for CLI tools."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )


def parse_positive_int(value: str, field_name: str = "value") -> int:
    """Parse a strictly positive integer for argparse arguments.

    Args:
        value: Raw argument string.
        field_name: Name of the field for error messages.

    Returns:
        Parsed integer.

    Raises:
        argparse.ArgumentTypeError: If the value is not an integer greater than zero.
    """
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{field_name} must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError(f"{field_name} must be greater than zero")
    return parsed
