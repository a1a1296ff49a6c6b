"""Hashing utilities."""

import hashlib
import re

_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)


def generate_document_id(source_file: str, ordinal: int) -> str:
    """Generate a stable fallback ID from a source path and segment ordinal."""
    return hashlib.sha256(f"{source_file}:{ordinal}".encode()).hexdigest()[:16]


def normalize_body(body: str) -> str:
    """Normalize a markdown body for hashing (line endings, trailing spaces, outer blank lines)."""
    text = body.replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_SPACE.sub("", text)
    return text.strip("\n")


def content_hash(body: str) -> str:
    """Hash of the normalized body, used for duplicate detection."""
    return hashlib.sha256(normalize_body(body).encode("utf-8")).hexdigest()
