"""Front-matter parsing for a single post segment."""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from ingest_posts.models import (
    MISSING_FRONT_MATTER,
    MISSING_TITLE,
    TRUNCATED_FRONT_MATTER,
    FrontMatter,
    RawSegment,
)

logger = logging.getLogger(__name__)

RECOGNIZED_FIELDS = ("title", "date", "draft", "tags", "description")

_DELIMITER_RE = re.compile(r"^---[ \t]*$")
_KEY_RE = re.compile(r"^([A-Za-z0-9_][\w.-]*)[ \t]*:(?:[ \t]+(.*)|[ \t]*)$")
_ITEM_RE = re.compile(r"^[ \t]*-(?:[ \t]+(.*)|[ \t]*)$")


class FrontMatterError(Exception):
    """Raised when a segment cannot yield front matter; carries a quarantine reason."""

    def __init__(self, reason: str, detail: str):
        super().__init__(detail)
        self.reason = reason
        self.detail = detail


def split_front_matter(text: str) -> tuple[str, str]:
    """
    Cut a segment into its front-matter block and body.

    The first non-blank line must be a lone "---"; the block runs to the next
    lone "---" and everything after that line is the body, untouched.

    Raises:
        FrontMatterError: missing_front_matter or truncated_front_matter
    """
    lines = text.splitlines(keepends=True)
    index = 0
    while index < len(lines) and not lines[index].lstrip("\ufeff").strip():
        index += 1

    if index == len(lines) or not _DELIMITER_RE.match(lines[index].lstrip("\ufeff").rstrip("\r\n")):
        raise FrontMatterError(MISSING_FRONT_MATTER, "segment does not start with a '---' line")

    for end in range(index + 1, len(lines)):
        if _DELIMITER_RE.match(lines[end].rstrip("\r\n")):
            block = "".join(lines[index + 1:end])
            body = "".join(lines[end + 1:])
            return block, body

    raise FrontMatterError(TRUNCATED_FRONT_MATTER, "no closing '---' line before end of segment")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def _parse_scalar(value: str) -> Any:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        try:
            parsed = yaml.load(value, Loader=yaml.BaseLoader)
        except yaml.YAMLError:
            parsed = None
        if isinstance(parsed, list):
            return parsed
        return [_unquote(part.strip()) for part in value[1:-1].split(",") if part.strip()]
    return _unquote(value)


def parse_lines(block: str) -> dict[str, Any]:
    """
    Line-oriented fallback for blocks that are not valid YAML.

    Understands "key: value" lines, inline "[a, b]" lists and indented
    "- item" lines under a key with an empty value. Anything else is skipped.
    """
    data: dict[str, Any] = {}
    current_key = None
    for line in block.splitlines():
        if not line.strip() or line.lstrip().startswith("#"):
            continue

        item = _ITEM_RE.match(line)
        if item and current_key is not None:
            existing = data.get(current_key)
            if not isinstance(existing, list):
                existing = [] if existing in ("", None) else [existing]
                data[current_key] = existing
            existing.append(_unquote((item.group(1) or "").strip()))
            continue

        key_match = _KEY_RE.match(line)
        if key_match:
            current_key = key_match.group(1)
            raw_value = key_match.group(2) or ""
            data[current_key] = _parse_scalar(raw_value) if raw_value.strip() else ""
            continue

        logger.debug("Skipping unparsable front-matter line: %r", line)
    return data


def parse_block(block: str) -> dict[str, Any]:
    """Parse a front-matter block into a dict of strings, lists and nested mappings.

    BaseLoader keeps every scalar a string, so dates and booleans are never
    coerced here.
    """
    try:
        data = yaml.load(block, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        logger.debug("Front matter is not valid YAML, using line parser: %s", exc)
        data = None
    if isinstance(data, dict):
        return data
    return parse_lines(block)


def _coerce_bool(value: Any, default: bool = False) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    logger.warning("Unrecognized draft value %r, treating as false", value)
    return default


def _coerce_tags(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return tuple(part for part in value.split(",") if part.strip())
    if isinstance(value, list):
        return tuple(item for item in value if isinstance(item, str))
    logger.warning("Ignoring tags of unexpected type %s", type(value).__name__)
    return ()


def _coerce_text(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def build_front_matter(data: dict[str, Any]) -> FrontMatter:
    """Map a parsed block onto FrontMatter, keeping unknown keys in extra."""
    return FrontMatter(
        title=_coerce_text(data.get("title")),
        date=data.get("date"),
        draft=_coerce_bool(data.get("draft")),
        tags=_coerce_tags(data.get("tags")),
        description=_coerce_text(data.get("description")),
        extra={k: v for k, v in data.items() if k not in RECOGNIZED_FIELDS},
    )


def parse_segment(segment: RawSegment) -> tuple[FrontMatter, str]:
    """
    Parse a segment into its front matter and markdown body.

    Args:
        segment: RawSegment produced by the splitter

    Returns:
        Tuple of (FrontMatter, body)

    Raises:
        FrontMatterError: If the block is missing, unterminated, or has no title
    """
    block, body = split_front_matter(segment.text)
    front_matter = build_front_matter(parse_block(block))
    if front_matter.title is None:
        raise FrontMatterError(MISSING_TITLE, "front matter has no title")
    return front_matter, body
