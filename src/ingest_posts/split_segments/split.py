"""Split concatenated posts apart on a separator marker."""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Iterator

from ingest_posts.models import RawFile, RawSegment

logger = logging.getLogger(__name__)

# Marker left behind by upstream aggregation, e.g. "<!-- post-break:9f2c41ab -->".
# The trailing run is an opaque run-specific token and is matched by shape only.
DEFAULT_SEPARATOR_PATTERN = (
    r"^[ \t]*<!--[ \t]*post-break(?:[ \t]*[:=_-][ \t]*[0-9a-z]+)?[ \t]*-->[ \t]*\r?$"
)

_FENCE_RE = re.compile(r"^[ \t]{0,3}(`{3,})(.*)$", re.MULTILINE)
_LEADING_BREAK_RE = re.compile(r"^[ \t]*\r?\n")
_TRAILING_BREAK_RE = re.compile(r"\r?\n[ \t]*\Z")


def compile_separator(pattern: str | re.Pattern) -> re.Pattern:
    """Compile a separator pattern (case-insensitive, line-anchored)."""
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern, re.IGNORECASE | re.MULTILINE)


def fenced_spans(text: str) -> list[tuple[int, int]]:
    """Return (start, end) offsets of closed triple-backtick fenced blocks.

    A fence closes on a later line with at least as many backticks and nothing
    else on it. An opener that never closes is ignored.
    """
    spans = []
    open_start = None
    open_len = 0
    for match in _FENCE_RE.finditer(text):
        ticks, rest = match.group(1), match.group(2)
        if open_start is None:
            open_start, open_len = match.start(), len(ticks)
        elif len(ticks) >= open_len and not rest.strip():
            spans.append((open_start, match.end()))
            open_start = None
    return spans


def _inside(offset: int, spans: list[tuple[int, int]]) -> bool:
    return any(start <= offset < end for start, end in spans)


def find_separators(text: str, separator: str | re.Pattern) -> list[re.Match]:
    """Find separator matches that are not inside a fenced code block."""
    regex = compile_separator(separator)
    spans = fenced_spans(text)
    matches = []
    for match in regex.finditer(text):
        if match.end() == match.start():
            continue
        if _inside(match.start(), spans):
            logger.debug("Ignoring separator inside code fence at offset %d", match.start())
            continue
        matches.append(match)
    return matches


def iter_segments(
    raw_file: RawFile,
    separator: str | re.Pattern = DEFAULT_SEPARATOR_PATTERN,
) -> Iterator[RawSegment]:
    """
    Lazily yield the RawSegments of a file.

    A file without separators yields exactly one segment equal to its full
    content. Otherwise the text between separators is cut into segments, with
    one line break trimmed on each side that touches a separator. Chunks that
    are empty or whitespace-only (a leading or trailing separator, two
    separators in a row) are not emitted; their bytes are folded into the
    neighbouring segment's prefix or suffix.

    Args:
        raw_file: File to split
        separator: Regex pattern (string or compiled) for the separator line

    Yields:
        RawSegment objects with consecutive ordinals starting at 0
    """
    text = raw_file.text
    matches = find_separators(text, separator)
    if not matches:
        yield RawSegment(source_file=raw_file.path, ordinal=0, text=text)
        return

    chunks = []
    position = 0
    token = ""
    for match in matches:
        chunks.append((text[position:match.start()], token, True))
        position = match.end()
        token = match.group(0)
    chunks.append((text[position:], token, False))

    pending = ""
    previous = None
    ordinal = 0
    for chunk, token, followed_by_separator in chunks:
        lead = ""
        if token:
            lead_match = _LEADING_BREAK_RE.match(chunk)
            lead = lead_match.group(0) if lead_match else ""
        trail = ""
        if followed_by_separator:
            trail_match = _TRAILING_BREAK_RE.search(chunk, len(lead))
            trail = trail_match.group(0) if trail_match else ""
        body = chunk[len(lead):len(chunk) - len(trail)]

        if not body.strip():
            pending += token + chunk
            continue

        if previous is not None:
            yield previous
        previous = RawSegment(
            source_file=raw_file.path,
            ordinal=ordinal,
            text=body,
            prefix=pending + token + lead,
            suffix=trail,
            separator=token,
        )
        pending = ""
        ordinal += 1

    if previous is None:
        logger.warning("%s contains only separators and whitespace", raw_file.path)
        return
    if pending:
        previous = replace(previous, suffix=previous.suffix + pending)
    yield previous


def split_file(
    raw_file: RawFile,
    separator: str | re.Pattern = DEFAULT_SEPARATOR_PATTERN,
) -> list[RawSegment]:
    """Split a file into its RawSegments."""
    segments = list(iter_segments(raw_file, separator))
    if len(segments) > 1:
        logger.info("Split %s into %d segments", raw_file.path, len(segments))
    return segments


def join_segments(segments: list[RawSegment], separator: str | None = None) -> str:
    """Rebuild file text from its segments.

    With no separator the recorded prefixes and suffixes are used, giving the
    original text exactly. With a separator the segment texts are joined with
    the separator on its own line in between.
    """
    if separator is None:
        return "".join(s.prefix + s.text + s.suffix for s in segments)
    return f"\n{separator}\n".join(s.text for s in segments)
