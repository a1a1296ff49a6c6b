"""Data models for ingest_posts pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from common.datetime import NormalizedDate

MISSING_FRONT_MATTER = "missing_front_matter"
TRUNCATED_FRONT_MATTER = "truncated_front_matter"
UNPARSABLE_DATE = "unparsable_date"
MISSING_TITLE = "missing_title"
UNDECODABLE_TEXT = "undecodable_text"
UNREADABLE_FILE = "unreadable_file"

QUARANTINE_REASONS = (
    MISSING_FRONT_MATTER,
    TRUNCATED_FRONT_MATTER,
    UNPARSABLE_DATE,
    MISSING_TITLE,
    UNDECODABLE_TEXT,
    UNREADABLE_FILE,
)


@dataclass(frozen=True)
class RawFile:
    """A source file as read from disk. path is relative to the input root."""

    path: str
    text: str


@dataclass(frozen=True)
class RawSegment:
    """
    One candidate document cut out of a RawFile.

    prefix holds everything between the previous segment and this one (the
    separator token plus the whitespace trimmed next to it); suffix holds the
    line break trimmed before the next separator, and on the last segment
    also any trailing separators. Joining prefix + text + suffix over all
    segments gives back the file byte for byte.
    """

    source_file: str
    ordinal: int
    text: str
    prefix: str = ""
    suffix: str = ""
    separator: str = ""  # matched separator token, "" for the first segment


@dataclass(frozen=True)
class FrontMatter:
    """Recognized front-matter fields plus unrecognized ones passed through verbatim."""

    title: str | None
    date: Any
    draft: bool = False
    tags: tuple[str, ...] = ()
    description: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QuarantineRecord:
    """A segment set aside for operator inspection."""

    source_file: str
    ordinal: int
    reason: str
    detail: str
    excerpt: str


@dataclass(frozen=True)
class Document:
    """Normalized post. id is empty until global slug assignment."""

    id: str
    slug: str
    title: str
    published_at: datetime
    precision: str
    fraction_digits: int
    draft: bool
    tags: tuple[str, ...]
    body: str
    source_file: str
    ordinal: int
    content_hash: str
    description: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def source_order(self) -> tuple[str, int]:
        return (self.source_file, self.ordinal)

    @property
    def published_at_iso(self) -> str:
        """Canonical UTC timestamp at the precision the source gave."""
        return NormalizedDate(self.published_at, self.precision, self.fraction_digits).isoformat()


@dataclass(frozen=True)
class FileResult:
    """Everything one worker produced for one RawFile."""

    source_file: str
    documents: tuple[Document, ...]
    quarantined: tuple[QuarantineRecord, ...]
    segment_count: int
