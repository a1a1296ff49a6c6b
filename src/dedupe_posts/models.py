"""Data models for dedupe_posts pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ingest_posts.models import Document

LONGER_BODY = "longer_body"
EARLIEST_SOURCE = "earliest_source"


@dataclass(frozen=True)
class DuplicateGroup:
    """Documents sharing a normalized title and publication instant."""

    title_key: str
    published_at: datetime
    member_ids: tuple[str, ...]
    canonical_id: str
    resolution: str
    distinct_content: bool

    @property
    def superseded_ids(self) -> tuple[str, ...]:
        return tuple(i for i in self.member_ids if i != self.canonical_id)


@dataclass(frozen=True)
class DedupeResult:
    """All documents, with duplicate groups and the superseded -> canonical mapping."""

    documents: tuple[Document, ...]
    groups: tuple[DuplicateGroup, ...] = ()
    superseded_by: dict[str, str] = field(default_factory=dict)

    def is_canonical(self, document_id: str) -> bool:
        return document_id not in self.superseded_by

    @property
    def canonical(self) -> list[Document]:
        return [d for d in self.documents if d.id not in self.superseded_by]

    @property
    def superseded(self) -> list[Document]:
        return [d for d in self.documents if d.id in self.superseded_by]

    def resolution_for(self, document_id: str) -> str | None:
        for group in self.groups:
            if document_id in group.member_ids:
                return group.resolution
        return None
