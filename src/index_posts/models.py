"""Data models for index_posts pipeline stage."""

from __future__ import annotations

from dataclasses import dataclass, field

from dedupe_posts.models import DuplicateGroup
from ingest_posts.models import Document, QuarantineRecord


@dataclass(frozen=True)
class CatalogPage:
    """One page of the publish catalog, 1-based."""

    page: int
    documents: tuple[Document, ...]


@dataclass(frozen=True)
class Catalog:
    """Draft-filtered, paginated view of the date index."""

    page_size: int
    pages: tuple[CatalogPage, ...]
    total_documents: int

    @property
    def total_pages(self) -> int:
        return len(self.pages)

    @property
    def documents(self) -> list[Document]:
        return [d for page in self.pages for d in page.documents]


@dataclass(frozen=True)
class SupersededEntry:
    """A duplicate that lost resolution, kept for bookkeeping."""

    document: Document
    canonical_id: str
    reason: str


@dataclass(frozen=True)
class IndexResult:
    """Everything one run publishes."""

    date_index: tuple[Document, ...]
    tag_index: dict[str, tuple[str, ...]]
    catalog: Catalog
    quarantine: tuple[QuarantineRecord, ...]
    superseded: tuple[SupersededEntry, ...] = ()
    groups: tuple[DuplicateGroup, ...] = field(default=())
