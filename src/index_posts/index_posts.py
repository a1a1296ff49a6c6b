"""Build the date index, tag index and paginated catalog."""

from __future__ import annotations

import logging
from typing import Iterable

from dedupe_posts.models import DedupeResult
from index_posts.models import Catalog, CatalogPage, IndexResult, SupersededEntry
from ingest_posts.models import Document, QuarantineRecord

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


def build_date_index(documents: Iterable[Document]) -> tuple[Document, ...]:
    """Order documents newest first, ties broken by (source_file, ordinal) ascending."""
    ordered = sorted(documents, key=lambda d: d.source_order)
    ordered.sort(key=lambda d: d.published_at, reverse=True)
    return tuple(ordered)


def build_tag_index(date_index: tuple[Document, ...]) -> dict[str, tuple[str, ...]]:
    """Map each tag to document ids in date-index order. Keys are sorted."""
    grouped: dict[str, list[str]] = {}
    for document in date_index:
        for tag in document.tags:
            ids = grouped.setdefault(tag, [])
            if document.id not in ids:
                ids.append(document.id)
    return {tag: tuple(grouped[tag]) for tag in sorted(grouped)}


def paginate(documents: tuple[Document, ...], page_size: int = DEFAULT_PAGE_SIZE) -> Catalog:
    """Split documents into 1-based pages of page_size. No documents means no pages."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    pages = tuple(
        CatalogPage(page=number, documents=documents[start:start + page_size])
        for number, start in enumerate(range(0, len(documents), page_size), start=1)
    )
    return Catalog(page_size=page_size, pages=pages, total_documents=len(documents))


def build_publish_catalog(
    date_index: tuple[Document, ...],
    page_size: int = DEFAULT_PAGE_SIZE,
    include_drafts: bool = False,
) -> Catalog:
    """Filter the date index to publishable documents and paginate it."""
    published = tuple(d for d in date_index if include_drafts or not d.draft)
    return paginate(published, page_size)


def index_posts(
    dedupe_result: DedupeResult,
    quarantined: Iterable[QuarantineRecord] = (),
    page_size: int = DEFAULT_PAGE_SIZE,
    include_drafts: bool = False,
) -> IndexResult:
    """
    Reduce the collected documents into the published indexes.

    Only canonical documents are indexed. Quarantine records are sorted by
    (source_file, ordinal) so the report does not depend on worker timing.

    Args:
        dedupe_result: Output of the deduplicator
        quarantined: Quarantine records from every file
        page_size: Catalog page size
        include_drafts: Keep draft documents in the catalog

    Returns:
        IndexResult with date index, tag index, catalog, quarantine and superseded lists
    """
    date_index = build_date_index(dedupe_result.canonical)
    tag_index = build_tag_index(date_index)
    catalog = build_publish_catalog(date_index, page_size, include_drafts)

    superseded = tuple(
        SupersededEntry(
            document=document,
            canonical_id=dedupe_result.superseded_by[document.id],
            reason=dedupe_result.resolution_for(document.id) or "",
        )
        for document in dedupe_result.superseded
    )
    quarantine = tuple(sorted(quarantined, key=lambda r: (r.source_file, r.ordinal)))

    logger.info(
        "Indexed %d documents under %d tags; catalog has %d documents on %d pages",
        len(date_index),
        len(tag_index),
        catalog.total_documents,
        catalog.total_pages,
    )
    return IndexResult(
        date_index=date_index,
        tag_index=tag_index,
        catalog=catalog,
        quarantine=quarantine,
        superseded=superseded,
        groups=dedupe_result.groups,
    )
