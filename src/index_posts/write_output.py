"""Render index results into the JSON and body files consumed by the site builder."""

from __future__ import annotations

from typing import Any

from common.serialization import dumps_stable, serialize_dataclass
from index_posts.models import Catalog, IndexResult
from ingest_posts.models import Document

BODIES_DIR = "bodies"
CATALOG_FILE = "catalog.json"
TAGS_FILE = "tags.json"
QUARANTINE_FILE = "quarantine.json"
SUPERSEDED_FILE = "superseded.json"

OUTPUT_ENTRIES = (CATALOG_FILE, TAGS_FILE, QUARANTINE_FILE, SUPERSEDED_FILE, BODIES_DIR)


def body_ref(document_id: str) -> str:
    return f"{BODIES_DIR}/{document_id}.md"


def document_summary(document: Document) -> dict[str, Any]:
    return {
        "id": document.id,
        "title": document.title,
        "publishedAt": document.published_at_iso,
        "precision": document.precision,
        "tags": list(document.tags),
        "description": document.description,
        "bodyRef": body_ref(document.id),
        "extra": dict(document.extra),
    }


def render_catalog(catalog: Catalog) -> dict[str, Any]:
    return {
        "pageSize": catalog.page_size,
        "totalPages": catalog.total_pages,
        "totalDocuments": catalog.total_documents,
        "pages": [
            {
                "page": page.page,
                "documents": [document_summary(d) for d in page.documents],
            }
            for page in catalog.pages
        ],
    }


def render_tags(tag_index: dict[str, tuple[str, ...]]) -> dict[str, list[str]]:
    return {tag: list(ids) for tag, ids in tag_index.items()}


def render_quarantine(result: IndexResult) -> list[dict[str, Any]]:
    return [serialize_dataclass(record, camel_case=True) for record in result.quarantine]


def render_superseded(result: IndexResult) -> list[dict[str, Any]]:
    return [
        {
            "id": entry.document.id,
            "canonicalId": entry.canonical_id,
            "title": entry.document.title,
            "publishedAt": entry.document.published_at_iso,
            "sourceFile": entry.document.source_file,
            "ordinal": entry.document.ordinal,
            "reason": entry.reason,
        }
        for entry in result.superseded
    ]


def render_outputs(result: IndexResult) -> dict[str, str]:
    """
    Render every output file of a run.

    Returns:
        Mapping of relative POSIX path to file contents. Bodies are written
        only for documents that made it into the catalog.
    """
    files = {
        CATALOG_FILE: dumps_stable(render_catalog(result.catalog)),
        TAGS_FILE: dumps_stable(render_tags(result.tag_index)),
        QUARANTINE_FILE: dumps_stable(render_quarantine(result)),
        SUPERSEDED_FILE: dumps_stable(render_superseded(result)),
    }
    for document in result.catalog.documents:
        files[body_ref(document.id)] = document.body
    return files
