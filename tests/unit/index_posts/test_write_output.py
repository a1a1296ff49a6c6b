"""Tests for index_posts.write_output module."""

import json

from dedupe_posts.dedupe_posts import dedupe_posts
from index_posts.index_posts import index_posts
from index_posts.write_output import (
    CATALOG_FILE,
    QUARANTINE_FILE,
    SUPERSEDED_FILE,
    TAGS_FILE,
    document_summary,
    render_outputs,
)
from ingest_posts.models import FrontMatter, QuarantineRecord
from ingest_posts.normalize_posts.normalize import assign_ids, build_document


def _result(page_size=10):
    documents = assign_ids([
        build_document(
            FrontMatter(
                title="First",
                date="2025-12-06T19:58:03.136",
                tags=("AI",),
                description="d",
                extra={"author": "Sam", "series": {"name": "x"}},
            ),
            "# First\r\n",
            "a.md",
            0,
        ),
        build_document(FrontMatter(title="First", date="2025-12-06T19:58:03.136"), "#", "b.md", 0),
        build_document(FrontMatter(title="Hidden", date="2025-01-01", draft=True), "h", "c.md", 0),
    ])
    quarantine = [QuarantineRecord("d.md", 1, "missing_title", "front matter has no title", "---")]
    return index_posts(dedupe_posts(documents), quarantine, page_size=page_size)


class TestDocumentSummary:
    def test_fields(self) -> None:
        document = _result().catalog.documents[0]
        assert document_summary(document) == {
            "id": "first",
            "title": "First",
            "publishedAt": "2025-12-06T19:58:03.136Z",
            "precision": "datetime-no-tz",
            "tags": ["ai"],
            "description": "d",
            "bodyRef": "bodies/first.md",
            "extra": {"author": "Sam", "series": {"name": "x"}},
        }

    def test_extra_fields_pass_through_to_catalog(self) -> None:
        catalog = json.loads(render_outputs(_result())[CATALOG_FILE])
        assert catalog["pages"][0]["documents"][0]["extra"] == {"author": "Sam", "series": {"name": "x"}}


class TestRenderOutputs:
    def test_files(self) -> None:
        files = render_outputs(_result())
        assert set(files) == {
            CATALOG_FILE, TAGS_FILE, QUARANTINE_FILE, SUPERSEDED_FILE, "bodies/first.md",
        }
        assert files["bodies/first.md"] == "# First\r\n"

    def test_catalog_shape(self) -> None:
        catalog = json.loads(render_outputs(_result(page_size=1))[CATALOG_FILE])
        assert catalog["pageSize"] == 1
        assert catalog["totalPages"] == 1
        assert catalog["totalDocuments"] == 1
        assert catalog["pages"][0]["page"] == 1
        assert [d["id"] for d in catalog["pages"][0]["documents"]] == ["first"]

    def test_tags_include_all_canonical_documents(self) -> None:
        tags = json.loads(render_outputs(_result())[TAGS_FILE])
        assert tags == {"ai": ["first"]}

    def test_quarantine_records(self) -> None:
        quarantine = json.loads(render_outputs(_result())[QUARANTINE_FILE])
        assert quarantine == [{
            "sourceFile": "d.md",
            "ordinal": 1,
            "reason": "missing_title",
            "detail": "front matter has no title",
            "excerpt": "---",
        }]

    def test_superseded_entries(self) -> None:
        superseded = json.loads(render_outputs(_result())[SUPERSEDED_FILE])
        assert superseded == [{
            "id": "first-2",
            "canonicalId": "first",
            "title": "First",
            "publishedAt": "2025-12-06T19:58:03.136Z",
            "sourceFile": "b.md",
            "ordinal": 0,
            "reason": "longer_body",
        }]

    def test_rendering_is_deterministic(self) -> None:
        assert render_outputs(_result()) == render_outputs(_result())
