"""Detect posts that are the same post and pick one canonical copy."""

from __future__ import annotations

import logging
from datetime import datetime

from dedupe_posts.models import (
    EARLIEST_SOURCE,
    LONGER_BODY,
    DedupeResult,
    DuplicateGroup,
)
from ingest_posts.models import Document

logger = logging.getLogger(__name__)


def normalize_title(title: str) -> str:
    """Case-fold a title and collapse its whitespace."""
    return " ".join(title.split()).casefold()


def _body_length(document: Document) -> int:
    return len(document.body.strip())


def _resolve(members: list[Document]) -> tuple[Document, str]:
    ranked = sorted(members, key=lambda d: (-_body_length(d), d.source_order))
    winner, runner_up = ranked[0], ranked[1]
    if _body_length(winner) > _body_length(runner_up):
        return winner, LONGER_BODY
    return winner, EARLIEST_SOURCE


def dedupe_posts(documents: list[Document]) -> DedupeResult:
    """
    Group documents by (normalized title, published instant) and resolve each group.

    Only exact key matches count as duplicates. The canonical member is the
    one with the strictly longest trimmed body; ties go to the earliest
    (source_file, ordinal). Other members stay in the result, marked as
    superseded by the canonical id.

    Args:
        documents: Documents with ids assigned

    Returns:
        DedupeResult over the same documents in (source_file, ordinal) order
    """
    ordered = sorted(documents, key=lambda d: d.source_order)
    buckets: dict[tuple[str, datetime], list[Document]] = {}
    for document in ordered:
        key = (normalize_title(document.title), document.published_at)
        buckets.setdefault(key, []).append(document)

    groups = []
    superseded_by: dict[str, str] = {}
    for (title_key, published_at), members in buckets.items():
        if len(members) < 2:
            continue
        canonical, resolution = _resolve(members)
        group = DuplicateGroup(
            title_key=title_key,
            published_at=published_at,
            member_ids=tuple(d.id for d in members),
            canonical_id=canonical.id,
            resolution=resolution,
            distinct_content=len({d.content_hash for d in members}) > 1,
        )
        groups.append(group)
        for superseded_id in group.superseded_ids:
            superseded_by[superseded_id] = canonical.id
        logger.info(
            "Duplicate group %r at %s: kept %s (%s), superseded %s",
            title_key,
            published_at.isoformat(),
            canonical.id,
            resolution,
            ", ".join(group.superseded_ids),
        )

    if groups:
        logger.info("Resolved %d duplicate groups, %d documents superseded", len(groups), len(superseded_by))
    return DedupeResult(documents=tuple(ordered), groups=tuple(groups), superseded_by=superseded_by)
