"""Normalize parsed posts into Documents and assign stable slugs."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import replace
from typing import Iterable

from common.datetime import normalize_date
from common.hashing import content_hash, generate_document_id
from ingest_posts.models import Document, FrontMatter

logger = logging.getLogger(__name__)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_tag(tag: str) -> str:
    """Trim, lowercase and collapse internal whitespace."""
    return " ".join(tag.split()).lower()


def normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    """Normalize tags, dropping empties and repeats (first occurrence wins)."""
    seen = set()
    result = []
    for tag in tags:
        normalized = normalize_tag(tag)
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        result.append(normalized)
    return tuple(result)


def slugify(title: str) -> str:
    """Lowercase a title and join its alphanumeric runs with hyphens.

    Accented letters are folded to ASCII first; symbols that have no ASCII
    form are dropped.
    """
    folded = unicodedata.normalize("NFKD", title).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM_RE.sub("-", folded.lower()).strip("-")


def build_document(
    front_matter: FrontMatter,
    body: str,
    source_file: str,
    ordinal: int,
) -> Document:
    """
    Build a Document from parsed front matter.

    The id is left empty; it is only assigned once every file has been
    processed, see assign_ids.

    Raises:
        UnparsableDateError: If the date is missing or in an unsupported format
    """
    published = normalize_date(front_matter.date)
    slug = slugify(front_matter.title or "")
    if not slug:
        slug = generate_document_id(source_file, ordinal)
        logger.info(
            "Title %r of %s#%d has no slug characters, using %s",
            front_matter.title, source_file, ordinal, slug,
        )

    return Document(
        id="",
        slug=slug,
        title=front_matter.title or "",
        published_at=published.instant,
        precision=published.precision,
        fraction_digits=published.fraction_digits,
        draft=front_matter.draft,
        tags=normalize_tags(front_matter.tags),
        body=body,
        source_file=source_file,
        ordinal=ordinal,
        content_hash=content_hash(body),
        description=front_matter.description,
        extra=dict(front_matter.extra),
    )


def assign_ids(documents: Iterable[Document]) -> list[Document]:
    """
    Give every document a unique id derived from its slug.

    Documents are walked in (source_file, ordinal) order. The first holder of
    a slug keeps it bare; later holders get the lowest "-2", "-3", ... suffix
    that no other document uses, bare slugs of later documents included.

    Returns:
        Documents with ids set, in (source_file, ordinal) order
    """
    ordered = sorted(documents, key=lambda d: d.source_order)

    owners: dict[str, tuple[str, int]] = {}
    for document in ordered:
        owners.setdefault(document.slug, document.source_order)
    taken = set(owners)

    result = []
    for document in ordered:
        if owners[document.slug] == document.source_order:
            result.append(replace(document, id=document.slug))
            continue
        suffix = 2
        while f"{document.slug}-{suffix}" in taken:
            suffix += 1
        new_id = f"{document.slug}-{suffix}"
        taken.add(new_id)
        logger.info(
            "Slug %s already used, assigning %s to %s#%d",
            document.slug, new_id, document.source_file, document.ordinal,
        )
        result.append(replace(document, id=new_id))
    return result
