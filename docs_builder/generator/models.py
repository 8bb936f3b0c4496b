"""Shared dataclasses used by the documentation build pipeline."""

from __future__ import annotations

import dataclasses as dc

from docs_builder.models import DocMeta, HeadingNode, LexemeRecord  # noqa: TC001


@dc.dataclass(slots=True)
class ProcessedDocument:
    """Artifacts derived from one source document before they are written.

    Attributes
    ----------
    slug : str
        Document identifier (filename without extension).
    html : str
        Highlighted HTML fragment destined for ``rendered/{version}/``.
    lexemes : list[LexemeRecord]
        Search records in document order.
    meta : DocMeta
        Title metadata for ``meta.json``.
    toc : list[HeadingNode]
        Nested ``h2``/``h3`` outline.
    """

    slug: str
    html: str
    lexemes: list[LexemeRecord]
    meta: DocMeta
    toc: list[HeadingNode]


__all__ = ["ProcessedDocument"]
