"""Derive a nested ``h2``/``h3`` outline from rendered documentation HTML.

Results are content-addressed: :class:`TocCache` keys outlines by a SHA-256
digest of the input HTML, so a cached entry can never go stale. The cache is
an unbounded in-memory map, which suits a small, fixed documentation corpus;
callers building larger corpora should pass a fresh cache per run or clear it.

Example
-------
>>> from docs_builder.toc import generate_toc
>>> [node.id for node in generate_toc('<h2 id="a">A</h2><h2 id="c">C</h2>')]
['a', 'c']
"""

from __future__ import annotations

import copy
import hashlib
import logging
import typing as typ

from bs4 import BeautifulSoup, Tag

from ._constants import CONTEXT_CLASSES
from .models import HeadingNode

logger = logging.getLogger(__name__)

OrphanPolicy = typ.Literal["drop", "promote"]


class TocCache:
    """Map from HTML content digests to generated outlines."""

    def __init__(self) -> None:
        self._entries: dict[str, list[HeadingNode]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def key_for(html: str) -> str:
        """Return the cache key for ``html``."""
        return hashlib.sha256(html.encode("utf-8")).hexdigest()

    def get(self, html: str) -> list[HeadingNode] | None:
        """Return a copy of the cached outline for ``html``, if present."""
        cached = self._entries.get(self.key_for(html))
        return copy.deepcopy(cached) if cached is not None else None

    def set(self, html: str, headings: list[HeadingNode]) -> None:
        """Store ``headings`` as the outline of ``html``."""
        self._entries[self.key_for(html)] = copy.deepcopy(headings)

    def clear(self) -> None:
        """Drop every cached outline."""
        self._entries.clear()


def _heading_context(heading: Tag) -> str | None:
    """Return the nearest context marker class on the heading or an ancestor."""
    node: Tag | None = heading
    while node is not None:
        classes = node.get("class") or []
        for marker in CONTEXT_CLASSES:
            if marker in classes:
                return marker
        node = node.parent
    return None


def generate_toc(
    html: str,
    *,
    cache: TocCache | None = None,
    orphan_policy: OrphanPolicy = "drop",
) -> list[HeadingNode]:
    """Build the table of contents for ``html``.

    Parameters
    ----------
    html : str
        Rendered HTML fragment.
    cache : TocCache, optional
        Outline cache consulted before parsing and filled afterwards.
    orphan_policy : {"drop", "promote"}, optional
        What to do with an ``h3`` that appears before any ``h2``: ``"drop"``
        skips it (with a warning), ``"promote"`` emits it as a top-level node.

    Returns
    -------
    list[HeadingNode]
        ``h2`` nodes in document order, each holding its ``h3`` children.
        Headings without an ``id`` or without text are skipped.
    """
    if cache is not None:
        cached = cache.get(html)
        if cached is not None:
            return cached

    soup = BeautifulSoup(html, "html.parser")
    headings: list[HeadingNode] = []
    current_h2: HeadingNode | None = None
    for element in soup.find_all(["h2", "h3"]):
        heading_id = element.get("id")
        text = element.get_text().strip()
        if not heading_id or not text:
            continue
        context = _heading_context(element)
        if element.name == "h2":
            current_h2 = HeadingNode(heading_id, text, 2, context, children=[])
            headings.append(current_h2)
        elif current_h2 is not None and current_h2.children is not None:
            current_h2.children.append(HeadingNode(heading_id, text, 3, context))
        elif orphan_policy == "promote":
            headings.append(HeadingNode(heading_id, text, 3, context))
        else:
            logger.warning("Dropping h3 #%s that precedes every h2", heading_id)

    if cache is not None:
        cache.set(html, headings)
    return headings


__all__ = ["OrphanPolicy", "TocCache", "generate_toc"]
