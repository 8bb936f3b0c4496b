"""Markdown extensions that stabilise heading anchors and internal links."""

from __future__ import annotations

import re
import typing as typ

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import HTML_PLACEHOLDER_RE

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

MD_LINK_PATTERN = re.compile(r"\.md(#|$)")
HEADING_TAGS = frozenset({"h1", "h2", "h3", "h4", "h5", "h6"})
_ESCAPED_CHAR = re.compile("\x02(\\d+)\x03")
_SLUG_STRIP = re.compile(r"[^\w\- ]")
_RAW_HEADING_ID = re.compile(
    r"<h[1-6]\b[^>]*?\sid\s*=\s*([\"'])(.*?)\1", re.IGNORECASE
)


def slugify(text: str) -> str:
    """Convert heading text into a GitHub-style anchor.

    Punctuation is dropped rather than replaced and every space becomes a
    hyphen, so existing permalinks keep resolving.

    Examples
    --------
    >>> slugify("What's New?")
    'whats-new'
    >>> slugify("Binders & Bootstrappers")
    'binders--bootstrappers'
    """
    slug = _SLUG_STRIP.sub("", text.strip().lower()).replace(" ", "-")
    return slug or "section"


def _unique_slug(base: str, used: set[str]) -> str:
    """Return a unique slug, appending numeric suffixes and mutating ``used``."""
    candidate = base
    suffix = 1
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


def rewrite_md_href(href: str | None) -> str | None:
    """Drop the ``.md`` extension from links to sibling documentation pages.

    Examples
    --------
    >>> rewrite_md_href("dependency-injection.md#binders")
    'dependency-injection#binders'
    >>> rewrite_md_href("https://example.com") is None
    True
    """
    if not href or ".md" not in href:
        return None
    rewritten = MD_LINK_PATTERN.sub(r"\1", href, count=1)
    return rewritten if rewritten != href else None


class DocsLinkExtension(Extension):
    """Register heading-ID and ``.md`` link rewriting on a Markdown instance.

    Heading IDs must be stable across rebuilds because they are persisted in
    permalinks and used as TOC anchors, so they are derived from the heading
    text only.
    """

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register both treeprocessors after inline processing has run."""
        md.treeprocessors.register(HeadingIdTreeprocessor(md), "docs_heading_ids", 15)
        md.treeprocessors.register(MdLinkTreeprocessor(md), "docs_md_links", 14)


class HeadingIdTreeprocessor(Treeprocessor):
    """Assign slugified ``id`` attributes to markdown headings."""

    def run(self, root: Element) -> Element:
        """Give every heading without an ``id`` a unique slug of its text."""
        used = self._raw_heading_ids()
        for element in root.iter():
            if element.tag not in HEADING_TAGS:
                continue
            existing = element.get("id")
            if existing:
                used.add(existing)
                continue
            element.set("id", _unique_slug(slugify(self._heading_text(element)), used))
        return root

    def _raw_heading_ids(self) -> set[str]:
        """Collect IDs of headings written as raw HTML, which sit in the stash."""
        ids: set[str] = set()
        for block in self.md.htmlStash.rawHtmlBlocks:
            if isinstance(block, str):
                ids.update(match.group(2) for match in _RAW_HEADING_ID.finditer(block))
                continue
            for element in block.iter():
                if element.tag in HEADING_TAGS and element.get("id"):
                    ids.add(element.get("id"))
        return ids

    @staticmethod
    def _heading_text(element: Element) -> str:
        text = "".join(element.itertext())
        text = HTML_PLACEHOLDER_RE.sub("", text)
        return _ESCAPED_CHAR.sub(lambda match: chr(int(match.group(1))), text)


class MdLinkTreeprocessor(Treeprocessor):
    """Rewrite ``page.md`` links into extension-less site routes."""

    def run(self, root: Element) -> Element:
        """Rewrite matching anchors in the parsed markdown tree."""
        for element in root.iter("a"):
            rewritten = rewrite_md_href(element.get("href"))
            if rewritten:
                element.set("href", rewritten)
        return root


__all__ = [
    "DocsLinkExtension",
    "HeadingIdTreeprocessor",
    "MdLinkTreeprocessor",
    "rewrite_md_href",
    "slugify",
]
