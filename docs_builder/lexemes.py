"""Turn rendered documentation HTML into flat search-index records.

Every indexable element (``h1``-``h5``, ``p``, ``li``, ``blockquote``) yields
one :class:`~docs_builder.models.LexemeRecord`. Heading fields describe the
headings *active* at that point in document order, not DOM ancestry: a
paragraph after ``<h2>Basics</h2>`` carries ``h2_inner_text="Basics"`` even
though the heading is its sibling.
"""

from __future__ import annotations

import typing as typ

from bs4 import BeautifulSoup, Tag

from ._constants import (
    FRAMEWORK_CONTEXT_CLASS,
    LIBRARY_CONTEXT_CLASS,
    LINK_PREFIX,
    TOC_NAV_CLASS,
)
from .errors import LexemeValidationError
from .models import Context, LexemeRecord

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import HtmlElementType

HEADING_LEVELS = ("h1", "h2", "h3", "h4", "h5")
INDEXABLE_ELEMENTS = frozenset({*HEADING_LEVELS, "p", "li", "blockquote"})
VALID_CONTEXTS = tuple(context.value for context in Context)


def page_link(version: str, slug: str) -> str:
    """Return the site route of a documentation page."""
    return f"{LINK_PREFIX}{version}/{slug}"


def inner_text(node: Tag) -> str:
    """Concatenate every descendant text node of ``node``."""
    return node.get_text()


def resolve_context(element: Tag) -> Context:
    """Return the context of the nearest marked ancestor, or ``GLOBAL``."""
    node: Tag | None = element
    while node is not None:
        classes = node.get("class") or []
        if FRAMEWORK_CONTEXT_CLASS in classes:
            return Context.FRAMEWORK
        if LIBRARY_CONTEXT_CLASS in classes:
            return Context.LIBRARY
        node = node.parent
    return Context.GLOBAL


class LexemeExtractor:
    """Walk one document and collect its lexeme records."""

    def __init__(self, version: str, slug: str) -> None:
        self.version = version
        self.slug = slug
        self._active: dict[str, str | None] = dict.fromkeys(HEADING_LEVELS)
        self._records: list[LexemeRecord] = []

    def extract(self, html: str) -> list[LexemeRecord]:
        """Return the records of ``html`` in document order."""
        self._active = dict.fromkeys(HEADING_LEVELS)
        self._records = []
        soup = BeautifulSoup(html, "html.parser")
        self._walk(soup)
        return self._records

    def _walk(self, node: Tag) -> None:
        for child in node.children:
            if not isinstance(child, Tag) or self._should_skip(child):
                continue
            name = child.name.lower()
            if name in HEADING_LEVELS:
                self._enter_heading(name, inner_text(child))
            if name in INDEXABLE_ELEMENTS:
                self._records.append(self._record(child, name))
            self._walk(child)

    @staticmethod
    def _should_skip(element: Tag) -> bool:
        return element.name == "nav" and TOC_NAV_CLASS in (element.get("class") or [])

    def _enter_heading(self, name: str, text: str) -> None:
        depth = HEADING_LEVELS.index(name)
        self._active[name] = text
        for deeper in HEADING_LEVELS[depth + 1 :]:
            self._active[deeper] = None

    def _link(self, element: Tag, name: str) -> str:
        base = page_link(self.version, self.slug)
        anchor = element.get("id")
        if name == "h1" or not anchor:
            return base
        return f"{base}#{anchor}"

    def _record(self, element: Tag, name: str) -> LexemeRecord:
        return LexemeRecord(
            version=self.version,
            context=resolve_context(element),
            link=self._link(element, name),
            html_element_type=typ.cast("HtmlElementType", name),
            inner_text=inner_text(element),
            h1_inner_text=self._active["h1"] or "",
            h2_inner_text=self._active["h2"],
            h3_inner_text=self._active["h3"],
            h4_inner_text=self._active["h4"],
            h5_inner_text=self._active["h5"],
        )


def extract_lexemes(html: str, version: str, slug: str) -> list[LexemeRecord]:
    """Extract the lexeme records of one rendered document."""
    return LexemeExtractor(version, slug).extract(html)


def validate_lexemes(records: cabc.Sequence[LexemeRecord]) -> None:
    """Check records against the search index contract before writing.

    Raises
    ------
    LexemeValidationError
        Listing every problem found, one ``Lexeme <index>: ...`` line each.
    """
    problems: list[str] = []
    for index, record in enumerate(records):
        if not record.h1_inner_text:
            problems.append(
                f"Lexeme {index}: Missing h1_inner_text (link: {record.link})"
            )
        if not record.link.startswith(LINK_PREFIX):
            problems.append(
                f"Lexeme {index}: Link must start with {LINK_PREFIX} "
                f"(got: {record.link})"
            )
        if record.context not in VALID_CONTEXTS:
            problems.append(
                f"Lexeme {index}: Invalid context value (got: {record.context}, "
                f"expected one of: {', '.join(VALID_CONTEXTS)})"
            )
    if problems:
        raise LexemeValidationError(problems)


__all__ = [
    "INDEXABLE_ELEMENTS",
    "LexemeExtractor",
    "extract_lexemes",
    "inner_text",
    "page_link",
    "resolve_context",
    "validate_lexemes",
]
