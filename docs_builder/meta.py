"""Extract page titles and compose the ``meta.json`` manifest."""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json
from bs4 import BeautifulSoup

from ._constants import DOC_TITLE_SELECTOR
from .errors import MissingTitleError
from .models import DocMeta

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class CompiledDocument(typ.TypedDict):
    """Input row for :func:`generate_meta_json`."""

    html: str
    version: str
    slug: str


def extract_doc_title(html: str, *, slug: str | None = None) -> str:
    """Return the stripped text of the ``h1#doc-title`` element.

    Raises
    ------
    MissingTitleError
        If the element is absent; ``slug`` is attached for reporting.
    """
    title = BeautifulSoup(html, "html.parser").select_one(DOC_TITLE_SELECTOR)
    if title is None:
        raise MissingTitleError(slug)
    return title.get_text().strip()


def generate_doc_meta(html: str, version: str, slug: str) -> DocMeta:
    """Build the metadata entry for one compiled document."""
    return DocMeta(version=version, slug=slug, title=extract_doc_title(html, slug=slug))


def generate_meta_json(documents: cabc.Iterable[CompiledDocument]) -> list[DocMeta]:
    """Map documents to metadata entries, preserving input order."""
    return [
        generate_doc_meta(doc["html"], doc["version"], doc["slug"]) for doc in documents
    ]


def write_meta_json(entries: cabc.Sequence[DocMeta], path: Path) -> Path:
    """Write ``entries`` to ``path`` as an indented JSON array."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = msgspec_json.format(msgspec_json.encode(list(entries)), indent=2)
    path.write_bytes(payload)
    return path


__all__ = [
    "CompiledDocument",
    "extract_doc_title",
    "generate_doc_meta",
    "generate_meta_json",
    "write_meta_json",
]
