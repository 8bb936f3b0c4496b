"""Unit tests for document title extraction and ``meta.json`` generation."""

from __future__ import annotations

import json
import typing as typ

import pytest

from docs_builder.errors import MissingTitleError
from docs_builder.meta import (
    extract_doc_title,
    generate_doc_meta,
    generate_meta_json,
    write_meta_json,
)
from docs_builder.models import DocMeta

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_generate_meta_json_round_trip() -> None:
    """A single titled document maps to one metadata entry."""
    entries = generate_meta_json(
        [{"html": '<h1 id="doc-title">Routing</h1>', "version": "1.x", "slug": "routing"}]
    )
    assert entries == [DocMeta(version="1.x", slug="routing", title="Routing")]


def test_title_text_is_stripped() -> None:
    """Whitespace and inline markup around the title are normalized."""
    html = '<h1 id="doc-title">\n  Dependency <em>Injection</em>\n</h1>'
    assert extract_doc_title(html) == "Dependency Injection"


def test_missing_title_raises_identifiable_error() -> None:
    """Absent titles fail loudly instead of returning an empty string."""
    with pytest.raises(MissingTitleError, match=r"h1#doc-title") as excinfo:
        generate_doc_meta("<h1>No id</h1><p>Body</p>", "1.x", "broken")
    assert excinfo.value.slug == "broken"
    assert "broken" in str(excinfo.value)


def test_meta_order_follows_input_order() -> None:
    """Entries are not sorted; input order is preserved."""
    docs = [
        {"html": f'<h1 id="doc-title">{slug.title()}</h1>', "version": "1.x", "slug": slug}
        for slug in ("zeta", "alpha", "mid")
    ]
    assert [entry.slug for entry in generate_meta_json(docs)] == ["zeta", "alpha", "mid"]


def test_write_meta_json_emits_indented_array(tmp_path: Path) -> None:
    """The manifest is a JSON array of version/slug/title objects."""
    path = write_meta_json(
        [DocMeta("1.x", "routing", "Routing")], tmp_path / "out" / "meta.json"
    )
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == [{"version": "1.x", "slug": "routing", "title": "Routing"}]
    assert '\n  {' in text, "Expected two-space indentation"
