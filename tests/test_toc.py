"""Unit tests for table-of-contents extraction and its content cache."""

from __future__ import annotations

import logging

import pytest

from docs_builder.models import HeadingNode
from docs_builder.toc import TocCache, generate_toc


def _as_dicts(nodes: list[HeadingNode]) -> list[dict[str, object]]:
    return [node.to_dict() for node in nodes]


def test_h3_nests_under_preceding_h2() -> None:
    """Level-3 headings attach to the most recent level-2 heading."""
    toc = generate_toc('<h2 id="a">A</h2><h3 id="b">B</h3><h2 id="c">C</h2>')
    assert _as_dicts(toc) == [
        {
            "id": "a",
            "text": "A",
            "level": 2,
            "children": [{"id": "b", "text": "B", "level": 3}],
        },
        {"id": "c", "text": "C", "level": 2, "children": []},
    ]


def test_headings_without_id_or_text_are_skipped() -> None:
    """Malformed headings never appear in the outline."""
    toc = generate_toc('<h2>No id</h2><h2 id="empty">  </h2><h2 id="ok">Ok</h2>')
    assert [node.id for node in toc] == ["ok"]


def test_heading_text_is_stripped() -> None:
    """Surrounding whitespace is removed from heading text."""
    toc = generate_toc('<h2 id="a">\n  Basics  \n</h2>')
    assert toc[0].text == "Basics"


def test_context_comes_from_nearest_marked_ancestor() -> None:
    """Headings inside context blocks carry the marker class name."""
    html = (
        '<h2 id="shared">Shared</h2>'
        '<div class="context-framework"><section>'
        '<h2 id="fw">Framework</h2><h3 id="fw-sub">Binder</h3>'
        "</section></div>"
        '<div class="context-library"><h2 id="lib">Library</h2></div>'
    )
    toc = generate_toc(html)
    contexts = {node.id: node.context for node in toc}
    assert contexts == {
        "shared": None,
        "fw": "context-framework",
        "lib": "context-library",
    }
    children = toc[1].children or []
    assert children[0].context == "context-framework"
    assert "context" not in toc[0].to_dict(), "Unset context should be omitted"


def test_orphan_h3_is_dropped_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    """An h3 before any h2 is skipped by default and the skip is logged."""
    with caplog.at_level(logging.WARNING, logger="docs_builder.toc"):
        toc = generate_toc('<h3 id="orphan">Orphan</h3><h2 id="a">A</h2>')
    assert [node.id for node in toc] == ["a"]
    assert "orphan" in caplog.text


def test_orphan_h3_can_be_promoted() -> None:
    """The promote policy keeps orphan h3s as top-level nodes."""
    toc = generate_toc(
        '<h3 id="orphan">Orphan</h3><h2 id="a">A</h2>', orphan_policy="promote"
    )
    assert [(node.id, node.level) for node in toc] == [("orphan", 3), ("a", 2)]
    assert toc[0].children is None


def test_cache_returns_stored_outline() -> None:
    """Repeated lookups of identical HTML are served from the cache."""
    cache = TocCache()
    html = '<h2 id="a">A</h2>'
    first = generate_toc(html, cache=cache)
    assert len(cache) == 1
    first[0].text = "mutated"
    second = generate_toc(html, cache=cache)
    assert second[0].text == "A", "Cached entries must not share mutable state"
    assert len(cache) == 1


def test_cache_keys_on_content() -> None:
    """Different HTML produces different cache entries."""
    cache = TocCache()
    generate_toc('<h2 id="a">A</h2>', cache=cache)
    generate_toc('<h2 id="b">B</h2>', cache=cache)
    assert len(cache) == 2
    assert TocCache.key_for("x") == TocCache.key_for("x")
    cache.clear()
    assert len(cache) == 0
