"""Shared fixtures for the docs_builder test suite."""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from docs_builder.generator.highlighter import reset_languages

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


@pytest.fixture(autouse=True)
def fresh_language_registry() -> cabc.Iterator[None]:
    """Reset the process-wide highlighter registry around every test."""
    reset_languages()
    yield
    reset_languages()


@pytest.fixture
def routing_markdown() -> str:
    """Return a representative documentation page with code and contexts."""
    return dedent(
        """\
        <h1 id="doc-title">Routing</h1>

        Routes map requests to [controllers](controllers.md#basics).

        ## Basics

        Define a route:

        ```php
        $routes->get('/users/:id');
        ```

        ### Route Variables

        - Variables are wrapped in colons.
        - Constraints are optional.

        <div class="context-framework" markdown="1">

        ## Framework Setup

        Register the routing binder.

        </div>
        """
    )


@pytest.fixture
def docs_dir(tmp_path: Path, routing_markdown: str) -> Path:
    """Create a source directory with two valid documentation pages."""
    source = tmp_path / "docs"
    source.mkdir()
    (source / "routing.md").write_text(routing_markdown, encoding="utf-8")
    (source / "installation.md").write_text(
        '<h1 id="doc-title">Installation</h1>\n\nRun the installer.\n',
        encoding="utf-8",
    )
    return source
