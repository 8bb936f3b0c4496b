"""Build pipeline for the framework documentation portal.

This package compiles markdown pages into highlighted HTML fragments, a
newline-delimited JSON search index, and a ``meta.json`` manifest that the
presentation layer reads.

Exports
-------
- ``app``: Cyclopts application behind the ``build-docs`` console script.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``build_docs``: Programmatic entry point returning a ``BuildResult``.

Examples
--------
>>> from docs_builder import main
>>> main(["--input", "docs"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main
from .generator import build_docs
from .models import BuildConfig, BuildResult

__all__ = ["BuildConfig", "BuildResult", "app", "build_docs", "main"]
