"""Cyclopts CLI entrypoint for building documentation artifacts.

The ``build-docs`` console script compiles a directory of markdown pages into
highlighted HTML fragments, an NDJSON search index, and ``meta.json``. Every
flag can also be supplied through a ``DOCS_BUILD_``-prefixed environment
variable, which is how CI jobs configure it.

Examples
--------
Build the default ``./docs`` directory into ``./dist/docs``:

>>> from docs_builder.cli import main
>>> main([])  # doctest: +SKIP

Build a custom directory with progress logging:

>>> main(["--input", "docs/1.x", "--output", "out", "-v"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from cyclopts.exceptions import CycloptsError

from ._constants import DEFAULT_VERSION, RENDERED_DIRNAME
from .errors import DocsBuildError
from .generator import build_docs
from .models import BuildConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import BuildResult

DEFAULT_INPUT = Path("docs")
DEFAULT_OUTPUT = Path("dist/docs")

app = App(
    name="build-docs",
    help="Compile markdown to HTML fragments and generate NDJSON lexemes for search.",
    config=cyclopts.config.Env("DOCS_BUILD_", command=False),  # type: ignore[unknown-argument]
)


def _configure_logging(*, verbose: bool) -> None:
    """Send package logs to stderr, at DEBUG when ``verbose`` is set."""
    logging.basicConfig(format="%(message)s", level=logging.WARNING)
    logging.getLogger("docs_builder").setLevel(
        logging.DEBUG if verbose else logging.WARNING
    )


def _print_summary(result: BuildResult, output_dir: Path) -> None:
    files = result.output_files
    print("Build complete!")
    print(f"  Documents processed: {result.documents_processed}")
    print(f"  Lexemes generated: {result.lexemes_generated}")
    print("  Output files:")
    print(
        f"    - Rendered HTML: {len(files.rendered)} files in "
        f"{output_dir / RENDERED_DIRNAME}"
    )
    print(f"    - Search index: {files.lexemes}")
    print(f"    - Metadata: {files.meta}")
    if files.stylesheet is not None:
        print(f"    - Stylesheet: {files.stylesheet}")


@app.default
def build(
    *,
    input_dir: typ.Annotated[
        Path,
        Parameter(
            name=["--input"], help="Input directory containing markdown files"
        ),
    ] = DEFAULT_INPUT,
    output_dir: typ.Annotated[
        Path,
        Parameter(name=["--output"], help="Output directory for build artifacts"),
    ] = DEFAULT_OUTPUT,
    doc_version: typ.Annotated[
        str, Parameter(help="Documentation version used in output paths and links")
    ] = DEFAULT_VERSION,
    fail_fast: typ.Annotated[
        bool, Parameter(help="Abort on the first document that fails to build")
    ] = False,
    stylesheet: typ.Annotated[
        Path | None,
        Parameter(help="Also write the CSS for highlighted code to this path"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(name=["--verbose", "-v"], help="Enable verbose logging")
    ] = False,
) -> None:
    """Build rendered fragments, the search index, and page metadata.

    Parameters
    ----------
    input_dir : Path, optional
        Directory of ``*.md`` sources; defaults to ``./docs``.
    output_dir : Path, optional
        Artifact root; defaults to ``./dist/docs``.
    doc_version : str, optional
        Documentation version, defaulting to ``1.x``.
    fail_fast : bool, optional
        Stop at the first failing document instead of reporting all of them.
    stylesheet : Path, optional
        Destination for the token stylesheet; skipped when omitted.
    verbose : bool, optional
        Log step-by-step progress to stderr.

    Raises
    ------
    SystemExit
        With status ``1`` when the input directory is missing or the build
        fails; a one-line reason is printed to stderr.
    """
    _configure_logging(verbose=verbose)
    config = BuildConfig(
        docs_source_dir=input_dir.resolve(),
        output_dir=output_dir.resolve(),
        version=doc_version,
        fail_fast=fail_fast,
        stylesheet=stylesheet.resolve() if stylesheet is not None else None,
    )
    try:
        result = build_docs(config)
    except DocsBuildError as exc:
        first_line = str(exc).splitlines()[0] if str(exc) else type(exc).__name__
        print(f"Build failed: {first_line}", file=sys.stderr)
        raise SystemExit(1) from exc
    _print_summary(result, config.output_dir)


def main(tokens: cabc.Sequence[str] | None = None) -> None:
    """Invoke the Cyclopts application that powers ``build-docs``.

    Parameters
    ----------
    tokens : Sequence[str], optional
        Arguments to parse instead of ``sys.argv``.

    Raises
    ------
    SystemExit
        With status ``1`` for unknown or malformed options, after Cyclopts
        has printed the problem.
    """
    try:
        app(tokens, exit_on_error=False)
    except CycloptsError as exc:
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
