"""Compile maintainer-authored markdown into embeddable HTML fragments."""

from __future__ import annotations

import logging
import typing as typ

from markdown import Markdown

from docs_builder.generator.link_rewriter import DocsLinkExtension

if typ.TYPE_CHECKING:
    from pathlib import Path

    from markdown.extensions import Extension
else:  # pragma: no cover - type-checking fallback
    Extension = typ.Any

logger = logging.getLogger(__name__)


class MarkdownCompiler:
    """Render markdown into HTML fragments with stable heading IDs.

    Raw HTML passes through untouched because the sources are written by
    maintainers; the output is treated as trusted downstream.
    """

    def __init__(self, extra_extensions: typ.Sequence[Extension] = ()) -> None:
        """Initialize the compiler with optional additional extensions.

        Parameters
        ----------
        extra_extensions : Sequence[Extension], optional
            Markdown extensions appended after the built-in set.
        """
        self._extra_extensions = list(extra_extensions)

    def _build_markdown(self) -> Markdown:
        extensions: list[Extension | str] = [
            "fenced_code",
            "tables",
            "sane_lists",
            "md_in_html",
            DocsLinkExtension(),
            *self._extra_extensions,
        ]
        return Markdown(extensions=extensions, output_format="html")

    def compile(self, text: str) -> str:
        """Render ``text`` into an HTML fragment.

        A fresh ``Markdown`` instance is used for every call so the output is
        a pure function of the input: compiling the same text twice yields
        byte-identical HTML.
        """
        if not text.strip():
            return ""
        return self._build_markdown().convert(text)

    def compile_file(self, path: Path) -> str:
        """Read a UTF-8 markdown file and compile it.

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist.
        """
        if not path.is_file():
            msg = f"Markdown source '{path}' not found."
            raise FileNotFoundError(msg)
        return self.compile(path.read_text(encoding="utf-8"))

    def compile_all(self, input_dir: Path) -> dict[str, str]:
        """Compile every ``*.md`` file in ``input_dir``, keyed by slug.

        Files are visited in sorted filename order so the mapping order is
        deterministic.
        """
        compiled: dict[str, str] = {}
        sources = sorted(input_dir.glob("*.md"))
        logger.debug("Found %d markdown files in %s", len(sources), input_dir)
        for source in sources:
            logger.debug("  Compiling %s -> %s.html", source.name, source.stem)
            compiled[source.stem] = self.compile_file(source)
        return compiled


def compile_markdown(text: str) -> str:
    """Compile ``text`` with a default :class:`MarkdownCompiler`."""
    return MarkdownCompiler().compile(text)


__all__ = ["MarkdownCompiler", "compile_markdown"]
