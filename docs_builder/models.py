"""Typed dataclasses shared by the documentation build pipeline stages."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from pathlib import Path

from ._constants import DEFAULT_VERSION

HtmlElementType = typ.Literal["h1", "h2", "h3", "h4", "h5", "p", "li", "blockquote"]


class Context(enum.StrEnum):
    """Content visibility dimension used by the search index."""

    FRAMEWORK = "framework"
    LIBRARY = "library"
    GLOBAL = "global"


class BuildState(enum.StrEnum):
    """States walked by :class:`~docs_builder.generator.DocsPipeline`."""

    IDLE = "idle"
    VALIDATING = "validating"
    COMPILING = "compiling"
    HIGHLIGHTING = "highlighting"
    EXTRACTING = "extracting"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dc.dataclass(slots=True, frozen=True)
class SourceDocument:
    """Markdown source read from disk.

    Attributes
    ----------
    slug : str
        Filename without the ``.md`` extension.
    version : str
        Documentation release line, e.g. ``"1.x"``.
    markdown : str
        Raw markdown text.
    path : Path or None
        File the markdown was read from, when it came from disk.
    """

    slug: str
    version: str
    markdown: str
    path: Path | None = None


@dc.dataclass(slots=True)
class HeadingNode:
    """Table-of-contents entry for an ``h2`` or ``h3`` heading."""

    id: str
    text: str
    level: int
    context: str | None = None
    children: list[HeadingNode] | None = None

    def to_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-ready mapping, omitting unset optional keys."""
        payload: dict[str, typ.Any] = {
            "id": self.id,
            "text": self.text,
            "level": self.level,
        }
        if self.context is not None:
            payload["context"] = self.context
        if self.children is not None:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


@dc.dataclass(slots=True)
class LexemeRecord:
    """One search-indexable unit of page text and its heading ancestry.

    Field names and order match the NDJSON contract consumed by the search
    index loader.
    """

    version: str
    context: Context
    link: str
    html_element_type: HtmlElementType
    inner_text: str
    h1_inner_text: str
    h2_inner_text: str | None = None
    h3_inner_text: str | None = None
    h4_inner_text: str | None = None
    h5_inner_text: str | None = None


@dc.dataclass(slots=True)
class DocMeta:
    """Navigation metadata for one compiled document."""

    version: str
    slug: str
    title: str


@dc.dataclass(slots=True)
class BuildConfig:
    """Inputs for a single pipeline run.

    Attributes
    ----------
    docs_source_dir : Path
        Directory holding one ``*.md`` file per slug.
    output_dir : Path
        Root directory that receives ``rendered/``, ``search/`` and
        ``meta.json``.
    version : str
        Documentation version used in output paths and lexeme links.
    fail_fast : bool
        Abort on the first per-document failure instead of collecting them.
    stylesheet : Path, optional
        Where to write the CSS for the highlighted token classes; nothing is
        written when omitted.
    """

    docs_source_dir: Path
    output_dir: Path
    version: str = DEFAULT_VERSION
    fail_fast: bool = False
    stylesheet: Path | None = None


@dc.dataclass(slots=True)
class OutputFiles:
    """Paths of the artifacts written by a pipeline run."""

    rendered: list[Path]
    lexemes: Path
    meta: Path
    stylesheet: Path | None = None


@dc.dataclass(slots=True)
class BuildResult:
    """Summary returned once a pipeline run reaches ``DONE``."""

    documents_processed: int
    lexemes_generated: int
    output_files: OutputFiles
    toc: dict[str, list[HeadingNode]] = dc.field(default_factory=dict)

    def to_dict(self) -> dict[str, typ.Any]:
        """Return the camel-case summary shape shared with other build hosts."""
        files = self.output_files
        output_files: dict[str, typ.Any] = {
            "rendered": [str(path) for path in files.rendered],
            "lexemes": str(files.lexemes),
            "meta": str(files.meta),
        }
        if files.stylesheet is not None:
            output_files["stylesheet"] = str(files.stylesheet)
        return {
            "documentsProcessed": self.documents_processed,
            "lexemesGenerated": self.lexemes_generated,
            "outputFiles": output_files,
        }


__all__ = [
    "BuildConfig",
    "BuildResult",
    "BuildState",
    "Context",
    "DocMeta",
    "HeadingNode",
    "HtmlElementType",
    "LexemeRecord",
    "OutputFiles",
    "SourceDocument",
]
