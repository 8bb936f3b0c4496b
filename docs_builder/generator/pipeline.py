"""High-level orchestration for documentation builds.

This module sequences the pipeline stages for one documentation version:
markdown is compiled with :class:`MarkdownCompiler`, code blocks are
tokenized by :class:`SyntaxHighlighter`, the table of contents, lexemes and
title metadata are extracted, and finally the rendered fragments, the NDJSON
search index and ``meta.json`` are written under the output directory::

    {output_dir}/
      rendered/{version}/{slug}.html
      search/lexemes.ndjson
      meta.json

Documents are processed independently. Failures are collected per slug and
reported together once every document has been attempted, unless
``BuildConfig.fail_fast`` is set, in which case the first failure aborts the
run. Nothing is written while any document has failed.

Example
-------
>>> from pathlib import Path
>>> from docs_builder.generator import build_docs
>>> from docs_builder.models import BuildConfig
>>> result = build_docs(BuildConfig(Path("docs"), Path("dist/docs")))  # doctest: +SKIP
>>> result.documents_processed  # doctest: +SKIP
12
"""

from __future__ import annotations

import logging
import typing as typ

from docs_builder._constants import (
    LEXEMES_FILENAME,
    META_FILENAME,
    RENDERED_DIRNAME,
    SEARCH_DIRNAME,
)
from docs_builder.errors import BuildFailedError, ConfigurationError, DocsBuildError
from docs_builder.generator.compiler import MarkdownCompiler
from docs_builder.generator.highlighter import SyntaxHighlighter, register_languages
from docs_builder.generator.models import ProcessedDocument
from docs_builder.lexemes import extract_lexemes, validate_lexemes
from docs_builder.meta import generate_doc_meta, write_meta_json
from docs_builder.models import (
    BuildResult,
    BuildState,
    OutputFiles,
    SourceDocument,
)
from docs_builder.ndjson_writer import NdjsonWriter
from docs_builder.toc import TocCache, generate_toc

if typ.TYPE_CHECKING:
    from pathlib import Path

    from docs_builder.models import BuildConfig

logger = logging.getLogger(__name__)


class DocsPipeline:
    """Run one documentation build and track its state.

    The pipeline moves ``IDLE -> VALIDATING -> (COMPILING -> HIGHLIGHTING ->
    EXTRACTING) per document -> WRITING -> DONE``; any failure ends in
    ``FAILED``.
    """

    def __init__(
        self,
        config: BuildConfig,
        *,
        compiler: MarkdownCompiler | None = None,
        highlighter: SyntaxHighlighter | None = None,
        toc_cache: TocCache | None = None,
    ) -> None:
        """Initialize the pipeline with its configuration and collaborators.

        Parameters
        ----------
        config : BuildConfig
            Source directory, output directory, version and failure policy.
        compiler : MarkdownCompiler, optional
            Markdown compiler; a default instance is used when omitted.
        highlighter : SyntaxHighlighter, optional
            Code highlighter; a default instance is used when omitted.
        toc_cache : TocCache, optional
            Outline cache shared across documents; a fresh cache per pipeline
            when omitted.
        """
        self.config = config
        self.compiler = compiler or MarkdownCompiler()
        self.highlighter = highlighter or SyntaxHighlighter()
        self.toc_cache = toc_cache if toc_cache is not None else TocCache()
        self.state = BuildState.IDLE
        self.failures: dict[str, Exception] = {}

    @property
    def rendered_dir(self) -> Path:
        """Return the directory receiving this version's HTML fragments."""
        return self.config.output_dir / RENDERED_DIRNAME / self.config.version

    @property
    def lexemes_path(self) -> Path:
        """Return the path of the NDJSON search index."""
        return self.config.output_dir / SEARCH_DIRNAME / LEXEMES_FILENAME

    @property
    def meta_path(self) -> Path:
        """Return the path of the metadata manifest."""
        return self.config.output_dir / META_FILENAME

    def run(self) -> BuildResult:
        """Build every document and write the artifacts.

        Returns
        -------
        BuildResult
            Counts, written paths and per-document outlines.

        Raises
        ------
        ConfigurationError
            If the source directory is missing.
        BuildFailedError
            If any document failed, lexeme validation failed, or writing
            the artifacts raised an ``OSError``.
        """
        try:
            self._transition(BuildState.VALIDATING)
            self._validate_config()
            register_languages()
            sources = self._discover_sources()
            processed = self._process_all(sources)
            self._transition(BuildState.WRITING)
            result = self._write(processed)
        except DocsBuildError:
            self._transition(BuildState.FAILED)
            raise
        self._transition(BuildState.DONE)
        return result

    def _transition(self, state: BuildState) -> None:
        logger.debug("Pipeline state: %s -> %s", self.state, state)
        self.state = state

    def _validate_config(self) -> None:
        source_dir = self.config.docs_source_dir
        if not source_dir.is_dir():
            msg = f"Input directory does not exist: {source_dir}"
            raise ConfigurationError(msg)
        logger.debug("Configuration:")
        logger.debug("  Input:   %s", source_dir)
        logger.debug("  Output:  %s", self.config.output_dir)
        logger.debug("  Version: %s", self.config.version)

    def _discover_sources(self) -> list[Path]:
        sources = sorted(
            path for path in self.config.docs_source_dir.glob("*.md") if path.is_file()
        )
        logger.debug(
            "Found %d markdown files in %s", len(sources), self.config.docs_source_dir
        )
        return sources

    def _process_all(self, sources: list[Path]) -> list[ProcessedDocument]:
        processed: list[ProcessedDocument] = []
        self.failures = {}
        for path in sources:
            slug = path.stem
            try:
                document = SourceDocument(
                    slug=slug,
                    version=self.config.version,
                    markdown=path.read_text(encoding="utf-8"),
                    path=path,
                )
                processed.append(self.process_document(document))
            except (DocsBuildError, OSError, UnicodeDecodeError) as exc:
                logger.debug("Document %s failed: %s", slug, exc)
                if self.config.fail_fast:
                    msg = f"Failed to build document '{slug}': {exc}"
                    raise BuildFailedError(msg, {slug: exc}) from exc
                self.failures[slug] = exc
        if self.failures:
            details = "; ".join(f"{slug}: {exc}" for slug, exc in self.failures.items())
            msg = f"{len(self.failures)} document(s) failed to build ({details})"
            raise BuildFailedError(msg, self.failures)
        return processed

    def process_document(self, document: SourceDocument) -> ProcessedDocument:
        """Compile, highlight and extract one document without writing it."""
        self._transition(BuildState.COMPILING)
        logger.debug("  Compiling %s.md -> %s.html", document.slug, document.slug)
        fragment = self.compiler.compile(document.markdown)

        self._transition(BuildState.HIGHLIGHTING)
        html = self.highlighter.highlight(fragment)

        self._transition(BuildState.EXTRACTING)
        meta = generate_doc_meta(html, document.version, document.slug)
        return ProcessedDocument(
            slug=document.slug,
            html=html,
            lexemes=extract_lexemes(html, document.version, document.slug),
            meta=meta,
            toc=generate_toc(html, cache=self.toc_cache),
        )

    def _write(self, processed: list[ProcessedDocument]) -> BuildResult:
        lexemes = [record for doc in processed for record in doc.lexemes]
        validate_lexemes(lexemes)
        try:
            rendered = self._write_rendered(processed)
            with NdjsonWriter().open(self.lexemes_path) as writer:
                writer.write_all(lexemes)
            logger.debug("Wrote %d lexemes to %s", len(lexemes), self.lexemes_path)
            write_meta_json([doc.meta for doc in processed], self.meta_path)
            logger.debug("Wrote metadata to %s", self.meta_path)
            stylesheet = self._write_stylesheet()
        except OSError as exc:
            msg = f"Failed to write build artifacts: {exc}"
            raise BuildFailedError(msg) from exc

        return BuildResult(
            documents_processed=len(processed),
            lexemes_generated=len(lexemes),
            output_files=OutputFiles(
                rendered=rendered,
                lexemes=self.lexemes_path,
                meta=self.meta_path,
                stylesheet=stylesheet,
            ),
            toc={doc.slug: doc.toc for doc in processed},
        )

    def _write_rendered(self, processed: list[ProcessedDocument]) -> list[Path]:
        out_dir = self.rendered_dir
        out_dir.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for doc in processed:
            output_path = out_dir / f"{doc.slug}.html"
            output_path.write_text(doc.html, encoding="utf-8")
            written.append(output_path)
        logger.debug("Compiled %d files to %s", len(written), out_dir)
        return written

    def _write_stylesheet(self) -> Path | None:
        path = self.config.stylesheet
        if path is None:
            return None
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.highlighter.stylesheet, encoding="utf-8")
        logger.debug("Wrote highlight stylesheet to %s", path)
        return path


def build_docs(config: BuildConfig) -> BuildResult:
    """Run a :class:`DocsPipeline` for ``config`` and return its result."""
    return DocsPipeline(config).run()


__all__ = ["DocsPipeline", "build_docs"]
