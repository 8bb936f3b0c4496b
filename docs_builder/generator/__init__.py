"""Utilities for compiling, highlighting, and building documentation pages."""

from .compiler import MarkdownCompiler, compile_markdown
from .highlighter import SyntaxHighlighter, highlight_all, highlight_code
from .link_rewriter import DocsLinkExtension
from .models import ProcessedDocument
from .pipeline import DocsPipeline, build_docs

__all__ = [
    "DocsLinkExtension",
    "DocsPipeline",
    "MarkdownCompiler",
    "ProcessedDocument",
    "SyntaxHighlighter",
    "build_docs",
    "compile_markdown",
    "highlight_all",
    "highlight_code",
]
