"""Common literal values used across docs_builder.

These constants keep output filenames, marker classes, and highlighter
defaults centralized so the pipeline stages, CLI, and tests import the same
values without drifting.

Examples
--------
>>> from docs_builder import _constants
>>> _constants.RENDERED_DIRNAME
'rendered'
>>> _constants.DEFAULT_CODE_LANGUAGE in _constants.SUPPORTED_LANGUAGES
True
"""

DOC_TITLE_SELECTOR = "h1#doc-title"

RENDERED_DIRNAME = "rendered"
SEARCH_DIRNAME = "search"
LEXEMES_FILENAME = "lexemes.ndjson"
META_FILENAME = "meta.json"

DEFAULT_VERSION = "1.x"
LINK_PREFIX = "/docs/"

FRAMEWORK_CONTEXT_CLASS = "context-framework"
LIBRARY_CONTEXT_CLASS = "context-library"
CONTEXT_CLASSES = (FRAMEWORK_CONTEXT_CLASS, LIBRARY_CONTEXT_CLASS)
TOC_NAV_CLASS = "toc-nav"

DEFAULT_CODE_LANGUAGE = "php"
NO_COPY_CLASS = "no-copy"

# Documentation language tag -> Pygments lexer alias.
SUPPORTED_LANGUAGES = {
    "apacheconf": "apacheconf",
    "bash": "bash",
    "http": "http",
    "json": "json",
    "markup": "html",
    "nginx": "nginx",
    "php": "php",
    "xml": "xml",
    "yaml": "yaml",
}
