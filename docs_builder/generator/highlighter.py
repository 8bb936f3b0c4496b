"""Server-side syntax highlighting for ``<pre><code>`` blocks.

The highlighter parses an HTML fragment with BeautifulSoup, tokenizes every
``pre > code`` block with Pygments, and injects the copy-button markup the
client-side script wires up. Language grammars are registered once per
process through :func:`register_languages`.

Example
-------
>>> from docs_builder.generator.highlighter import SyntaxHighlighter
>>> html = SyntaxHighlighter().highlight("<pre><code>echo 1;</code></pre>")
>>> 'class="language-php"' in html
True
"""

from __future__ import annotations

import logging
import threading
import typing as typ

from bs4 import BeautifulSoup, Tag
from pygments import format as pygments_format
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import find_lexer_class_by_name
from pygments.token import Text

from docs_builder._constants import (
    DEFAULT_CODE_LANGUAGE,
    NO_COPY_CLASS,
    SUPPORTED_LANGUAGES,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pygments.lexer import Lexer
    from pygments.token import _TokenType

logger = logging.getLogger(__name__)

LANGUAGE_CLASS_PREFIX = "language-"
BUTTON_WRAPPER_CLASS = "button-wrapper"
COPY_BUTTON_CLASS = "copy-button"
COPY_BUTTON_TITLE = "Copy to clipboard"
COPY_ICON_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="16" height="16" '
    'fill="currentColor" class="bi bi-copy" viewBox="0 0 16 16"><path '
    'fill-rule="evenodd" d="M4 2a2 2 0 0 1 2-2h8a2 2 0 0 1 2 2v8a2 2 0 0 1-2 '
    "2H6a2 2 0 0 1-2-2zm2-1a1 1 0 0 0-1 1v8a1 1 0 0 0 1 1h8a1 1 0 0 0 1-1V2a1 "
    "1 0 0 0-1-1zM2 5a1 1 0 0 0-1 1v8a1 1 0 0 0 1 1h8a1 1 0 0 0 1-1v-1h1v1a2 2 "
    '0 0 1-2 2H2a2 2 0 0 1-2-2V6a2 2 0 0 1 2-2h1v1z"></path></svg>'
)

_registry: dict[str, type[Lexer]] = {}
_registry_lock = threading.Lock()
_languages_loaded = False


def register_languages(
    languages: cabc.Mapping[str, str] = SUPPORTED_LANGUAGES,
) -> None:
    """Load the Pygments lexers for the documentation languages.

    Safe to call repeatedly; the registry is populated at most once until
    :func:`reset_languages` is called.

    Raises
    ------
    pygments.util.ClassNotFound
        If a configured alias has no matching Pygments lexer.
    """
    global _languages_loaded  # noqa: PLW0603
    with _registry_lock:
        if _languages_loaded:
            return
        for language, alias in languages.items():
            _registry[language] = find_lexer_class_by_name(alias)
        _languages_loaded = True
        logger.debug("Registered %d highlighter languages", len(_registry))


def reset_languages() -> None:
    """Forget registered languages so tests can reinitialize deterministically."""
    global _languages_loaded  # noqa: PLW0603
    with _registry_lock:
        _registry.clear()
        _languages_loaded = False


def languages_loaded() -> bool:
    """Return whether :func:`register_languages` has populated the registry."""
    return _languages_loaded


def is_supported(language: str) -> bool:
    """Return whether ``language`` has a registered grammar."""
    return language in _registry


def _lexer_for(language: str, code: str) -> Lexer:
    """Instantiate the registered lexer, preserving the snippet's whitespace."""
    lexer_cls = _registry[language]
    options: dict[str, typ.Any] = {"stripnl": False, "ensurenl": False}
    if language == "php" and not code.lstrip().startswith("<?"):
        options["startinline"] = True
    return lexer_cls(**options)


def _aligned_tokens(
    lexer: Lexer, code: str
) -> cabc.Iterator[tuple[_TokenType, str]]:
    """Yield the lexer's tokens clipped or padded to exactly ``code``.

    Some lexers append a newline or fold trailing blank lines regardless of
    ``ensurenl``; the emitted text must still equal the original snippet.
    """
    remaining = len(code)
    for token_type, value in lexer.get_tokens(code):
        if remaining <= 0:
            break
        value = value[:remaining]
        remaining -= len(value)
        yield token_type, value
    if remaining > 0:
        yield Text, code[len(code) - remaining :]


class SyntaxHighlighter:
    """Tokenize code blocks in HTML fragments and add copy affordances."""

    def __init__(self, default_language: str = DEFAULT_CODE_LANGUAGE) -> None:
        """Initialize the highlighter.

        Parameters
        ----------
        default_language : str, optional
            Language assumed for blocks without a ``language-*`` class.
            Defaults to ``"php"``, the predominant language of the docs.
        """
        self.default_language = default_language
        self._formatter = HtmlFormatter(nowrap=True)

    @property
    def stylesheet(self) -> str:
        """Return the Pygments CSS scoped to language-tagged ``pre`` blocks."""
        return self._formatter.get_style_defs("pre[class*='language-']")

    def tokenize(self, code: str, language: str) -> str | None:
        """Return tokenized markup for ``code`` or ``None`` when unsupported."""
        register_languages()
        if not is_supported(language):
            return None
        tokens = _aligned_tokens(_lexer_for(language, code), code)
        markup = pygments_format(tokens, self._formatter)
        # HtmlFormatter terminates the last line with a newline of its own.
        trailing = code[len(code.rstrip("\n")) :]
        return markup.rstrip("\n") + trailing

    def highlight(self, html: str) -> str:
        """Return ``html`` with every ``pre > code`` block highlighted.

        Blocks in an unsupported language are left untouched. Blocks whose
        ``code`` element already holds markup are treated as tokenized, so
        highlighting a fragment twice is a no-op the second time.
        """
        soup = BeautifulSoup(html, "html.parser")
        for code in soup.select("pre > code"):
            self._highlight_block(soup, code)
        return str(soup)

    def highlight_all(self, documents: cabc.Mapping[str, str]) -> dict[str, str]:
        """Highlight every fragment in a ``slug -> html`` mapping independently."""
        return {slug: self.highlight(html) for slug, html in documents.items()}

    def _highlight_block(self, soup: BeautifulSoup, code: Tag) -> None:
        if code.find(True) is not None:
            return
        classes = list(code.get("class") or [])
        language_class = next(
            (cls for cls in classes if cls.startswith(LANGUAGE_CLASS_PREFIX)), None
        )
        if language_class:
            language = language_class.removeprefix(LANGUAGE_CLASS_PREFIX)
        else:
            language = self.default_language
            language_class = f"{LANGUAGE_CLASS_PREFIX}{language}"

        tokens = self.tokenize(code.get_text(), language)
        if tokens is None:
            logger.debug("No grammar for language %r; leaving block as-is", language)
            return

        if language_class not in classes:
            code["class"] = [*classes, language_class]
        code.clear()
        fragment = BeautifulSoup(tokens, "html.parser")
        for node in list(fragment.contents):
            code.append(node.extract())

        pre = code.parent
        if not isinstance(pre, Tag):  # pragma: no cover - selector guarantees pre
            return
        pre_classes = list(pre.get("class") or [])
        if language_class not in pre_classes:
            pre["class"] = [*pre_classes, language_class]
        if NO_COPY_CLASS not in pre_classes and not self._has_copy_button(pre):
            pre.insert(0, self._copy_button(soup))

    @staticmethod
    def _has_copy_button(pre: Tag) -> bool:
        return pre.find("div", class_=BUTTON_WRAPPER_CLASS, recursive=False) is not None

    @staticmethod
    def _copy_button(soup: BeautifulSoup) -> Tag:
        wrapper = soup.new_tag("div", attrs={"class": BUTTON_WRAPPER_CLASS})
        button = soup.new_tag(
            "button", attrs={"class": COPY_BUTTON_CLASS, "title": COPY_BUTTON_TITLE}
        )
        icon = BeautifulSoup(COPY_ICON_SVG, "html.parser")
        for node in list(icon.contents):
            button.append(node.extract())
        wrapper.append(button)
        return wrapper


def highlight_code(html: str) -> str:
    """Highlight ``html`` with a default :class:`SyntaxHighlighter`."""
    return SyntaxHighlighter().highlight(html)


def highlight_all(documents: cabc.Mapping[str, str]) -> dict[str, str]:
    """Highlight a ``slug -> html`` mapping with a default highlighter."""
    return SyntaxHighlighter().highlight_all(documents)


__all__ = [
    "SyntaxHighlighter",
    "highlight_all",
    "highlight_code",
    "is_supported",
    "languages_loaded",
    "register_languages",
    "reset_languages",
]
