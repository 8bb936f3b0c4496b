"""Exception hierarchy raised by the documentation build pipeline."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class DocsBuildError(RuntimeError):
    """Base class for every failure raised by docs_builder."""


class ConfigurationError(DocsBuildError, ValueError):
    """Raised when the build configuration cannot be used (e.g. no input dir)."""


class MissingTitleError(DocsBuildError):
    """Raised when a document lacks its ``h1#doc-title`` heading."""

    def __init__(self, slug: str | None = None) -> None:
        self.slug = slug
        msg = "Document missing h1#doc-title element"
        if slug:
            msg = f"{msg} (slug: {slug})"
        super().__init__(msg)


class WriterNotOpenError(DocsBuildError):
    """Raised when an NDJSON writer is used before ``open()``."""


class LexemeValidationError(DocsBuildError):
    """Raised when generated lexeme records violate the index contract."""

    def __init__(self, problems: cabc.Sequence[str]) -> None:
        self.problems = list(problems)
        super().__init__("Lexeme validation failed:\n" + "\n".join(self.problems))


class BuildFailedError(DocsBuildError):
    """Raised when the pipeline ends in the ``FAILED`` state.

    Attributes
    ----------
    failures : dict[str, Exception]
        Offending document slugs mapped to the exception each one raised.
        Empty when the failure is not tied to a document (e.g. disk errors).
    """

    def __init__(
        self, msg: str, failures: cabc.Mapping[str, Exception] | None = None
    ) -> None:
        self.failures = dict(failures or {})
        super().__init__(msg)

    @property
    def failed_slugs(self) -> list[str]:
        """Return the slugs of the documents that failed, in processing order."""
        return list(self.failures)


__all__ = [
    "BuildFailedError",
    "ConfigurationError",
    "DocsBuildError",
    "LexemeValidationError",
    "MissingTitleError",
    "WriterNotOpenError",
]
