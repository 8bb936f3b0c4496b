"""Stream lexeme records into a newline-delimited JSON file.

Each record becomes one line of JSON; there is no enclosing array and no
separator between records, so consumers can load very large indexes one line
at a time.

Example
-------
>>> from pathlib import Path
>>> from docs_builder.ndjson_writer import NdjsonWriter
>>> with NdjsonWriter().open(Path("dist/search/lexemes.ndjson")) as writer:  # doctest: +SKIP
...     writer.write_all(records)
"""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json

from .errors import WriterNotOpenError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path
    from types import TracebackType


class NdjsonWriter:
    """Append-only NDJSON writer over a single open file handle."""

    def __init__(self) -> None:
        self._handle: typ.IO[bytes] | None = None
        self._encoder = msgspec_json.Encoder()
        self.path: Path | None = None
        self.records_written = 0

    @property
    def is_open(self) -> bool:
        """Return whether the writer currently holds a file handle."""
        return self._handle is not None

    def open(self, path: Path) -> typ.Self:
        """Open ``path`` for writing, creating parent directories as needed."""
        if self._handle is not None:
            self.close()
        path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = path.open("wb")
        self.path = path
        self.records_written = 0
        return self

    def write(self, record: object) -> None:
        """Serialize ``record`` as one JSON line.

        Raises
        ------
        WriterNotOpenError
            If called before :meth:`open`.
        """
        if self._handle is None:
            msg = "NDJSON writer not opened. Call open() first."
            raise WriterNotOpenError(msg)
        self._handle.write(self._encoder.encode(record) + b"\n")
        self.records_written += 1

    def write_all(self, records: cabc.Iterable[object]) -> None:
        """Write ``records`` in input order."""
        for record in records:
            self.write(record)

    def close(self) -> None:
        """Flush and release the handle; a no-op when nothing is open."""
        if self._handle is None:
            return
        try:
            self._handle.flush()
        finally:
            self._handle.close()
            self._handle = None

    def __enter__(self) -> typ.Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def write_lexemes_to_ndjson(records: cabc.Iterable[object], path: Path) -> int:
    """Write ``records`` to ``path`` and return how many lines were written."""
    with NdjsonWriter().open(path) as writer:
        writer.write_all(records)
        return writer.records_written


__all__ = ["NdjsonWriter", "write_lexemes_to_ndjson"]
