"""Archive lifecycle: open, iterate, close.

What:
  Tie a byte source, a decode window, and a message cursor together for one
  mbox file and expose them as a closeable, single-pass iterable of
  :class:`~mboxiter.core.cursor.MessageView` objects.

Why:
  The file handle, the mapping, and every outstanding view share one
  lifetime. Owning them in a single object makes release happen exactly once,
  whether the caller closes explicitly, leaves a ``with`` block, or simply
  drops the archive half way through.

How:
  :class:`Archive` opens the source, registers a :func:`weakref.finalize`
  hook that closes it, builds a fresh decoder and compiled pattern, and runs
  the cursor's initial scan. Any failure during that sequence closes the
  source before the exception propagates.

Interfaces:
  :class:`Archive`, :func:`open_archive`.

Invariants & Safety:
  - ``close()`` is idempotent and invalidates all outstanding views.
  - Each archive owns its decoder, window, and matcher; nothing is shared
    between archives, so independent archives may be used from different
    threads. A single archive is not thread-safe.
"""
from __future__ import annotations

import weakref
from pathlib import Path
from typing import Any, Iterator, Optional

from ..config.schema import ArchiveOptions
from ..utils.logging import JsonLogger, get_logger
from .cursor import BoundaryScanner, CursorState, MessageCursor, MessageView
from .errors import ArchiveClosed
from .source import open_source
from .window import DecodeWindow


class Archive:
    """An opened mbox file and the state needed to iterate its messages."""

    def __init__(self, options: ArchiveOptions, *, logger: Optional[JsonLogger] = None) -> None:
        self.options = options
        self.path = Path(options.path)
        self.charset = options.charset
        self.boundary_pattern = options.boundary_pattern
        self.max_window_chars = options.max_window_chars
        self.logger = logger if logger is not None else get_logger("mboxiter.archive")
        self._source = open_source(self.path, options.access_mode)
        self._finalizer = weakref.finalize(self, self._source.close)
        try:
            window = DecodeWindow(
                options.charset,
                options.max_window_chars,
                chunk_bytes=options.read_chunk_bytes,
            )
            scanner = BoundaryScanner(options.compile_pattern())
            self._cursor = MessageCursor(
                self._source, window, scanner, logger=self.logger, path=self.path
            )
            self.preamble = self._cursor.start()
        except BaseException:
            self._finalizer()
            raise
        self.logger.info(
            "archive_opened",
            path=str(self.path),
            size=self.size,
            charset=self.charset,
            access_mode=options.access_mode,
            max_window_chars=self.max_window_chars,
        )

    @property
    def size(self) -> int:
        """Byte length of the archive file."""

        return self._source.length()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    @property
    def state(self) -> CursorState:
        return self._cursor.state

    def has_next(self) -> bool:
        return not self.closed and self._cursor.has_next()

    def advance(self) -> MessageView:
        """Return the next message view; see :meth:`MessageCursor.advance`."""

        if self.closed:
            raise ArchiveClosed(f"Archive {self.path} is closed")
        return self._cursor.advance()

    def __iter__(self) -> Iterator[MessageView]:
        if self.closed:
            raise ArchiveClosed(f"Archive {self.path} is closed")
        return self._cursor

    def messages(self) -> Iterator[str]:
        """Yield each message as an independent string copy."""

        for view in self:
            yield view.text()

    def close(self) -> None:
        """Release the file handle and mapping; safe to call repeatedly."""

        if not self._finalizer.alive:
            return
        self._cursor.invalidate()
        self._finalizer()
        self.logger.info("archive_closed", path=str(self.path))

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "closed" if self.closed else self._cursor.state.value
        return f"Archive(path={str(self.path)!r}, charset={self.charset!r}, state={status})"


def open_archive(
    path: Optional[Path | str] = None,
    *,
    options: Optional[ArchiveOptions] = None,
    logger: Optional[JsonLogger] = None,
    **settings: Any,
) -> Archive:
    """Open an archive from a path plus keyword settings, or from ``options``.

    Args:
      path: Archive file; ignored when ``options`` is given.
      options: Pre-validated options.
      logger: Logger for archive events; defaults to a WARN-level JSON logger.
      **settings: Any other :class:`ArchiveOptions` field.

    Raises:
      ValidationError: If the settings are invalid.
      ArchiveNotFound, ArchiveIOError: If the file cannot be opened.
      NoBoundaryFound: If the first window contains no boundary line.
      MalformedInput, UnmappableCharacter: If the first window fails to decode.
    """

    if options is None:
        options = ArchiveOptions.build(path=path, **settings)
    elif settings:
        options = ArchiveOptions.build(**{**options.model_dump(), **settings})
    return Archive(options, logger=logger)


__all__ = ["Archive", "open_archive"]
