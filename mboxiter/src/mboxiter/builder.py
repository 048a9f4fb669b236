"""Fluent builder for opening archives.

What:
  Collect archive options through chained setters and open the archive with
  :meth:`ArchiveBuilder.build`.

Why:
  Call sites that tweak one or two settings read better as a chain than as a
  long keyword call, and the builder keeps the only mandatory value (the path)
  up front.

How:
  Each setter records a value and returns ``self``. :meth:`options` validates
  the collected values through :meth:`ArchiveOptions.build`; :meth:`build`
  hands them to :class:`~mboxiter.core.archive.Archive`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .config.schema import ArchiveOptions, parse_flags
from .core.archive import Archive
from .utils.logging import JsonLogger


class ArchiveBuilder:
    """Chainable collector of :class:`ArchiveOptions` values."""

    def __init__(self, path: Path | str) -> None:
        self._values: dict[str, Any] = {"path": Path(path)}
        self._logger: Optional[JsonLogger] = None

    def charset(self, charset: str) -> "ArchiveBuilder":
        self._values["charset"] = charset
        return self

    def from_line(self, pattern: str) -> "ArchiveBuilder":
        """Set the boundary line regular expression."""

        self._values["boundary_pattern"] = pattern
        return self

    def flags(self, flags: Any) -> "ArchiveBuilder":
        """Set the ``re`` flags, as an int or flag names."""

        self._values["pattern_flags"] = parse_flags(flags)
        return self

    def max_window_chars(self, chars: int) -> "ArchiveBuilder":
        self._values["max_window_chars"] = chars
        return self

    def access_mode(self, mode: str) -> "ArchiveBuilder":
        self._values["access_mode"] = mode
        return self

    def read_chunk_bytes(self, size: int) -> "ArchiveBuilder":
        self._values["read_chunk_bytes"] = size
        return self

    def logger(self, logger: JsonLogger) -> "ArchiveBuilder":
        self._logger = logger
        return self

    def options(self) -> ArchiveOptions:
        """Validate the collected values.

        Raises:
          ValidationError: If any value is invalid.
        """

        return ArchiveOptions.build(**self._values)

    def build(self) -> Archive:
        """Open the archive with the collected options."""

        return Archive(self.options(), logger=self._logger)


__all__ = ["ArchiveBuilder"]
