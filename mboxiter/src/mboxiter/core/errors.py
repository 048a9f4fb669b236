"""Exception hierarchy raised by the mbox iteration engine.

What:
  Declare one exception type per failure mode of opening, decoding, scanning,
  and iterating an archive.

Why:
  Callers decide whether to abort or reopen with a different configuration
  (larger window, other charset). That decision needs typed errors rather than
  message parsing, and every type must be catchable through a single base.

How:
  Everything derives from :class:`MboxError`. Filesystem failures also derive
  from the matching built-in :class:`OSError` subclasses, and iteration misuse
  from :class:`IndexError`, so generic handlers keep working.

Interfaces:
  :class:`MboxError`, :class:`ArchiveNotFound`, :class:`ArchiveIOError`,
  :class:`NoBoundaryFound`, :class:`DecodeFailure`, :class:`MalformedInput`,
  :class:`UnmappableCharacter`, :class:`WindowTooSmall`,
  :class:`ArchiveExhausted`, :class:`ArchiveClosed`, :class:`ViewInvalidated`.

Invariants & Safety:
  - None of these errors is retried internally; each is raised at the call
    that triggered it.
  - Error messages never include decoded message content.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional


class MboxError(Exception):
    """Base class for every error raised by :mod:`mboxiter`."""


class ArchiveNotFound(MboxError, FileNotFoundError):
    """Raised when the archive path does not exist."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Archive not found: {path}")
        self.path = path


class ArchiveIOError(MboxError, OSError):
    """Raised when the archive exists but cannot be opened, mapped, or read."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to read archive {path}: {reason}")
        self.path = path
        self.reason = reason


class NoBoundaryFound(MboxError):
    """Raised at open time when the first window holds no boundary line.

    What:
      Signals that the file is not a valid archive under the current
      configuration: either it contains no ``From`` line at all, or the first
      one lies beyond ``max_window_chars``.
    """

    def __init__(self, path: Path, window_chars: int) -> None:
        super().__init__(
            f"No boundary line found in the first {window_chars} characters of {path}; "
            "not an mbox archive under this configuration"
        )
        self.path = path
        self.window_chars = window_chars


class DecodeFailure(MboxError):
    """Base class for fatal decoding errors.

    What:
      Carries the absolute byte ``offset`` of the offending sequence and the
      configured ``charset``.

    Why:
      Both subclasses end the iteration. Operators usually fix them by
      reopening with another charset, so the offset and charset are the useful
      diagnostics.
    """

    kind = "decode_failure"

    def __init__(self, charset: str, offset: int, reason: str) -> None:
        super().__init__(f"{self.kind} at byte {offset} under {charset}: {reason}")
        self.charset = charset
        self.offset = offset
        self.reason = reason


class MalformedInput(DecodeFailure):
    """The bytes do not form a valid sequence under the configured charset."""

    kind = "malformed_input"


class UnmappableCharacter(DecodeFailure):
    """The byte sequence is valid but has no character mapping."""

    kind = "unmappable_character"


class WindowTooSmall(MboxError):
    """Raised when a single message does not fit into the decode window."""

    def __init__(self, max_window_chars: int, byte_offset: int) -> None:
        super().__init__(
            f"Message starting before byte {byte_offset} exceeds max_window_chars="
            f"{max_window_chars}; reopen with a larger window"
        )
        self.max_window_chars = max_window_chars
        self.byte_offset = byte_offset


class ArchiveExhausted(MboxError, IndexError):
    """Raised by ``advance()`` once the last message has been produced."""


class ArchiveClosed(MboxError):
    """Raised when iterating an archive after it has been closed."""


class ViewInvalidated(MboxError):
    """Raised when a message view is read after the cursor moved on.

    What:
      Views borrow the decode window. Advancing may compact the window, and
      closing releases it, so a view is only readable until then.
    """

    def __init__(self, generation: int, current: Optional[int]) -> None:
        if current is None:
            detail = "the archive is closed"
        else:
            detail = f"the cursor advanced to generation {current}"
        super().__init__(f"Message view from generation {generation} is no longer valid: {detail}")
        self.generation = generation
        self.current = current


__all__ = [
    "MboxError",
    "ArchiveNotFound",
    "ArchiveIOError",
    "NoBoundaryFound",
    "DecodeFailure",
    "MalformedInput",
    "UnmappableCharacter",
    "WindowTooSmall",
    "ArchiveExhausted",
    "ArchiveClosed",
    "ViewInvalidated",
]
