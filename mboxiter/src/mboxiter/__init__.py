"""
Module: mboxiter.__init__

What:
  Streaming, memory-bounded iteration over the messages of an mbox archive.
  Messages are handed out as views into a decode window instead of copies.

Why:
  Mail archives routinely exceed available memory. Decoding a bounded window
  at a time and scanning it for ``From`` boundary lines lets callers walk an
  archive of any size while holding at most one window of text.

How:
  Re-export the archive entry points, the message view, the options model and
  builder, and the error hierarchy with an explicit ``__all__``.

Interfaces:
  - open_archive / Archive / ArchiveBuilder: open and iterate archives.
  - ArchiveOptions / load_options: validated configuration.
  - MessageView: borrowed message, readable until the next advance.
  - MboxError and its subclasses.

Invariants:
  - A message view is only readable until the cursor advances or the archive
    closes.
  - Archives share no mutable state with each other.
"""

from .builder import ArchiveBuilder
from .config import ArchiveOptions, ConfigLoadError, ValidationError, load_options
from .core import (
    Archive,
    ArchiveClosed,
    ArchiveExhausted,
    ArchiveIOError,
    ArchiveNotFound,
    CursorState,
    DecodeFailure,
    MalformedInput,
    MboxError,
    MessageView,
    NoBoundaryFound,
    UnmappableCharacter,
    ViewInvalidated,
    WindowTooSmall,
    open_archive,
)
from .split import count_messages, split_archive

__all__ = [
    "open_archive",
    "Archive",
    "ArchiveBuilder",
    "ArchiveOptions",
    "load_options",
    "MessageView",
    "CursorState",
    "split_archive",
    "count_messages",
    "ConfigLoadError",
    "ValidationError",
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
