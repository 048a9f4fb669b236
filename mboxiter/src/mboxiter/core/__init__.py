"""Core decode-and-scan engine for mbox archives.

What:
  Group the byte sources, the decode window, the boundary scanner and message
  cursor, and the archive that owns them.

Interfaces:
  - Archive / open_archive: lifecycle entry points.
  - MessageView / MessageCursor / CursorState: iteration.
  - DecodeWindow / DecodeResult / RefillResult: incremental decoding.
  - ByteSource / MappedSource / StreamSource / open_source: file access.
  - errors: exception hierarchy.
"""

from .archive import Archive, open_archive
from .cursor import BoundaryMatch, BoundaryScanner, CursorState, MessageCursor, MessageView
from .errors import (
    ArchiveClosed,
    ArchiveExhausted,
    ArchiveIOError,
    ArchiveNotFound,
    DecodeFailure,
    MalformedInput,
    MboxError,
    NoBoundaryFound,
    UnmappableCharacter,
    ViewInvalidated,
    WindowTooSmall,
)
from .source import ByteSource, MappedSource, StreamSource, open_source
from .window import DecodeResult, DecodeWindow, RefillResult

__all__ = [
    "Archive",
    "open_archive",
    "BoundaryMatch",
    "BoundaryScanner",
    "CursorState",
    "MessageCursor",
    "MessageView",
    "DecodeResult",
    "DecodeWindow",
    "RefillResult",
    "ByteSource",
    "MappedSource",
    "StreamSource",
    "open_source",
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
