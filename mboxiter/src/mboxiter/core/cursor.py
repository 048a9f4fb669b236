"""Boundary scanning and the message cursor state machine.

What:
  Locate ``From`` boundary lines inside the decode window and hand out one
  :class:`MessageView` per message, refilling the window whenever the next
  boundary is not yet decoded.

Why:
  This is where the window's bounded size meets the unbounded archive. A
  boundary that is only partially decoded must not be mistaken for a complete
  one, a message must never be truncated by a refill, and a window that is
  simply too small must be reported instead of looping forever.

How:
  :class:`BoundaryScanner` runs the compiled pattern from a position and only
  accepts matches that start a line whose terminator is already decoded (or
  that end the archive). When no boundary is found and bytes remain,
  :class:`MessageCursor` compacts the window to the start of the pending
  message, decodes to capacity, and rescans from the start of the last
  incomplete line. Each advance bumps a generation counter; views from older
  generations refuse to be read.

Interfaces:
  :class:`BoundaryMatch`, :class:`BoundaryScanner`, :class:`CursorState`,
  :class:`MessageView`, :class:`MessageCursor`.

Invariants & Safety:
  - A message spans from just after its boundary line's terminator to the
    start of the next boundary line.
  - Views are borrows. Reading one after the next ``advance()`` or after the
    archive is closed raises :class:`ViewInvalidated`.
  - ``advance()`` either returns a complete message or raises; it never
    yields a partial one.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from ..utils.logging import JsonLogger
from .errors import (
    ArchiveClosed,
    ArchiveExhausted,
    MalformedInput,
    MboxError,
    NoBoundaryFound,
    UnmappableCharacter,
    ViewInvalidated,
    WindowTooSmall,
)
from .source import ByteSource
from .window import DecodeResult, DecodeWindow, RefillResult


@dataclass(frozen=True)
class BoundaryMatch:
    """Character offsets of one boundary line within the window.

    ``end`` points just past the line terminator, or to the end of the text
    when the boundary is the unterminated last line of the archive.
    """

    start: int
    end: int


class BoundaryScanner:
    """Find start-of-line boundary matches in decoded text."""

    def __init__(self, pattern: re.Pattern[str]) -> None:
        self.pattern = pattern

    def scan(self, text: str, pos: int, *, complete: bool) -> tuple[Optional[BoundaryMatch], int]:
        """Search ``text`` from ``pos`` for the next boundary line.

        Args:
          text: Valid decoded text of the window.
          pos: Line-start index to search from.
          complete: ``True`` when no more text will ever follow ``text``.

        Returns:
          ``(match, resume)``. ``match`` is ``None`` when no acceptable
          boundary exists yet; ``resume`` is then the index a later scan over
          the extended text must restart from (the start of the last line that
          may still grow).
        """

        origin = pos
        while True:
            found = self.pattern.search(text, pos)
            if found is None:
                break
            start = found.start()
            if start and text[start - 1] != "\n":
                pos = start + 1
                continue
            newline = text.find("\n", max(found.end() - 1, start))
            if newline != -1:
                return BoundaryMatch(start, newline + 1), newline + 1
            if complete:
                return BoundaryMatch(start, len(text)), len(text)
            return None, start
        if complete:
            return None, len(text)
        return None, max(origin, text.rfind("\n", origin) + 1)


class CursorState(enum.Enum):
    INITIALIZED = "initialized"
    HAS_NEXT = "has_next"
    EXHAUSTED = "exhausted"


class MessageView:
    """Borrowed view of one message inside the decode window.

    The view stores offsets only. :meth:`text` and :meth:`encode` copy the
    characters out and must be called before the cursor advances again.
    """

    __slots__ = ("_cursor", "generation", "start", "end", "boundary")

    def __init__(self, cursor: "MessageCursor", generation: int, boundary: str, start: int, end: int) -> None:
        self._cursor = cursor
        self.generation = generation
        self.boundary = boundary
        self.start = start
        self.end = end

    @property
    def valid(self) -> bool:
        return self._cursor.generation == self.generation

    def _buffer(self) -> str:
        current = self._cursor.generation
        if current != self.generation:
            raise ViewInvalidated(self.generation, current)
        return self._cursor.window.text

    def text(self) -> str:
        """Copy the message characters out of the window."""

        return self._buffer()[self.start : self.end]

    def encode(self, charset: Optional[str] = None) -> bytes:
        """Re-encode the message, by default to the archive's charset.

        With the archive charset the result is the original byte slice between
        the two boundary lines; a byte order mark is never prepended.
        """

        if charset is None:
            return self._cursor.window.encode(self.text())
        return self.text().encode(charset)

    def __len__(self) -> int:
        return self.end - self.start

    def __str__(self) -> str:
        return self.text()

    def __repr__(self) -> str:
        return (
            f"MessageView(generation={self.generation}, start={self.start}, "
            f"end={self.end}, valid={self.valid})"
        )


class MessageCursor:
    """Forward-only, single-pass iterator over the messages of one archive."""

    def __init__(
        self,
        source: ByteSource,
        window: DecodeWindow,
        scanner: BoundaryScanner,
        *,
        logger: JsonLogger,
        path: Optional[Path] = None,
    ) -> None:
        self.source = source
        self.window = window
        self.scanner = scanner
        self.logger = logger
        self.path = path if path is not None else source.path
        self.state = CursorState.INITIALIZED
        self.generation: Optional[int] = 0
        self._boundary = ""
        self._body_start = 0
        self._scan_pos = 0
        self._failure: Optional[MboxError] = None

    def start(self) -> str:
        """Decode the first window and locate the first boundary.

        Returns:
          The preamble: text preceding the first boundary line, usually empty.

        Raises:
          NoBoundaryFound: If the first window holds no boundary line.
          MalformedInput, UnmappableCharacter: If the first window fails to decode.
        """

        self._check(self.window.refill(self.source))
        found, _ = self.scanner.scan(self.window.text, 0, complete=self.window.exhausted)
        if found is None:
            self.logger.error(
                "no_boundary_found",
                path=str(self.path),
                window_chars=self.window.capacity,
                decoded_chars=self.window.valid,
            )
            raise NoBoundaryFound(self.path, self.window.capacity)
        preamble = self.window.text[: found.start]
        self._accept(found)
        self.state = CursorState.INITIALIZED
        return preamble

    def has_next(self) -> bool:
        return (
            self.generation is not None
            and self._failure is None
            and self.state is not CursorState.EXHAUSTED
        )

    def advance(self) -> MessageView:
        """Return a view of the next message, refilling the window as needed.

        Raises:
          ArchiveClosed: If the owning archive has been closed.
          ArchiveExhausted: If the last message was already returned.
          WindowTooSmall: If the pending message does not fit the window.
          MalformedInput, UnmappableCharacter: If a refill fails to decode.
        """

        if self.generation is None:
            raise ArchiveClosed(f"Archive {self.path} is closed")
        if self._failure is not None:
            raise self._failure
        if self.state is CursorState.EXHAUSTED:
            raise ArchiveExhausted(f"No more messages in {self.path}")
        self.generation += 1
        boundary = self._boundary
        while True:
            found, resume = self.scanner.scan(
                self.window.text, self._scan_pos, complete=self.window.exhausted
            )
            if found is not None:
                view = MessageView(self, self.generation, boundary, self._body_start, found.start)
                self._accept(found)
                self.state = CursorState.HAS_NEXT
                return view
            if self.window.exhausted:
                self.state = CursorState.EXHAUSTED
                return MessageView(
                    self, self.generation, boundary, self._body_start, self.window.valid
                )
            self._scan_pos = resume
            try:
                self._refill()
            except MboxError as exc:
                self._failure = exc
                raise

    def invalidate(self) -> None:
        """Invalidate every outstanding view; used when the archive closes."""

        self.generation = None

    def __iter__(self) -> Iterator[MessageView]:
        return self

    def __next__(self) -> MessageView:
        if self.generation is not None and self._failure is None:
            if self.state is CursorState.EXHAUSTED:
                raise StopIteration
        return self.advance()

    def _accept(self, found: BoundaryMatch) -> None:
        self._boundary = self.window.text[found.start : found.end]
        self._body_start = found.end
        self._scan_pos = found.end

    def _refill(self) -> None:
        """Compact the window to the pending message and decode more text."""

        shift = self._body_start
        if shift == 0 and self.window.room == 0:
            self.logger.error(
                "window_too_small",
                path=str(self.path),
                max_window_chars=self.window.capacity,
                byte_offset=self.window.byte_offset,
            )
            raise WindowTooSmall(self.window.capacity, self.window.byte_offset)
        self.window.compact(shift)
        self._body_start -= shift
        self._scan_pos -= shift
        result = self.window.refill(self.source)
        self._check(result)
        self.logger.debug(
            "window_refilled",
            path=str(self.path),
            dropped_chars=shift,
            chars_decoded=result.chars_decoded,
            bytes_consumed=result.bytes_consumed,
            byte_offset=self.window.byte_offset,
            exhausted=self.window.exhausted,
        )

    def _check(self, result: RefillResult) -> None:
        if result.ok:
            return
        offset = result.error_offset if result.error_offset is not None else self.window.byte_offset
        reason = result.reason or result.result.value
        self.logger.error(
            "decode_failed",
            path=str(self.path),
            kind=result.result.value,
            charset=self.window.charset,
            offset=offset,
        )
        if result.result is DecodeResult.UNMAPPABLE_CHARACTER:
            raise UnmappableCharacter(self.window.charset, offset, reason)
        raise MalformedInput(self.window.charset, offset, reason)


__all__ = [
    "BoundaryMatch",
    "BoundaryScanner",
    "CursorState",
    "MessageView",
    "MessageCursor",
]
