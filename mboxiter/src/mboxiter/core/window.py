"""Capacity-bounded decode window fed by an incremental character decoder.

What:
  Hold the currently decoded portion of an archive as text, together with the
  explicit decoder state needed to resume decoding exactly where the previous
  refill stopped.

Why:
  Archives are larger than any window we want to keep resident, and multi-byte
  characters straddle arbitrary chunk boundaries. Losing or duplicating the
  undecoded tail of a chunk silently corrupts every later message, so the tail
  is kept as a visible byte buffer instead of being left inside the codec.

How:
  Each decode call resets the codec to the stored ``(remainder, flag)`` state,
  feeds ``remainder + chunk`` and reads the state back with ``getstate()``.
  Chunks are sized from the free room so that a codec emitting at most one
  character per input byte can never overflow the capacity. ``final`` is only
  passed on the chunk that reaches the end of the source.

Interfaces:
  :class:`DecodeResult`, :class:`RefillResult`, :class:`DecodeWindow`.

Invariants & Safety:
  - ``len(window.text) <= capacity`` after every refill.
  - ``byte_offset`` counts bytes handed to the codec; bytes still buffered in
    ``remainder`` are counted as consumed but have produced no text yet.
  - Once a refill reports an error the window must not be refilled again.
"""
from __future__ import annotations

import codecs
import enum
from dataclasses import dataclass
from typing import Optional

from .source import ByteSource

_UNMAPPABLE_REASON = "character maps to <undefined>"


class DecodeResult(enum.Enum):
    OK = "ok"
    MALFORMED_INPUT = "malformed_input"
    UNMAPPABLE_CHARACTER = "unmappable_character"


@dataclass(frozen=True)
class RefillResult:
    """Outcome of one :meth:`DecodeWindow.refill` call.

    ``error_offset`` and ``reason`` are only set when ``result`` is not
    :attr:`DecodeResult.OK`.
    """

    chars_decoded: int
    bytes_consumed: int
    result: DecodeResult = DecodeResult.OK
    error_offset: Optional[int] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.result is DecodeResult.OK


class DecodeWindow:
    """Bounded text buffer plus explicit incremental decoder state."""

    def __init__(self, charset: str, capacity: int, *, chunk_bytes: int = 64 * 1024) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        if chunk_bytes <= 0:
            raise ValueError("chunk_bytes must be positive")
        self.charset = codecs.lookup(charset).name
        self.capacity = capacity
        self.chunk_bytes = chunk_bytes
        self._decoder = codecs.getincrementaldecoder(charset)(errors="strict")
        # The initial flag is codec specific (utf-16 starts in "BOM not seen yet").
        self._remainder, self._flag = self._decoder.getstate()
        # Any byte order mark sits before the first boundary, so it is spent
        # once here and never repeated in re-encoded messages.
        self._encoder = codecs.getincrementalencoder(charset)(errors="strict")
        self._encoder.encode("")
        self.text = ""
        self.byte_offset = 0
        self.exhausted = False

    @property
    def valid(self) -> int:
        return len(self.text)

    @property
    def room(self) -> int:
        return self.capacity - len(self.text)

    @property
    def remainder(self) -> bytes:
        """Undecoded bytes carried over to the next decode call."""

        return self._remainder

    def compact(self, keep_from: int) -> None:
        """Drop text before ``keep_from`` and shift the rest to index 0."""

        if keep_from < 0 or keep_from > len(self.text):
            raise ValueError(f"keep_from {keep_from} outside window of {len(self.text)} chars")
        if keep_from:
            self.text = self.text[keep_from:]

    def encode(self, text: str) -> bytes:
        """Encode ``text`` back to the window charset without a byte order mark.

        The encoder is flushed after every call so stateful charsets
        (``iso-2022-jp``) return to their initial shift state between messages.
        """

        return self._encoder.encode(text, True)

    def refill(self, source: ByteSource) -> RefillResult:
        """Decode bytes from ``source`` until the window is full or the source ends.

        Returns:
          A :class:`RefillResult`. On a decode error the text decoded before
          the offending chunk stays in the window and ``byte_offset`` is left
          at the start of that chunk.
        """

        total = source.length()
        decoded = 0
        consumed = 0
        if self.byte_offset >= total and not self.exhausted:
            # Nothing left to read; flush whatever the codec still expects.
            outcome = self._decode(b"", final=True)
            if outcome is not None:
                return RefillResult(decoded, consumed, *outcome)
            self.exhausted = True
        while not self.exhausted and self.room > 0:
            take = min(
                max(1, self.room - len(self._remainder)),
                self.chunk_bytes,
                total - self.byte_offset,
            )
            final = self.byte_offset + take >= total
            before = len(self.text)
            with source.region(self.byte_offset, take) as chunk:
                outcome = self._decode(chunk, final=final)
            if outcome is not None:
                return RefillResult(decoded, consumed, *outcome)
            self.byte_offset += take
            consumed += take
            decoded += len(self.text) - before
            self.exhausted = final
        return RefillResult(decoded, consumed)

    def _decode(self, chunk, *, final: bool) -> Optional[tuple[DecodeResult, int, str]]:
        data = self._remainder + chunk if self._remainder else chunk
        self._decoder.reset()
        self._decoder.setstate((b"", self._flag))
        try:
            text = self._decoder.decode(data, final)
        except UnicodeDecodeError as exc:
            kind = (
                DecodeResult.UNMAPPABLE_CHARACTER
                if exc.reason == _UNMAPPABLE_REASON
                else DecodeResult.MALFORMED_INPUT
            )
            offset = self.byte_offset - len(self._remainder) + exc.start
            return kind, offset, exc.reason
        except UnicodeError as exc:
            # e.g. utf-16 input without a byte order mark
            return DecodeResult.MALFORMED_INPUT, self.byte_offset - len(self._remainder), str(exc)
        self._remainder, self._flag = self._decoder.getstate()
        self.text += text
        return None


__all__ = ["DecodeResult", "RefillResult", "DecodeWindow"]
