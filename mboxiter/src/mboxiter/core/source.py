"""Read-only byte sources backing an archive.

What:
  Provide two interchangeable ways to reach the bytes of an mbox file: a full
  read-only memory mapping (:class:`MappedSource`) and sequential positioned
  reads into a reusable scratch buffer (:class:`StreamSource`).

Why:
  Mapping avoids any read copies for files that fit the address space, while
  streaming keeps the resident footprint at one chunk for very large archives
  or filesystems that refuse ``mmap``. The decode window only needs a bounded
  byte region at a given offset, so both variants share :meth:`ByteSource.region`.

How:
  The source opens the file in binary mode, records its size once, and exposes
  ``region(offset, length)`` as a context manager that yields a memoryview.
  Views are released when the ``with`` block exits so the mapping can always
  be closed.

Interfaces:
  :class:`ByteSource`, :class:`MappedSource`, :class:`StreamSource`,
  :func:`open_source`.

Invariants & Safety:
  - Sources never mutate the file; the mapping is ``ACCESS_READ``.
  - ``close()`` is idempotent and releases the handle exactly once.
  - Zero-length files are never mapped (``mmap`` rejects them).
"""
from __future__ import annotations

import abc
import contextlib
import mmap
import os
from pathlib import Path
from typing import BinaryIO, Iterator, Literal, Optional

from .errors import ArchiveIOError, ArchiveNotFound

AccessMode = Literal["mmap", "stream"]


class ByteSource(abc.ABC):
    """Common surface of the byte sources."""

    def __init__(self, path: Path, handle: BinaryIO) -> None:
        self.path = path
        self._handle: Optional[BinaryIO] = handle
        try:
            self._length = os.fstat(handle.fileno()).st_size
        except OSError as exc:
            handle.close()
            raise ArchiveIOError(path, str(exc)) from exc

    @property
    def closed(self) -> bool:
        return self._handle is None

    def length(self) -> int:
        """Return the size of the underlying file in bytes."""

        return self._length

    @abc.abstractmethod
    def region(self, offset: int, length: int) -> contextlib.AbstractContextManager[memoryview]:
        """Yield a read-only view of ``length`` bytes starting at ``offset``."""

    def close(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()

    def _require_open(self) -> BinaryIO:
        if self._handle is None:
            raise ArchiveIOError(self.path, "source is closed")
        return self._handle

    def _check_bounds(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > self._length:
            raise ArchiveIOError(
                self.path,
                f"region [{offset}, {offset + length}) outside file of {self._length} bytes",
            )


class MappedSource(ByteSource):
    """Byte source backed by a read-only memory mapping of the whole file.

    What:
      Maps the file once at construction and serves regions as memoryview
      slices of the mapping.

    Why:
      The mapping is immutable for the archive's lifetime, so regions are safe
      to read from any position without copies.
    """

    def __init__(self, path: Path, handle: BinaryIO) -> None:
        super().__init__(path, handle)
        self._mm: Optional[mmap.mmap] = None
        if self._length:
            try:
                self._mm = mmap.mmap(handle.fileno(), 0, access=mmap.ACCESS_READ)
            except (OSError, ValueError) as exc:
                handle.close()
                raise ArchiveIOError(path, f"mmap failed: {exc}") from exc

    @contextlib.contextmanager
    def map_region(self, offset: int, length: int) -> Iterator[memoryview]:
        """Yield a memoryview over ``[offset, offset + length)`` of the mapping."""

        self._require_open()
        self._check_bounds(offset, length)
        if self._mm is None:
            yield memoryview(b"")
            return
        with memoryview(self._mm) as whole:
            with whole[offset : offset + length] as view:
                yield view

    def region(self, offset: int, length: int) -> contextlib.AbstractContextManager[memoryview]:
        return self.map_region(offset, length)

    def close(self) -> None:
        mm, self._mm = self._mm, None
        if mm is not None:
            mm.close()
        super().close()


class StreamSource(ByteSource):
    """Byte source that reads sequential chunks into a reusable buffer."""

    def __init__(self, path: Path, handle: BinaryIO) -> None:
        super().__init__(path, handle)
        self._scratch = bytearray()

    def read_into(self, dst: bytearray | memoryview, offset: int) -> int:
        """Fill ``dst`` with bytes starting at ``offset`` and return the count read."""

        handle = self._require_open()
        try:
            handle.seek(offset)
            count = handle.readinto(dst)
        except OSError as exc:
            raise ArchiveIOError(self.path, str(exc)) from exc
        return count or 0

    @contextlib.contextmanager
    def region(self, offset: int, length: int) -> Iterator[memoryview]:
        self._check_bounds(offset, length)
        if len(self._scratch) < length:
            self._scratch = bytearray(length)
        with memoryview(self._scratch) as whole:
            with whole[:length] as dst:
                count = self.read_into(dst, offset)
                if count != length:
                    raise ArchiveIOError(
                        self.path, f"short read at byte {offset}: wanted {length}, got {count}"
                    )
                yield dst


def open_source(path: Path | str, mode: AccessMode = "mmap") -> ByteSource:
    """Open ``path`` for reading with the requested access mode.

    Raises:
      ArchiveNotFound: If ``path`` does not exist.
      ArchiveIOError: If the file cannot be opened or mapped.
    """

    path = Path(path)
    try:
        handle = path.open("rb")
    except FileNotFoundError as exc:
        raise ArchiveNotFound(path) from exc
    except OSError as exc:
        raise ArchiveIOError(path, str(exc)) from exc
    if mode == "stream":
        return StreamSource(path, handle)
    return MappedSource(path, handle)


__all__ = ["AccessMode", "ByteSource", "MappedSource", "StreamSource", "open_source"]
