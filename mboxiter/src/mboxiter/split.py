"""Write each message of an archive to its own file."""
from __future__ import annotations

from pathlib import Path

from .core.archive import Archive


def split_archive(archive: Archive, outdir: Path | str, *, prefix: str = "msg-") -> int:
    """Write every remaining message of ``archive`` to ``outdir/<prefix><n>``.

    Messages are re-encoded to the archive charset, so each output file holds
    the original bytes between two boundary lines. Numbering starts at zero.

    Returns:
      The number of files written.
    """

    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    count = 0
    for view in archive:
        (outdir / f"{prefix}{count}").write_bytes(view.encode())
        count += 1
    return count


def count_messages(archive: Archive) -> int:
    """Count the remaining messages without copying their text."""

    count = 0
    for _ in archive:
        count += 1
    return count


__all__ = ["split_archive", "count_messages"]
