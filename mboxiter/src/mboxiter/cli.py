"""mboxiter command-line interface.

What:
  Provide a Typer-based entry point with two commands: ``split`` writes each
  message of an archive to its own file, ``count`` prints how many messages an
  archive holds.

Why:
  Splitting an mbox into per-message files is the most common thing done with
  an archive iterator, and operators need a quick way to check that a charset
  and boundary pattern yield the expected message count before doing so.

How:
  Both commands merge an optional YAML options file with explicit flags via
  :func:`mboxiter.config.loader.load_options`, open the archive with a JSON
  logger whose threshold follows ``--verbose``, and delegate to
  :mod:`mboxiter.split`.

Interfaces:
  ``app`` (Typer application), ``split``, ``count``, ``main``.

Invariants & Safety:
  - Exit codes: ``0`` success, ``1`` configuration or archive error, ``2``
    usage error (raised by Typer itself).
  - The archive is closed on every path, including failures mid-iteration.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer

from .config.loader import ConfigLoadError, load_options
from .core.archive import Archive
from .core.errors import MboxError
from .split import count_messages, split_archive
from .utils.logging import get_logger


app = typer.Typer(help="Stream the messages of an mbox archive")

LOGGER = logging.getLogger("mboxiter.cli")

_VERBOSITY = {0: "WARN", 1: "INFO"}

# Failures reported with exit code 1.
_FAILURES = (ConfigLoadError, MboxError, OSError)


def _open_archive(
    mbox: Path,
    *,
    config: Optional[Path],
    charset: Optional[str],
    from_line: Optional[str],
    max_window_chars: Optional[int],
    mode: Optional[str],
    verbose: int,
) -> Archive:
    options = load_options(
        config,
        path=mbox,
        charset=charset,
        boundary_pattern=from_line,
        max_window_chars=max_window_chars,
        access_mode=mode,
    )
    logger = get_logger("mboxiter.archive", level=_VERBOSITY.get(verbose, "DEBUG"))
    return Archive(options, logger=logger)


def _fail(command: str, exc: Exception) -> typer.Exit:
    LOGGER.error("%s_failed error=%s", command, exc)
    typer.echo(f"error: {exc}", err=True)
    return typer.Exit(code=1)


@app.command("split")
def split(
    mbox: Path = typer.Argument(..., help="mbox archive to split"),
    outdir: Path = typer.Argument(..., help="Directory receiving one file per message"),
    prefix: str = typer.Option("msg-", help="File name prefix for written messages"),
    config: Optional[Path] = typer.Option(None, help="YAML file with archive options"),
    charset: Optional[str] = typer.Option(None, help="Archive character encoding"),
    from_line: Optional[str] = typer.Option(None, help="Boundary line regular expression"),
    max_window_chars: Optional[int] = typer.Option(None, help="Decode window size in characters"),
    mode: Optional[str] = typer.Option(None, help="Byte access mode: mmap or stream"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log archive events"),
) -> None:
    """Write every message of MBOX to OUTDIR/<prefix><n>."""

    try:
        with _open_archive(
            mbox,
            config=config,
            charset=charset,
            from_line=from_line,
            max_window_chars=max_window_chars,
            mode=mode,
            verbose=verbose,
        ) as archive:
            written = split_archive(archive, outdir, prefix=prefix)
    except _FAILURES as exc:
        raise _fail("split", exc) from exc
    LOGGER.info("split_completed mbox=%s messages=%s outdir=%s", mbox, written, outdir)
    typer.echo(f"Found {written} messages")


@app.command("count")
def count(
    mbox: Path = typer.Argument(..., help="mbox archive to inspect"),
    config: Optional[Path] = typer.Option(None, help="YAML file with archive options"),
    charset: Optional[str] = typer.Option(None, help="Archive character encoding"),
    from_line: Optional[str] = typer.Option(None, help="Boundary line regular expression"),
    max_window_chars: Optional[int] = typer.Option(None, help="Decode window size in characters"),
    mode: Optional[str] = typer.Option(None, help="Byte access mode: mmap or stream"),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Log archive events"),
) -> None:
    """Print the number of messages in MBOX."""

    try:
        with _open_archive(
            mbox,
            config=config,
            charset=charset,
            from_line=from_line,
            max_window_chars=max_window_chars,
            mode=mode,
            verbose=verbose,
        ) as archive:
            total = count_messages(archive)
    except _FAILURES as exc:
        raise _fail("count", exc) from exc
    typer.echo(str(total))


def main() -> None:
    """Execute the Typer application entry point."""

    app()


if __name__ == "__main__":  # pragma: no cover
    main()
