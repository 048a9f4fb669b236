"""Pytest configuration shared by the unit and end-to-end suites.

What:
  Put the in-repo source tree on ``sys.path`` and provide fixtures that locate
  the reference archive and build synthetic archives on disk.

Why:
  Tests must exercise the ``mboxiter`` package from ``mboxiter/src`` rather
  than an installed wheel, and most scenarios need small mbox files whose
  exact content the test controls.

How:
  Compute the project root relative to this file, prepend ``mboxiter/src``
  when present, and expose the fixtures listed below.

Interfaces:
  :func:`data_dir`, :func:`mbox_text`, :func:`make_mbox`, :func:`quiet_logger`
  (pytest fixtures).
"""

import io
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "mboxiter" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from mboxiter.utils.logging import JsonLogger

DATA_DIR = Path(__file__).resolve().parent / "data"


def _build_mbox(bodies, *, sender="user@example.org", date="Mon Jan  6 10:00:00 2014"):
    """Return mbox text with one ``From`` line before each body."""

    return "".join(f"From {sender}  {date}\n{body}" for body in bodies)


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def mbox_text():
    """Expose the mbox text builder to tests."""

    return _build_mbox


@pytest.fixture
def make_mbox(tmp_path: Path):
    """Write text (or bytes) to a fresh file and return its path."""

    counter = iter(range(1_000_000))

    def _make(content, *, encoding: str = "utf-8", name: str = "") -> Path:
        path = tmp_path / (name or f"archive-{next(counter)}.mbox")
        if isinstance(content, str):
            content = content.encode(encoding)
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def quiet_logger() -> JsonLogger:
    """JSON logger writing DEBUG and above into an in-memory stream."""

    return JsonLogger(stream=io.StringIO(), component="test", level="DEBUG")
