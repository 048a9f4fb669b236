"""Load archive options from YAML files.

What:
  Read an options file, merge explicit overrides on top of it, and validate
  the result into an :class:`~mboxiter.config.schema.ArchiveOptions` model.

Why:
  Operators splitting many archives keep charset, boundary pattern, and window
  size in a file rather than repeating CLI flags. Validation happens once, here,
  so the engine only ever receives a consistent option set.

How:
  Parse the file with :func:`yaml.safe_load`, require a top-level mapping,
  drop ``None`` overrides (unset CLI flags), and hand the merged mapping to
  :meth:`ArchiveOptions.build`. Filesystem, YAML and schema failures are all
  converted to :class:`ConfigLoadError` with the file path in the message.

Interfaces:
  :class:`ConfigLoadError`, :func:`read_options_file`, :func:`load_options`.

Invariants:
  - The configuration file is only read when a path is given explicitly; no
    environment variable or default location is consulted.
  - Keys in the file must match :class:`ArchiveOptions` fields exactly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml

from .schema import ArchiveOptions, ValidationError


class ConfigLoadError(Exception):
    """Raised when an options file cannot be read, parsed, or validated."""


def read_options_file(path: Path | str) -> dict[str, Any]:
    """Return the mapping stored in the YAML options file at ``path``.

    Raises:
      ConfigLoadError: If the file is missing, unreadable, not valid YAML, or
        does not contain a mapping.
    """

    path = Path(path).expanduser()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigLoadError(f"Configuration file missing: {path}") from exc
    except OSError as exc:  # pragma: no cover - filesystem surface
        raise ConfigLoadError(f"Unable to read configuration file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigLoadError(f"{path} must contain a mapping at the top-level")
    return payload


def load_options(config_path: Optional[Path | str] = None, **overrides: Any) -> ArchiveOptions:
    """Build validated archive options from an optional file plus overrides.

    Args:
      config_path: YAML file providing defaults, or ``None``.
      **overrides: Option values that win over the file; ``None`` values are
        ignored so unset CLI flags do not clobber the file.

    Returns:
      The validated :class:`ArchiveOptions`.

    Raises:
      ConfigLoadError: If the file cannot be loaded or the merged options are
        invalid.
    """

    payload: dict[str, Any] = {}
    if config_path is not None:
        payload.update(read_options_file(config_path))
    payload.update({key: value for key, value in overrides.items() if value is not None})
    if "path" not in payload:
        raise ConfigLoadError("archive path is required")
    try:
        return ArchiveOptions.build(**payload)
    except ValidationError as exc:
        source = f" from {config_path}" if config_path is not None else ""
        raise ConfigLoadError(f"Invalid archive options{source}: {exc}") from exc


__all__ = ["ConfigLoadError", "read_options_file", "load_options"]
