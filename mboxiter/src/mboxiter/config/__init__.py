"""mboxiter configuration package.

What:
  Provide the import surface for archive option validation and YAML loading.

Why:
  Callers should go through the schema so every archive is opened with a
  validated charset, boundary pattern, and window size.

How:
  Re-export the loader helpers and the pydantic model with an explicit
  ``__all__``.

Interfaces:
  - ArchiveOptions / ValidationError: schema model and its error type.
  - load_options / read_options_file / ConfigLoadError: YAML file loading.
"""

from .loader import ConfigLoadError, load_options, read_options_file
from .schema import (
    DEFAULT_BOUNDARY_PATTERN,
    DEFAULT_CHARSET,
    DEFAULT_MAX_WINDOW_CHARS,
    DEFAULT_PATTERN_FLAGS,
    DEFAULT_READ_CHUNK_BYTES,
    ArchiveOptions,
    ValidationError,
    parse_flags,
)

__all__ = [
    "ArchiveOptions",
    "ValidationError",
    "ConfigLoadError",
    "load_options",
    "read_options_file",
    "parse_flags",
    "DEFAULT_BOUNDARY_PATTERN",
    "DEFAULT_CHARSET",
    "DEFAULT_MAX_WINDOW_CHARS",
    "DEFAULT_PATTERN_FLAGS",
    "DEFAULT_READ_CHUNK_BYTES",
]
