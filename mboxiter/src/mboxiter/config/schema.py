"""Pydantic model describing how an archive is opened."""
from __future__ import annotations

import codecs
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError as _PydanticValidationError
from pydantic import field_validator, model_validator

# A "From " line: address-like token, anything, then a four digit year.
DEFAULT_BOUNDARY_PATTERN = r"^From \S+@\S.*\d{4}\r?$"
DEFAULT_PATTERN_FLAGS = re.MULTILINE
DEFAULT_CHARSET = "utf-8"
DEFAULT_MAX_WINDOW_CHARS = 10240
DEFAULT_READ_CHUNK_BYTES = 64 * 1024


class ValidationError(ValueError):
    """Raised when archive options do not satisfy the schema."""


def parse_flags(value: Any) -> int:
    """Convert ``re`` flags given as an int, a flag name, or a list of names."""

    if isinstance(value, bool):
        raise ValidationError("pattern_flags must be an int or flag names")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = [part for part in re.split(r"[|,\s]+", value) if part]
    if isinstance(value, (list, tuple)):
        flags = 0
        for name in value:
            flag = getattr(re.RegexFlag, str(name).upper(), None)
            if flag is None:
                raise ValidationError(f"unknown regex flag '{name}'")
            flags |= flag
        return int(flags)
    raise ValidationError("pattern_flags must be an int or flag names")


class ArchiveOptions(BaseModel):
    """Construction parameters consumed by :func:`mboxiter.open_archive`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: Path
    charset: str = DEFAULT_CHARSET
    boundary_pattern: str = DEFAULT_BOUNDARY_PATTERN
    pattern_flags: int = int(DEFAULT_PATTERN_FLAGS)
    max_window_chars: int = Field(default=DEFAULT_MAX_WINDOW_CHARS, gt=0)
    access_mode: Literal["mmap", "stream"] = "mmap"
    read_chunk_bytes: int = Field(default=DEFAULT_READ_CHUNK_BYTES, gt=0)

    @field_validator("charset")
    @classmethod
    def _validate_charset(cls, value: str) -> str:
        try:
            codecs.getincrementaldecoder(value)
            codecs.getincrementalencoder(value)
        except LookupError as exc:
            raise ValueError(f"unknown charset '{value}'") from exc
        return value

    @field_validator("pattern_flags", mode="before")
    @classmethod
    def _coerce_flags(cls, value: Any) -> int:
        try:
            return parse_flags(value)
        except ValidationError as exc:
            raise ValueError(str(exc)) from exc

    @model_validator(mode="after")
    def _validate_pattern(self) -> "ArchiveOptions":
        try:
            re.compile(self.boundary_pattern, self.pattern_flags)
        except re.error as exc:
            raise ValueError(f"invalid boundary_pattern: {exc}") from exc
        return self

    def compile_pattern(self) -> re.Pattern[str]:
        """Compile a fresh pattern; archives never share a compiled instance."""

        return re.compile(self.boundary_pattern, self.pattern_flags)

    @classmethod
    def build(cls, **values: Any) -> "ArchiveOptions":
        """Validate ``values`` and convert pydantic failures to :class:`ValidationError`."""

        try:
            return cls.model_validate(values)
        except _PydanticValidationError as exc:
            raise ValidationError(str(exc)) from exc


__all__ = [
    "DEFAULT_BOUNDARY_PATTERN",
    "DEFAULT_PATTERN_FLAGS",
    "DEFAULT_CHARSET",
    "DEFAULT_MAX_WINDOW_CHARS",
    "DEFAULT_READ_CHUNK_BYTES",
    "ArchiveOptions",
    "ValidationError",
    "parse_flags",
]
