"""mboxiter logging helpers with JSON emission and content redaction.

What:
  Offer a tiny facade over Python streams so archive components emit JSON log
  lines with consistent fields, a severity threshold, and automatic removal of
  message content.

Why:
  Archive diagnostics (refills, decode failures) are most useful when they can
  be grepped or parsed line by line. Mail archives are private data, so message
  text, boundary lines, and previews must never reach a log even when a caller
  passes them by accident.

How:
  Provide a :class:`JsonLogger` dataclass bound to a stream, a component tag,
  and a minimum level. ``extra`` dictionaries are scrubbed recursively before
  being serialised with ``json.dump``.

Interfaces:
  :class:`JsonLogger`, :func:`get_logger`, :data:`LEVELS`.

Invariants & Safety:
  - Every payload carries ``ts``, ``lvl``, ``msg`` and ``component``.
  - Keys named ``body``, ``text``, ``boundary`` or ``preview`` are replaced
    with ``[redacted]`` at any nesting depth.
  - Streams are flushed after every write.
"""
from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


REDACTED = "[redacted]"
LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}
_SENSITIVE_KEYS = frozenset({"body", "text", "boundary", "preview"})


@dataclass
class JsonLogger:
    """Structured JSON logger with a level threshold and redaction.

    What:
      Emits single-line JSON entries for events at or above ``level``.

    Why:
      Library code runs inside other programs; the threshold keeps routine
      events such as window refills silent unless the caller asks for them.

    How:
      :meth:`log` drops entries below the threshold, merges redacted extras
      into the canonical payload, and writes one line to ``stream``.
    """

    stream: Any = field(default_factory=lambda: sys.stderr)
    component: str = "mboxiter"
    level: str = "WARN"

    def enabled_for(self, level: str) -> bool:
        return LEVELS[level.upper()] >= LEVELS[self.level.upper()]

    def log(self, level: str, message: str, *, extra: Optional[Dict[str, Any]] = None) -> None:
        """Emit a structured JSON log entry.

        Args:
          level: Severity name (``"debug"``, ``"info"``, ``"warn"``, ``"error"``).
          message: Event name.
          extra: Optional context dictionary, redacted recursively.
        """

        if not self.enabled_for(level):
            return
        payload = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "lvl": level.upper(),
            "msg": message,
            "component": self.component,
        }
        if extra:
            payload.update(self._redact(extra))
        json.dump(payload, self.stream, separators=(",", ":"), default=str)
        self.stream.write("\n")
        self.stream.flush()

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log("DEBUG", message, extra=kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log("INFO", message, extra=kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log("WARN", message, extra=kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log an error entry; archive failures are logged here before raising."""

        self.log("ERROR", message, extra=kwargs)

    @staticmethod
    def _redact(data: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key in _SENSITIVE_KEYS:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = JsonLogger._redact(value)
            else:
                result[key] = value
        return result


def get_logger(component: str, *, level: str = "WARN", stream: Any = None) -> JsonLogger:
    """Construct a :class:`JsonLogger` for ``component``.

    Raises:
      ValueError: If ``level`` is not one of :data:`LEVELS`.
    """

    if level.upper() not in LEVELS:
        raise ValueError(f"unknown log level '{level}'")
    if stream is None:
        return JsonLogger(component=component, level=level.upper())
    return JsonLogger(stream=stream, component=component, level=level.upper())
