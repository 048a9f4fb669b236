"""Expose the shared utility surface for mboxiter.

What:
  Re-export the structured logging helpers so callers can use
  ``from mboxiter.utils import get_logger`` without knowing module names.
"""

from .logging import LEVELS, JsonLogger, get_logger

__all__ = ["LEVELS", "JsonLogger", "get_logger"]
