from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict

SERVICE_NAME = "pagerender"

# Attributes every LogRecord carries; anything else was passed via ``extra``.
_RECORD_ATTRS = frozenset(
  logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

# Libraries that log per-chunk decoder details at DEBUG.
_QUIET_LOGGERS = {
  "uvicorn.access": logging.WARNING,
  "PIL": logging.INFO,
  "multipart": logging.INFO,
}


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
  """Scalar ``extra`` fields of a record, e.g. ``file_name`` or ``pages``."""
  context: Dict[str, Any] = {}
  for key, value in record.__dict__.items():
    if key.startswith("_") or key in _RECORD_ATTRS:
      continue
    if isinstance(value, (str, int, float, bool)) or value is None:
      context[key] = value
  return context


class JsonFormatter(logging.Formatter):
  def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
    stamp = datetime.fromtimestamp(record.created, tz=timezone.utc)
    payload: dict[str, Any] = {
      "ts": stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
      "service": SERVICE_NAME,
      "level": record.levelname,
      "logger": record.name,
      "message": record.getMessage(),
    }
    for key, value in record_context(record).items():
      payload.setdefault(key, value)
    if record.exc_info:
      payload["exc_info"] = self.formatException(record.exc_info)
    return json.dumps(payload, ensure_ascii=False)


class ContextFormatter(logging.Formatter):
  """Human readable lines with the ``extra`` context appended as key=value pairs."""

  def __init__(self) -> None:
    super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

  def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
    line = super().format(record)
    context = record_context(record)
    if not context:
      return line
    pairs = " ".join(f"{key}={value}" for key, value in sorted(context.items()))
    first, sep, rest = line.partition("\n")
    return f"{first} [{pairs}]{sep}{rest}"


def _log_level() -> str:
  return os.getenv("LOG_LEVEL", "INFO").upper()


def configure_logging(structured: bool = True) -> None:
  root = logging.getLogger()
  for handler in list(root.handlers):
    root.removeHandler(handler)

  root.setLevel(_log_level())
  stream_handler = logging.StreamHandler(sys.stdout)
  stream_handler.setFormatter(JsonFormatter() if structured else ContextFormatter())
  root.addHandler(stream_handler)

  for name, level in _QUIET_LOGGERS.items():
    logging.getLogger(name).setLevel(level)
