"""Evidence logging for Supacheck pipelines."""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from config.settings import Settings


class JSONLineFormatter(logging.Formatter):
    """Formats records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            event.update(fields)
        if record.exc_info:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, default=str)


class EvidenceLogger:
    """Owns the console and evidence-file handlers for the process.

    Create once at startup, hand ``logger`` to the pipelines, and call
    ``close()`` at shutdown to flush the evidence file.
    """

    def __init__(
        self,
        name: str = "supacheck",
        level: str = "INFO",
        log_file: str | Path | None = None,
    ):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))
        self._handlers: list[logging.Handler] = []
        self._setup_handlers(log_file)

    def _setup_handlers(self, log_file: str | Path | None) -> None:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s - %(name)s - %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        self._attach(console)

        if log_file:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(path, encoding="utf-8")
            file_handler.setFormatter(JSONLineFormatter())
            self._attach(file_handler)

    def _attach(self, handler: logging.Handler) -> None:
        self.logger.addHandler(handler)
        self._handlers.append(handler)

    def child(self, suffix: str) -> logging.Logger:
        """Logger for one component; records propagate to our handlers."""
        return self.logger.getChild(suffix)

    def close(self) -> None:
        """Flush and detach every handler this instance installed."""
        for handler in self._handlers:
            handler.flush()
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers.clear()


def setup_logging(settings: Settings) -> EvidenceLogger:
    """Build the process logger from settings.

    Args:
        settings: Application settings (``log_level`` and ``log_file``).

    Returns:
        The EvidenceLogger; the caller is responsible for closing it.
    """
    return EvidenceLogger(level=settings.log_level, log_file=settings.log_file or None)
