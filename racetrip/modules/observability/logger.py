"""
modules/observability/logger.py
-------------------------------
Pipeline event log for the itinerary engine.

One ``EventLog`` per stream, one JSON object per line:

    logs/itinerary.jsonl   ITINERARY_ASSEMBLED, ITINERARY_STORED
    logs/narrative.jsonl   NARRATIVE_FALLBACK

Record shape:
    {"ts": "<UTC ISO-8601>", "event": "ITINERARY_STORED", "itinerary_id": "...", ...}

Writing is best-effort: these events are an audit trail, not part of the
result.  A failed write (missing permissions, LOGS_DIR pointing at a file,
full disk) is reported through ``logging`` and ``emit``
returns False; it never raises into itinerary creation.

The target directory is ``config.LOGS_DIR`` (or ``<repo>/logs``), resolved on
every write so tests can point it elsewhere.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from racetrip import config

logger = logging.getLogger(__name__)

_DEFAULT_LOGS_DIR: Path = Path(__file__).resolve().parents[3] / "logs"


def logs_dir() -> Path:
    return Path(config.LOGS_DIR) if config.LOGS_DIR else _DEFAULT_LOGS_DIR


class EventLog:
    """Append-only JSONL sink for one pipeline stream."""

    def __init__(self, stream: str, directory: Path | str | None = None) -> None:
        self.stream = stream
        self._directory = Path(directory) if directory else None
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return (self._directory or logs_dir()) / f"{self.stream}.jsonl"

    def emit(self, event: str, payload: dict[str, Any]) -> bool:
        """Append ``event`` with ``payload`` fields; False if it could not be written."""
        record = {"ts": datetime.now(timezone.utc).isoformat(), "event": event, **payload}
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"
        path = self.path
        try:
            with self._lock:
                path.parent.mkdir(parents=True, exist_ok=True)
                with open(path, "a", encoding="utf-8") as fh:
                    fh.write(line)
        except OSError as exc:
            logger.warning("Could not write %s event to %s: %s", event, path, exc)
            return False
        return True
