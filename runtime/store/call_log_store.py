"""
CallLogStore: append-only logging of dispatched method channel calls.

Writes JSON lines to:

    <data_dir>/logs/calls_YYYY-MM-DD.jsonl

One line per event; argument values are never written, only their keys.
"""

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


class CallLogStore:
    """Date-based JSONL event log.

    Parameters
    ----------
    data_dir:
        Base directory. Events go to `data_dir/logs/calls_<date>.jsonl`.
        Defaults to `runtime/data` relative to the current working directory.
    """

    def __init__(self, data_dir: Optional[str] = None) -> None:
        self._data_dir = Path(data_dir) if data_dir else Path("runtime/data")
        self._lock = threading.Lock()

    @property
    def log_dir(self) -> Path:
        return self._data_dir / "logs"

    def _log_path(self, day: str) -> Path:
        return self.log_dir / f"calls_{day}.jsonl"

    def log_event(self, event_type: str, payload: dict) -> Path:
        """Append an event to today's log file and return its path."""
        now = datetime.now(timezone.utc)
        record = {"timestamp": now.isoformat(), "event_type": event_type}
        record.update(payload)

        path = self._log_path(now.date().isoformat())
        with self._lock:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(record, ensure_ascii=False, default=str))
                f.write("\n")
        return path

    def read_events(self, day: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return the events logged on `day` (YYYY-MM-DD, default today)."""
        day = day or datetime.now(timezone.utc).date().isoformat()
        path = self._log_path(day)
        if not path.is_file():
            return []
        with path.open("r", encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]
