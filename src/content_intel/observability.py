"""JSONL event log for the content intelligence engine.

One file per day under ``$XDG_DATA_HOME/content-intel/observability``, one
JSON object per line: ``{"ts": ..., "event": ..., **metadata}``. Writers in
several processes (API server, CLI runs) share the files through ``flock``.
"""

import fcntl
import json
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

DAY_FORMAT = "%Y-%m-%d"
FILE_SUFFIX = "_events.jsonl"


def default_events_dir() -> Path:
    """$XDG_DATA_HOME/content-intel/observability (or ~/.local/share/...)."""
    data_home = os.environ.get("XDG_DATA_HOME", str(Path.home() / ".local" / "share"))
    return Path(data_home) / "content-intel" / "observability"


class ObservabilityLogger:
    """Appends engine events to daily JSONL files."""

    def __init__(self, base_dir: Path | None = None):
        # Created by log() on first write
        self.base_dir = base_dir or default_events_dir()

    def events_file(self, day: str | None = None) -> Path:
        """Path of the JSONL file for ``day`` (YYYY-MM-DD, default today)."""
        return self.base_dir / f"{day or datetime.now().strftime(DAY_FORMAT)}{FILE_SUFFIX}"

    def log(self, event: str, **metadata: Any) -> None:
        """Record one event.

        Never raises: reranking and summaries must not fail because an event
        could not be written. Problems go to stderr instead.

        Args:
            event: Dotted event name (e.g. "embedding.init", "remote.call")
            **metadata: JSON-serializable event fields
        """
        ts = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        try:
            line = json.dumps(
                {"ts": ts.replace("+00:00", "Z"), "event": event, **metadata},
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as e:
            print(f"[Observability] Cannot serialize event '{event}': {e}", file=sys.stderr)
            return

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            with open(self.events_file(), "a", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    f.write(line + "\n")
                    f.flush()
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            print(f"[Observability] Cannot write event '{event}': {e}", file=sys.stderr)

    def read_events(self, day: str | None = None) -> list[dict[str, Any]]:
        """Events recorded on ``day``, oldest first."""
        path = self.events_file(day)
        if not path.exists():
            return []
        with open(path, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def cleanup_old_files(self, retention_days: int = 30) -> int:
        """Delete daily files older than ``retention_days``; returns how many."""
        if not self.base_dir.is_dir():
            return 0

        cutoff = datetime.now() - timedelta(days=retention_days)
        removed = 0

        for path in self.base_dir.glob(f"*{FILE_SUFFIX}"):
            try:
                file_day = datetime.strptime(path.name[: -len(FILE_SUFFIX)], DAY_FORMAT)
            except ValueError:
                continue
            if file_day >= cutoff:
                continue
            try:
                path.unlink()
                removed += 1
            except OSError as e:
                print(f"[Observability] Cannot remove {path}: {e}", file=sys.stderr)

        return removed


_logger: ObservabilityLogger | None = None


def get_logger() -> ObservabilityLogger:
    """Process-wide logger, created on first use."""
    global _logger
    if _logger is None:
        _logger = ObservabilityLogger()
    return _logger


def reset_logger() -> None:
    """Forget the process-wide logger so the next call re-reads XDG_DATA_HOME."""
    global _logger
    _logger = None


def log(event: str, **metadata: Any) -> None:
    """Record an event on the process-wide logger.

    Usage:
        from content_intel.observability import log
        log("search.enhance", candidates=12, duration_ms=4)
    """
    get_logger().log(event, **metadata)
