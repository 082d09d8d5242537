"""
Session history: the persistence collaborator for finished sessions.

- append-only list of SessionRecords, oldest dropped past `limit`
- optional JSON file backing (atomic writes)
- aggregate stats and the personal-best banner logic
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from config import HISTORY_LIMIT, PERSONAL_BEST_AVERAGE_FACTOR
from drills.sim.contracts import SessionRecord

logger = logging.getLogger(__name__)


def _atomic_write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(text, encoding="utf-8")
    os.replace(tmp, path)


class SessionHistory:
    """
    File-backed (or in-memory when `path` is None) session history.

    Use `history.append` as a Session completion listener.
    """

    def __init__(self, path: Optional[Path] = None, limit: int = HISTORY_LIMIT):
        self.path = Path(path) if path else None
        self.limit = limit
        self._records: list[SessionRecord] = []

    @classmethod
    def default(cls, *, path: str = "") -> "SessionHistory":
        history = cls(Path(path) if path else None)
        history.load()
        return history

    @property
    def records(self) -> list[SessionRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> None:
        if self.path is None or not self.path.exists():
            self._records = []
            return
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            self._records = [SessionRecord.from_dict(d) for d in (raw.get("sessions") or [])][-self.limit:]
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("failed to load session history from %s: %s", self.path, e)
            self._records = []

    def save(self) -> None:
        if self.path is None:
            return
        payload = {"sessions": [r.to_dict() for r in self._records]}
        try:
            _atomic_write_text(self.path, json.dumps(payload, indent=2, sort_keys=True))
        except OSError as e:
            logger.warning("failed to save session history to %s: %s", self.path, e)

    def append(self, record: SessionRecord) -> None:
        self._records.append(record)
        if len(self._records) > self.limit:
            del self._records[: len(self._records) - self.limit]
        self.save()

    def clear(self) -> None:
        self._records = []
        self.save()

    def stats(self) -> dict:
        """Totals over the kept records; times are averaged over completed sessions only."""
        records = self._records
        times = [r.outcome.total_time for r in records if r.outcome.completed]
        targets = sum(r.outcome.targets_collected for r in records)
        return {
            "sessions": len(records),
            "completed": len(times),
            "targets": targets,
            "hazards": sum(r.outcome.hazard_targets_hit for r in records),
            "average_targets": targets / len(records) if records else 0.0,
            "average_time": sum(times) / len(times) if times else 0.0,
            "best_time": min(times) if times else None,
        }

    def check_personal_best(self, record: SessionRecord) -> tuple:
        """
        Compare a just-finished session against earlier completions.

        Call before appending `record`. Returns (is_record, message).
        """
        completed = [r for r in self._records if r.outcome.completed and r is not record]
        if not completed:
            return True, "First completion!"

        counts = record.config.target_counts.to_dict()
        similar = [r for r in completed if r.config.target_counts.to_dict() == counts]
        if not similar:
            return True, "New challenge completed!"

        current = record.outcome.total_time
        times = [r.outcome.total_time for r in similar]
        best = min(times)
        average = sum(times) / len(times)
        if current < best:
            return True, "New Personal Best!"
        if current < average * PERSONAL_BEST_AVERAGE_FACTOR:
            return True, "Great performance!"
        return False, ""
