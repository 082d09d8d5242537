"""
Tests for session history persistence and personal-best messages.
"""

import json
import logging

from conftest import make_config
from drills.history import SessionHistory
from drills.sim.contracts import SessionRecord, SessionState


def record(total_time, code="500001300601100012121", completed=True, **counts) -> SessionRecord:
    config = make_config(**(counts or {"stationary": 5})).with_seed(code)
    outcome = SessionState(seed=code, completed=completed, total_time=total_time, targets_collected=5)
    return SessionRecord(config=config, outcome=outcome, code=code)


class TestStorage:
    def test_keeps_only_the_last_ten(self) -> None:
        history = SessionHistory()
        for i in range(12):
            history.append(record(1000 + i))
        assert len(history) == 10
        assert history.records[0].outcome.total_time == 1002
        assert history.records[-1].outcome.total_time == 1011

    def test_round_trips_through_disk(self, tmp_path) -> None:
        path = tmp_path / "nested" / "history.json"
        history = SessionHistory(path)
        history.append(record(4200, hazard=1, stationary=3))

        raw = json.loads(path.read_text(encoding="utf-8"))
        assert raw["sessions"][0]["outcome"]["totalTime"] == 4200
        assert raw["sessions"][0]["config"]["targetCounts"]["hazard"] == 1

        reloaded = SessionHistory.default(path=str(path))
        assert len(reloaded) == 1
        restored = reloaded.records[0]
        assert restored.code == "500001300601100012121"
        assert restored.config.same_layout(history.records[0].config)
        assert restored.outcome == history.records[0].outcome

    def test_corrupt_file_loads_empty(self, tmp_path, caplog) -> None:
        path = tmp_path / "history.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING, logger="drills.history"):
            history = SessionHistory.default(path=str(path))
        assert len(history) == 0
        assert "failed to load session history" in caplog.text

    def test_in_memory_history_writes_nothing(self, tmp_path) -> None:
        history = SessionHistory.default()
        history.append(record(1000))
        assert history.path is None
        assert list(tmp_path.iterdir()) == []

    def test_clear_and_stats(self, tmp_path) -> None:
        history = SessionHistory(tmp_path / "h.json")
        history.append(record(1000))
        history.append(record(2000))
        assert history.stats() == {
            "sessions": 2,
            "completed": 2,
            "targets": 10,
            "hazards": 0,
            "average_targets": 5.0,
            "average_time": 1500.0,
            "best_time": 1000,
        }
        history.clear()
        assert len(SessionHistory.default(path=str(tmp_path / "h.json"))) == 0


class TestPersonalBest:
    def test_first_completion(self) -> None:
        assert SessionHistory().check_personal_best(record(5000)) == (True, "First completion!")

    def test_incomplete_sessions_do_not_count(self) -> None:
        history = SessionHistory()
        history.append(record(100, completed=False))
        assert history.check_personal_best(record(5000)) == (True, "First completion!")

    def test_new_challenge_for_different_counts(self) -> None:
        history = SessionHistory()
        history.append(record(5000, stationary=3))
        assert history.check_personal_best(record(9000, stationary=4)) == (True, "New challenge completed!")

    def test_new_best_and_near_average(self) -> None:
        history = SessionHistory()
        history.append(record(5000))
        history.append(record(7000))
        assert history.check_personal_best(record(4000)) == (True, "New Personal Best!")
        # Average 6000, so anything under 6600 still gets a nod.
        assert history.check_personal_best(record(6500)) == (True, "Great performance!")
        assert history.check_personal_best(record(6700)) == (False, "")

    def test_same_counts_different_seed_are_comparable(self) -> None:
        history = SessionHistory()
        history.append(record(5000, code="RED-STAR-500001300601100012121"))
        assert history.check_personal_best(record(4000, code="500001300601100012121"))[1] == "New Personal Best!"


class TestStats:
    def test_empty_history(self) -> None:
        stats = SessionHistory().stats()
        assert stats["sessions"] == 0
        assert stats["average_time"] == 0.0
        assert stats["best_time"] is None

    def test_times_ignore_unfinished_sessions(self) -> None:
        history = SessionHistory()
        history.append(record(4000))
        history.append(record(1000, completed=False))
        history.append(record(2000))
        stats = history.stats()
        assert stats["sessions"] == 3
        assert stats["completed"] == 2
        assert stats["average_time"] == 3000.0
        assert stats["best_time"] == 2000
        assert stats["average_targets"] == 5.0
