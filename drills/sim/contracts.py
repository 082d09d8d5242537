"""
Thin, stable data contracts shared between the session engine and its collaborators.

These are intentionally small "struct-like" dataclasses so:
- systems can share session bookkeeping without import cycles
- a finished session is trivially serializable for the history store
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Optional

from drills.session_config import SessionConfig


class SessionPhase(str, Enum):
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"


@dataclass(slots=True)
class SessionState:
    """
    Live bookkeeping for one session.

    Times are milliseconds on the session clock; `time_adjustments` is in signed
    seconds (negative for bonuses, positive for hazard penalties).
    """

    seed: Optional[str] = None
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    paused_time: int = 0
    pause_start_time: Optional[int] = None
    time_adjustments: float = 0.0
    targets_collected: int = 0
    core_targets_collected: int = 0
    bonus_targets_collected: int = 0
    hazard_targets_hit: int = 0
    total_targets: int = 0
    total_core_targets: int = 0
    completed: bool = False
    total_time: int = 0

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        return {
            "seed": d["seed"],
            "startTime": d["start_time"],
            "endTime": d["end_time"],
            "pausedTime": d["paused_time"],
            "timeAdjustments": d["time_adjustments"],
            "targetsCollected": d["targets_collected"],
            "coreTargetsCollected": d["core_targets_collected"],
            "bonusTargetsCollected": d["bonus_targets_collected"],
            "hazardTargetsHit": d["hazard_targets_hit"],
            "totalTargets": d["total_targets"],
            "totalCoreTargets": d["total_core_targets"],
            "completed": d["completed"],
            "totalTime": d["total_time"],
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "SessionState":
        return cls(
            seed=d.get("seed"),
            start_time=d.get("startTime"),
            end_time=d.get("endTime"),
            paused_time=int(d.get("pausedTime") or 0),
            time_adjustments=float(d.get("timeAdjustments") or 0.0),
            targets_collected=int(d.get("targetsCollected") or 0),
            core_targets_collected=int(d.get("coreTargetsCollected") or 0),
            bonus_targets_collected=int(d.get("bonusTargetsCollected") or 0),
            hazard_targets_hit=int(d.get("hazardTargetsHit") or 0),
            total_targets=int(d.get("totalTargets") or 0),
            total_core_targets=int(d.get("totalCoreTargets") or 0),
            completed=bool(d.get("completed", False)),
            total_time=int(d.get("totalTime") or 0),
        )


@dataclass(slots=True)
class SessionRecord:
    """What a finished session hands to the persistence collaborator."""

    config: SessionConfig
    outcome: SessionState
    code: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "outcome": self.outcome.to_dict(),
            "code": self.code,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "SessionRecord":
        return cls(
            config=SessionConfig.from_dict(d.get("config") or {}),
            outcome=SessionState.from_dict(d.get("outcome") or {}),
            code=str(d.get("code") or ""),
        )
