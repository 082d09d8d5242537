"""
Target entities.

One class per target kind. Placement builds them, motion and collision mutate them
in place, and renderers read them through `to_dict()`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from config import (
    TARGET_COLORS,
    TARGET_POINTS,
    BONUS_POINTS,
    BONUS_TIME_SECONDS,
    BONUS_MULTIPLIER,
    HAZARD_PENALTY_SECONDS,
    FLEE_SPEED,
    FLEE_DETECTION_FACTOR,
)
from drills.session_config import CORE_KINDS, TargetKind


@dataclass
class Velocity:
    x: float = 0.0
    y: float = 0.0


@dataclass
class Target:
    """Base target. `target_id` is unique within a session and never reused."""

    target_id: int
    x: float
    y: float
    size: float
    kind: TargetKind = TargetKind.STATIC
    collectible: bool = True
    created_at: int = 0
    color: str = TARGET_COLORS["static"]
    points: int = TARGET_POINTS
    dwell_progress: float = 0.0  # 0..1, for rendering only

    @property
    def is_core(self) -> bool:
        return self.kind in CORE_KINDS

    @property
    def radius(self) -> float:
        return self.size

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.target_id,
            "type": TargetKind(self.kind).value,
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "collectible": self.collectible,
            "createdAt": self.created_at,
            "color": self.color,
            "points": self.points,
            "dwellProgress": self.dwell_progress,
        }


@dataclass
class StaticTarget(Target):
    kind: TargetKind = TargetKind.STATIC
    color: str = TARGET_COLORS["static"]


@dataclass
class MovingTarget(Target):
    kind: TargetKind = TargetKind.MOVING
    color: str = TARGET_COLORS["moving"]
    velocity: Velocity = field(default_factory=Velocity)
    pattern: str = "linear"

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["velocity"] = {"x": self.velocity.x, "y": self.velocity.y}
        d["pattern"] = self.pattern
        return d


@dataclass
class FleeTarget(Target):
    kind: TargetKind = TargetKind.FLEE
    color: str = TARGET_COLORS["flee"]
    flee_speed: float = FLEE_SPEED
    detection_radius: Optional[float] = None
    velocity: Velocity = field(default_factory=Velocity)

    def __post_init__(self):
        if self.detection_radius is None:
            self.detection_radius = self.size * FLEE_DETECTION_FACTOR

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["fleeSpeed"] = self.flee_speed
        d["detectionRadius"] = self.detection_radius
        return d


@dataclass
class BonusTarget(Target):
    kind: TargetKind = TargetKind.BONUS
    color: str = TARGET_COLORS["bonus"]
    points: int = BONUS_POINTS
    time_bonus: float = BONUS_TIME_SECONDS
    bonus_multiplier: int = BONUS_MULTIPLIER

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["timeBonus"] = self.time_bonus
        return d


@dataclass
class HazardTarget(Target):
    kind: TargetKind = TargetKind.HAZARD
    color: str = TARGET_COLORS["hazard"]
    collectible: bool = False
    time_penalty: float = HAZARD_PENALTY_SECONDS

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["timePenalty"] = self.time_penalty
        return d


TARGET_CLASSES = {
    TargetKind.STATIC: StaticTarget,
    TargetKind.MOVING: MovingTarget,
    TargetKind.FLEE: FleeTarget,
    TargetKind.BONUS: BonusTarget,
    TargetKind.HAZARD: HazardTarget,
}


def core_remaining(targets) -> int:
    """Number of live targets that still block completion."""
    return sum(1 for t in targets if t.is_core)
