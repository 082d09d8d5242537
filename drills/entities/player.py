"""
Player marker.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from config import PLAYER_DEFAULT_SIZE


@dataclass
class TrailPoint:
    x: float
    y: float
    at_ms: int


@dataclass
class Player:
    """
    The player's square marker. `size` is the half-extent of the hitbox and is forced
    to the configured target size at placement time.
    """

    x: float = 0.0
    y: float = 0.0
    size: float = PLAYER_DEFAULT_SIZE
    trail: list[TrailPoint] = field(default_factory=list)
    continuous_direction: Optional[str] = None
    target_x: Optional[float] = None
    target_y: Optional[float] = None
    is_moving: bool = False

    @property
    def position(self) -> tuple:
        return self.x, self.y

    def add_to_trail(self, x: float, y: float, at_ms: int, max_length: int) -> None:
        """Record a past position; most recent last, oldest dropped past `max_length`."""
        if max_length <= 0:
            self.trail.clear()
            return
        self.trail.append(TrailPoint(x, y, at_ms))
        if len(self.trail) > max_length:
            del self.trail[: len(self.trail) - max_length]

    def prune_trail(self, now_ms: int, fade_ms: int) -> None:
        self.trail = [p for p in self.trail if now_ms - p.at_ms < fade_ms]

    def clear_trail(self) -> None:
        self.trail = []

    def clamp_to(self, width: float, height: float) -> None:
        """Keep the whole marker inside the field."""
        self.x = max(self.size, min(width - self.size, self.x))
        self.y = max(self.size, min(height - self.size, self.y))

    def set_move_target(self, x: float, y: float) -> None:
        self.continuous_direction = None
        self.is_moving = False
        self.target_x = x
        self.target_y = y

    def set_direction(self, direction: Optional[str]) -> None:
        # Latching a direction cancels any pending click-to-move.
        self.target_x = None
        self.target_y = None
        self.continuous_direction = direction
        self.is_moving = direction is not None

    def reset_motion(self) -> None:
        self.continuous_direction = None
        self.is_moving = False
        self.target_x = None
        self.target_y = None

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "size": self.size,
            "trail": [{"x": p.x, "y": p.y, "timestamp": p.at_ms} for p in self.trail],
            "continuousDirection": self.continuous_direction,
            "targetX": self.target_x,
            "targetY": self.target_y,
        }
