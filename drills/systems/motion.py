"""
Target motion: moving targets drift and bounce, flee targets back away from the player.

Runs after player movement and before collision each tick. Speeds are kept moderate
and motion stays inside the field.
"""
import math

from config import MOVING_BASE_SPEED, FLEE_BASE_SPEED, CALM_MODE_FACTOR, FLEE_DETECTION_FACTOR
from drills.entities.target import MovingTarget, FleeTarget


class TargetMotionSystem:
    """Advances moving/flee targets by one tick."""

    def __init__(self, width: float, height: float, calm_mode: bool = False):
        self.width = width
        self.height = height
        self.speed_factor = CALM_MODE_FACTOR if calm_mode else 1.0

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height

    def update(self, targets: list, player, dt: float):
        """dt in seconds."""
        for target in targets:
            if isinstance(target, MovingTarget):
                self._update_moving(target, dt)
            elif isinstance(target, FleeTarget):
                self._update_flee(target, player, dt)

    def _update_moving(self, t: MovingTarget, dt: float):
        step = MOVING_BASE_SPEED * self.speed_factor * dt
        t.x += t.velocity.x * step
        t.y += t.velocity.y * step

        # Bounce off the field edges.
        if t.x - t.size < 0:
            t.x = t.size
            t.velocity.x *= -1
        if t.x + t.size > self.width:
            t.x = self.width - t.size
            t.velocity.x *= -1
        if t.y - t.size < 0:
            t.y = t.size
            t.velocity.y *= -1
        if t.y + t.size > self.height:
            t.y = self.height - t.size
            t.velocity.y *= -1

    def _update_flee(self, t: FleeTarget, player, dt: float):
        dx = t.x - player.x
        dy = t.y - player.y
        d = math.hypot(dx, dy) or 1
        radius = t.detection_radius or t.size * FLEE_DETECTION_FACTOR
        if d < radius:
            step = t.flee_speed * FLEE_BASE_SPEED * self.speed_factor * dt
            t.velocity.x = (dx / d) * step
            t.velocity.y = (dy / d) * step
            t.x += t.velocity.x
            t.y += t.velocity.y
        else:
            t.velocity.x = 0.0
            t.velocity.y = 0.0

        t.x = max(t.size, min(self.width - t.size, t.x))
        t.y = max(t.size, min(self.height - t.size, t.y))
