"""
Headless autopilot: steers a Session toward the nearest collectible target.

Used by the `play` CLI command and QA smoke runs to drive a replay code to completion
without a window. It only goes through the public Session input surface, so it
exercises the same paths a real player does.
"""
from __future__ import annotations

import math
from typing import Optional

from drills.entities.target import HazardTarget
from drills.session_config import InputMethod

AXIS_DIRECTIONS = (("left", "right"), ("up", "down"))


class Autopilot:
    """Chooses the nearest non-hazard target and feeds input toward it."""

    def __init__(self, session):
        self.session = session
        self.goal = None

    def _pick_goal(self):
        player = self.session.player
        best = None
        best_dist = float("inf")
        for t in self.session.targets:
            if isinstance(t, HazardTarget):
                continue
            d = math.hypot(t.x - player.x, t.y - player.y)
            if d < best_dist:
                best = t
                best_dist = d
        return best

    def steer(self) -> Optional[str]:
        """Update input for this tick. Returns the direction/goal label used, if any."""
        s = self.session
        self.goal = self._pick_goal()
        if self.goal is None:
            return None

        dx = self.goal.x - s.player.x
        dy = self.goal.y - s.player.y
        method = InputMethod(s.config.input_method)

        if method in (InputMethod.MOUSE, InputMethod.CURSOR):
            s.click(self.goal.x, self.goal.y)
            return f"goal:{self.goal.target_id}"

        if method is InputMethod.JOYSTICK:
            d = math.hypot(dx, dy) or 1
            return s.set_joystick(dx / d, dy / d)

        if method is InputMethod.CONTINUOUS:
            if abs(dx) >= abs(dy):
                direction = "right" if dx > 0 else "left"
            else:
                direction = "down" if dy > 0 else "up"
            s.press(direction)
            return direction

        # Discrete: hold one key per axis while that axis is off.
        step = s.config.player_speed * 2
        held = []
        for (neg, pos), delta in zip(AXIS_DIRECTIONS, (dx, dy)):
            s.release(neg)
            s.release(pos)
            if abs(delta) > step / 2:
                direction = pos if delta > 0 else neg
                s.press(direction)
                held.append(direction)
        return "+".join(held) or None
