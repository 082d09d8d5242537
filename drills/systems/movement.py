"""
Player movement for each input method.

Steps are per tick (playerSpeed * 2 px), so speed is tied to the frame rate:
- discrete:   move while a direction is held
- continuous: keep moving in the last chosen direction
- mouse / cursor: click-to-move, snapping once within one step
- joystick:   analog vector with radial deadzone and a sensitivity curve
"""

from __future__ import annotations

import math
from typing import Optional

from config import PLAYER_STEP_FACTOR, TRAIL_LENGTHS, TRAIL_FADE_MS
from drills.entities.player import Player
from drills.session_config import InputMethod, JoystickSensitivity, PlayerTrail, SessionConfig

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

KEY_DIRECTIONS = {
    "ArrowUp": "up",
    "ArrowDown": "down",
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "KeyW": "up",
    "KeyS": "down",
    "KeyA": "left",
    "KeyD": "right",
}

SENSITIVITY_CURVES = {
    JoystickSensitivity.LOW: lambda v: v ** 2,
    JoystickSensitivity.MEDIUM: lambda v: v,
    JoystickSensitivity.HIGH: lambda v: v ** 0.5,
}


def apply_deadzone(x: float, y: float, deadzone: float) -> tuple:
    """Zero out small deflections and rescale the rest so output starts at 0."""
    magnitude = math.hypot(x, y)
    if magnitude < deadzone or magnitude == 0:
        return 0.0, 0.0
    scaled = (magnitude - deadzone) / (1 - deadzone)
    scale = scaled / magnitude
    return x * scale, y * scale


def joystick_vector(raw_x: float, raw_y: float, deadzone_pct: int, sensitivity) -> tuple:
    """
    Turn raw stick axes into (dir_x, dir_y, intensity).
    intensity is 0 inside the deadzone.
    """
    x, y = apply_deadzone(raw_x, raw_y, deadzone_pct / 100.0)
    magnitude = min(1.0, math.hypot(x, y))
    if magnitude <= 0:
        return 0.0, 0.0, 0.0
    curve = SENSITIVITY_CURVES.get(JoystickSensitivity(sensitivity), SENSITIVITY_CURVES[JoystickSensitivity.MEDIUM])
    return x / magnitude, y / magnitude, curve(magnitude)


def cardinal_direction(dx: float, dy: float) -> Optional[str]:
    """Nearest of up/down/left/right for a vector (screen coordinates, y down)."""
    if dx == 0 and dy == 0:
        return None
    deg = math.degrees(math.atan2(dy, dx))
    if -45 <= deg < 45:
        return "right"
    if 45 <= deg < 135:
        return "down"
    if -135 <= deg < -45:
        return "up"
    return "left"


class MovementSystem:
    """Moves the player one tick according to the session's input method."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.held: set = set()
        self.stick = (0.0, 0.0)

    def resize(self, width: float, height: float):
        self.width = width
        self.height = height

    def press(self, direction: str) -> None:
        if direction in DIRECTIONS:
            self.held.add(direction)

    def release(self, direction: str) -> None:
        self.held.discard(direction)

    def set_stick(self, x: float, y: float) -> None:
        self.stick = (float(x), float(y))

    def clear(self) -> None:
        self.held.clear()
        self.stick = (0.0, 0.0)

    def update(self, player: Player, config: SessionConfig, now_ms: int) -> bool:
        """Apply one tick of movement. Returns True if the player moved."""
        old_x, old_y = player.x, player.y
        step = config.player_speed * PLAYER_STEP_FACTOR
        method = InputMethod(config.input_method)

        if method is InputMethod.DISCRETE:
            for direction in self.held:
                dx, dy = DIRECTIONS[direction]
                player.x += dx * step
                player.y += dy * step
        elif method is InputMethod.CONTINUOUS:
            if player.is_moving and player.continuous_direction in DIRECTIONS:
                dx, dy = DIRECTIONS[player.continuous_direction]
                player.x += dx * step
                player.y += dy * step
        elif method in (InputMethod.MOUSE, InputMethod.CURSOR):
            self._click_to_move(player, step)
        elif method is InputMethod.JOYSTICK:
            dir_x, dir_y, intensity = joystick_vector(
                self.stick[0], self.stick[1], config.joystick_deadzone, config.joystick_sensitivity
            )
            player.x += dir_x * step * intensity
            player.y += dir_y * step * intensity

        player.clamp_to(self.width, self.height)
        moved = (player.x, player.y) != (old_x, old_y)
        if moved:
            max_len = TRAIL_LENGTHS.get(PlayerTrail(config.player_trail).value, 0)
            player.add_to_trail(old_x, old_y, now_ms, max_len)
        player.prune_trail(now_ms, TRAIL_FADE_MS)
        return moved

    def _click_to_move(self, player: Player, step: float) -> None:
        if player.target_x is None or player.target_y is None:
            return
        dx = player.target_x - player.x
        dy = player.target_y - player.y
        distance = math.hypot(dx, dy)
        if distance < step:
            player.x = player.target_x
            player.y = player.target_y
            player.target_x = None
            player.target_y = None
        else:
            player.x += (dx / distance) * step
            player.y += (dy / distance) * step
