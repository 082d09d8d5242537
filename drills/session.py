"""
Session: one explicitly owned practice run.

Ties together placement, movement, target motion, collision and timing. A host loop
(pygame window, headless runner, tests) owns the Session, feeds it input and calls
`tick(dt_ms)` once per frame:

    input -> movement -> target motion -> collision -> timer

State machine: READY -> PLAYING <-> PAUSED -> COMPLETED (terminal). The timer starts on
the first movement input in READY, or on an explicit `begin()`.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional

from config import FIELD_WIDTH, FIELD_HEIGHT, RESIZE_COMPRESS_RATIO, RESIZE_TARGET_MARGIN
from drills import replay_code
from drills.entities.player import Player
from drills.entities.target import core_remaining
from drills.session_config import InputMethod, SessionConfig
from drills.sim.contracts import SessionPhase, SessionRecord, SessionState
from drills.sim.timebase import now_ms
from drills.systems.collision import CollisionEngine
from drills.systems.motion import TargetMotionSystem
from drills.systems.movement import (
    DIRECTIONS, KEY_DIRECTIONS, MovementSystem, cardinal_direction, joystick_vector,
)
from drills.systems.placement import TargetPlacementEngine
from drills.systems.timing import SessionTimer

logger = logging.getLogger(__name__)

CompletionListener = Callable[[SessionRecord], None]


class Session:
    """A single seeded session and its live state."""

    def __init__(
        self,
        config: SessionConfig,
        width: float = FIELD_WIDTH,
        height: float = FIELD_HEIGHT,
        clock: Optional[Callable[[], int]] = None,
    ):
        if not config.seed:
            config = config.with_seed(replay_code.encode(config))
            logger.info("generated replay code %s", config.seed)
        self.config = config
        self.code = config.seed
        self.width = width
        self.height = height
        self.clock = clock or now_ms

        self.state = SessionState(seed=self.code)
        self.phase = SessionPhase.READY
        self.player = Player()

        self.placement = TargetPlacementEngine(width, height)
        self.targets = self.placement.place(config, self.player, self.state, created_at=self.clock())

        self.movement = MovementSystem(width, height)
        self.motion = TargetMotionSystem(width, height, calm_mode=config.calm_mode)
        self.collision = CollisionEngine()
        self.timer = SessionTimer(self.state, clock=self.clock)

        self.record: Optional[SessionRecord] = None
        self._listeners: list[CompletionListener] = []

    @classmethod
    def from_config(cls, config: SessionConfig, width: float = FIELD_WIDTH, height: float = FIELD_HEIGHT, clock=None) -> "Session":
        """New session from an authored config (a code is generated when the config has none)."""
        return cls(config, width, height, clock=clock)

    @classmethod
    def from_code(cls, code: str, width: float = FIELD_WIDTH, height: float = FIELD_HEIGHT, clock=None) -> "Session":
        """Replay a shared code. Raises InvalidReplayCode rather than starting from a bad code."""
        config = replay_code.parse(code)
        return cls(config, width, height, clock=clock)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def add_completion_listener(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    @property
    def is_active(self) -> bool:
        return self.phase in (SessionPhase.READY, SessionPhase.PLAYING)

    def begin(self) -> bool:
        """Start the clock (READY -> PLAYING)."""
        if self.phase is not SessionPhase.READY:
            return False
        self.timer.begin()
        self.phase = SessionPhase.PLAYING
        return True

    def pause(self) -> bool:
        if self.phase is not SessionPhase.PLAYING:
            return False
        self.timer.pause()
        self.movement.clear()
        self.phase = SessionPhase.PAUSED
        return True

    def resume(self) -> bool:
        if self.phase is not SessionPhase.PAUSED:
            return False
        self.timer.resume()
        self.phase = SessionPhase.PLAYING
        return True

    def toggle_pause(self) -> bool:
        if self.phase is SessionPhase.PLAYING:
            return self.pause()
        if self.phase is SessionPhase.PAUSED:
            return self.resume()
        return False

    def resize(self, width: float, height: float) -> int:
        """
        Adopt new field bounds without regenerating the layout.

        Live targets are pulled back inside the field (keeping `size + 10` px clear of
        the edges); a side shrinking below 70% also compresses positions toward the
        top-left margin so the layout keeps its shape. The player is clamped last.
        Returns how many targets moved.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"field must have positive size, got {width}x{height}")
        old_width, old_height = self.width, self.height
        self.width, self.height = width, height
        self.placement.width, self.placement.height = width, height
        self.movement.resize(width, height)
        self.motion.resize(width, height)

        compress = width < old_width * RESIZE_COMPRESS_RATIO or height < old_height * RESIZE_COMPRESS_RATIO
        repositioned = 0
        for t in self.targets:
            old = (t.x, t.y)
            margin = t.size + RESIZE_TARGET_MARGIN
            t.x = max(margin, min(width - margin, t.x))
            t.y = max(margin, min(height - margin, t.y))
            if compress and old_width > 2 * margin and old_height > 2 * margin:
                t.x = margin + (t.x - margin) * (width - 2 * margin) / (old_width - 2 * margin)
                t.y = margin + (t.y - margin) * (height - 2 * margin) / (old_height - 2 * margin)
            if (t.x, t.y) != old:
                repositioned += 1

        self.player.clamp_to(width, height)
        if self.phase is not SessionPhase.PLAYING:
            self.player.clear_trail()
        if repositioned:
            logger.debug("resize to %sx%s moved %d target(s)", width, height, repositioned)
        return repositioned

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def _input_started(self) -> bool:
        if self.phase is SessionPhase.READY:
            return self.begin()
        return self.phase is SessionPhase.PLAYING

    def press(self, direction: str) -> bool:
        """
        Direction key down ("up"/"left"/... or a key name like "ArrowUp"/"KeyW").
        The first one in READY starts the timer.
        """
        direction = KEY_DIRECTIONS.get(direction, direction)
        if direction not in DIRECTIONS:
            return False
        if not self.is_active or not self._input_started():
            return False
        method = InputMethod(self.config.input_method)
        if method is InputMethod.CONTINUOUS:
            self.player.set_direction(direction)
        elif method is InputMethod.DISCRETE:
            self.movement.press(direction)
        return True

    def set_direction(self, direction: Optional[str]) -> bool:
        """Latch (or with None, stop) the continuous-mode direction."""
        if InputMethod(self.config.input_method) is not InputMethod.CONTINUOUS:
            return False
        if direction is None:
            if not self.is_active:
                return False
            self.player.set_direction(None)
            return True
        return self.press(direction)

    def release(self, direction: str) -> None:
        self.movement.release(KEY_DIRECTIONS.get(direction, direction))

    def click(self, x: float, y: float) -> bool:
        """Click-to-move (mouse and cursor input methods only)."""
        if InputMethod(self.config.input_method) not in (InputMethod.MOUSE, InputMethod.CURSOR):
            return False
        if not self.is_active or not self._input_started():
            return False
        self.player.set_move_target(x, y)
        return True

    def set_joystick(self, x: float, y: float) -> Optional[str]:
        """
        Feed raw stick axes. Returns the cardinal direction being pushed (for
        announcements), or None while the stick rests inside the deadzone.
        """
        if InputMethod(self.config.input_method) is not InputMethod.JOYSTICK or not self.is_active:
            return None
        self.movement.set_stick(x, y)
        dir_x, dir_y, intensity = joystick_vector(
            x, y, self.config.joystick_deadzone, self.config.joystick_sensitivity
        )
        if intensity <= 0:
            return None
        self._input_started()
        return cardinal_direction(dir_x, dir_y)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------
    def tick(self, dt_ms: float) -> list:
        """Advance one frame. Returns the collision/completion events for this tick."""
        if self.phase is not SessionPhase.PLAYING:
            return []

        self.movement.update(self.player, self.config, self.clock())
        self.motion.update(self.targets, self.player, dt_ms / 1000.0)
        events = self.collision.process(
            self.targets, self.player, self.state, self.config, tick_ms=dt_ms
        )
        if self.state.completed:
            self._complete()
        return events

    def _complete(self) -> None:
        self.timer.finalize()
        self.phase = SessionPhase.COMPLETED
        self.record = SessionRecord(
            config=self.config,
            outcome=replace(self.state),
            code=self.code,
        )
        logger.info(
            "session %s completed in %sms (%d collected, %d hazards)",
            self.code, self.state.total_time, self.state.targets_collected, self.state.hazard_targets_hit,
        )
        for listener in self._listeners:
            try:
                listener(self.record)
            except Exception:
                # A failing collaborator (e.g. history write) must not undo the completion.
                logger.exception("completion listener failed for session %s", self.code)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def elapsed_ms(self) -> float:
        return self.timer.elapsed_ms()

    def display_time(self) -> str:
        return self.timer.display()

    def progress(self) -> float:
        """Core-target completion percentage."""
        total = self.state.total_core_targets
        if total <= 0:
            return 100.0
        collected = total - core_remaining(self.targets)
        return collected / total * 100.0

    def snapshot(self) -> dict:
        return {
            "phase": self.phase.value,
            "code": self.code,
            "player": self.player.to_dict(),
            "targets": [t.to_dict() for t in self.targets],
            "state": self.state.to_dict(),
            "elapsed": self.elapsed_ms(),
            "progress": self.progress(),
        }
