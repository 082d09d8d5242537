"""
Deterministic player + target placement.

Everything here draws from ONE SeededPRNG stream seeded from the replay code, in this
exact order (changing it breaks every shared code):

1. player x, player y                      (skipped when there is no seed)
2. per kind (stationary, moving, flee, bonus, hazard), per target:
   up to 50 (x, y) candidate pairs, plus one extra pair if all 50 were rejected,
   then velocity x, velocity y for moving targets
3. forced static targets for degenerate configs, same sampling as above
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from config import (
    PLACEMENT_MAX_ATTEMPTS,
    PLACEMENT_EDGE_MARGIN,
    PLAYER_CLEARANCE_FACTOR,
    TARGET_SPACING_FACTOR,
    OVERLAY_WIDTH,
    OVERLAY_HEIGHT,
)
from drills.entities.player import Player
from drills.entities.target import Target, Velocity, TARGET_CLASSES, core_remaining
from drills.session_config import SessionConfig, TargetCounts, TargetKind
from drills.sim.contracts import SessionState
from drills.sim.determinism import SeededPRNG, hash_seed

logger = logging.getLogger(__name__)


class TargetPlacementEngine:
    """Lays out the player start and the target set for one session."""

    def __init__(self, width: float, height: float):
        self.width = width
        self.height = height
        self.rng = SeededPRNG()
        self.targets: list[Target] = []
        self.fallback_placements = 0
        self._next_id = 1

    def _draw_point(self, margin: float) -> tuple:
        x = margin + self.rng.next() * (self.width - 2 * margin)
        y = margin + self.rng.next() * (self.height - 2 * margin)
        return x, y

    def _is_acceptable(self, x: float, y: float, size: float, margin: float, player: Player) -> bool:
        if math.hypot(x - player.x, y - player.y) < size * PLAYER_CLEARANCE_FACTOR:
            return False
        # Top-left corner is reserved for the timer overlay.
        if x < OVERLAY_WIDTH + margin and y < OVERLAY_HEIGHT + margin:
            return False
        min_gap = size * TARGET_SPACING_FACTOR
        for existing in self.targets:
            if math.hypot(x - existing.x, y - existing.y) < min_gap:
                return False
        return True

    def position_player(self, player: Player, seed: Optional[str]) -> None:
        """Seeded start position, or field centre when there is no seed."""
        if seed:
            margin = player.size + PLACEMENT_EDGE_MARGIN
            player.x, player.y = self._draw_point(margin)
            logger.debug("seeded player start (%.1f, %.1f) for %s", player.x, player.y, seed)
        else:
            player.x = self.width / 2
            player.y = self.height / 2
            logger.info("no seed; player starts at field centre")
        player.clear_trail()

    def create_target(self, kind: TargetKind, size: float, player: Player, created_at: int = 0) -> Target:
        """Rejection-sample a spot for one target and build it."""
        margin = size + PLACEMENT_EDGE_MARGIN
        for _ in range(PLACEMENT_MAX_ATTEMPTS):
            x, y = self._draw_point(margin)
            if self._is_acceptable(x, y, size, margin, player):
                return self._build(kind, x, y, size, created_at)

        # Give up on spacing rather than loop forever.
        x, y = self._draw_point(margin)
        self.fallback_placements += 1
        logger.info("placement fallback for %s target at (%.1f, %.1f)", kind.value, x, y)
        return self._build(kind, x, y, size, created_at)

    def _build(self, kind: TargetKind, x: float, y: float, size: float, created_at: int) -> Target:
        target_id = self._next_id
        self._next_id += 1
        common = dict(target_id=target_id, x=x, y=y, size=size, created_at=created_at)
        if kind is TargetKind.MOVING:
            vx = (self.rng.next() - 0.5) * 2
            vy = (self.rng.next() - 0.5) * 2
            common["velocity"] = Velocity(vx, vy)
        return TARGET_CLASSES[kind](**common)

    def place(
        self,
        config: SessionConfig,
        player: Player,
        state: Optional[SessionState] = None,
        created_at: int = 0,
    ) -> list[Target]:
        """
        Seed, position the player and generate every target for `config`.

        Returns the new target list (also kept on `self.targets`) and records the
        total/core counts on `state` when given.
        """
        seed = config.seed
        self.rng.seed(hash_seed(seed))
        self.targets = []
        self.fallback_placements = 0
        self._next_id = 1

        self.position_player(player, seed)

        size = config.target_pixels
        counts = config.target_counts
        for name, kind in TargetCounts.ORDER:
            for _ in range(max(0, int(getattr(counts, name)))):
                self.targets.append(self.create_target(kind, size, player, created_at))

        if not self.targets:
            # Nothing requested: one static target so the session is still winnable.
            self.targets.append(self.create_target(TargetKind.STATIC, size, player, created_at))
        elif core_remaining(self.targets) == 0:
            # Only bonus/hazard requested: they never complete a session on their own.
            self.targets.append(self.create_target(TargetKind.STATIC, size, player, created_at))

        player.size = size
        if state is not None:
            state.total_targets = len(self.targets)
            state.total_core_targets = core_remaining(self.targets)

        logger.debug(
            "placed %d targets (%d core, %d fallbacks) for seed %s",
            len(self.targets), core_remaining(self.targets), self.fallback_placements, seed,
        )
        return self.targets
