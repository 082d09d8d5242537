"""
Collision system: player contact with targets, per-kind effects, dwell mode.
"""
from __future__ import annotations

import logging
import math

from config import DWELL_TICK_MS
from drills.entities.player import Player
from drills.entities.target import Target, BonusTarget, HazardTarget, core_remaining
from drills.session_config import SessionConfig, TargetKind
from drills.sim.contracts import SessionState

logger = logging.getLogger(__name__)

DWELL_TICK_SOUND_MS = 200


def contact_distance(player: Player, target: Target) -> float:
    """Distance from the target centre to the closest point of the player's square hitbox."""
    closest_x = max(player.x - player.size, min(target.x, player.x + player.size))
    closest_y = max(player.y - player.size, min(target.y, player.y + player.size))
    return math.hypot(target.x - closest_x, target.y - closest_y)


def is_touching(player: Player, target: Target) -> bool:
    return contact_distance(player, target) < target.radius


class CollisionEngine:
    """Detects contacts and resolves them into session bookkeeping + events."""

    def __init__(self):
        # target_id -> accumulated contact ms
        self.dwell_progress: dict[int, float] = {}

    def reset(self) -> None:
        self.dwell_progress.clear()

    def process(
        self,
        targets: list,
        player: Player,
        state: SessionState,
        config: SessionConfig,
        tick_ms: float = DWELL_TICK_MS,
    ) -> list:
        """
        Run one collision pass. Mutates `targets` and `state` in place.
        Returns list of events (collections, penalties, dwell updates, completion).
        """
        events = []
        dwell_time = config.dwell_time or 1000

        # Walk backwards so removals don't disturb the remaining indices.
        for target in list(reversed(targets)):
            if state.completed:
                break

            if not is_touching(player, target):
                if self.dwell_progress.pop(target.target_id, None) is not None:
                    target.dwell_progress = 0.0
                    events.append({"type": "dwell_reset", "target": target.target_id})
                continue

            if target.kind is TargetKind.HAZARD:
                events.extend(self.hit_hazard(targets, target, state))
                continue

            # Fleeing targets are hard enough to touch; never make the player dwell on them.
            if target.kind is TargetKind.FLEE or not config.dwell_mode:
                events.extend(self.collect(targets, target, state))
                continue

            before = self.dwell_progress.get(target.target_id, 0.0)
            after = before + tick_ms
            if after >= dwell_time:
                self.dwell_progress.pop(target.target_id, None)
                target.dwell_progress = 0.0
                events.extend(self.collect(targets, target, state))
            else:
                self.dwell_progress[target.target_id] = after
                target.dwell_progress = after / dwell_time
                events.append({
                    "type": "dwell_progress",
                    "target": target.target_id,
                    "progress": target.dwell_progress,
                })
                if config.feedback.audio and int(after // DWELL_TICK_SOUND_MS) > int(before // DWELL_TICK_SOUND_MS):
                    events.append({"type": "dwell_tick", "target": target.target_id})

        return events

    def collect(self, targets: list, target: Target, state: SessionState) -> list:
        """Remove a collectible target and credit it."""
        targets.remove(target)
        self.dwell_progress.pop(target.target_id, None)
        events = []

        if isinstance(target, BonusTarget):
            state.time_adjustments -= target.time_bonus
            state.bonus_targets_collected += 1
            state.targets_collected += 1
            events.append({
                "type": "bonus_collected",
                "target": target.target_id,
                "time_bonus": target.time_bonus,
            })
        else:
            state.core_targets_collected += 1
            state.targets_collected += 1
            events.append({
                "type": "target_collected",
                "target": target.target_id,
                "kind": target.kind.value,
                "remaining": core_remaining(targets),
            })

        events.extend(self._check_completion(targets, state))
        return events

    def hit_hazard(self, targets: list, target: HazardTarget, state: SessionState) -> list:
        """Apply a hazard's time penalty and remove it after the single contact."""
        targets.remove(target)
        self.dwell_progress.pop(target.target_id, None)
        state.time_adjustments += target.time_penalty
        state.hazard_targets_hit += 1
        logger.debug("hazard %s hit, +%ss", target.target_id, target.time_penalty)
        events = [{
            "type": "hazard_hit",
            "target": target.target_id,
            "time_penalty": target.time_penalty,
        }]
        events.extend(self._check_completion(targets, state))
        return events

    def _check_completion(self, targets: list, state: SessionState) -> list:
        if core_remaining(targets) > 0:
            return []
        state.completed = True
        return [{"type": "session_completed"}]
