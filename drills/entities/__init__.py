"""
Session entities package.
"""
from .player import Player, TrailPoint
from .target import (
    Target, StaticTarget, MovingTarget, FleeTarget, BonusTarget, HazardTarget,
    Velocity, TARGET_CLASSES, core_remaining,
)
