"""
Session configuration model.

A SessionConfig is everything a replay code carries. The dict form uses the same
camelCase keys the persisted session records use, so history files stay readable
by older builds.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional

from config import TARGET_SIZES, DEFAULT_TARGET_SIZE


class TargetKind(str, Enum):
    STATIC = "static"
    MOVING = "moving"
    FLEE = "flee"
    BONUS = "bonus"
    HAZARD = "hazard"


CORE_KINDS = frozenset({TargetKind.STATIC, TargetKind.MOVING, TargetKind.FLEE})


class TargetSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra-large"

    @property
    def pixels(self) -> int:
        return TARGET_SIZES.get(self.value, DEFAULT_TARGET_SIZE)


class PlayerTrail(str, Enum):
    SHORT = "short"
    LONG = "long"
    OFF = "off"


class InputMethod(str, Enum):
    DISCRETE = "discrete"
    CONTINUOUS = "continuous"
    MOUSE = "mouse"
    JOYSTICK = "joystick"
    CURSOR = "cursor"


class Boundaries(str, Enum):
    NONE = "none"
    VISUAL = "visual"
    HARD = "hard"


class JoystickSensitivity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class TargetCounts:
    stationary: int = 5
    moving: int = 0
    flee: int = 0
    bonus: int = 0
    hazard: int = 0

    # Placement order; "stationary" targets are created as static ones.
    ORDER = (
        ("stationary", TargetKind.STATIC),
        ("moving", TargetKind.MOVING),
        ("flee", TargetKind.FLEE),
        ("bonus", TargetKind.BONUS),
        ("hazard", TargetKind.HAZARD),
    )

    def core(self) -> int:
        return self.stationary + self.moving + self.flee

    def total(self) -> int:
        return self.core() + self.bonus + self.hazard

    def to_dict(self) -> Dict[str, int]:
        return {name: int(getattr(self, name)) for name, _ in self.ORDER}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TargetCounts":
        return cls(**{name: int(d.get(name) or 0) for name, _ in cls.ORDER})


@dataclass
class Feedback:
    audio: bool = True
    visual: bool = True
    haptic: bool = False

    def to_dict(self) -> Dict[str, bool]:
        return {"audio": self.audio, "visual": self.visual, "haptic": self.haptic}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Feedback":
        return cls(
            audio=bool(d.get("audio", True)),
            visual=bool(d.get("visual", True)),
            haptic=bool(d.get("haptic", False)),
        )


@dataclass
class SessionConfig:
    """Authoritative session settings (authored in a form or decoded from a code)."""

    target_counts: TargetCounts = field(default_factory=TargetCounts)
    target_size: TargetSize = TargetSize.MEDIUM
    player_speed: int = 3
    player_trail: PlayerTrail = PlayerTrail.SHORT
    input_method: InputMethod = InputMethod.DISCRETE
    input_buffer: int = 300  # ms
    boundaries: Boundaries = Boundaries.NONE
    feedback: Feedback = field(default_factory=Feedback)
    calm_mode: bool = False
    dwell_mode: bool = False
    dwell_time: int = 1000  # ms
    joystick_deadzone: int = 15  # percent
    joystick_sensitivity: JoystickSensitivity = JoystickSensitivity.MEDIUM
    seed: Optional[str] = None

    @property
    def target_pixels(self) -> int:
        return TargetSize(self.target_size).pixels

    def core_count(self) -> int:
        return self.target_counts.core()

    def total_count(self) -> int:
        return self.target_counts.total()

    def with_seed(self, seed: Optional[str]) -> "SessionConfig":
        return replace(self, seed=seed)

    def same_layout(self, other: "SessionConfig") -> bool:
        """True when both configs carry identical settings, ignoring the seed."""
        a = self.to_dict()
        b = other.to_dict()
        a.pop("seed", None)
        b.pop("seed", None)
        return a == b

    def to_dict(self) -> Dict[str, Any]:
        return {
            "targetCounts": self.target_counts.to_dict(),
            "targetSize": TargetSize(self.target_size).value,
            "playerSpeed": int(self.player_speed),
            "playerTrail": PlayerTrail(self.player_trail).value,
            "inputMethod": InputMethod(self.input_method).value,
            "inputBuffer": int(self.input_buffer),
            "boundaries": Boundaries(self.boundaries).value,
            "feedback": self.feedback.to_dict(),
            "calmMode": bool(self.calm_mode),
            "dwellMode": bool(self.dwell_mode),
            "dwellTime": int(self.dwell_time),
            "joystickDeadzone": int(self.joystick_deadzone),
            "joystickSensitivity": JoystickSensitivity(self.joystick_sensitivity).value,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SessionConfig":
        defaults = cls()
        return cls(
            target_counts=TargetCounts.from_dict(d.get("targetCounts") or {}),
            target_size=TargetSize(d.get("targetSize", defaults.target_size.value)),
            player_speed=int(d.get("playerSpeed", defaults.player_speed)),
            player_trail=PlayerTrail(d.get("playerTrail", defaults.player_trail.value)),
            input_method=InputMethod(d.get("inputMethod", defaults.input_method.value)),
            input_buffer=int(d.get("inputBuffer", defaults.input_buffer)),
            boundaries=Boundaries(d.get("boundaries", defaults.boundaries.value)),
            feedback=Feedback.from_dict(d.get("feedback") or {}),
            calm_mode=bool(d.get("calmMode", False)),
            dwell_mode=bool(d.get("dwellMode", False)),
            dwell_time=int(d.get("dwellTime", defaults.dwell_time)),
            joystick_deadzone=int(d.get("joystickDeadzone", defaults.joystick_deadzone)),
            joystick_sensitivity=JoystickSensitivity(
                d.get("joystickSensitivity", defaults.joystick_sensitivity.value)
            ),
            seed=d.get("seed"),
        )
