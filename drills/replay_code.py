"""
Replay codes: a compact, numbers-only encoding of a SessionConfig.

Wire formats (newer decoders accept every older format):

    legacy  14 payload digits                               (no checksum)
    v1      14 payload digits + "1" + checksum digit        (16 digits)
    v2      19 payload digits + "2" + checksum digit        (21 digits)

Payload digit order:

    0-4   target counts: stationary, moving, flee, bonus, hazard (0-9 each)
    5     target size        6  player speed (1-5)   7  trail
    8     input method       9  input buffer / 50ms  10 boundaries
    11-13 feedback audio / visual / haptic
    14-18 (v2) calm mode, dwell mode, dwell time step, deadzone step, sensitivity

The checksum is the digit sum of the payload mod 10. A cosmetic `COLOR-SHAPE-`
prefix may precede the digits; it is ignored for decoding but stays part of the
seed, so a prefixed code reproduces its own layout.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Dict, Optional

from config import PREFIX_COLORS, PREFIX_SHAPES, REPLAY_CODE_VERSION
from drills.session_config import (
    Boundaries,
    Feedback,
    InputMethod,
    JoystickSensitivity,
    PlayerTrail,
    SessionConfig,
    TargetCounts,
    TargetSize,
)

logger = logging.getLogger(__name__)


class CodeVersion(str, Enum):
    LEGACY = "legacy"
    V1 = "v1"
    V2 = "v2"


class InvalidReplayCode(ValueError):
    """Raised when a replay code cannot be decoded. Carries a short reason."""

    def __init__(self, code: str, reason: str):
        super().__init__(f"invalid replay code {code!r}: {reason}")
        self.code = code
        self.reason = reason


BASE_PAYLOAD_DIGITS = 14
V2_PAYLOAD_DIGITS = 19
VERSION_DIGITS = {CodeVersion.V1: "1", CodeVersion.V2: "2"}
LENGTH_TO_VERSION = {
    V2_PAYLOAD_DIGITS + 2: CodeVersion.V2,
    BASE_PAYLOAD_DIGITS + 2: CodeVersion.V1,
    BASE_PAYLOAD_DIGITS: CodeVersion.LEGACY,
}

SIZE_TABLE = [TargetSize.SMALL, TargetSize.MEDIUM, TargetSize.LARGE, TargetSize.EXTRA_LARGE]
BOUNDARY_TABLE = [Boundaries.NONE, Boundaries.VISUAL, Boundaries.HARD]
SENSITIVITY_TABLE = [JoystickSensitivity.LOW, JoystickSensitivity.MEDIUM, JoystickSensitivity.HIGH]
TRAIL_TABLES = {
    CodeVersion.LEGACY: [PlayerTrail.SHORT, PlayerTrail.LONG],
    CodeVersion.V1: [PlayerTrail.SHORT, PlayerTrail.LONG],
    CodeVersion.V2: [PlayerTrail.SHORT, PlayerTrail.LONG, PlayerTrail.OFF],
}
INPUT_TABLES = {
    CodeVersion.LEGACY: [InputMethod.DISCRETE, InputMethod.CONTINUOUS, InputMethod.MOUSE],
    CodeVersion.V1: [InputMethod.DISCRETE, InputMethod.CONTINUOUS, InputMethod.MOUSE],
    CodeVersion.V2: [
        InputMethod.DISCRETE,
        InputMethod.CONTINUOUS,
        InputMethod.MOUSE,
        InputMethod.JOYSTICK,
        InputMethod.CURSOR,
    ],
}

INPUT_BUFFER_STEP_MS = 50
DWELL_TIME_BASE_MS = 500
DWELL_TIME_STEP_MS = 500
DEADZONE_BASE_PCT = 5
DEADZONE_STEP_PCT = 5
MAX_STEP = 5

# Values carried only by v2 payloads.
V2_DEFAULTS = {
    "calm_mode": False,
    "dwell_mode": False,
    "dwell_time": 1000,
    "joystick_deadzone": 15,
    "joystick_sensitivity": JoystickSensitivity.MEDIUM,
}

_DIGITS_RE = re.compile(r"[0-9]+")


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))


def _round_half_up(x: float) -> int:
    return int(x + 0.5) if x >= 0 else -int(-x + 0.5)


def _index_or_default(table: list, value, default: int = 0) -> int:
    try:
        return table.index(value)
    except ValueError:
        return default


def _resolve_version(version) -> CodeVersion:
    if version is None:
        return CodeVersion(REPLAY_CODE_VERSION)
    return CodeVersion(version)


def checksum(payload: str) -> str:
    """Single-digit checksum: digit sum of the payload mod 10."""
    return str(sum(int(ch) for ch in payload) % 10)


def encode_payload(config: SessionConfig, version=CodeVersion.V2) -> str:
    version = _resolve_version(version)
    counts = config.target_counts
    digits = [
        _clamp(int(counts.stationary), 0, 9),
        _clamp(int(counts.moving), 0, 9),
        _clamp(int(counts.flee), 0, 9),
        _clamp(int(counts.bonus), 0, 9),
        _clamp(int(counts.hazard), 0, 9),
        _index_or_default(SIZE_TABLE, config.target_size, default=1),
        _clamp(int(config.player_speed), 1, 5),
        _index_or_default(TRAIL_TABLES[version], config.player_trail),
        _index_or_default(INPUT_TABLES[version], config.input_method),
        _clamp(int(config.input_buffer) // INPUT_BUFFER_STEP_MS, 0, 9),
        _index_or_default(BOUNDARY_TABLE, config.boundaries),
        1 if config.feedback.audio else 0,
        1 if config.feedback.visual else 0,
        1 if config.feedback.haptic else 0,
    ]
    if version is CodeVersion.V2:
        digits += [
            1 if config.calm_mode else 0,
            1 if config.dwell_mode else 0,
            _clamp(_round_half_up((int(config.dwell_time) - DWELL_TIME_BASE_MS) / DWELL_TIME_STEP_MS), 0, MAX_STEP),
            _clamp(_round_half_up((int(config.joystick_deadzone) - DEADZONE_BASE_PCT) / DEADZONE_STEP_PCT), 0, MAX_STEP),
            _index_or_default(SENSITIVITY_TABLE, config.joystick_sensitivity, default=1),
        ]
    return "".join(str(d) for d in digits)


def encode(config: SessionConfig, version=None) -> str:
    """
    Encode a config into a replay code (v2 unless told otherwise).

    Counts are truncated to one digit; values a version cannot carry (e.g. trail "off"
    in v1) are written as that field's first table entry.
    """
    version = _resolve_version(version)
    payload = encode_payload(config, version)
    if version is CodeVersion.LEGACY:
        code = payload
    else:
        code = payload + VERSION_DIGITS[version] + checksum(payload)
    logger.debug("encoded %s code %s", version.value, code)
    return code


def strip_prefix(code: str) -> str:
    """Return the digit part of `COLOR-SHAPE-digits` (or the input if unprefixed)."""
    s = (code or "").strip()
    if "-" not in s:
        return s
    parts = s.split("-")
    if len(parts) != 3:
        raise InvalidReplayCode(code, "expected COLOR-SHAPE-digits")
    return parts[2]


def prefixed(code: str, color: str, shape: str) -> str:
    return f"{color.upper()}-{shape.upper()}-{strip_prefix(code)}"


def generate_prefix(rng) -> str:
    """Pick a cosmetic `COLOR-SHAPE` pair using the caller's RNG (random.Random-like)."""
    return f"{rng.choice(PREFIX_COLORS)}-{rng.choice(PREFIX_SHAPES)}"


def detect_version(digits: str) -> Optional[CodeVersion]:
    return LENGTH_TO_VERSION.get(len(digits))


def _strict(code: str, table: list, digit: int, name: str):
    if digit >= len(table):
        raise InvalidReplayCode(code, f"{name} digit {digit} out of range")
    return table[digit]


def _strict_flag(code: str, digit: int, name: str) -> bool:
    if digit > 1:
        raise InvalidReplayCode(code, f"{name} digit {digit} is not 0/1")
    return digit == 1


def _decode_base(code: str, payload: str, version: CodeVersion) -> Dict[str, object]:
    d = [int(ch) for ch in payload]
    counts = TargetCounts(stationary=d[0], moving=d[1], flee=d[2], bonus=d[3], hazard=d[4])

    if version is CodeVersion.LEGACY:
        # Permissive: legacy codes carry no checksum, so unknown digits fall back to defaults.
        speed = d[6] or 3
        return {
            "target_counts": counts,
            "target_size": SIZE_TABLE[d[5]] if d[5] < len(SIZE_TABLE) else TargetSize.MEDIUM,
            "player_speed": min(speed, 5),
            "player_trail": TRAIL_TABLES[version][d[7]] if d[7] < 2 else PlayerTrail.SHORT,
            "input_method": INPUT_TABLES[version][d[8]] if d[8] < 3 else InputMethod.DISCRETE,
            "input_buffer": d[9] * INPUT_BUFFER_STEP_MS,
            "boundaries": BOUNDARY_TABLE[d[10]] if d[10] < 3 else Boundaries.NONE,
            "feedback": Feedback(audio=d[11] == 1, visual=d[12] == 1, haptic=d[13] == 1),
        }

    if not 1 <= d[6] <= 5:
        raise InvalidReplayCode(code, f"player speed digit {d[6]} out of range")
    return {
        "target_counts": counts,
        "target_size": _strict(code, SIZE_TABLE, d[5], "size"),
        "player_speed": d[6],
        "player_trail": _strict(code, TRAIL_TABLES[version], d[7], "trail"),
        "input_method": _strict(code, INPUT_TABLES[version], d[8], "input method"),
        "input_buffer": d[9] * INPUT_BUFFER_STEP_MS,
        "boundaries": _strict(code, BOUNDARY_TABLE, d[10], "boundaries"),
        "feedback": Feedback(
            audio=_strict_flag(code, d[11], "audio"),
            visual=_strict_flag(code, d[12], "visual"),
            haptic=_strict_flag(code, d[13], "haptic"),
        ),
    }


def _decode_v2_extras(code: str, payload: str) -> Dict[str, object]:
    d = [int(ch) for ch in payload[BASE_PAYLOAD_DIGITS:]]
    if d[2] > MAX_STEP or d[3] > MAX_STEP:
        raise InvalidReplayCode(code, "dwell time / deadzone step out of range")
    return {
        "calm_mode": _strict_flag(code, d[0], "calm mode"),
        "dwell_mode": _strict_flag(code, d[1], "dwell mode"),
        "dwell_time": DWELL_TIME_BASE_MS + d[2] * DWELL_TIME_STEP_MS,
        "joystick_deadzone": DEADZONE_BASE_PCT + d[3] * DEADZONE_STEP_PCT,
        "joystick_sensitivity": _strict(code, SENSITIVITY_TABLE, d[4], "sensitivity"),
    }


def parse(code: str) -> SessionConfig:
    """
    Decode a replay code, raising InvalidReplayCode on any problem.

    Decoding is all-or-nothing: a bad length, a non-digit character, a wrong version
    digit or a checksum mismatch rejects the whole code.
    """
    if not isinstance(code, str) or not code.strip():
        raise InvalidReplayCode(str(code), "empty code")
    digits = strip_prefix(code)
    if not _DIGITS_RE.fullmatch(digits):
        raise InvalidReplayCode(code, "payload must be digits only")

    version = detect_version(digits)
    if version is None:
        raise InvalidReplayCode(code, f"unexpected length {len(digits)}")

    if version is CodeVersion.LEGACY:
        payload = digits
    else:
        payload, version_digit, check_digit = digits[:-2], digits[-2], digits[-1]
        if version_digit != VERSION_DIGITS[version]:
            raise InvalidReplayCode(code, f"version digit {version_digit} does not match length")
        if checksum(payload) != check_digit:
            raise InvalidReplayCode(code, "checksum mismatch")

    fields = _decode_base(code, payload, version)
    if version is CodeVersion.V2:
        fields.update(_decode_v2_extras(code, payload))
    else:
        fields.update(V2_DEFAULTS)

    logger.debug("decoded %s code %s", version.value, code)
    return SessionConfig(seed=code.strip(), **fields)


def decode(code: str) -> Optional[SessionConfig]:
    """Decode a replay code, returning None when it is invalid."""
    try:
        return parse(code)
    except InvalidReplayCode as e:
        logger.info("%s", e)
        return None


def is_valid(code: str) -> bool:
    return decode(code) is not None
