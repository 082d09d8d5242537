"""
Determinism helpers.

Goals:
- Provide a seeded RNG stream for session layout (player start, targets, velocities)
- Provide a stable string -> seed hash so a replay code always maps to the same stream

Non-goals:
- Cryptographic security
- Statistical quality (this is a plain 32-bit LCG, kept for replay compatibility)

The stream is owned by exactly one session. Call order is part of the replay
contract: reordering any next() call changes every layout after it.
"""

from __future__ import annotations

import random
from typing import Optional

LCG_MULTIPLIER = 1664525
LCG_INCREMENT = 1013904223
LCG_MODULUS = 2 ** 32
FALLBACK_SEED_RANGE = 1_000_000


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str):
    # Replay codes are ASCII; astral characters still hash like a browser would.
    for ch in text:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp -= 0x10000
            yield 0xD800 + (cp >> 10)
            yield 0xDC00 + (cp & 0x3FF)
        else:
            yield cp


def fallback_seed() -> int:
    """Process-random seed for ad hoc sessions. The only non-deterministic path."""
    return random.randrange(FALLBACK_SEED_RANGE)


def hash_seed(code: Optional[str]) -> int:
    """
    Map a replay code (or any string) to a non-negative 32-bit seed.

    Accumulates `hash * 31 + char` with signed 32-bit wraparound, then takes abs().
    Empty/None input falls back to `fallback_seed()`.
    """
    if not code:
        return fallback_seed()
    h = 0
    for unit in _utf16_units(code):
        h = _to_int32((h << 5) - h + unit)
    return abs(h)


class SeededPRNG:
    """Linear congruential generator producing floats in [0, 1)."""

    def __init__(self, seed: Optional[int] = None):
        self.state = 0
        if seed is not None:
            self.seed(seed)

    def seed(self, n: int) -> None:
        """Set the state to `n` without consuming a value."""
        self.state = int(n) % LCG_MODULUS

    def next(self) -> float:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state / LCG_MODULUS

    @classmethod
    def from_code(cls, code: Optional[str]) -> "SeededPRNG":
        return cls(hash_seed(code))
