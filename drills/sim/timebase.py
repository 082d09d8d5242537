"""
Session clock.

Sessions read time through `now_ms()`. Headless runs and tests pin it with
`set_sim_now_ms()` (fixed-tick, reproducible); an interactive host can leave it
unset and get pygame's ticks instead.
"""

from __future__ import annotations

from typing import Optional

import pygame

_pinned_ms: Optional[int] = None


def set_sim_now_ms(value: Optional[int]) -> None:
    """Pin the session clock to `value` ms, or unpin it with None."""
    global _pinned_ms
    _pinned_ms = None if value is None else int(value)


def is_pinned() -> bool:
    return _pinned_ms is not None


def tick_to_ms(tick: int, hz: int) -> int:
    """Start time of fixed tick number `tick` at `hz` ticks per second."""
    return (tick * 1000) // hz


def now_ms() -> int:
    if _pinned_ms is not None:
        return _pinned_ms
    return int(pygame.time.get_ticks())
