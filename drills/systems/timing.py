"""
Session timing.

Time model:
    elapsed = (end_time or now) - start_time - paused_time + time_adjustments * 1000

`time_adjustments` is negative for bonuses and positive for penalties, so the live value
can dip below zero. The finalized total is clamped at zero.
"""

from __future__ import annotations

from typing import Callable, Optional

from drills.sim.contracts import SessionState
from drills.sim.timebase import now_ms


def format_time(milliseconds: float) -> str:
    """`M:SS.cc` with minutes, `S.ccs` without; negatives get a leading '-'."""
    negative = milliseconds < 0
    abs_ms = abs(milliseconds)
    seconds = int(abs_ms // 1000)
    minutes = seconds // 60
    remaining_seconds = seconds % 60
    centis = int((abs_ms % 1000) // 10)
    if minutes > 0:
        text = f"{minutes}:{remaining_seconds:02d}.{centis:02d}"
    else:
        text = f"{remaining_seconds}.{centis:02d}s"
    return f"-{text}" if negative else text


class SessionTimer:
    """Start/pause/resume bookkeeping on a SessionState, driven by an injectable clock."""

    def __init__(self, state: SessionState, clock: Optional[Callable[[], int]] = None):
        self.state = state
        self.clock = clock or now_ms

    @property
    def started(self) -> bool:
        return self.state.start_time is not None

    @property
    def paused(self) -> bool:
        return self.state.pause_start_time is not None

    def begin(self) -> bool:
        if self.started:
            return False
        self.state.start_time = self.clock()
        return True

    def pause(self) -> bool:
        if not self.started or self.paused or self.state.end_time is not None:
            return False
        self.state.pause_start_time = self.clock()
        return True

    def resume(self) -> bool:
        if not self.paused:
            return False
        self.state.paused_time += self.clock() - self.state.pause_start_time
        self.state.pause_start_time = None
        return True

    def elapsed_ms(self) -> float:
        """Live elapsed time; may be negative while bonuses outweigh play time."""
        s = self.state
        if s.start_time is None:
            return 0
        end = s.end_time if s.end_time is not None else self.clock()
        paused = s.paused_time
        if s.pause_start_time is not None and s.end_time is None:
            # Time spent in the current pause doesn't count either.
            paused += end - s.pause_start_time
        return end - s.start_time - paused + s.time_adjustments * 1000

    def finalize(self) -> int:
        """Stop the clock and store the clamped total on the state."""
        if self.paused:
            self.resume()
        if self.state.end_time is None:
            self.state.end_time = self.clock()
        self.state.total_time = max(0, int(round(self.elapsed_ms())))
        return self.state.total_time

    def display(self) -> str:
        if not self.started:
            return format_time(0)
        return format_time(self.elapsed_ms())
