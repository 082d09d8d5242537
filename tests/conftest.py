"""
Shared fixtures: headless pygame, a controllable session clock, small builders.
"""

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest  # noqa: E402

from drills.entities.player import Player  # noqa: E402
from drills.entities.target import StaticTarget  # noqa: E402
from drills.session_config import SessionConfig, TargetCounts  # noqa: E402
from drills.sim.contracts import SessionState  # noqa: E402
from drills.sim.timebase import set_sim_now_ms  # noqa: E402


class FakeClock:
    """Injectable millisecond clock: call it for the time, bump `now` to advance."""

    def __init__(self, start: int = 0):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture(autouse=True)
def sim_clock():
    """Pin sim time so nothing falls through to pygame's wall clock."""
    set_sim_now_ms(0)
    yield
    set_sim_now_ms(None)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def player() -> Player:
    return Player(x=400.0, y=300.0, size=30)


@pytest.fixture
def state() -> SessionState:
    return SessionState(seed="test")


def make_config(**counts) -> SessionConfig:
    """Config with only the given target counts (everything else default)."""
    base = {"stationary": 0, "moving": 0, "flee": 0, "bonus": 0, "hazard": 0}
    base.update(counts)
    return SessionConfig(target_counts=TargetCounts(**base))


def static_at(target_id: int, x: float, y: float, size: float = 30) -> StaticTarget:
    return StaticTarget(target_id=target_id, x=x, y=y, size=size)
