"""
End-to-end runs: the autopilot drives sessions to completion for every input method.
"""

import pytest

from conftest import FakeClock
from drills import replay_code
from drills.autopilot import Autopilot
from drills.session import Session
from drills.session_config import InputMethod, SessionConfig, TargetCounts
from drills.sim.contracts import SessionPhase

DT = 1000 / 60


def run(config: SessionConfig, seconds: int = 60) -> Session:
    clock = FakeClock()
    session = Session.from_code(replay_code.encode(config), clock=clock)
    autopilot = Autopilot(session)
    session.begin()
    for _ in range(seconds * 60):
        clock.now += DT
        autopilot.steer()
        session.tick(DT)
        if session.phase is SessionPhase.COMPLETED:
            break
    return session


@pytest.mark.parametrize(
    "method",
    [InputMethod.DISCRETE, InputMethod.CONTINUOUS, InputMethod.MOUSE, InputMethod.JOYSTICK, InputMethod.CURSOR],
)
def test_completes_with_each_input_method(method) -> None:
    config = SessionConfig(
        target_counts=TargetCounts(stationary=4, moving=2, bonus=1),
        input_method=method,
    )
    session = run(config)
    assert session.phase is SessionPhase.COMPLETED
    assert session.state.core_targets_collected == 6
    assert session.record is not None
    assert session.record.outcome.total_time == session.state.total_time


def test_dwell_mode_takes_at_least_dwell_time_per_target() -> None:
    config = SessionConfig(
        target_counts=TargetCounts(stationary=3),
        input_method=InputMethod.MOUSE,
        dwell_mode=True,
        dwell_time=1000,
    )
    session = run(config)
    assert session.phase is SessionPhase.COMPLETED
    assert session.state.total_time >= 3000


def test_flee_targets_can_be_caught() -> None:
    config = SessionConfig(target_counts=TargetCounts(stationary=1, flee=2))
    session = run(config, seconds=120)
    assert session.phase is SessionPhase.COMPLETED


def test_same_code_same_result() -> None:
    config = SessionConfig(target_counts=TargetCounts(stationary=3, moving=3, hazard=2))
    a = run(config)
    b = run(config)
    assert a.state.to_dict() == b.state.to_dict()


def test_autopilot_ignores_hazards() -> None:
    session = Session(SessionConfig(target_counts=TargetCounts(stationary=1, hazard=1), seed="hz"), clock=FakeClock())
    autopilot = Autopilot(session)
    autopilot.steer()
    assert autopilot.goal is session.targets[0]
