"""
Directional Drills - replay-code tools and a headless session runner.

Usage:
    python main.py encode [--stationary N ...] [--version v2] [--prefix]
    python main.py decode <code>
    python main.py play <code> [--seconds 60] [--realtime] [--history path]
    python main.py history [--history path]

Replay codes:
    legacy  14 digits
    v1      16 digits (version "1" + checksum)
    v2      21 digits (version "2" + checksum), optionally prefixed COLOR-SHAPE-
"""
import os
import sys
import json
import random
import logging
import argparse

# Headless pygame setup (safe for CI / no-window environments)
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pygame  # noqa: E402

from config import DEBUG, FIELD_WIDTH, FIELD_HEIGHT, GAME_TITLE, HISTORY_PATH, SIM_TICK_HZ  # noqa: E402
from drills import replay_code  # noqa: E402
from drills.autopilot import Autopilot  # noqa: E402
from drills.history import SessionHistory  # noqa: E402
from drills.session import Session  # noqa: E402
from drills.session_config import (  # noqa: E402
    Boundaries, Feedback, InputMethod, JoystickSensitivity, PlayerTrail,
    SessionConfig, TargetCounts, TargetSize,
)
from drills.sim.contracts import SessionPhase  # noqa: E402
from drills.sim.timebase import set_sim_now_ms, tick_to_ms  # noqa: E402
from drills.systems.timing import format_time  # noqa: E402


def _choices(enum_cls):
    return [e.value for e in enum_cls]


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description=GAME_TITLE)
    sub = parser.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="build a replay code from settings")
    enc.add_argument("--stationary", type=int, default=5)
    enc.add_argument("--moving", type=int, default=0)
    enc.add_argument("--flee", type=int, default=0)
    enc.add_argument("--bonus", type=int, default=0)
    enc.add_argument("--hazard", type=int, default=0)
    enc.add_argument("--size", choices=_choices(TargetSize), default="medium")
    enc.add_argument("--speed", type=int, default=3, help="player speed 1-5")
    enc.add_argument("--trail", choices=_choices(PlayerTrail), default="short")
    enc.add_argument("--input", choices=_choices(InputMethod), default="discrete")
    enc.add_argument("--input-buffer", type=int, default=300, help="ms, stored in 50ms steps")
    enc.add_argument("--boundaries", choices=_choices(Boundaries), default="none")
    enc.add_argument("--no-audio", action="store_true")
    enc.add_argument("--no-visual", action="store_true")
    enc.add_argument("--haptic", action="store_true")
    enc.add_argument("--calm", action="store_true")
    enc.add_argument("--dwell", action="store_true")
    enc.add_argument("--dwell-time", type=int, default=1000, help="ms, 500-3000 in 500ms steps")
    enc.add_argument("--deadzone", type=int, default=15, help="percent, 5-30 in 5%% steps")
    enc.add_argument("--sensitivity", choices=_choices(JoystickSensitivity), default="medium")
    enc.add_argument("--version", choices=["legacy", "v1", "v2"], default=None)
    enc.add_argument("--prefix", action="store_true", help="add a cosmetic COLOR-SHAPE- prefix")

    dec = sub.add_parser("decode", help="show the settings inside a replay code")
    dec.add_argument("code")

    play = sub.add_parser("play", help="run a replay code headlessly with the autopilot")
    play.add_argument("code")
    play.add_argument("--seconds", type=float, default=60.0, help="give up after this much sim time")
    play.add_argument("--width", type=int, default=FIELD_WIDTH)
    play.add_argument("--height", type=int, default=FIELD_HEIGHT)
    play.add_argument("--realtime", action="store_true", help="pace ticks with pygame's clock")
    play.add_argument("--history", type=str, default=HISTORY_PATH, help="history JSON file")
    play.add_argument("--json", action="store_true", help="emit the session record as JSON")

    hist = sub.add_parser("history", help="list saved sessions")
    hist.add_argument("--history", type=str, default=HISTORY_PATH, help="history JSON file")

    return parser.parse_args(argv)


def config_from_args(args) -> SessionConfig:
    return SessionConfig(
        target_counts=TargetCounts(
            stationary=args.stationary,
            moving=args.moving,
            flee=args.flee,
            bonus=args.bonus,
            hazard=args.hazard,
        ),
        target_size=TargetSize(args.size),
        player_speed=args.speed,
        player_trail=PlayerTrail(args.trail),
        input_method=InputMethod(args.input),
        input_buffer=args.input_buffer,
        boundaries=Boundaries(args.boundaries),
        feedback=Feedback(audio=not args.no_audio, visual=not args.no_visual, haptic=args.haptic),
        calm_mode=args.calm,
        dwell_mode=args.dwell,
        dwell_time=args.dwell_time,
        joystick_deadzone=args.deadzone,
        joystick_sensitivity=JoystickSensitivity(args.sensitivity),
    )


def cmd_encode(args) -> int:
    code = replay_code.encode(config_from_args(args), version=args.version)
    if args.prefix:
        code = f"{replay_code.generate_prefix(random.Random())}-{code}"
    print(code)
    return 0


def cmd_decode(args) -> int:
    try:
        config = replay_code.parse(args.code)
    except replay_code.InvalidReplayCode as e:
        print(f"[drills] {e}")
        return 1
    version = replay_code.detect_version(replay_code.strip_prefix(args.code))
    print(f"[drills] version: {version.value}")
    print(json.dumps(config.to_dict(), indent=2))
    return 0


def cmd_play(args) -> int:
    pygame.init()
    history = SessionHistory.default(path=args.history)

    set_sim_now_ms(0)
    try:
        session = Session.from_code(args.code, args.width, args.height)
    except replay_code.InvalidReplayCode as e:
        print(f"[drills] {e}")
        print("[drills] please check the code and try again")
        return 1

    records = []
    session.add_completion_listener(records.append)

    dt_ms = 1000.0 / SIM_TICK_HZ
    ticks = int(args.seconds * SIM_TICK_HZ)
    autopilot = Autopilot(session)
    clock = pygame.time.Clock()

    print(f"[drills] code={session.code} targets={len(session.targets)} core={session.state.total_core_targets}")
    print(f"[drills] player start=({session.player.x:.1f}, {session.player.y:.1f})")

    session.begin()
    for t in range(ticks):
        set_sim_now_ms(tick_to_ms(t, SIM_TICK_HZ))
        if args.realtime:
            clock.tick(SIM_TICK_HZ)
            pygame.event.pump()
        autopilot.steer()
        for event in session.tick(dt_ms):
            if event["type"] in ("target_collected", "bonus_collected", "hazard_hit"):
                print(f"[drills] {format_time(session.elapsed_ms()):>9} {event['type']} #{event['target']}")
        if session.phase is SessionPhase.COMPLETED:
            break

    if not records:
        print(f"[drills] not completed after {args.seconds:.0f}s (progress {session.progress():.0f}%)")
        return 2

    record = records[0]
    is_record, message = history.check_personal_best(record)
    history.append(record)

    if args.json:
        print(json.dumps(record.to_dict(), indent=2))
    print(f"[drills] completed in {format_time(record.outcome.total_time)}"
          f" (bonus {record.outcome.bonus_targets_collected}, hazards {record.outcome.hazard_targets_hit})")
    if is_record:
        print(f"[drills] {message}")
    return 0


def cmd_history(args) -> int:
    history = SessionHistory.default(path=args.history)
    if not len(history):
        print("[drills] no sessions completed yet")
        return 0
    stats = history.stats()
    print(f"[drills] sessions={stats['sessions']} completed={stats['completed']} targets={stats['targets']}")
    if stats["best_time"] is not None:
        print(f"[drills] best={format_time(stats['best_time'])} average={format_time(stats['average_time'])}")
    for record in reversed(history.records):
        print(f"  {format_time(record.outcome.total_time):>9}  {record.code}")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    args = parse_args(argv)
    handlers = {
        "encode": cmd_encode,
        "decode": cmd_decode,
        "play": cmd_play,
        "history": cmd_history,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
