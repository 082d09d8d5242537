"""
QA smoke runner (headless).

Runs the determinism guard, then plays a handful of replay codes through
`main.py play` (autopilot, sim time) and prints a PASS/FAIL line per profile.
Exit code is non-zero if the guard or any profile fails.

Examples:
  python tools/qa_smoke.py
  python tools/qa_smoke.py --quick
  python tools/qa_smoke.py --code BLUE-STAR-500001300601100012121 --seconds 30
"""

from __future__ import annotations

import argparse
import os
import subprocess
import sys
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
MAIN = PROJECT_ROOT / "main.py"
GUARD = PROJECT_ROOT / "tools" / "determinism_guard.py"

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from drills import replay_code  # noqa: E402
from drills.session_config import (  # noqa: E402
    Feedback, InputMethod, SessionConfig, TargetCounts, TargetSize,
)


def smoke_profiles() -> list[tuple[str, str]]:
    """(title, code) pairs, encoded at run time so they follow the current wire format."""
    encode = replay_code.encode
    return [
        ("static only, discrete", encode(SessionConfig())),
        ("all kinds, continuous", encode(SessionConfig(
            target_counts=TargetCounts(stationary=3, moving=2, flee=1, bonus=1, hazard=1),
            input_method=InputMethod.CONTINUOUS,
        ))),
        ("mouse + dwell 1.5s", encode(SessionConfig(
            target_counts=TargetCounts(stationary=4, bonus=2),
            input_method=InputMethod.MOUSE,
            dwell_mode=True,
            dwell_time=1500,
        ))),
        ("joystick, calm, large", encode(SessionConfig(
            target_counts=TargetCounts(stationary=2, moving=2, flee=2),
            target_size=TargetSize.LARGE,
            input_method=InputMethod.JOYSTICK,
            calm_mode=True,
            feedback=Feedback(audio=False),
        ))),
        ("legacy 14-digit code", "50003130003000"),
    ]


def _headless_env() -> dict:
    env = dict(os.environ)
    env.setdefault("SDL_VIDEODRIVER", "dummy")
    env.setdefault("SDL_AUDIODRIVER", "dummy")
    # Smoke runs must not touch a developer's real history file.
    env["DRILLS_HISTORY_PATH"] = ""
    return env


def _run(title: str, cmd: list[str]) -> int:
    print(f"\n[qa_smoke] --- {title} ---")
    print("[qa_smoke] $", " ".join(cmd))
    rc = subprocess.run(cmd, env=_headless_env(), cwd=str(PROJECT_ROOT)).returncode
    print(f"[qa_smoke] {'PASS' if rc == 0 else 'FAIL'} (rc={rc})")
    return rc


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Headless QA smoke profiles for Directional Drills")
    ap.add_argument("--seconds", type=float, default=90.0, help="sim-time budget per profile")
    ap.add_argument("--quick", action="store_true", help="run only the first profile")
    ap.add_argument("--code", default="", help="play this single replay code instead of the profiles")
    ns = ap.parse_args(argv)

    if not MAIN.exists():
        print(f"[qa_smoke] ERROR: missing {MAIN}")
        return 2

    # Release gate: nothing else is worth running if session code went nondeterministic.
    guard_rc = _run("determinism guard", [sys.executable, str(GUARD)])
    if guard_rc != 0:
        return guard_rc

    if ns.code:
        profiles = [("custom code", ns.code)]
    else:
        profiles = smoke_profiles()[:1] if ns.quick else smoke_profiles()

    failed = []
    for title, code in profiles:
        cmd = [sys.executable, str(MAIN), "play", code, "--seconds", str(ns.seconds)]
        if _run(title, cmd) != 0:
            failed.append(title)

    print(f"\n[qa_smoke] {len(profiles) - len(failed)}/{len(profiles)} profiles passed")
    for title in failed:
        print(f"[qa_smoke]   failed: {title}")
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
