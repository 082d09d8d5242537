"""
Determinism guard (static check).

A replay code must rebuild the same layout and the same scoring on every machine,
so the modules that place, move and score things may only read time through
`drills.sim.timebase` and randomness through `drills.sim.determinism`.

Flags, in the replay-critical modules:
- wall-clock reads (pygame.time.get_ticks, time.time/monotonic/perf_counter, datetime.now/utcnow)
- the global RNG (random.random, random.choice, ...)
- builtin hash() (salted per process)

Not scanned: drills/sim/** (owns the sanctioned wrappers, incl. the fallback seed),
drills/history.py and drills/autopilot.py (outside the replay contract).

Usage:
  python tools/determinism_guard.py
  python tools/determinism_guard.py --json
  python tools/determinism_guard.py --paths drills/systems/placement.py
"""

from __future__ import annotations

import argparse
import ast
import json
import sys
from dataclasses import asdict, dataclass
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[1]
PACKAGE = PROJECT_ROOT / "drills"

REPLAY_CRITICAL = [
    PACKAGE / "entities",
    PACKAGE / "systems",
    PACKAGE / "replay_code.py",
    PACKAGE / "session.py",
    PACKAGE / "session_config.py",
]
EXEMPT = [PACKAGE / "sim"]

# (call chain suffix, kind, hint). A chain matches when it ends with the suffix.
RULES = [
    (("pygame", "time", "get_ticks"), "wall_clock_time", "read drills.sim.timebase.now_ms() instead"),
    (("time", "time"), "wall_clock_time", "read drills.sim.timebase.now_ms() instead"),
    (("time", "monotonic"), "wall_clock_time", "read drills.sim.timebase.now_ms() instead"),
    (("time", "perf_counter"), "wall_clock_time", "read drills.sim.timebase.now_ms() instead"),
    (("datetime", "now"), "wall_clock_time", "session logic has no calendar; use sim time"),
    (("datetime", "utcnow"), "wall_clock_time", "session logic has no calendar; use sim time"),
    (("hash",), "unstable_hash", "use drills.sim.determinism.hash_seed"),
]
GLOBAL_RNG_CALLS = {"random", "randint", "randrange", "uniform", "choice", "choices", "shuffle", "sample", "seed"}


@dataclass
class Finding:
    kind: str
    file: str
    line: int
    col: int
    detail: str

    def render(self) -> str:
        return f"- {self.file}:{self.line}:{self.col} [{self.kind}] {self.detail}"


def _rel(path: Path) -> str:
    try:
        return path.resolve().relative_to(PROJECT_ROOT).as_posix()
    except ValueError:
        return str(path)


def _dotted(node: ast.AST) -> tuple:
    """('pygame', 'time', 'get_ticks') for pygame.time.get_ticks; () for anything not a plain name chain."""
    parts = []
    while isinstance(node, ast.Attribute):
        parts.append(node.attr)
        node = node.value
    if not isinstance(node, ast.Name):
        return ()
    parts.append(node.id)
    return tuple(reversed(parts))


class _CallScanner(ast.NodeVisitor):
    def __init__(self, file_label: str):
        self.file_label = file_label
        self.findings: list[Finding] = []

    def _add(self, node: ast.AST, kind: str, detail: str) -> None:
        self.findings.append(Finding(kind, self.file_label, node.lineno, node.col_offset, detail))

    def visit_Call(self, node: ast.Call) -> None:
        chain = _dotted(node.func)
        if chain:
            name = ".".join(chain)
            for suffix, kind, hint in RULES:
                if chain == suffix or (len(suffix) > 1 and chain[-len(suffix):] == suffix):
                    self._add(node, kind, f"{name}(): {hint}")
                    break
            else:
                if len(chain) == 2 and chain[0] == "random" and chain[1] in GLOBAL_RNG_CALLS:
                    self._add(node, "global_rng", f"{name}(): draw from the session's SeededPRNG")
        self.generic_visit(node)


def scan_source(src: str, file_path: Path) -> list[dict]:
    label = _rel(file_path)
    try:
        tree = ast.parse(src, filename=str(file_path))
    except SyntaxError as e:
        return [asdict(Finding("parse_error", label, e.lineno or 0, e.offset or 0, f"SyntaxError: {e.msg}"))]
    scanner = _CallScanner(label)
    scanner.visit(tree)
    return [asdict(f) for f in scanner.findings]


def collect_files(paths: list[Path]) -> list[Path]:
    exempt = [p.resolve() for p in EXEMPT]
    files = set()
    for path in paths:
        candidates = [path] if path.is_file() else sorted(path.rglob("*.py")) if path.is_dir() else []
        for f in candidates:
            resolved = f.resolve()
            if f.suffix == ".py" and not any(resolved.is_relative_to(ex) for ex in exempt):
                files.add(f)
    return sorted(files)


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Static determinism guard for replay-critical session code")
    ap.add_argument("--paths", nargs="*", default=[], help="files/dirs to scan instead of the default set")
    ap.add_argument("--json", action="store_true", help="print findings as JSON")
    ns = ap.parse_args(argv)

    roots = [Path(p) for p in ns.paths] or REPLAY_CRITICAL
    findings: list[dict] = []
    for f in collect_files(roots):
        findings.extend(scan_source(f.read_text(encoding="utf-8", errors="replace"), f))

    if ns.json:
        print(json.dumps({"findings": findings}, indent=2))
    elif findings:
        print(f"[determinism_guard] FAIL: {len(findings)} violation(s)")
        for d in findings:
            print(Finding(**d).render())
    else:
        print("[determinism_guard] PASS: no violations found")
    return 1 if findings else 0


if __name__ == "__main__":
    sys.exit(main())
