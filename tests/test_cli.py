"""
Tests for the command line entry point and the QA tooling.
"""

import importlib.util
import json
import sys
from pathlib import Path

import main
from drills import replay_code

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def load_tool(name):
    loader_spec = importlib.util.spec_from_file_location(name, PROJECT_ROOT / "tools" / f"{name}.py")
    module = importlib.util.module_from_spec(loader_spec)
    # dataclasses resolve string annotations through sys.modules.
    sys.modules[name] = module
    loader_spec.loader.exec_module(module)
    return module


class TestMain:
    def test_encode_default(self, capsys) -> None:
        assert main.main(["encode", "--version", "v2"]) == 0
        assert capsys.readouterr().out.strip() == "500001300601100012121"

    def test_encode_with_prefix_decodes(self, capsys) -> None:
        assert main.main(["encode", "--prefix", "--dwell", "--input", "joystick"]) == 0
        code = capsys.readouterr().out.strip()
        assert code.count("-") == 2
        config = replay_code.parse(code)
        assert config.dwell_mode
        assert config.input_method.value == "joystick"

    def test_decode(self, capsys) -> None:
        assert main.main(["decode", "50003130003000"]) == 0
        out = capsys.readouterr().out
        assert "version: legacy" in out
        assert '"hazard": 3' in out

    def test_decode_invalid(self, capsys) -> None:
        assert main.main(["decode", "500001300601100012120"]) == 1
        assert "checksum mismatch" in capsys.readouterr().out

    def test_play_writes_history(self, tmp_path, capsys) -> None:
        path = tmp_path / "history.json"
        code = "500001300601100012121"
        assert main.main(["play", code, "--history", str(path), "--json"]) == 0
        out = capsys.readouterr().out
        assert "completed in" in out
        assert "First completion!" in out
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["sessions"][0]["code"] == code

        assert main.main(["history", "--history", str(path)]) == 0
        assert code in capsys.readouterr().out

    def test_play_invalid_code(self, capsys) -> None:
        assert main.main(["play", "123", "--history", ""]) == 1
        assert "please check the code" in capsys.readouterr().out


class TestDeterminismGuard:
    def test_session_code_is_clean(self, capsys) -> None:
        guard = load_tool("determinism_guard")
        assert guard.main([]) == 0
        assert "PASS" in capsys.readouterr().out

    def test_flags_wall_clock_rng_and_hash(self) -> None:
        guard = load_tool("determinism_guard")
        src = (
            "import random, time, pygame\n"
            "a = time.time()\n"
            "b = random.random()\n"
            "c = hash('x')\n"
            "d = pygame.time.get_ticks()\n"
        )
        kinds = [f["kind"] for f in guard.scan_source(src, Path("example.py"))]
        assert kinds.count("wall_clock_time") == 2
        assert "global_rng" in kinds
        assert "unstable_hash" in kinds

    def test_syntax_error_is_reported(self) -> None:
        guard = load_tool("determinism_guard")
        findings = guard.scan_source("def broken(:\n", Path("bad.py"))
        assert findings[0]["kind"] == "parse_error"

    def test_reports_violations_in_given_paths(self, tmp_path, capsys) -> None:
        guard = load_tool("determinism_guard")
        bad = tmp_path / "clocky.py"
        bad.write_text("import time\nstarted = time.monotonic()\n", encoding="utf-8")
        assert guard.main(["--paths", str(bad)]) == 1
        out = capsys.readouterr().out
        assert "FAIL: 1 violation(s)" in out
        assert "[wall_clock_time] time.monotonic()" in out

        assert guard.main(["--json", "--paths", str(bad)]) == 1
        findings = json.loads(capsys.readouterr().out)["findings"]
        assert [(f["kind"], f["line"]) for f in findings] == [("wall_clock_time", 2)]
