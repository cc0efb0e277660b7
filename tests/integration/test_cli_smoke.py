"""
prefsort — CLI smoke contracts

File: tests/integration/test_cli_smoke.py

Purpose
- Drive complete console rankings through ``run_cli`` with scripted stdin.
- Verify exit codes, stdout/stderr text and the ``-o`` output file.
- Run ``python -m prefsort`` once as a subprocess.
"""

from __future__ import annotations

import io
import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from prefsort.engine.merge_sort import Ranking
from prefsort.engine.oracle import SortCancelled
from prefsort.ui.cli import run_cli

PROJECT_ROOT = Path(__file__).resolve().parents[2]
SRC_PATH = PROJECT_ROOT / "src"

pytestmark = pytest.mark.integration


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("PREFSORT_"):
            monkeypatch.delenv(name)


def _stdin(monkeypatch: pytest.MonkeyPatch, text: str) -> None:
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


def test_console_ranking_from_args(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "1\n1\n")
    assert run_cli(["Apple", "Banana", "Cherry"]) == 0

    out = capsys.readouterr().out
    assert out.startswith("\nGot 3 items. We'll ask pairwise questions to rank them.\n")
    assert out.count("Which do you prefer?") == 2
    assert out.endswith("\nFinal ranking (best -> worst):\n1. Apple\n2. Banana\n3. Cherry\n")


def test_items_interleaved_with_flags(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "2\n")
    assert run_cli(["a", "--no-color", "b"]) == 0
    out = capsys.readouterr().out
    assert "Got 2 items." in out
    assert out.endswith("1. b\n2. a\n")


def test_invalid_answer_reprompts(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "banana\n2\n")
    assert run_cli(["X", "Y"]) == 0
    out = capsys.readouterr().out
    assert "Invalid input; please enter 1 or 2 (or q to quit)." in out
    assert out.endswith("1. Y\n2. X\n")


def test_interactive_capture_then_rank(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "Banana\nApple\n\n2\n")
    assert run_cli([]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Enter items to sort, one per line. Submit an empty line when done:\n")
    assert out.endswith("1. Apple\n2. Banana\n")


def test_quit_exits_zero_without_ranking(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "q\n")
    assert run_cli(["a", "b", "c"]) == 0
    out = capsys.readouterr().out
    assert out.endswith("Quitting.\n")
    assert "Final ranking" not in out


def test_eof_during_comparison_is_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "")
    assert run_cli(["a", "b"]) == 1
    assert "error: read error: EOF" in capsys.readouterr().err


def test_no_items_is_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "\n")
    assert run_cli([]) == 1
    assert "no items provided; exiting" in capsys.readouterr().err


def test_single_item_needs_no_questions(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "")
    assert run_cli(["solo"]) == 0
    out = capsys.readouterr().out
    assert "Which do you prefer?" not in out
    assert out.endswith("1. solo\n")


def test_file_input_and_output_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "items.txt"
    source.write_text("  X\n\nY\n", encoding="utf-8")
    target = tmp_path / "ranked.txt"
    _stdin(monkeypatch, "2\n")

    assert run_cli(["--file", str(source), "ignored", "-o", str(target)]) == 0
    assert target.read_text(encoding="utf-8") == "1. Y\n2. X\n"
    assert capsys.readouterr().out.endswith("1. Y\n2. X\n")


def test_output_write_failure(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, "")
    assert run_cli(["solo", "-o", str(tmp_path / "missing" / "out.txt")]) == 1
    captured = capsys.readouterr()
    assert "1. solo" in captured.out
    assert "failed to write output file" in captured.err


def test_missing_input_file_is_failure(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert run_cli(["--file", str(tmp_path / "absent.txt")]) == 1
    assert "failed to read file" in capsys.readouterr().err


def test_config_errors_exit_two(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert run_cli(["a", "--config", str(tmp_path / "absent.toml")]) == 2
    assert "config file not found" in capsys.readouterr().err

    assert run_cli(["a", "--log-level", "LOUD"]) == 2
    assert "logging.level" in capsys.readouterr().err


def test_config_file_sets_output_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / "prefsort.toml").write_text('[output]\npath = "out/ranked.txt"\n', encoding="utf-8")
    (tmp_path / "out").mkdir()
    _stdin(monkeypatch, "")
    assert run_cli(["solo"]) == 0
    assert (tmp_path / "out" / "ranked.txt").read_text(encoding="utf-8") == "1. solo\n"


def test_log_file_records_decisions(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    log_path = tmp_path / "prefsort.jsonl"
    _stdin(monkeypatch, "1\n")
    assert run_cli(["a", "b", "--log-level", "debug", "--log-file", str(log_path)]) == 0

    events = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    messages = [event["message"] for event in events]
    assert "comparison.decided" in messages
    completed = next(event for event in events if event["message"] == "sort.completed")
    assert completed["fields"]["comparisons"] == 1


def test_tui_unavailable_is_failure(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr("prefsort.ui.tui.tui_available", lambda: False)
    assert run_cli(["a", "b", "--tui"]) == 1
    assert "TUI requires optional dependency" in capsys.readouterr().err


def test_tui_ranking_is_printed(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(
        "prefsort.ui.cli.run_tui",
        lambda items, no_color=False: Ranking(items=tuple(reversed(items)), comparisons=1),
    )
    assert run_cli(["a", "b", "--tui"]) == 0
    assert capsys.readouterr().out == "\nFinal ranking (best -> worst):\n1. b\n2. a\n"


def test_tui_quit_prints_nothing(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    def _cancelled(items: object, no_color: bool = False) -> Ranking:
        raise SortCancelled("quit")

    monkeypatch.setattr("prefsort.ui.cli.run_tui", _cancelled)
    assert run_cli(["a", "b", "--tui"]) == 0
    assert capsys.readouterr().out == ""


def test_module_entrypoint_subprocess(tmp_path: Path) -> None:
    env = os.environ.copy()
    existing = env.get("PYTHONPATH")
    env["PYTHONPATH"] = str(SRC_PATH) if not existing else f"{SRC_PATH}{os.pathsep}{existing}"
    completed = subprocess.run(
        [sys.executable, "-m", "prefsort", "Apple", "Banana"],
        cwd=tmp_path,
        input="2\n",
        text=True,
        capture_output=True,
        check=False,
        env=env,
    )
    assert completed.returncode == 0, completed.stderr
    assert completed.stdout.endswith("1. Banana\n2. Apple\n")
