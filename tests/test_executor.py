from __future__ import annotations

import subprocess
import sys

import pytest

import executor
from errors import CommandFailedError

posix_only = pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX shell syntax")


@posix_only
def test_execute_succeeds_on_zero_exit() -> None:
    assert executor.execute("true") is None


@posix_only
def test_execute_raises_with_exit_code() -> None:
    with pytest.raises(CommandFailedError) as excinfo:
        executor.execute("exit 3")

    assert excinfo.value.returncode == 3
    assert excinfo.value.message == "Command exited with code 3"


@posix_only
def test_execute_runs_through_shell(tmp_path) -> None:
    target = tmp_path / "out.txt"

    executor.execute(f"echo one two | tr ' ' '\\n' > {target}")

    assert target.read_text().split() == ["one", "two"]


def test_execute_does_not_capture_streams(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_run(command: str, **kwargs: object) -> subprocess.CompletedProcess:
        captured["command"] = command
        captured.update(kwargs)
        return subprocess.CompletedProcess(command, 0)

    monkeypatch.setattr(executor.subprocess, "run", fake_run)

    executor.execute("ls -la")

    assert captured["command"] == "ls -la"
    assert captured["shell"] is True
    assert "capture_output" not in captured
    assert "stdout" not in captured
    assert "timeout" not in captured


def test_execute_wraps_spawn_errors(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(command: str, **kwargs: object) -> subprocess.CompletedProcess:
        raise PermissionError("denied")

    monkeypatch.setattr(executor.subprocess, "run", fake_run)

    with pytest.raises(CommandFailedError) as excinfo:
        executor.execute("ls")

    assert excinfo.value.returncode is None
    assert "denied" in excinfo.value.message
